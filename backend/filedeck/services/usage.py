"""Storage usage: bytes used below the root plus host disk capacity."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Sequence

from filedeck.errors import ProbeUnavailable
from filedeck.services.disk_probe import DiskProbe, DiskSpace

logger = logging.getLogger(__name__)


@dataclass
class UsageSnapshot:
    used_bytes: int
    total_bytes: int | None = None
    free_bytes: int | None = None
    available_bytes: int | None = None


def directory_size(path: str) -> int:
    """Sum the sizes of all regular files below ``path``.

    Symlinks are not followed. A folder that cannot be listed, or an entry
    that cannot be stat'ed, counts as 0 instead of failing the whole walk.
    """
    total = 0
    stack = [path]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                children = list(it)
        except OSError as e:
            logger.debug("Skipping unreadable folder %s: %s", current, e)
            continue

        for child in children:
            try:
                if child.is_dir(follow_symlinks=False):
                    stack.append(child.path)
                elif child.is_file(follow_symlinks=False):
                    total += child.stat(follow_symlinks=False).st_size
            except OSError as e:
                logger.debug("Skipping %s: %s", child.path, e)
    return total


class UsageReporter:
    """Computes a fresh UsageSnapshot on every call; nothing is cached."""

    def __init__(self, root: str, probes: Sequence[DiskProbe]):
        self._root = root
        self._probes = list(probes)

    @property
    def probe_names(self) -> list[str]:
        return [p.name for p in self._probes]

    def usage(self) -> UsageSnapshot:
        snapshot = UsageSnapshot(used_bytes=directory_size(self._root))
        space = self.disk_space()
        if space is not None:
            snapshot.total_bytes = space.total_bytes
            snapshot.free_bytes = space.free_bytes
            snapshot.available_bytes = space.available_bytes
        return snapshot

    def disk_space(self) -> DiskSpace | None:
        """First validated reading from the probe chain, or None."""
        for probe in self._probes:
            try:
                return probe.probe(self._root)
            except ProbeUnavailable as e:
                logger.debug("Disk probe %s unavailable: %s", probe.name, e)
        if self._probes:
            logger.warning("All disk probes failed for %s", self._root)
        return None
