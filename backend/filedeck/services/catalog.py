"""Directory listing with per-entry metadata."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone

from filedeck.errors import IOFailure, NotFound
from filedeck.services.path_resolver import PathResolver

logger = logging.getLogger(__name__)

FILE = "file"
FOLDER = "folder"


@dataclass
class Entry:
    name: str
    type: str  # file, folder
    size_bytes: int | None  # None for folders, never summed here
    modified_at: datetime
    relative_path: str


class EntryCatalog:
    """Lists the children of a folder below the storage root."""

    def __init__(self, resolver: PathResolver):
        self._resolver = resolver

    def list(self, folder: str | None = "") -> list[Entry]:
        target = self._resolver.resolve(folder)
        if not os.path.isdir(target):
            raise NotFound("Folder not found")

        base = self._resolver.relative(target)
        entries: list[Entry] = []
        try:
            with os.scandir(target) as it:
                for child in it:
                    entry = self._describe(child, base)
                    if entry is not None:
                        entries.append(entry)
        except FileNotFoundError:
            raise NotFound("Folder not found")
        except OSError as e:
            logger.error("Failed to list %s: %s", target, e)
            raise IOFailure(f"Failed to list folder: {e.strerror or e}")
        return entries

    @staticmethod
    def _describe(child: os.DirEntry, base: str) -> Entry | None:
        try:
            is_dir = child.is_dir()
            st = child.stat()
        except FileNotFoundError:
            # Removed after scandir saw it, or a dangling symlink
            logger.debug("Skipping vanished entry %s", child.path)
            return None

        return Entry(
            name=child.name,
            type=FOLDER if is_dir else FILE,
            size_bytes=None if is_dir else st.st_size,
            modified_at=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
            relative_path=f"{base}/{child.name}" if base else child.name,
        )
