"""Host disk capacity probes.

Each probe queries the filesystem that contains a path and reports total,
free and available bytes. Probes shell out to platform tools (``df`` on
POSIX, ``wmic``/``fsutil`` on Windows) with a hard timeout; ``psutil`` is
the in-process last resort. A probe that cannot produce a plausible
reading raises ProbeUnavailable so the caller can try the next one.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass

import psutil

from filedeck.errors import ProbeUnavailable

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0  # seconds


@dataclass
class DiskSpace:
    total_bytes: int
    free_bytes: int
    available_bytes: int


def check_disk_space(space: DiskSpace) -> DiskSpace:
    """Reject readings that cannot be right (e.g. total=0, free > total)."""
    total, free, available = space.total_bytes, space.free_bytes, space.available_bytes
    if total <= 0:
        raise ProbeUnavailable(f"Implausible total size: {total}")
    if not 0 < free <= total:
        raise ProbeUnavailable(f"Implausible free size: {free} of {total}")
    if not 0 <= available <= total:
        raise ProbeUnavailable(f"Implausible available size: {available} of {total}")
    return space


def _run(args: list[str], timeout: float) -> str:
    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=True,
        )
    except subprocess.TimeoutExpired:
        raise ProbeUnavailable(f"{args[0]} timed out after {timeout}s")
    except subprocess.CalledProcessError as e:
        raise ProbeUnavailable(f"{args[0]} exited with {e.returncode}")
    except OSError as e:
        raise ProbeUnavailable(f"{args[0]} not runnable: {e}")
    return result.stdout


def _to_int(raw: str) -> int:
    """Parse a byte count that may carry thousands separators."""
    digits = re.sub(r"[,.\s]", "", raw)
    if not digits.isdigit():
        raise ProbeUnavailable(f"Not a number: {raw!r}")
    return int(digits)


class DiskProbe(ABC):
    """Free-space query against the filesystem containing a path."""

    name = "probe"

    @abstractmethod
    def probe(self, path: str) -> DiskSpace:
        """Return a validated DiskSpace or raise ProbeUnavailable."""


class DfProbe(DiskProbe):
    """POSIX ``df -P`` with an explicit block size.

    ``unit`` is the number of bytes per reported block, so ``-B1`` pairs with 1
    and ``-k`` with 1024.
    """

    def __init__(self, block_flag: str = "-k", unit: int = 1024, timeout: float = DEFAULT_TIMEOUT):
        self.block_flag = block_flag
        self.unit = unit
        self.timeout = timeout
        self.name = f"df {block_flag}"

    def probe(self, path: str) -> DiskSpace:
        output = _run(["df", "-P", self.block_flag, path], self.timeout)
        return check_disk_space(self.parse(output))

    def parse(self, output: str) -> DiskSpace:
        lines = [line for line in output.strip().splitlines() if line.strip()]
        if len(lines) < 2:
            raise ProbeUnavailable("df printed no data line")

        # Filesystem  <blocks>  Used  Available  Capacity  Mounted on
        parts = lines[-1].split()
        if len(parts) < 4:
            raise ProbeUnavailable(f"Unexpected df line: {lines[-1]!r}")
        total = _to_int(parts[1]) * self.unit
        used = _to_int(parts[2]) * self.unit
        available = _to_int(parts[3]) * self.unit
        return DiskSpace(total_bytes=total, free_bytes=total - used, available_bytes=available)


class WmicProbe(DiskProbe):
    """Windows ``wmic logicaldisk`` query for the drive holding the path."""

    name = "wmic"

    _SIZE_RE = re.compile(r"^\s*Size=(\d+)", re.IGNORECASE | re.MULTILINE)
    _FREE_RE = re.compile(r"^\s*FreeSpace=(\d+)", re.IGNORECASE | re.MULTILINE)

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def probe(self, path: str) -> DiskSpace:
        drive = os.path.splitdrive(os.path.abspath(path))[0]
        if not re.fullmatch(r"[A-Za-z]:", drive):
            raise ProbeUnavailable(f"No drive letter in {path!r}")
        output = _run(
            [
                "wmic", "logicaldisk", "where", f"DeviceID='{drive.upper()}'",
                "get", "Size,FreeSpace", "/format:value",
            ],
            self.timeout,
        )
        return check_disk_space(self.parse(output))

    def parse(self, output: str) -> DiskSpace:
        size = self._SIZE_RE.search(output)
        free = self._FREE_RE.search(output)
        if not size or not free:
            raise ProbeUnavailable("wmic output lacks Size/FreeSpace")
        free_bytes = int(free.group(1))
        return DiskSpace(
            total_bytes=int(size.group(1)),
            free_bytes=free_bytes,
            available_bytes=free_bytes,
        )


class FsutilProbe(DiskProbe):
    """Windows ``fsutil volume diskfree``.

    Older builds print ``Total # of free bytes : 123``, newer ones
    ``Total free bytes : 1,234 (1.2 KB)``; both are accepted.
    """

    name = "fsutil"

    _FREE_RE = re.compile(r"Total (?:# of )?free bytes\s*:\s*([\d,. ]+)", re.IGNORECASE)
    _TOTAL_RE = re.compile(r"Total (?:# of )?bytes\s*:\s*([\d,. ]+)", re.IGNORECASE)
    _AVAIL_RE = re.compile(
        r"Total (?:# of avail free|quota free) bytes\s*:\s*([\d,. ]+)", re.IGNORECASE
    )

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def probe(self, path: str) -> DiskSpace:
        output = _run(["fsutil", "volume", "diskfree", path], self.timeout)
        return check_disk_space(self.parse(output))

    def parse(self, output: str) -> DiskSpace:
        free = self._FREE_RE.search(output)
        total = self._TOTAL_RE.search(output)
        if not free or not total:
            raise ProbeUnavailable("fsutil output lacks free/total bytes")
        free_bytes = _to_int(free.group(1))
        avail = self._AVAIL_RE.search(output)
        return DiskSpace(
            total_bytes=_to_int(total.group(1)),
            free_bytes=free_bytes,
            available_bytes=_to_int(avail.group(1)) if avail else free_bytes,
        )


class PsutilProbe(DiskProbe):
    """In-process statvfs/GetDiskFreeSpaceEx through psutil."""

    name = "psutil"

    def probe(self, path: str) -> DiskSpace:
        try:
            usage = psutil.disk_usage(path)
        except OSError as e:
            raise ProbeUnavailable(f"psutil.disk_usage failed: {e}")
        return check_disk_space(
            DiskSpace(
                total_bytes=usage.total,
                free_bytes=usage.total - usage.used,
                available_bytes=usage.free,
            )
        )


def default_probes(platform: str | None = None, timeout: float = DEFAULT_TIMEOUT) -> list[DiskProbe]:
    """Ordered probe chain for the host platform."""
    platform = platform or sys.platform
    if platform.startswith("win"):
        return [WmicProbe(timeout=timeout), FsutilProbe(timeout=timeout), PsutilProbe()]
    return [
        DfProbe("-B1", unit=1, timeout=timeout),
        DfProbe("-k", unit=1024, timeout=timeout),
        PsutilProbe(),
    ]
