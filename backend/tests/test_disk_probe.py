"""Tests for disk probes: output parsing, unit normalization, failure modes."""

import os
import subprocess
from collections import namedtuple
from unittest.mock import patch

import pytest

from filedeck.errors import ProbeUnavailable
from filedeck.services.disk_probe import (
    DfProbe,
    DiskSpace,
    FsutilProbe,
    PsutilProbe,
    WmicProbe,
    check_disk_space,
    default_probes,
)

GNU_DF_BYTES = (
    "Filesystem       1-blocks        Used   Available Capacity Mounted on\n"
    "/dev/nvme0n1p2 500000000000 200000000000 275000000000      43% /\n"
)

POSIX_DF_KIB = (
    "Filesystem     1024-blocks      Used Available Capacity Mounted on\n"
    "/dev/disk1s1     488245288 390000000  90000000    82% /System/Volumes/Data\n"
)

FSUTIL_LEGACY = (
    "Total # of free bytes        : 83586785280\r\n"
    "Total # of bytes             : 255369605120\r\n"
    "Total # of avail free bytes  : 80000000000\r\n"
)

FSUTIL_MODERN = (
    "Total free bytes                :  83,586,785,280 ( 77.8 GB)\r\n"
    "Total bytes                     : 255,369,605,120 (237.8 GB)\r\n"
    "Total quota free bytes          :  83,586,785,280 ( 77.8 GB)\r\n"
    "Unavailable pool bytes          :               0 (  0.0 KB)\r\n"
)

WMIC_OUTPUT = "\r\r\n\r\r\nFreeSpace=83586785280\r\r\nSize=255369605120\r\r\n\r\r\n"


def _completed(stdout):
    return subprocess.CompletedProcess(args=[], returncode=0, stdout=stdout, stderr="")


class TestCheckDiskSpace:
    def test_plausible(self):
        space = DiskSpace(total_bytes=100, free_bytes=50, available_bytes=40)
        assert check_disk_space(space) is space

    def test_full_availability(self):
        check_disk_space(DiskSpace(total_bytes=100, free_bytes=100, available_bytes=100))

    @pytest.mark.parametrize(
        "total,free,available",
        [
            (0, 0, 0),
            (-1, 1, 1),
            (100, 0, 0),
            (100, 101, 50),
            (100, 50, 101),
            (100, 50, -1),
        ],
    )
    def test_implausible(self, total, free, available):
        with pytest.raises(ProbeUnavailable):
            check_disk_space(DiskSpace(total, free, available))


class TestDfProbe:
    def test_parse_bytes(self):
        space = DfProbe("-B1", unit=1).parse(GNU_DF_BYTES)
        assert space.total_bytes == 500_000_000_000
        assert space.free_bytes == 300_000_000_000
        assert space.available_bytes == 275_000_000_000

    def test_parse_kibibytes_normalized(self):
        space = DfProbe("-k", unit=1024).parse(POSIX_DF_KIB)
        assert space.total_bytes == 488245288 * 1024
        assert space.free_bytes == (488245288 - 390000000) * 1024
        assert space.available_bytes == 90000000 * 1024

    def test_probe_runs_df_with_timeout(self):
        probe = DfProbe("-B1", unit=1, timeout=3.0)
        with patch(
            "filedeck.services.disk_probe.subprocess.run",
            return_value=_completed(GNU_DF_BYTES),
        ) as mock_run:
            space = probe.probe("/srv/storage")

        assert space.total_bytes == 500_000_000_000
        args, kwargs = mock_run.call_args
        assert args[0] == ["df", "-P", "-B1", "/srv/storage"]
        assert kwargs["timeout"] == 3.0

    @pytest.mark.parametrize(
        "error",
        [
            subprocess.TimeoutExpired(cmd="df", timeout=5),
            subprocess.CalledProcessError(returncode=1, cmd="df"),
            FileNotFoundError(2, "No such file or directory", "df"),
        ],
    )
    def test_command_failures(self, error):
        with patch("filedeck.services.disk_probe.subprocess.run", side_effect=error):
            with pytest.raises(ProbeUnavailable):
                DfProbe().probe("/srv/storage")

    @pytest.mark.parametrize(
        "output",
        [
            "",
            "Filesystem 1024-blocks Used Available Capacity Mounted on\n",
            "Filesystem 1024-blocks Used Available\n/dev/sda1 lots some few 1% /\n",
        ],
    )
    def test_unparsable_output(self, output):
        with pytest.raises(ProbeUnavailable):
            DfProbe().parse(output)

    def test_implausible_reading_rejected(self):
        output = (
            "Filesystem 1024-blocks Used Available Capacity Mounted on\n"
            "/dev/sda1 100 10 500 10% /\n"
        )
        with patch("filedeck.services.disk_probe.subprocess.run", return_value=_completed(output)):
            with pytest.raises(ProbeUnavailable):
                DfProbe().probe("/")


class TestWindowsProbes:
    def test_wmic_parse(self):
        space = WmicProbe().parse(WMIC_OUTPUT)
        assert space.total_bytes == 255369605120
        assert space.free_bytes == 83586785280
        assert space.available_bytes == 83586785280

    def test_wmic_parse_missing_field(self):
        with pytest.raises(ProbeUnavailable):
            WmicProbe().parse("FreeSpace=1\r\n")

    @pytest.mark.skipif(os.name == "nt", reason="POSIX paths carry no drive letter")
    def test_wmic_needs_drive_letter(self):
        with patch("filedeck.services.disk_probe.subprocess.run") as mock_run:
            with pytest.raises(ProbeUnavailable):
                WmicProbe().probe("/srv/storage")
        mock_run.assert_not_called()

    def test_fsutil_legacy_format(self):
        space = FsutilProbe().parse(FSUTIL_LEGACY)
        assert space.total_bytes == 255369605120
        assert space.free_bytes == 83586785280
        assert space.available_bytes == 80000000000

    def test_fsutil_modern_format(self):
        space = FsutilProbe().parse(FSUTIL_MODERN)
        assert space.total_bytes == 255369605120
        assert space.free_bytes == 83586785280
        assert space.available_bytes == 83586785280

    def test_fsutil_without_total_fails(self):
        with pytest.raises(ProbeUnavailable):
            FsutilProbe().parse("Total free bytes : 100\r\n")

    def test_fsutil_probe_command(self):
        with patch(
            "filedeck.services.disk_probe.subprocess.run",
            return_value=_completed(FSUTIL_LEGACY),
        ) as mock_run:
            FsutilProbe(timeout=2.0).probe("C:\\data")
        args, kwargs = mock_run.call_args
        assert args[0] == ["fsutil", "volume", "diskfree", "C:\\data"]
        assert kwargs["timeout"] == 2.0


class TestPsutilProbe:
    _Usage = namedtuple("sdiskusage", ["total", "used", "free", "percent"])

    def test_reading(self):
        usage = self._Usage(total=1000, used=600, free=350, percent=60.0)
        with patch("filedeck.services.disk_probe.psutil.disk_usage", return_value=usage):
            space = PsutilProbe().probe("/")
        assert space == DiskSpace(total_bytes=1000, free_bytes=400, available_bytes=350)

    def test_error(self):
        with patch(
            "filedeck.services.disk_probe.psutil.disk_usage",
            side_effect=FileNotFoundError(2, "No such file or directory"),
        ):
            with pytest.raises(ProbeUnavailable):
                PsutilProbe().probe("/nope")

    def test_real_host(self, tmp_path):
        space = PsutilProbe().probe(str(tmp_path))
        assert space.total_bytes > 0


class TestDefaultProbes:
    def test_windows_chain(self):
        assert [p.name for p in default_probes("win32")] == ["wmic", "fsutil", "psutil"]

    def test_posix_chain(self):
        probes = default_probes("linux", timeout=2.5)
        assert [p.name for p in probes] == ["df -B1", "df -k", "psutil"]
        assert probes[0].unit == 1
        assert probes[1].unit == 1024
        assert probes[0].timeout == 2.5
