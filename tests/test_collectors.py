"""Tests for the filesystem inventory collectors."""

import re
import subprocess
from unittest.mock import patch

from linux_disk_check.collectors.df_collector import DfCollector, parse_df_output
from linux_disk_check.collectors.filesystem_collector import (
    FilesystemCollector,
    is_storage_device,
    percent_used,
    to_mb,
)
from tests.helpers import MB, DiskUsage, Partition

DF_OUTPUT = """\
Filesystem               1048576-blocks   Used Available Capacity Mounted on
udev                               7942      0      7942       0% /dev
tmpfs                              1594      3      1591       1% /run
/dev/sda1                        100000  50000     50000      50% /
/dev/mapper/vg0-data             500000 480000     20000      96% /data
/dev/sdb1                        204800 174080     30720      85% /mnt/backup disk
/dev/nvme0n1p1                   100000  10000     90000      10% /fast
"""


class TestHelpers:
    """Unit conversions and device filtering."""

    def test_storage_devices(self):
        assert is_storage_device("/dev/sda1")
        assert is_storage_device("/dev/sdc")
        assert is_storage_device("/dev/mapper/vg0-root")
        assert not is_storage_device("/dev/nvme0n1p1")
        assert not is_storage_device("tmpfs")

    def test_to_mb_rounds_up(self):
        assert to_mb(0) == 0
        assert to_mb(MB) == 1
        assert to_mb(MB + 1) == 2
        # beyond float precision
        assert to_mb(2**53 + 1) == 2**33 + 1

    def test_percent_used_like_df(self):
        assert percent_used(50, 50) == 50
        assert percent_used(1, 199) == 1
        assert percent_used(1, 299) == 1
        assert percent_used(2, 299) == 1
        assert percent_used(0, 0) == 0
        assert percent_used(2**60, 2**60 * 3 - 1) == 26


class TestFilesystemCollector:
    """psutil-backed inventory."""

    def test_collects_matching_partitions(self):
        partitions = [
            Partition("/dev/sda1", "/", "ext4", "rw"),
            Partition("tmpfs", "/run", "tmpfs", "rw"),
            Partition("/dev/mapper/vg0-data", "/data", "xfs", "rw"),
        ]
        usages = {
            "/": DiskUsage(total=100000 * MB, used=50000 * MB, free=50000 * MB, percent=50.0),
            "/data": DiskUsage(total=500000 * MB, used=480000 * MB, free=20000 * MB, percent=96.0),
        }

        with patch("psutil.disk_partitions", return_value=partitions), patch(
            "psutil.disk_usage", side_effect=lambda path: usages[path]
        ):
            result = FilesystemCollector().collect()

        assert [r.mount_point for r in result.data] == ["/", "/data"]
        data = result.data[1]
        assert data.device == "/dev/mapper/vg0-data"
        assert data.size_mb == 500000
        assert data.used_mb == 480000
        assert data.percent_used == 96
        assert result.notes == []

    def test_unreadable_partition_is_skipped(self):
        partitions = [
            Partition("/dev/sda1", "/", "ext4", "rw"),
            Partition("/dev/sdb1", "/stale", "ext4", "rw"),
        ]

        def disk_usage(path):
            if path == "/stale":
                raise PermissionError("denied")
            return DiskUsage(total=100 * MB, used=10 * MB, free=90 * MB, percent=10.0)

        with patch("psutil.disk_partitions", return_value=partitions), patch(
            "psutil.disk_usage", side_effect=disk_usage
        ):
            result = FilesystemCollector().collect()

        assert [r.mount_point for r in result.data] == ["/"]
        assert len(result.notes) == 1
        assert "/dev/sdb1" in result.notes[0]

    def test_custom_device_pattern(self):
        partitions = [
            Partition("/dev/sda1", "/", "ext4", "rw"),
            Partition("/dev/nvme0n1p1", "/fast", "ext4", "rw"),
        ]
        usage = DiskUsage(total=100 * MB, used=10 * MB, free=90 * MB, percent=10.0)

        with patch("psutil.disk_partitions", return_value=partitions), patch(
            "psutil.disk_usage", return_value=usage
        ):
            result = FilesystemCollector(device_pattern=re.compile(r"/dev/nvme")).collect()

        assert [r.device for r in result.data] == ["/dev/nvme0n1p1"]

    def test_no_partitions(self):
        with patch("psutil.disk_partitions", return_value=[]):
            result = FilesystemCollector().collect()
        assert result.data == []


class TestDfCollector:
    """df -Pm backed inventory."""

    def test_parse_filters_and_keeps_order(self):
        notes = []
        records = parse_df_output(DF_OUTPUT, notes)

        assert [r.device for r in records] == ["/dev/sda1", "/dev/mapper/vg0-data", "/dev/sdb1"]
        assert records[1].size_mb == 500000
        assert records[1].used_mb == 480000
        assert records[1].percent_used == "96"
        assert records[2].mount_point == "/mnt/backup disk"
        assert notes == []

    def test_capacity_is_passed_through_for_validation(self):
        out = DF_OUTPUT.splitlines()[0] + "\n/dev/sda1 100000 50000 50000 - /\n"
        records = parse_df_output(out, [])
        assert records[0].percent_used == ""

    def test_non_numeric_size_is_skipped(self):
        out = DF_OUTPUT.splitlines()[0] + "\n/dev/sda1 - - - - /\n"
        notes = []
        assert parse_df_output(out, notes) == []
        assert len(notes) == 1

    def test_collect_runs_df(self):
        with patch("subprocess.check_output", return_value=DF_OUTPUT) as mock_run:
            result = DfCollector().collect()

        mock_run.assert_called_once()
        assert mock_run.call_args[0][0] == ["df", "-Pm"]
        assert len(result.data) == 3

    def test_df_failure_yields_no_records(self):
        err = subprocess.CalledProcessError(1, ["df", "-Pm"])
        with patch("subprocess.check_output", side_effect=err):
            result = DfCollector().collect()

        assert result.data == []
        assert result.notes

    def test_missing_df_binary(self):
        with patch("subprocess.check_output", side_effect=FileNotFoundError("df")):
            result = DfCollector().collect()
        assert result.data == []
