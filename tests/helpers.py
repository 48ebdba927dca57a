"""Record builders and psutil result shapes shared by the tests."""

from collections import namedtuple

from linux_disk_check.models.filesystem import FilesystemRecord

# Shapes of the psutil namedtuples the collector reads.
Partition = namedtuple("Partition", ["device", "mountpoint", "fstype", "opts"])
DiskUsage = namedtuple("DiskUsage", ["total", "used", "free", "percent"])

MB = 1024 * 1024


def make_record(
    mount_point: str = "/",
    size_mb: int = 100000,
    used_mb: int = 50000,
    percent_used="50",
    device: str = "/dev/sda1",
) -> FilesystemRecord:
    return FilesystemRecord(
        device=device,
        size_mb=size_mb,
        used_mb=used_mb,
        percent_used=percent_used,
        mount_point=mount_point,
    )
