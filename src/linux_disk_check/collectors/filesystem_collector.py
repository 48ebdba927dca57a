from __future__ import annotations

import logging
import re
from datetime import datetime

import psutil

from linux_disk_check.models.common import CollectorResult
from linux_disk_check.models.filesystem import FilesystemRecord

logger = logging.getLogger(__name__)

# sd* block devices (optionally partitioned) and device-mapper volumes
DEVICE_PATTERN = re.compile(r"/dev/sd[a-z][1-9]?|mapper")

_MB = 1024 * 1024


def is_storage_device(device: str, pattern: re.Pattern[str] = DEVICE_PATTERN) -> bool:
    return pattern.search(device) is not None


def to_mb(n_bytes: int) -> int:
    # df -m rounds block counts up
    return -(-n_bytes // _MB)


def percent_used(used: int, free: int) -> int:
    """Use% as df reports it: used over used+available, rounded up."""
    total = used + free
    if total <= 0:
        return 0
    return -(-used * 100 // total)


class FilesystemCollector:
    def __init__(self, device_pattern: re.Pattern[str] = DEVICE_PATTERN) -> None:
        self.device_pattern = device_pattern

    def collect(self) -> CollectorResult[list[FilesystemRecord]]:
        ts = datetime.now()
        notes: list[str] = []
        records = self._mounts(notes)
        for n in notes:
            logger.debug(n)
        return CollectorResult(ts=ts, data=records, notes=notes)

    def _mounts(self, notes: list[str]) -> list[FilesystemRecord]:
        rows: list[FilesystemRecord] = []
        for p in psutil.disk_partitions(all=False):
            if not is_storage_device(p.device, self.device_pattern):
                continue
            try:
                u = psutil.disk_usage(p.mountpoint)
            except OSError as e:
                notes.append(f"Skipping {p.device} on {p.mountpoint}: {e}")
                continue
            rows.append(
                FilesystemRecord(
                    device=str(p.device),
                    size_mb=to_mb(u.total),
                    used_mb=to_mb(u.used),
                    percent_used=percent_used(int(u.used), int(u.free)),
                    mount_point=str(p.mountpoint),
                )
            )
        return rows
