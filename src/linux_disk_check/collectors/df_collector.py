from __future__ import annotations

import logging
import re
import subprocess
from datetime import datetime

from linux_disk_check.collectors.filesystem_collector import DEVICE_PATTERN
from linux_disk_check.models.common import CollectorResult
from linux_disk_check.models.filesystem import FilesystemRecord

logger = logging.getLogger(__name__)

# -P keeps every filesystem on one line, -m reports 1M blocks
DF_COMMAND = ("df", "-Pm")


def parse_df_output(
    out: str,
    notes: list[str],
    device_pattern: re.Pattern[str] = DEVICE_PATTERN,
) -> list[FilesystemRecord]:
    """Parse ``df -Pm`` output into records.

    The capacity column is only stripped of non-digits; whether what is
    left is a usable percentage is decided by the classifier.
    """
    rows: list[FilesystemRecord] = []
    for line in out.splitlines()[1:]:
        if not device_pattern.search(line):
            continue
        parts = line.split(None, 5)
        if len(parts) < 6:
            notes.append(f"Unparsable df line: {line!r}")
            continue
        device, size, used, _avail, capacity, mountpoint = parts
        try:
            size_mb = int(size)
            used_mb = int(used)
        except ValueError:
            notes.append(f"Non-numeric size for {device}: {size!r}/{used!r}")
            continue
        rows.append(
            FilesystemRecord(
                device=device,
                size_mb=size_mb,
                used_mb=used_mb,
                percent_used="".join(re.findall(r"\d", capacity)),
                mount_point=mountpoint,
            )
        )
    return rows


class DfCollector:
    def __init__(self, command: tuple[str, ...] = DF_COMMAND) -> None:
        self.command = command

    def collect(self) -> CollectorResult[list[FilesystemRecord]]:
        ts = datetime.now()
        notes: list[str] = []
        try:
            out = subprocess.check_output(list(self.command), text=True, stderr=subprocess.DEVNULL)
        except (OSError, subprocess.CalledProcessError) as e:
            logger.error("%s failed: %s", " ".join(self.command), e)
            notes.append(f"df failed: {e}")
            return CollectorResult(ts=ts, data=[], notes=notes)

        records = parse_df_output(out, notes)
        for n in notes:
            logger.debug(n)
        return CollectorResult(ts=ts, data=records, notes=notes)
