from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from linux_disk_check.models.common import Severity
from linux_disk_check.models.filesystem import (
    FilesystemRecord,
    PercentValue,
    SizeTier,
    ThresholdSet,
    Verdict,
)

logger = logging.getLogger(__name__)

# Disk size limits in megabytes: 200 GB default ceiling, 1 TB and up is huge.
DEFAULT_DISK_MB = 204800
HUGE_DISK_MB = 1000000

TIER_THRESHOLDS: dict[SizeTier, ThresholdSet] = {
    SizeTier.DEFAULT: ThresholdSet(
        warn_percent_free=15, crit_percent_free=10, graph_warn_percent=85, graph_crit_percent=90
    ),
    SizeTier.BIG: ThresholdSet(
        warn_percent_free=10, crit_percent_free=5, graph_warn_percent=90, graph_crit_percent=95
    ),
    SizeTier.HUGE: ThresholdSet(
        warn_percent_free=7, crit_percent_free=3, graph_warn_percent=93, graph_crit_percent=97
    ),
}

_PERCENT_RE = re.compile(r"[0-9]{1,3}")


class MalformedPercentError(ValueError):
    def __init__(self, device: str, value: object) -> None:
        super().__init__(f"Got incorrect percent value {value!r} from {device}")
        self.device = device
        self.value = value


def size_tier(size_mb: int) -> SizeTier:
    """Tier for a filesystem of ``size_mb`` megabytes.

    The default ceiling is inclusive, so exactly 204800 Mb stays in the
    default tier while exactly 1000000 Mb is already huge.
    """
    if size_mb <= DEFAULT_DISK_MB:
        return SizeTier.DEFAULT
    if size_mb < HUGE_DISK_MB:
        return SizeTier.BIG
    return SizeTier.HUGE


def parse_percent(device: str, value: PercentValue) -> int:
    if isinstance(value, bool):
        raise MalformedPercentError(device, value)
    if isinstance(value, int):
        percent = value
    elif isinstance(value, str) and _PERCENT_RE.fullmatch(value):
        percent = int(value)
    else:
        raise MalformedPercentError(device, value)
    if not 0 <= percent <= 100:
        raise MalformedPercentError(device, value)
    return percent


def graph_thresholds(size_mb: int, thresholds: ThresholdSet) -> tuple[int, int]:
    warn = size_mb * thresholds.graph_warn_percent // 100
    crit = size_mb * thresholds.graph_crit_percent // 100
    return warn, crit


def severity_for(percent_free: int, thresholds: ThresholdSet) -> Severity:
    if percent_free <= thresholds.crit_percent_free:
        return Severity.CRITICAL
    if percent_free <= thresholds.warn_percent_free:
        return Severity.WARNING
    return Severity.OK


def classify(record: FilesystemRecord) -> Verdict:
    percent_used = parse_percent(record.device, record.percent_used)
    percent_free = 100 - percent_used

    tier = size_tier(record.size_mb)
    thresholds = TIER_THRESHOLDS[tier]
    graph_warn, graph_crit = graph_thresholds(record.size_mb, thresholds)
    severity = severity_for(percent_free, thresholds)

    logger.debug(
        "%s on %s: tier=%s free=%d%% -> %s",
        record.device,
        record.mount_point,
        tier.value,
        percent_free,
        severity.label,
    )
    return Verdict(
        mount_point=record.mount_point,
        device=record.device,
        tier=tier,
        severity=severity,
        percent_free=percent_free,
        graph_fragment=(
            f"{record.mount_point}={record.used_mb}MB;{graph_warn};{graph_crit};0;{record.size_mb}"
        ),
    )


def classify_all(records: Iterable[FilesystemRecord]) -> tuple[Verdict, ...]:
    """Classify records in order, stopping at the first malformed one."""
    return tuple(classify(r) for r in records)
