from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from linux_disk_check.models.common import ExitCode, Severity

# Inventory sources hand over the percent column untouched; see classifier.
PercentValue = Union[int, str]


class SizeTier(Enum):
    DEFAULT = "default"
    BIG = "big"
    HUGE = "huge"


@dataclass(frozen=True)
class FilesystemRecord:
    device: str
    size_mb: int
    used_mb: int
    percent_used: PercentValue
    mount_point: str


@dataclass(frozen=True)
class ThresholdSet:
    warn_percent_free: int
    crit_percent_free: int
    # graph factors as whole percents so the absolute values floor exactly
    graph_warn_percent: int
    graph_crit_percent: int

    @property
    def graph_warn_factor(self) -> float:
        return self.graph_warn_percent / 100

    @property
    def graph_crit_factor(self) -> float:
        return self.graph_crit_percent / 100


@dataclass(frozen=True)
class Verdict:
    mount_point: str
    device: str
    tier: SizeTier
    severity: Severity
    percent_free: int
    graph_fragment: str


@dataclass(frozen=True)
class RunResult:
    overall_severity: Severity
    output_line: str
    graph_string: str
    exit_code: ExitCode
