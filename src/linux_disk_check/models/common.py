from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class Severity(IntEnum):
    OK = 0
    WARNING = 1
    CRITICAL = 2

    @property
    def label(self) -> str:
        return _SEVERITY_LABELS[self]


_SEVERITY_LABELS = {
    Severity.OK: "OK",
    Severity.WARNING: "Warning",
    Severity.CRITICAL: "Critical",
}


class ExitCode(IntEnum):
    OK = 0
    WARNING = 1
    CRITICAL = 2
    NO_DISKS = 3
    INVALID_ARGUMENT = 4
    MALFORMED_PERCENT = 5


@dataclass(frozen=True)
class CollectorResult(Generic[T]):
    ts: datetime
    data: T
    notes: list[str] = field(default_factory=list)
