from __future__ import annotations

from collections.abc import Sequence

from linux_disk_check.models.common import ExitCode, Severity
from linux_disk_check.models.filesystem import RunResult, Verdict

DISKS_OK_TEXT = "Disks OK"

_EXIT_CODES: dict[Severity, ExitCode] = {
    Severity.OK: ExitCode.OK,
    Severity.WARNING: ExitCode.WARNING,
    Severity.CRITICAL: ExitCode.CRITICAL,
}


def exit_code_for(severity: Severity) -> ExitCode:
    return _EXIT_CODES[severity]


def worst_severity(verdicts: Sequence[Verdict]) -> Severity:
    return max((v.severity for v in verdicts), default=Severity.OK)


def render_verdict(v: Verdict) -> str:
    return f"{v.severity.label}: {v.percent_free}% left on {v.mount_point}"


class ReportService:
    def build_result(self, verdicts: Sequence[Verdict], *, debug: bool = False) -> RunResult:
        overall = worst_severity(verdicts)
        graph = " ".join(v.graph_fragment for v in verdicts)
        status_text = self._status_text(verdicts, overall, debug)
        return RunResult(
            overall_severity=overall,
            output_line=f"{status_text} | {graph}",
            graph_string=graph,
            exit_code=exit_code_for(overall),
        )

    def _status_text(self, verdicts: Sequence[Verdict], overall: Severity, debug: bool) -> str:
        if debug:
            return " ".join(render_verdict(v) for v in verdicts)
        if overall is Severity.OK:
            return DISKS_OK_TEXT
        return " ".join(render_verdict(v) for v in verdicts if v.severity is not Severity.OK)


def aggregate(verdicts: Sequence[Verdict], debug_mode: bool = False) -> RunResult:
    return ReportService().build_result(verdicts, debug=debug_mode)
