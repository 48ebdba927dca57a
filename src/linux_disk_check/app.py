from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from typing import NoReturn, TextIO

from linux_disk_check.collectors.df_collector import DfCollector
from linux_disk_check.collectors.filesystem_collector import FilesystemCollector
from linux_disk_check.models.common import ExitCode
from linux_disk_check.services.classifier import MalformedPercentError, classify_all
from linux_disk_check.services.report_service import ReportService

logger = logging.getLogger(__name__)

DESCRIPTION = """\
Checks the remaining space of disks (/dev/sd[a-z][1-9], /dev/mapper/*),
based on the size of the disk. Prints one monitoring-plugin status line
with performance data for graphing.

Thresholds (percent free, warning / critical):
    disks <= 200 GB (204800 Mb)   15 / 10
    disks >= 200 GB               10 / 5
    disks >= 1 TB (1000000 Mb)     7 / 3
"""

EPILOG = """\
Exit codes:
    0: No alerts
    1: Warning
    2: Critical
    3: No partitions to check
    4: Incorrect command line argument
    5: Incorrect percent value of mountpoint (not int or empty)

The check ALWAYS exits with 2 (Critical) if ANY of the partitions is at
Critical level, whatever the state of the others.
"""

COLLECTORS = {
    "psutil": FilesystemCollector,
    "df": DfCollector,
}


@dataclass(frozen=True)
class CheckOptions:
    debug: bool = False
    verbose: bool = False
    source: str = "psutil"


class CheckArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(int(ExitCode.INVALID_ARGUMENT), f"{self.prog}: error: {message}\n")


def build_parser() -> CheckArgumentParser:
    parser = CheckArgumentParser(
        prog="linux-disk",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("-h", "--help", action="store_true", help="Show this help and exit")
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show information about all disks, not only the failing ones",
    )
    parser.add_argument(
        "-s",
        "--source",
        choices=sorted(COLLECTORS),
        default="psutil",
        help="Where to read filesystem usage from (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log diagnostics to stderr")
    return parser


def parse_options(argv: Sequence[str], stdout: TextIO) -> CheckOptions:
    parser = build_parser()
    ns, extra = parser.parse_known_args(list(argv))
    if ns.help:
        stdout.write(parser.format_help())
        raise SystemExit(int(ExitCode.OK))
    # operands are ignored, only unknown flags are usage errors
    unknown = [a for a in extra if a.startswith("-")]
    if unknown:
        parser.error(f"unrecognized arguments: {' '.join(unknown)}")
    return CheckOptions(debug=ns.debug, verbose=ns.verbose, source=ns.source)


def setup_logger(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if root_logger.handlers:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def run(argv: Sequence[str] | None = None, stdout: TextIO | None = None) -> int:
    out = stdout or sys.stdout
    try:
        options = parse_options(sys.argv[1:] if argv is None else argv, out)
    except SystemExit as e:
        return int(e.code or 0)

    setup_logger(options.verbose)

    inventory = COLLECTORS[options.source]().collect()
    if not inventory.data:
        out.write("No disks to check. Exiting.\n")
        return int(ExitCode.NO_DISKS)

    try:
        verdicts = classify_all(inventory.data)
    except MalformedPercentError as e:
        logger.error("%s", e)
        out.write(f"Got incorrect percent value from {e.device}. Exiting.\n")
        return int(ExitCode.MALFORMED_PERCENT)

    result = ReportService().build_result(verdicts, debug=options.debug)
    logger.debug("%d disk(s) checked, overall %s", len(verdicts), result.overall_severity.label)
    out.write(result.output_line + "\n")
    return int(result.exit_code)


def main() -> None:
    raise SystemExit(run())
