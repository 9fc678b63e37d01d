"""
    Main entry point for the VPS audit tool
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console

from core.checks import CHECKS
from core.context import RunContext
from core.models import AuditError, AuditReport
from core.report import ReportSink, write_json_report
from core.runner import run_checks
from helpers.probe import SystemProbe
from reports.formatter import Reporter
from shared.system import get_host_summary, get_uptime

logger = logging.getLogger("vps_audit")

EXIT_OK = 0
EXIT_FAILED_CHECKS = 1
EXIT_REPORT_ERROR = 2


def audit(ctx: RunContext, probe: SystemProbe, console: Console | None = None) -> AuditReport:
    """
    Run every check once, streaming results to the console and the report
    file, and return the sealed report. Raises ReportWriteError if the
    report file cannot be written.
    """
    with ReportSink(ctx.report_path) as sink:
        reporter = Reporter(sink, console)
        reporter.header(ctx.started_at)
        reporter.uptime(get_uptime(probe))

        results = run_checks(CHECKS, probe, on_result=reporter.result)

        host = get_host_summary(probe)
        reporter.footer(host)

    reporter.completed()
    return AuditReport(
        meta={
            "generated_at": ctx.started_at.isoformat(),
            "report_path": str(sink.path),
        },
        host=host,
        checks=results,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Point-in-time security and resource audit of this host")
    parser.add_argument("--output-dir", type=Path, default=Path("."),
                        help="directory for the report file (default: current directory)")
    parser.add_argument("--json", type=Path, metavar="PATH",
                        help="also write the results as JSON to PATH")
    parser.add_argument("--strict", action="store_true",
                        help="exit with status 1 when any check FAILs")
    parser.add_argument("--root", type=Path, default=Path("/"),
                        help="filesystem root to read configuration files from (default: /)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    ctx = RunContext(output_dir=args.output_dir, strict=args.strict)
    probe = SystemProbe(root=args.root)

    try:
        report = audit(ctx, probe)
        if args.json:
            write_json_report(report, args.json)
    except AuditError as e:
        logger.error("audit aborted: %s", e)
        return EXIT_REPORT_ERROR

    if ctx.strict and report.has_failures:
        return EXIT_FAILED_CHECKS
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
