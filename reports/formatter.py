"""
    Report formatting: one result at a time to the console and the report file.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any

from rich.console import Console
from rich.text import Text

from core.models import ABSENT, CheckResult, HostSummary, Verdict
from core.report import ReportSink

SEPARATOR = "================================"

VERDICT_STYLES = {
    Verdict.PASS: "green",
    Verdict.WARN: "bold yellow",
    Verdict.FAIL: "red",
}


def format_timestamp(when: datetime) -> str:
    # same shape as date(1): "Sun Oct 18 09:08:00 UTC 2026"
    return when.strftime("%a %b %d %H:%M:%S %Z %Y").replace("  ", " ")


def result_text(result: CheckResult) -> Text:
    return Text.assemble(
        (f"[{result.verdict.value}]", VERDICT_STYLES[result.verdict]),
        f" {result.name} ",
        (f"- {result.message}", "grey50"),
    )


class Reporter:
    """
    Streams each CheckResult to the console (colored) and the report sink
    (plaintext line plus a blank line) as soon as it is produced.
    """

    def __init__(self, sink: ReportSink, console: Console | None = None):
        self.sink = sink
        self.console = console or Console(highlight=False)

    def header(self, started_at: datetime) -> None:
        self.console.print("Starting VPS audit...")
        self.sink.write_line(f"VPS Audit Report - {format_timestamp(started_at)}")
        self.sink.write_line(SEPARATOR)
        self.sink.write_line()

    def uptime(self, uptime: dict[str, Any] | Any) -> None:
        if uptime is ABSENT:
            current = since = "unknown"
        else:
            current, since = uptime["uptime"], uptime["since"]
        self.sink.write_line()
        self.sink.write_line("System Uptime Information:")
        self.sink.write_line(f"Current uptime: {current}")
        self.sink.write_line(f"System up since: {since}")
        self.sink.write_line()
        self.console.print(f"System Uptime: {current} (since {since})", soft_wrap=True)

    def result(self, result: CheckResult) -> None:
        self.console.print(result_text(result), soft_wrap=True)
        self.sink.write_line(result.line())
        self.sink.write_line()

    def footer(self, host: HostSummary) -> None:
        for line in (
            SEPARATOR,
            "System Information Summary:",
            f"Hostname: {host.hostname}",
            f"Kernel: {host.kernel}",
            f"OS: {host.os_name}",
            f"CPU Cores: {host.cpu_cores}",
            f"Total Memory: {host.total_memory}",
            f"Total Disk Space: {host.total_disk}",
            SEPARATOR,
            "End of VPS Audit Report",
        ):
            self.sink.write_line(line)

    def completed(self) -> None:
        self.console.print(f"\nVPS audit complete. Full report saved to {self.sink.path}", markup=False, soft_wrap=True)
        self.console.print(f"Review {self.sink.path} for detailed recommendations.", markup=False, soft_wrap=True)
