from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

REPORT_PREFIX = "vps-audit-report"


@dataclass(frozen=True)
class RunContext:
    """Everything fixed at the start of a run, built once in main()."""
    output_dir: Path = Path(".")
    started_at: datetime = field(default_factory=lambda: datetime.now().astimezone())
    strict: bool = False

    @property
    def stamp(self) -> str:
        return self.started_at.strftime("%Y%m%d_%H%M%S")

    @property
    def report_path(self) -> Path:
        return self.output_dir / f"{REPORT_PREFIX}-{self.stamp}.txt"
