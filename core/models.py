# core/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Verdict(str, Enum):
    PASS = "PASS"
    WARN = "WARN"
    FAIL = "FAIL"

    @property
    def severity(self) -> int:
        # FAIL > WARN > PASS
        return ("PASS", "WARN", "FAIL").index(self.value)


class Missing(Enum):
    """
    Sentinels a probe returns instead of a real fact.

      - ABSENT: the file / command / counter does not exist or could not be read
      - UNPARSEABLE: the source exists but its output is not in the expected shape
    """
    ABSENT = "absent"
    UNPARSEABLE = "unparseable"

    def __repr__(self) -> str:
        return self.name


ABSENT = Missing.ABSENT
UNPARSEABLE = Missing.UNPARSEABLE


class AuditError(Exception):
    """Base class for tool errors (as opposed to FAIL verdicts about the host)."""


class ReportWriteError(AuditError):
    """The report file could not be created or written."""


@dataclass(frozen=True)
class CheckResult:
    name: str
    verdict: Verdict
    message: str

    def line(self) -> str:
        return f"[{self.verdict.value}] {self.name} - {self.message}"


@dataclass(frozen=True)
class HostSummary:
    hostname: str = "unknown"
    kernel: str = "unknown"
    os_name: str = "unknown"
    cpu_cores: str = "unknown"
    total_memory: str = "unknown"
    total_disk: str = "unknown"


@dataclass
class AuditReport:
    meta: dict[str, Any]
    host: HostSummary
    checks: list[CheckResult] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return any(c.verdict is Verdict.FAIL for c in self.checks)
