"""
    Threshold ladders: numeric observation -> Verdict.

    A ladder is an ordered list of (upper_bound, verdict) steps checked from
    the lowest bound up. The first bound the value is strictly below wins;
    a value at or above every bound gets the ladder's final verdict. So a
    reading exactly on a bound always lands in the worse bucket.
"""
from __future__ import annotations
from dataclasses import dataclass

from core.models import Verdict

PASS, WARN, FAIL = Verdict.PASS, Verdict.WARN, Verdict.FAIL


@dataclass(frozen=True)
class Ladder:
    steps: tuple[tuple[float, Verdict], ...]
    otherwise: Verdict

    def __post_init__(self):
        bounds = [b for b, _ in self.steps]
        if bounds != sorted(bounds):
            raise ValueError(f"ladder bounds must be ascending: {bounds}")

    def classify(self, value: float) -> Verdict:
        for bound, verdict in self.steps:
            if value < bound:
                return verdict
        return self.otherwise


THRESHOLDS: dict[str, Ladder] = {
    "Failed Logins": Ladder(((10, PASS), (50, WARN)), FAIL),
    "System Updates": Ladder(((1, PASS),), FAIL),
    "Running Services": Ladder(((20, PASS), (40, WARN)), FAIL),
    "Open Ports": Ladder(((10, PASS), (20, WARN)), FAIL),
    "Disk Usage": Ladder(((50, PASS), (80, WARN)), FAIL),
    "Memory Usage": Ladder(((50, PASS), (80, WARN)), FAIL),
    "CPU Usage": Ladder(((50, PASS), (80, WARN)), FAIL),
    "SUID Files": Ladder(((1, PASS),), FAIL),
}


def classify(name: str, value: float) -> Verdict:
    return THRESHOLDS[name].classify(value)
