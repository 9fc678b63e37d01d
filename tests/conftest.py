"""Shared test fixtures: a probe rooted at tmp_path with scripted commands."""

from __future__ import annotations

import itertools
from pathlib import Path

import pytest

from core.models import ABSENT
from helpers.probe import SystemProbe
from helpers.unix import RC_NOT_RUN


class ScriptedRunner:
    """
    Stands in for helpers.unix.run_cmd.

    Responses are keyed by a command prefix tuple; the longest matching
    prefix wins. Anything unscripted behaves like a missing binary.
    """

    def __init__(self, responses: dict[tuple[str, ...], tuple[int, str, str]] | None = None):
        self.responses = dict(responses or {})
        self.calls: list[list[str]] = []

    def __call__(self, cmd: list[str], timeout_s: int | None = None) -> tuple[int, str, str]:
        self.calls.append(list(cmd))
        best = None
        for prefix, response in self.responses.items():
            if tuple(cmd[:len(prefix)]) == prefix and (best is None or len(prefix) > len(best[0])):
                best = (prefix, response)
        if best is None:
            return RC_NOT_RUN, "", f"FileNotFoundError: {cmd[0]}"
        return best[1]


class AbsentProbe(SystemProbe):
    """A probe on a host where no library counter is readable either."""

    def sample(self, fn, *args, **kwargs):
        return ABSENT


def write_files(root: Path, files: dict[str, str]) -> None:
    for rel, content in files.items():
        path = root / rel.lstrip("/")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


@pytest.fixture
def make_probe(tmp_path):
    roots = itertools.count()

    def factory(files: dict[str, str] | None = None, commands=None, cls=SystemProbe) -> SystemProbe:
        # a fresh tree per call, so one host never sees another host's files
        root = tmp_path / f"host{next(roots)}"
        root.mkdir()
        write_files(root, files or {})
        return cls(root=root, runner=ScriptedRunner(commands))
    return factory


@pytest.fixture
def absent_probe(tmp_path) -> SystemProbe:
    root = tmp_path / "empty-host"
    root.mkdir()
    return AbsentProbe(root=root, runner=ScriptedRunner())
