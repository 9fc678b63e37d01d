"""
    Read-only access to the host being audited.

    Every method answers one question about the host and never raises because
    a file or command is missing. Instead it returns ABSENT (nothing to read)
    or UNPARSEABLE (something was read, but not in the shape we expected), so
    a rule can tell "file not found" apart from "file exists but is empty".
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Callable

import psutil

from core.models import ABSENT, UNPARSEABLE
from helpers.unix import RC_NOT_RUN, get_evidence, run_cmd

logger = logging.getLogger(__name__)

Runner = Callable[..., tuple[int, str, str]]


class SystemProbe:
    """
    Probe rooted at a filesystem prefix.

    `root` is prepended to every absolute path the collectors ask for, so the
    same collectors can audit "/" or a fixture tree. `runner` executes
    commands and has the same contract as helpers.unix.run_cmd.
    """

    def __init__(self, root: str | Path = "/", runner: Runner = run_cmd):
        self.root = Path(root)
        self.runner = runner

    def path(self, path: str | Path) -> Path:
        return self.root / str(path).lstrip("/")

    # -----------------------------
    # Files
    # -----------------------------
    def file_exists(self, path: str) -> bool:
        return self.path(path).is_file()

    def read_text(self, path: str) -> str | object:
        try:
            return self.path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug("cannot read %s: %s", path, e)
            return ABSENT

    def file_contains(self, path: str, pattern: str) -> bool | object:
        text = self.read_text(path)
        if text is ABSENT:
            return ABSENT
        return re.search(pattern, text, re.MULTILINE) is not None

    def file_field(self, path: str, pattern: str, flags: int = 0) -> str | None | object:
        """
        First captured group of `pattern` in the file.

        Returns None when the file is readable but the pattern does not match.
        Lines starting with "#" are skipped, which is how every config file we
        read marks comments.
        """
        text = self.read_text(path)
        if text is ABSENT:
            return ABSENT
        regex = re.compile(pattern, flags)
        for line in text.splitlines():
            if line.lstrip().startswith("#"):
                continue
            m = regex.search(line)
            if m:
                return m.group(1)
        return None

    def glob(self, pattern: str) -> list[str]:
        """Host paths matching an absolute glob pattern, sorted."""
        rel = pattern.lstrip("/")
        if not rel:
            return []
        return sorted("/" + str(p.relative_to(self.root)) for p in self.root.glob(rel))

    def file_count(self, path: str, pattern: str) -> int | object:
        text = self.read_text(path)
        if text is ABSENT:
            return ABSENT
        regex = re.compile(pattern)
        return sum(1 for line in text.splitlines() if regex.search(line))

    # -----------------------------
    # Commands
    # -----------------------------
    def command_output(
        self,
        cmd: list[str],
        extractor: Callable[[int, str], Any],
        timeout_s: int | None = 10,
    ) -> Any:
        """
        Run `cmd` and hand (rc, stdout) to `extractor`.

        A command that cannot be run at all is ABSENT; an extractor that
        returns None means the output was not understood (UNPARSEABLE).
        """
        rc, stdout, stderr = self.runner(cmd, timeout_s=timeout_s)
        if rc == RC_NOT_RUN:
            logger.debug("command unavailable: %s", get_evidence(cmd, rc, stdout, stderr))
            return ABSENT

        value = extractor(rc, stdout)
        if value is None:
            logger.debug("unparseable output: %s", get_evidence(cmd, rc, stdout, stderr))
            return UNPARSEABLE
        return value

    def counter(
        self,
        cmd: list[str],
        extractor: Callable[[int, str], int | None],
        timeout_s: int | None = 10,
    ) -> int | object:
        value = self.command_output(cmd, extractor, timeout_s=timeout_s)
        if value is ABSENT or value is UNPARSEABLE:
            return value
        try:
            return int(value)
        except (TypeError, ValueError):
            return UNPARSEABLE

    # -----------------------------
    # Library counters
    # -----------------------------
    def sample(self, fn: Callable[..., Any], *args, **kwargs) -> Any:
        """
        Call a psutil-style function; access errors become ABSENT.

        On some systems psutil raises AccessDenied for system-wide data
        unless run as root.
        """
        try:
            return fn(*args, **kwargs)
        except (psutil.Error, OSError, ValueError) as e:
            logger.debug("%s failed: %s: %s", getattr(fn, "__name__", fn), type(e).__name__, e)
            return ABSENT
