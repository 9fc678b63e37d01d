from __future__ import annotations

import logging
from typing import Callable, Iterable

from core.checks import Check
from core.models import CheckResult, Verdict
from helpers.probe import SystemProbe

logger = logging.getLogger(__name__)


def run_check(check: Check, probe: SystemProbe) -> CheckResult:
    """
    Collect and evaluate one check.

    Collectors and rules are written not to raise; if one does anyway the
    check becomes a FAIL naming the error and the audit carries on.
    """
    try:
        facts = check.collect(probe)
        verdict, message = check.evaluate(facts)
    except Exception as e:
        logger.exception("check %r crashed", check.name)
        return CheckResult(check.name, Verdict.FAIL, f"Check could not be evaluated ({type(e).__name__}: {e})")
    return CheckResult(check.name, verdict, message)


def run_checks(
    checks: Iterable[Check],
    probe: SystemProbe,
    on_result: Callable[[CheckResult], None] | None = None,
) -> list[CheckResult]:
    results: list[CheckResult] = []
    for check in checks:
        logger.debug("running check %s", check.name)
        result = run_check(check, probe)
        results.append(result)
        if on_result is not None:
            on_result(result)
    return results
