from __future__ import annotations

import traceback
from typing import List

from app.smart_logger import SmartLogger
from app.sanity_checks.result import SanityCheckResult
from app.sanity_checks.checks.check_db import check_target_db
from app.sanity_checks.checks.check_settings import check_settings
from app.store.base import StoreAdapter


async def run_startup_sanity_checks_or_raise(store: StoreAdapter) -> List[SanityCheckResult]:
    """
    Run startup sanity checks (fail-fast).

    Raises:
        RuntimeError: if any required check fails.
    """
    checks = [
        check_settings(),
        check_target_db(store),
    ]

    results: List[SanityCheckResult] = []
    for coro in checks:
        try:
            results.append(await coro)
        except Exception as exc:
            # A check reports failures through its result; an exception here is a bug in the check.
            results.append(
                SanityCheckResult(
                    name="sanity_check_internal_error",
                    ok=False,
                    detail="A sanity check raised unexpectedly",
                    error=repr(exc) + "\n" + traceback.format_exc(),
                )
            )

    failed = [r for r in results if not r.ok]

    for r in results:
        SmartLogger.log(
            "INFO" if r.ok else "ERROR",
            f"startup.sanity.{r.name}." + ("ok" if r.ok else "fail"),
            category="startup.sanity",
            params=r.to_log_params(),
            max_inline_chars=0,
        )

    if failed:
        SmartLogger.log(
            "CRITICAL",
            "startup.sanity.failed",
            category="startup.sanity",
            params={"failed": [f.name for f in failed]},
            max_inline_chars=0,
        )
        raise RuntimeError("Startup sanity checks failed. See logs for details.")

    SmartLogger.log("INFO", "startup.sanity.passed", category="startup.sanity")
    return results
