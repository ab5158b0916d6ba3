from __future__ import annotations

import asyncio
import time
import traceback

from app.config import settings
from app.sanity_checks.result import SanityCheckResult
from app.store.base import StoreAdapter


async def check_target_db(store: StoreAdapter, *, timeout_seconds: float = 10.0) -> SanityCheckResult:
    """
    Target DB round trip: the table listing used by catalog construction.

    Fail-fast conditions:
    - the store cannot be reached within ``timeout_seconds``.
    - the table listing fails.
    """
    name = "target_db"
    location = {
        "db_type": settings.target_db_type,
        "dialect": store.dialect,
        "host": f"{settings.target_db_host}:{settings.target_db_port}",
        "database": settings.target_db_name,
    }

    started = time.perf_counter()
    try:
        tables = await asyncio.wait_for(store.list_tables(), timeout=timeout_seconds)
    except Exception as exc:
        return SanityCheckResult(
            name=name,
            ok=False,
            detail="Target DB sanity check failed",
            data=location,
            error=repr(exc) + "\n" + traceback.format_exc(),
            elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
        )

    return SanityCheckResult(
        name=name,
        ok=True,
        detail="OK",
        data={**location, "table_count": len(tables)},
        elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
    )
