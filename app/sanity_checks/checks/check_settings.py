from __future__ import annotations

from typing import List

from app.config import Settings, settings as default_settings
from app.sanity_checks.result import SanityCheckResult


async def check_settings(settings: Settings = default_settings) -> SanityCheckResult:
    """
    Listing and timeout settings must describe a usable request.

    Fail-fast conditions:
    - default_limit < 1 or default_offset < 0.
    - request_timeout_seconds <= 0.
    - db_pool_min_size > db_pool_max_size.
    """
    name = "settings"
    problems: List[str] = []

    if settings.default_limit < 1:
        problems.append(f"default_limit must be >= 1 (got {settings.default_limit})")
    if settings.default_offset < 0:
        problems.append(f"default_offset must be >= 0 (got {settings.default_offset})")
    if settings.request_timeout_seconds <= 0:
        problems.append(f"request_timeout_seconds must be > 0 (got {settings.request_timeout_seconds})")
    if settings.db_pool_min_size > settings.db_pool_max_size:
        problems.append("db_pool_min_size must not exceed db_pool_max_size")

    data = {
        "default_limit": settings.default_limit,
        "default_offset": settings.default_offset,
        "request_timeout_seconds": settings.request_timeout_seconds,
        "excluded_tables": sorted(settings.excluded_tables()),
    }
    if problems:
        return SanityCheckResult(
            name=name,
            ok=False,
            detail="Invalid settings",
            data=data,
            error="; ".join(problems),
        )
    return SanityCheckResult(name=name, ok=True, detail="OK", data=data)
