from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from feedboard.services.ingest.normalize import as_utc, parse_timestamp


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def is_within_window(
    published_at_iso: str | None,
    window_hours: float,
    now_fn: Callable[[], datetime] | None = None,
) -> bool:
    """
    True when the item is at most ``window_hours`` old.

    Future-dated items (clock skew) count as inside the window. A missing or
    unreadable timestamp is treated as "now".
    """
    if window_hours < 0:
        raise ValueError(f"window_hours must be non-negative, got {window_hours}")

    now = as_utc((now_fn or utc_now)())
    published = parse_timestamp(published_at_iso, now)
    hours_diff = (now - published).total_seconds() / 3600
    return hours_diff <= window_hours
