"""Wall clock used by the cache services."""

from collections.abc import Callable
from datetime import datetime, timezone

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def elapsed_ms(earlier: datetime, later: datetime) -> float:
    """Milliseconds between two datetimes (negative if `later` is earlier)."""
    return (later - earlier).total_seconds() * 1000
