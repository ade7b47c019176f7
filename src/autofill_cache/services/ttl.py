"""TTL checks for cache entries.

Expiry is lazy: `get` checks the entry it reads, and `purge_expired` sweeps
the whole container when the store runs a cleanup.
"""

from datetime import datetime, timedelta

from autofill_cache.config import MIN_TTL_MS
from autofill_cache.entities import CacheContainer, CacheEntry
from autofill_cache.errors import ConfigurationError


def validate_ttl(ttl_ms: int) -> int:
    """Check a TTL value before it is applied.

    Args:
        ttl_ms: Requested TTL in milliseconds

    Returns:
        The validated TTL

    Raises:
        ConfigurationError: If the TTL is not an integer or is below one minute
    """
    if not isinstance(ttl_ms, int) or isinstance(ttl_ms, bool):
        raise ConfigurationError(f"TTL must be an integer number of milliseconds, got {ttl_ms!r}")
    if ttl_ms < MIN_TTL_MS:
        raise ConfigurationError(f"TTL must be at least {MIN_TTL_MS}ms (1 minute), got {ttl_ms}")
    return ttl_ms


def is_expired(entry: CacheEntry, ttl_ms: int, now: datetime) -> bool:
    """An entry is expired once its age strictly exceeds the TTL."""
    return now - entry.created_at > timedelta(milliseconds=ttl_ms)


def count_expired(container: CacheContainer, now: datetime) -> int:
    return sum(1 for entry in container.entries.values() if is_expired(entry, container.ttl_ms, now))


def purge_expired(container: CacheContainer, now: datetime) -> int:
    """Remove every expired entry from the container in place.

    `last_cleanup_at` is only stamped when something was removed, so an
    unchanged container does not need to be persisted.

    Returns:
        Number of entries removed
    """
    expired = [key for key, entry in container.entries.items() if is_expired(entry, container.ttl_ms, now)]
    for key in expired:
        del container.entries[key]
    if expired:
        container.last_cleanup_at = now
    return len(expired)
