"""Cache statistics."""

from datetime import datetime

from autofill_cache.codec import ContainerCodec
from autofill_cache.entities import CacheContainer, CacheStats
from autofill_cache.utils.clock import elapsed_ms

from .ttl import count_expired


def hit_rate(total_hits: int, total_entries: int) -> float:
    """Hits over hits plus stored entries.

    The denominator counts entries, not requests: every stored entry stands
    for the miss that produced it.
    """
    denominator = total_hits + total_entries
    if denominator == 0:
        return 0.0
    return total_hits / denominator


def collect_stats(container: CacheContainer, now: datetime, codec: ContainerCodec) -> CacheStats:
    """Aggregate statistics for a loaded container.

    Args:
        container: The container to describe
        now: Reference time for ages and expiry
        codec: Codec used to measure the serialized size

    Returns:
        CacheStats for the container
    """
    entries = list(container.entries.values())
    size_in_bytes = len(codec.encode(container))

    if not entries:
        return CacheStats(
            total_entries=0,
            total_hits=container.total_hits,
            hit_rate=hit_rate(container.total_hits, 0),
            oldest_entry=None,
            newest_entry=None,
            average_age_ms=0.0,
            size_in_bytes=size_in_bytes,
            expired_entries=0,
        )

    created = [entry.created_at for entry in entries]
    ages = [elapsed_ms(timestamp, now) for timestamp in created]

    return CacheStats(
        total_entries=len(entries),
        total_hits=container.total_hits,
        hit_rate=hit_rate(container.total_hits, len(entries)),
        oldest_entry=min(created),
        newest_entry=max(created),
        average_age_ms=sum(ages) / len(ages),
        size_in_bytes=size_in_bytes,
        expired_entries=count_expired(container, now),
    )


def empty_stats(codec: ContainerCodec) -> CacheStats:
    """Zero-valued stats reported when the container cannot be loaded."""
    return CacheStats(
        total_entries=0,
        total_hits=0,
        hit_rate=0.0,
        oldest_entry=None,
        newest_entry=None,
        average_age_ms=0.0,
        size_in_bytes=len(codec.encode(codec.default_container())),
        expired_entries=0,
    )
