"""Value-based eviction.

Each entry gets a composite score; the lowest-scoring entries are evicted
first when the container is over its bound. Components (higher = keep):

    creation recency   max(0, 100 - age_days * 10)
    usage              min(50, hit_count * 5)
    priority           priority * 0.5                (0-50)
    access recency     max(0, 30 - hours_since_access * 5)
"""

from datetime import datetime

from autofill_cache.entities import CacheContainer, CacheEntry
from autofill_cache.utils.clock import elapsed_ms

DAY_MS = 24 * 60 * 60 * 1000
HOUR_MS = 60 * 60 * 1000


def eviction_score(entry: CacheEntry, now: datetime) -> float:
    """Composite value score of an entry at time `now`."""
    age_ms = elapsed_ms(entry.created_at, now)
    since_access_ms = elapsed_ms(entry.last_accessed_at, now)

    score = max(0.0, 100 - (age_ms / DAY_MS) * 10)
    score += min(50, entry.hit_count * 5)
    score += entry.priority * 0.5
    score += max(0.0, 30 - (since_access_ms / HOUR_MS) * 5)
    return score


def rank_for_eviction(entries: dict[str, CacheEntry], now: datetime) -> list[CacheEntry]:
    """Entries ordered from first to last evicted.

    Ties on score go to the older entry; the key makes the order total.
    """
    return sorted(
        entries.values(),
        key=lambda entry: (eviction_score(entry, now), entry.created_at, entry.key),
    )


def select_victims(entries: dict[str, CacheEntry], count: int, now: datetime) -> list[str]:
    """Keys of the `count` least valuable entries."""
    if count <= 0:
        return []
    return [entry.key for entry in rank_for_eviction(entries, now)[:count]]


def evict(container: CacheContainer, count: int, now: datetime) -> int:
    """Remove the `count` least valuable entries in place.

    Returns:
        Number of entries removed
    """
    victims = select_victims(container.entries, count, now)
    for key in victims:
        del container.entries[key]
    return len(victims)
