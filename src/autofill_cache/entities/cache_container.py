"""Cache container domain entity."""

from dataclasses import dataclass, field
from datetime import datetime

from .cache_entry import CacheEntry


@dataclass
class CacheContainer:
    """Everything persisted for one cache instance, stored as a single blob.

    Attributes:
        entries: Live entries by key
        max_entries: Upper bound on len(entries) after each mutation
        ttl_ms: Maximum entry age in milliseconds
        total_hits: Cumulative hits, including hits on evicted entries
        last_cleanup_at: Time of the last sweep or clear
    """

    max_entries: int
    ttl_ms: int
    last_cleanup_at: datetime
    total_hits: int = 0
    entries: dict[str, CacheEntry] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return len(self.entries)

    @property
    def overflow(self) -> int:
        """Number of entries above `max_entries` (0 if within bounds)."""
        return max(0, len(self.entries) - self.max_entries)


@dataclass(frozen=True)
class CacheConfiguration:
    """Read-only snapshot of the container bounds."""

    max_entries: int
    ttl_ms: int
