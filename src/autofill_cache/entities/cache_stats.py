"""Cache statistics entities."""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class CacheStats:
    """Aggregated view of a container.

    Attributes:
        total_entries: Number of stored entries
        total_hits: Container-level cumulative hit counter
        hit_rate: total_hits / (total_hits + total_entries)
        oldest_entry: Earliest created_at, None if empty
        newest_entry: Latest created_at, None if empty
        average_age_ms: Mean entry age in milliseconds
        size_in_bytes: Size of the serialized container
        expired_entries: Entries past TTL that have not been swept yet
    """

    total_entries: int
    total_hits: int
    hit_rate: float
    oldest_entry: datetime | None
    newest_entry: datetime | None
    average_age_ms: float
    size_in_bytes: int
    expired_entries: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class OptimizeResult:
    """Outcome of an optimize pass."""

    expired_removed: int = 0
    evicted: int = 0

    @property
    def total_removed(self) -> int:
        return self.expired_removed + self.evicted
