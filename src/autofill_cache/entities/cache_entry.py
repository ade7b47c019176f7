"""Cache entry domain entity."""

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any


def estimate_size(artifact: Any) -> int:
    """Approximate size in bytes of an artifact once serialized."""
    return len(json.dumps(artifact, default=str).encode("utf-8"))


@dataclass
class CacheEntry:
    """A cached artifact and its bookkeeping.

    The artifact is opaque to the cache. Only `hit_count` and
    `last_accessed_at` change after insertion, and only on successful reads.

    Attributes:
        key: Deterministic fingerprint, unique within a container
        artifact: The cached result (e.g. LLM-derived fill instructions)
        source_url: Page the artifact was produced for
        created_at: Insertion time, never changed
        last_accessed_at: Time of the latest successful read
        hit_count: Number of successful reads
        priority: Caller-assigned importance in [0, 100]
        size_estimate: Serialized artifact size in bytes
    """

    key: str
    artifact: Any
    source_url: str
    created_at: datetime
    last_accessed_at: datetime
    hit_count: int = 0
    priority: int = 50
    size_estimate: int = 0

    def record_hit(self, now: datetime) -> None:
        """Count a successful read."""
        self.hit_count += 1
        self.last_accessed_at = now
