"""Persistent, bounded, TTL-aware cache of analysis artifacts.

The CacheStore owns the load -> mutate -> persist cycle over the single
container blob kept in a BlobStore. Every public operation runs that cycle
under one asyncio lock, so concurrent callers on the same event loop cannot
lose each other's updates.

Storage failures never escape from here: they are logged and turned into the
safe result of the call (a miss, zero counts, empty stats). Only invalid
arguments raise, as ConfigurationError.
"""

import asyncio
import logging
import re
from collections.abc import Awaitable
from typing import Any, TypeVar

from autofill_cache.codec import ContainerCodec
from autofill_cache.config import settings
from autofill_cache.entities import (
    CacheConfiguration,
    CacheContainer,
    CacheEntry,
    CacheStats,
    OptimizeResult,
    estimate_size,
)
from autofill_cache.errors import ConfigurationError, PersistenceError
from autofill_cache.protocols import BlobStore
from autofill_cache.repositories import InMemoryBlobStore, RedisBlobStore
from autofill_cache.utils.clock import Clock, utc_now

from .eviction import evict, select_victims
from .stats import collect_stats, empty_stats
from .ttl import is_expired, purge_expired

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def validate_priority(priority: int) -> int:
    if not isinstance(priority, int) or isinstance(priority, bool) or not 0 <= priority <= 100:
        raise ConfigurationError(f"Priority must be an integer between 0 and 100, got {priority!r}")
    return priority


class CacheStore:
    """Priority-aware TTL cache persisted as one blob.

    Construct it once at application start and pass it to every consumer.

    Example:
        ```python
        from autofill_cache.services import CacheStore

        cache = CacheStore.create()
        await cache.set(key, instructions, source_url=url, priority=70)
        artifact = await cache.get(key)  # None on a miss
        ```
    """

    def __init__(
        self,
        blob_store: BlobStore,
        codec: ContainerCodec | None = None,
        storage_key: str | None = None,
        timeout: float | None = None,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the cache store.

        Args:
            blob_store: Backing key-value store (required).
            codec: Container codec. Defaults to a ContainerCodec using `clock`.
            storage_key: Key of the container blob. Defaults to settings.
            timeout: Per-call storage timeout in seconds. Defaults to settings.
            clock: Time source, injectable for tests.
        """
        self._blobs = blob_store
        self._codec = ContainerCodec(clock=clock) if codec is None else codec
        self._storage_key = settings.storage_key if storage_key is None else storage_key
        self._timeout = settings.storage_timeout if timeout is None else timeout
        self._clock = clock
        self._lock = asyncio.Lock()

    @classmethod
    def create(
        cls,
        blob_store: BlobStore | None = None,
        clock: Clock = utc_now,
    ) -> "CacheStore":
        """Factory method to create a CacheStore from settings.

        Args:
            blob_store: Backing store. If None, uses the configured backend.
            clock: Time source.

        Returns:
            Configured CacheStore
        """
        if blob_store is None:
            blob_store = RedisBlobStore.create() if settings.uses_redis else InMemoryBlobStore()
        return cls(blob_store=blob_store, clock=clock)

    # -- storage boundary ---------------------------------------------------

    async def _call_store(self, action: str, operation: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(operation, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise PersistenceError(f"{action} timed out after {self._timeout}s") from e
        except Exception as e:
            raise PersistenceError(f"{action} failed: {e}") from e

    async def _load(self) -> CacheContainer:
        data = await self._call_store("read", self._blobs.get(self._storage_key))
        return self._codec.decode(data)

    async def _persist(self, container: CacheContainer) -> None:
        await self._call_store("write", self._blobs.set(self._storage_key, self._codec.encode(container)))

    async def _load_or_none(self, action: str) -> CacheContainer | None:
        try:
            return await self._load()
        except PersistenceError as e:
            _logger.warning("Cache %s skipped, container could not be loaded: %s", action, e)
            return None

    async def _persist_or_log(self, container: CacheContainer, action: str) -> bool:
        try:
            await self._persist(container)
        except PersistenceError as e:
            _logger.warning("Cache %s not persisted: %s", action, e)
            return False
        return True

    # -- entry operations ---------------------------------------------------

    async def get_entry(self, key: str) -> CacheEntry | None:
        """Read an entry, recording the hit.

        Expired entries are removed as a side effect and reported as a miss.

        Args:
            key: The cache key

        Returns:
            The entry after the hit was recorded, or None on a miss
        """
        async with self._lock:
            container = await self._load_or_none("read")
            if container is None:
                return None

            entry = container.entries.get(key)
            if entry is None:
                return None

            now = self._clock()
            if is_expired(entry, container.ttl_ms, now):
                del container.entries[key]
                await self._persist_or_log(container, "expired entry removal")
                return None

            entry.record_hit(now)
            container.total_hits += 1
            await self._persist_or_log(container, "hit update")
            return entry

    async def get(self, key: str) -> Any | None:
        """Read an artifact, recording the hit.

        Args:
            key: The cache key

        Returns:
            The cached artifact, or None on a miss
        """
        entry = await self.get_entry(key)
        return entry.artifact if entry is not None else None

    async def set(self, key: str, artifact: Any, source_url: str, priority: int = 50) -> bool:
        """Insert or overwrite an entry.

        When the key is new and the container is full, the least valuable
        entries are evicted first. Insertion and eviction are persisted in
        one write.

        Args:
            key: The cache key
            artifact: The payload to cache (JSON-compatible)
            source_url: Page the artifact belongs to
            priority: Caller-assigned importance in [0, 100]

        Returns:
            True if the entry was persisted, False otherwise

        Raises:
            ConfigurationError: If the priority is out of range or the artifact
                is not JSON-serializable
        """
        validate_priority(priority)
        self._codec.check_artifact(artifact)

        async with self._lock:
            container = await self._load_or_none("write")
            if container is None:
                return False

            now = self._clock()
            excess = container.size - container.max_entries + (0 if key in container.entries else 1)
            if excess > 0:
                candidates = {k: e for k, e in container.entries.items() if k != key}
                victims = select_victims(candidates, excess, now)
                for victim in victims:
                    del container.entries[victim]
                _logger.debug("Evicted %d entries to make room for %s", len(victims), key)

            container.entries[key] = CacheEntry(
                key=key,
                artifact=artifact,
                source_url=source_url,
                created_at=now,
                last_accessed_at=now,
                hit_count=0,
                priority=priority,
                size_estimate=estimate_size(artifact),
            )
            return await self._persist_or_log(container, "write")

    async def delete(self, key: str) -> bool:
        """Remove an entry if present. Persists even if the key is absent.

        Returns:
            True if the container was persisted, False otherwise
        """
        async with self._lock:
            container = await self._load_or_none("delete")
            if container is None:
                return False
            container.entries.pop(key, None)
            return await self._persist_or_log(container, "delete")

    async def clear(self) -> bool:
        """Remove every entry and reset the hit counter.

        Returns:
            True if the container was persisted, False otherwise
        """
        async with self._lock:
            container = await self._load_or_none("clear")
            if container is None:
                return False
            container.entries = {}
            container.total_hits = 0
            container.last_cleanup_at = self._clock()
            return await self._persist_or_log(container, "clear")

    async def contains(self, key: str) -> bool:
        """Check for a live entry without recording a hit."""
        async with self._lock:
            container = await self._load_or_none("lookup")
        if container is None:
            return False
        entry = container.entries.get(key)
        return entry is not None and not is_expired(entry, container.ttl_ms, self._clock())

    async def find_by_url(self, pattern: str) -> list[CacheEntry]:
        """Find live entries whose source URL matches a regex (case-insensitive).

        Args:
            pattern: Regular expression searched in each source URL

        Returns:
            Matching entries, oldest first

        Raises:
            ConfigurationError: If the pattern is not a valid regex
        """
        try:
            regex = re.compile(pattern, re.IGNORECASE)
        except re.error as e:
            raise ConfigurationError(f"Invalid URL pattern {pattern!r}: {e}") from e

        async with self._lock:
            container = await self._load_or_none("search")
        if container is None:
            return []

        now = self._clock()
        matches = [
            entry
            for entry in container.entries.values()
            if regex.search(entry.source_url) and not is_expired(entry, container.ttl_ms, now)
        ]
        return sorted(matches, key=lambda entry: entry.created_at)

    # -- maintenance --------------------------------------------------------

    async def _sweep(self, container: CacheContainer) -> int:
        removed = purge_expired(container, self._clock())
        if removed and not await self._persist_or_log(container, "cleanup"):
            return 0
        return removed

    async def _evict(self, container: CacheContainer, count: int) -> int:
        if count <= 0:
            return 0
        removed = evict(container, count, self._clock())
        if removed and not await self._persist_or_log(container, "eviction"):
            return 0
        return removed

    async def cleanup_expired(self) -> int:
        """Remove all expired entries.

        Nothing is written when no entry has expired.

        Returns:
            Number of entries removed
        """
        async with self._lock:
            container = await self._load_or_none("cleanup")
            if container is None:
                return 0
            return await self._sweep(container)

    async def evict_least_valuable(self, count: int) -> int:
        """Evict the `count` lowest-scoring entries in one write.

        Returns:
            Number of entries removed
        """
        if count <= 0:
            return 0
        async with self._lock:
            container = await self._load_or_none("eviction")
            if container is None:
                return 0
            return await self._evict(container, count)

    async def optimize(self) -> OptimizeResult:
        """Sweep expired entries, then evict down to `max_entries`.

        The two phases are persisted separately.

        Returns:
            How many entries each phase removed
        """
        expired = await self.cleanup_expired()
        async with self._lock:
            container = await self._load_or_none("optimize")
            if container is None:
                return OptimizeResult(expired_removed=expired)
            evicted = await self._evict(container, container.overflow)

        if expired or evicted:
            _logger.info("Cache optimized: removed %d expired, evicted %d", expired, evicted)
        return OptimizeResult(expired_removed=expired, evicted=evicted)

    # -- statistics ---------------------------------------------------------

    async def get_stats(self) -> CacheStats:
        """Get cache statistics (zero-valued if storage is unavailable)."""
        async with self._lock:
            container = await self._load_or_none("stats")
        if container is None:
            return empty_stats(self._codec)
        return collect_stats(container, self._clock(), self._codec)

    async def get_hit_rate(self) -> float:
        return (await self.get_stats()).hit_rate

    async def get_total_hits(self) -> int:
        async with self._lock:
            container = await self._load_or_none("stats")
        return container.total_hits if container is not None else 0

    async def get_size(self) -> int:
        async with self._lock:
            container = await self._load_or_none("stats")
        return container.size if container is not None else 0

    # -- configuration ------------------------------------------------------

    async def get_configuration(self) -> CacheConfiguration:
        """Snapshot of the current bounds (defaults if storage is unavailable)."""
        async with self._lock:
            container = await self._load_or_none("configuration read")
        if container is None:
            container = self._codec.default_container()
        return CacheConfiguration(max_entries=container.max_entries, ttl_ms=container.ttl_ms)

    async def update_configuration(self, max_entries: int | None = None, ttl_ms: int | None = None) -> bool:
        """Persist new bounds without enforcing them.

        Callers validate the values and run the matching cleanup; see
        ConfigManager.

        Returns:
            True if the container was persisted, False otherwise
        """
        async with self._lock:
            container = await self._load_or_none("configuration update")
            if container is None:
                return False
            if max_entries is not None:
                container.max_entries = max_entries
            if ttl_ms is not None:
                container.ttl_ms = ttl_ms
            return await self._persist_or_log(container, "configuration update")

    async def is_healthy(self) -> bool:
        try:
            return await self._call_store("health check", self._blobs.is_healthy())
        except PersistenceError:
            return False

    @property
    def codec(self) -> ContainerCodec:
        """Get the container codec."""
        return self._codec

    @property
    def blob_store(self) -> BlobStore:
        """Get the underlying blob store (for testing)."""
        return self._blobs
