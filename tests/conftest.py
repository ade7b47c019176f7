"""Shared fixtures for cache tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from autofill_cache.codec import ContainerCodec
from autofill_cache.entities import CacheContainer, CacheEntry
from autofill_cache.repositories import InMemoryBlobStore
from autofill_cache.services import CacheStore

START = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
DAY_MS = 24 * 60 * 60 * 1000


class FakeClock:
    """Controllable time source."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FailingBlobStore:
    """Blob store whose reads and/or writes raise."""

    def __init__(self, fail_get: bool = True, fail_set: bool = True) -> None:
        self.inner = InMemoryBlobStore()
        self.fail_get = fail_get
        self.fail_set = fail_set

    async def get(self, key: str) -> bytes | None:
        if self.fail_get:
            raise ConnectionError("storage offline")
        return await self.inner.get(key)

    async def set(self, key: str, value: bytes) -> None:
        if self.fail_set:
            raise ConnectionError("storage offline")
        await self.inner.set(key, value)

    async def is_healthy(self) -> bool:
        return not (self.fail_get or self.fail_set)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def codec(clock) -> ContainerCodec:
    return ContainerCodec(max_entries=100, ttl_ms=DAY_MS, clock=clock)


@pytest.fixture
def cache(blob_store, codec, clock) -> CacheStore:
    """Cache with 100 entries max and a 24h TTL."""
    return CacheStore(blob_store=blob_store, codec=codec, storage_key="test-cache", clock=clock)


def make_entry(
    key: str,
    created_at: datetime = START,
    last_accessed_at: datetime | None = None,
    hit_count: int = 0,
    priority: int = 50,
    source_url: str = "https://example.com/form",
    artifact: object | None = None,
) -> CacheEntry:
    """Helper to create test entries."""
    return CacheEntry(
        key=key,
        artifact=artifact if artifact is not None else {"instructions": [key]},
        source_url=source_url,
        created_at=created_at,
        last_accessed_at=last_accessed_at or created_at,
        hit_count=hit_count,
        priority=priority,
        size_estimate=32,
    )


async def seed(cache: CacheStore, container: CacheContainer) -> None:
    """Persist a prepared container as the cache's current state."""
    await cache.blob_store.set("test-cache", cache.codec.encode(container))


async def load(cache: CacheStore) -> CacheContainer:
    """Read the persisted container back without touching hit counters."""
    return cache.codec.decode(await cache.blob_store.get("test-cache"))
