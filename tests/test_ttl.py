"""Tests for TTL expiry and sweeping."""

from datetime import timedelta

import pytest

from autofill_cache.entities import CacheContainer
from autofill_cache.errors import ConfigurationError
from autofill_cache.services.ttl import is_expired, purge_expired, validate_ttl
from conftest import DAY_MS, START, load, make_entry, seed


class TestIsExpired:
    def test_boundary(self):
        entry = make_entry("k")
        assert not is_expired(entry, 60_000, START + timedelta(milliseconds=59_999))
        assert not is_expired(entry, 60_000, START + timedelta(milliseconds=60_000))
        assert is_expired(entry, 60_000, START + timedelta(milliseconds=60_001))

    def test_access_does_not_extend_lifetime(self):
        entry = make_entry("k", last_accessed_at=START + timedelta(hours=23))
        assert is_expired(entry, DAY_MS, START + timedelta(hours=25))


class TestValidateTtl:
    def test_minimum_accepted(self):
        assert validate_ttl(60_000) == 60_000

    @pytest.mark.parametrize("ttl_ms", [59_999, 30_000, 0, -1, 60_000.0, "60000", None])
    def test_rejected(self, ttl_ms):
        with pytest.raises(ConfigurationError):
            validate_ttl(ttl_ms)


class TestPurgeExpired:
    def test_removes_only_expired(self):
        container = CacheContainer(
            max_entries=100,
            ttl_ms=DAY_MS,
            last_cleanup_at=START - timedelta(days=2),
            entries={
                "old": make_entry("old", created_at=START - timedelta(hours=25)),
                "new": make_entry("new", created_at=START - timedelta(hours=1)),
            },
        )

        assert purge_expired(container, START) == 1
        assert list(container.entries) == ["new"]
        assert container.last_cleanup_at == START

    def test_nothing_expired_leaves_timestamp(self):
        container = CacheContainer(
            max_entries=100,
            ttl_ms=DAY_MS,
            last_cleanup_at=START - timedelta(days=2),
            entries={"new": make_entry("new")},
        )

        assert purge_expired(container, START) == 0
        assert container.last_cleanup_at == START - timedelta(days=2)


@pytest.mark.asyncio
class TestCleanupExpired:
    async def test_sweeps_expired_entries(self, cache, clock, blob_store):
        await seed(
            cache,
            CacheContainer(
                max_entries=100,
                ttl_ms=DAY_MS,
                last_cleanup_at=START - timedelta(days=1),
                entries={
                    "old": make_entry("old", created_at=START - timedelta(hours=25)),
                    "new": make_entry("new", created_at=START - timedelta(hours=1)),
                },
            ),
        )
        writes = blob_store.writes

        assert await cache.cleanup_expired() == 1

        container = await load(cache)
        assert list(container.entries) == ["new"]
        assert container.last_cleanup_at == START
        assert blob_store.writes == writes + 1

    async def test_no_write_when_nothing_expired(self, cache, blob_store):
        await cache.set("k", "artifact", source_url="https://example.com")

        assert await cache.cleanup_expired() == 0
        assert blob_store.writes == 1

    async def test_cleanup_after_time_passes(self, cache, clock):
        await cache.set("a", 1, source_url="https://example.com")
        clock.advance(hours=12)
        await cache.set("b", 2, source_url="https://example.com")
        clock.advance(hours=13)

        assert await cache.cleanup_expired() == 1
        assert await cache.contains("b") is True
