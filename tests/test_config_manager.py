"""Tests for runtime configuration."""

from datetime import timedelta

import pytest

from autofill_cache.entities import CacheContainer
from autofill_cache.errors import ConfigurationError
from autofill_cache.services import CacheStore, ConfigManager
from conftest import DAY_MS, START, FailingBlobStore, load, make_entry, seed


@pytest.fixture
def config(cache):
    return ConfigManager(cache)


@pytest.mark.asyncio
class TestConfigManager:
    async def test_defaults(self, config):
        configuration = await config.get_configuration()

        assert configuration.max_entries == 100
        assert configuration.ttl_ms == DAY_MS

    async def test_set_ttl(self, config, cache):
        await config.set_ttl(60 * 60 * 1000)

        assert (await cache.get_configuration()).ttl_ms == 60 * 60 * 1000

    async def test_short_ttl_rejected(self, config, blob_store):
        with pytest.raises(ConfigurationError):
            await config.set_ttl(30_000)

        assert (await config.get_configuration()).ttl_ms == DAY_MS
        assert blob_store.writes == 0

    async def test_shorter_ttl_sweeps(self, config, cache):
        await seed(
            cache,
            CacheContainer(
                max_entries=100,
                ttl_ms=DAY_MS,
                last_cleanup_at=START,
                entries={
                    "old": make_entry("old", created_at=START - timedelta(hours=2)),
                    "new": make_entry("new", created_at=START - timedelta(minutes=10)),
                },
            ),
        )

        await config.set_ttl(60 * 60 * 1000)

        assert list((await load(cache)).entries) == ["new"]

    @pytest.mark.parametrize("max_entries", [0, -5, 2.5, True])
    async def test_invalid_max_entries(self, config, blob_store, max_entries):
        with pytest.raises(ConfigurationError):
            await config.set_max_entries(max_entries)

        assert (await config.get_configuration()).max_entries == 100
        assert blob_store.writes == 0

    async def test_shrinking_evicts(self, config, cache):
        entries = {f"k{i}": make_entry(f"k{i}", hit_count=i) for i in range(10)}
        await seed(cache, CacheContainer(max_entries=100, ttl_ms=DAY_MS, last_cleanup_at=START, entries=entries))

        await config.set_max_entries(4)

        container = await load(cache)
        assert container.max_entries == 4
        assert set(container.entries) == {"k6", "k7", "k8", "k9"}

    async def test_growing_keeps_entries(self, config, cache):
        await cache.set("k", "artifact", source_url="https://example.com")

        await config.set_max_entries(500)

        assert (await config.get_configuration()).max_entries == 500
        assert await cache.get_size() == 1

    async def test_update_both_bounds(self, config, cache):
        entries = {f"k{i}": make_entry(f"k{i}", hit_count=i) for i in range(5)}
        await seed(cache, CacheContainer(max_entries=100, ttl_ms=DAY_MS, last_cleanup_at=START, entries=entries))

        await config.update(max_entries=3, ttl_ms=120_000)

        configuration = await config.get_configuration()
        assert configuration.max_entries == 3
        assert configuration.ttl_ms == 120_000
        assert set((await load(cache)).entries) == {"k2", "k3", "k4"}

    @pytest.mark.parametrize(
        "bounds",
        [{"max_entries": 3, "ttl_ms": 30_000}, {"max_entries": 0, "ttl_ms": 120_000}],
    )
    async def test_update_with_one_invalid_bound_changes_nothing(self, config, cache, blob_store, bounds):
        entries = {f"k{i}": make_entry(f"k{i}") for i in range(5)}
        await seed(cache, CacheContainer(max_entries=100, ttl_ms=DAY_MS, last_cleanup_at=START, entries=entries))
        writes = blob_store.writes

        with pytest.raises(ConfigurationError):
            await config.update(**bounds)

        configuration = await config.get_configuration()
        assert configuration.max_entries == 100
        assert configuration.ttl_ms == DAY_MS
        assert await cache.get_size() == 5
        assert blob_store.writes == writes

    async def test_update_nothing(self, config, blob_store):
        await config.update()
        assert blob_store.writes == 0

    async def test_unavailable_storage(self, clock):
        config = ConfigManager(CacheStore(blob_store=FailingBlobStore(), clock=clock))

        await config.set_max_entries(10)
        await config.set_ttl(120_000)

        configuration = await config.get_configuration()
        assert configuration.max_entries > 0
