"""Tests for value-based eviction."""

from datetime import timedelta

import pytest

from autofill_cache.entities import CacheContainer
from autofill_cache.services.eviction import eviction_score, rank_for_eviction, select_victims
from conftest import DAY_MS, START, load, make_entry, seed


class TestEvictionScore:
    def test_fresh_entry(self):
        entry = make_entry("k", priority=50)
        assert eviction_score(entry, START) == pytest.approx(100 + 0 + 25 + 30)

    def test_components_combine(self):
        entry = make_entry(
            "k",
            created_at=START - timedelta(days=1),
            last_accessed_at=START - timedelta(hours=1),
            hit_count=2,
            priority=80,
        )
        assert eviction_score(entry, START) == pytest.approx(90 + 10 + 40 + 25)

    def test_recency_terms_floor_at_zero(self):
        entry = make_entry("k", created_at=START - timedelta(days=20), priority=0)
        assert eviction_score(entry, START) == 0

    def test_usage_bonus_is_capped(self):
        busy = make_entry("busy", hit_count=10)
        busier = make_entry("busier", hit_count=1000)
        assert eviction_score(busy, START) == eviction_score(busier, START)

    def test_priority_raises_score(self):
        assert eviction_score(make_entry("hi", priority=100), START) > eviction_score(
            make_entry("lo", priority=0), START
        )


class TestRanking:
    def test_lowest_score_first(self):
        entries = {
            "used": make_entry("used", hit_count=4),
            "idle": make_entry("idle"),
            "important": make_entry("important", priority=100),
        }
        assert select_victims(entries, 1, START) == ["idle"]

    def test_tie_goes_to_older_entry(self):
        """Equal scores: the entry created first is evicted first."""
        older = make_entry("b", created_at=START - timedelta(days=20))
        newer = make_entry("a", created_at=START - timedelta(days=15))
        assert eviction_score(older, START) == eviction_score(newer, START)

        ranked = rank_for_eviction({"a": newer, "b": older}, START)

        assert [entry.key for entry in ranked] == ["b", "a"]

    def test_count_larger_than_container(self):
        entries = {"a": make_entry("a"), "b": make_entry("b")}
        assert sorted(select_victims(entries, 5, START)) == ["a", "b"]

    def test_non_positive_count(self):
        assert select_victims({"a": make_entry("a")}, 0, START) == []


@pytest.mark.asyncio
class TestStoreEviction:
    async def test_evict_least_valuable(self, cache, blob_store):
        entries = {f"k{i}": make_entry(f"k{i}", hit_count=i) for i in range(6)}
        await seed(cache, CacheContainer(max_entries=100, ttl_ms=DAY_MS, last_cleanup_at=START, entries=entries))
        writes = blob_store.writes

        assert await cache.evict_least_valuable(2) == 2

        assert set((await load(cache)).entries) == {"k2", "k3", "k4", "k5"}
        assert blob_store.writes == writes + 1

    async def test_evict_zero_is_noop(self, cache, blob_store):
        assert await cache.evict_least_valuable(0) == 0
        assert blob_store.writes == 0

    async def test_evict_from_empty_cache(self, cache, blob_store):
        assert await cache.evict_least_valuable(3) == 0
        assert blob_store.writes == 0

    async def test_evicted_hits_stay_counted(self, cache):
        await seed(
            cache,
            CacheContainer(
                max_entries=100,
                ttl_ms=DAY_MS,
                last_cleanup_at=START,
                total_hits=9,
                entries={"k": make_entry("k", hit_count=9)},
            ),
        )

        await cache.evict_least_valuable(1)

        assert await cache.get_total_hits() == 9


@pytest.mark.asyncio
class TestOptimize:
    async def test_sweeps_then_evicts(self, cache, clock, blob_store):
        entries = {f"k{i}": make_entry(f"k{i}", hit_count=i) for i in range(5)}
        entries["stale"] = make_entry("stale", created_at=START - timedelta(hours=25), hit_count=50)
        await seed(cache, CacheContainer(max_entries=3, ttl_ms=DAY_MS, last_cleanup_at=START, entries=entries))
        writes = blob_store.writes

        result = await cache.optimize()

        assert result.expired_removed == 1
        assert result.evicted == 2
        assert result.total_removed == 3
        assert set((await load(cache)).entries) == {"k2", "k3", "k4"}
        assert blob_store.writes == writes + 2

    async def test_nothing_to_do(self, cache, blob_store):
        await cache.set("k", "artifact", source_url="https://example.com")

        result = await cache.optimize()

        assert result.total_removed == 0
        assert blob_store.writes == 1
