#!/usr/bin/env python3
"""
Demo script for the autofill analysis cache.

This script demonstrates caching, expiry, eviction and configuration using an
in-memory blob store and a simulated clock.
"""

import asyncio
from datetime import datetime, timedelta, timezone

from autofill_cache import (
    AnalysisCacheService,
    CacheStore,
    ConfigManager,
    ConfigurationError,
    InMemoryBlobStore,
    KeyGenerator,
)


class DemoClock:
    """Clock that only moves when told to."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def demo_basic_cache(cache: CacheStore) -> None:
    """Demonstrate basic cache operations."""
    print_section("Basic Cache Operations")

    service = AnalysisCacheService.create(cache_store=cache, key_generator=KeyGenerator())

    pages = [
        ("<form id='apply'>name, email, resume</form>", "https://jobs.example.com/apply/123", "high"),
        ("<form id='newsletter'>email</form>", "https://blog.example.com/subscribe", "low"),
    ]

    print("\n📝 Storing analyses...")
    for html, url, complexity in pages:
        analysis = {
            "confidence": 90,
            "instructions": [{"selector": "#email", "action": "fill", "reasoning": "Email field " * 20}],
            "reasoning": "Detected a form. " * 30,
        }
        key = await service.set_cached_analysis(html, url, analysis, complexity=complexity)
        print(f"  ✓ Stored {url} as {key}")

    print("\n🔍 Reading back:")
    for html, url, _ in pages:
        analysis = await service.get_cached_analysis(html, url)
        status = "HIT" if analysis is not None else "miss"
        print(f"  {status}: {url}")

    print("\n🔎 Searching by URL pattern 'jobs':")
    for entry in await service.find_by_url("jobs"):
        print(f"  {entry.source_url} (priority {entry.priority}, hits {entry.hit_count})")


async def demo_expiry(cache: CacheStore, clock: DemoClock) -> None:
    """Demonstrate TTL expiry and sweeping."""
    print_section("Expiry")

    await cache.set("stale", {"instructions": []}, source_url="https://old.example.com")
    clock.advance(hours=25)
    await cache.set("fresh", {"instructions": []}, source_url="https://new.example.com")

    removed = await cache.cleanup_expired()
    print(f"\n  Removed {removed} expired entries after 25 hours")
    print(f"  'fresh' still cached: {await cache.contains('fresh')}")


async def demo_configuration(cache: CacheStore) -> None:
    """Demonstrate configuration and eviction."""
    print_section("Configuration and Eviction")

    config = ConfigManager(cache)
    for i in range(10):
        await cache.set(f"page-{i}", {"n": i}, source_url=f"https://example.com/{i}", priority=i * 10)

    await config.set_max_entries(5)
    stats = await cache.get_stats()
    print(f"\n  After shrinking to 5 entries: {stats.total_entries} entries, {stats.size_in_bytes} bytes")

    try:
        await config.set_ttl(30_000)
    except ConfigurationError as e:
        print(f"  ✓ Rejected TTL: {e}")

    print(f"  Configuration: {await config.get_configuration()}")


async def main() -> None:
    clock = DemoClock()
    cache = CacheStore(blob_store=InMemoryBlobStore(), clock=clock)

    await demo_basic_cache(cache)
    await demo_expiry(cache, clock)
    await demo_configuration(cache)

    print_section("Statistics")
    stats = await cache.get_stats()
    for name, value in stats.to_dict().items():
        print(f"  {name}: {value}")


if __name__ == "__main__":
    asyncio.run(main())
