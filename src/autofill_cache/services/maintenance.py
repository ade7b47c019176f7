"""Periodic cache maintenance.

Runs `CacheStore.optimize()` on a fixed interval. This only makes cleanup
happen sooner; reads and writes still enforce TTL and bounds themselves.
"""

import asyncio
import logging

from autofill_cache.config import settings

from .cache_store import CacheStore

_logger = logging.getLogger(__name__)


class CacheMaintenance:
    """Background asyncio task that optimizes the cache periodically."""

    def __init__(self, cache_store: CacheStore, interval_seconds: float | None = None) -> None:
        """Initialize the maintenance loop.

        Args:
            cache_store: The cache to optimize (required).
            interval_seconds: Seconds between passes; 0 disables. Defaults to settings.
        """
        self._cache = cache_store
        self._interval = settings.cache_cleanup_interval if interval_seconds is None else interval_seconds
        self._task: asyncio.Task | None = None
        self.passes = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start (or restart) the loop on the running event loop."""
        if self._interval <= 0:
            _logger.info("Cache maintenance disabled")
            return
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="cache-maintenance")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def run_once(self) -> None:
        result = await self._cache.optimize()
        self.passes += 1
        if result.total_removed:
            _logger.info(
                "Cache maintenance: removed %d expired, evicted %d",
                result.expired_removed,
                result.evicted,
            )

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.run_once()
            except Exception:
                _logger.exception("Cache maintenance pass failed")
