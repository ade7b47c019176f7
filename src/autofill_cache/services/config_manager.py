"""Runtime configuration of cache bounds."""

from autofill_cache.entities import CacheConfiguration
from autofill_cache.errors import ConfigurationError

from .cache_store import CacheStore
from .ttl import validate_ttl


def validate_max_entries(max_entries: int) -> int:
    if not isinstance(max_entries, int) or isinstance(max_entries, bool):
        raise ConfigurationError(f"Max entries must be an integer, got {max_entries!r}")
    if max_entries < 1:
        raise ConfigurationError(f"Max entries must be at least 1, got {max_entries}")
    return max_entries


class ConfigManager:
    """Validates and applies new bounds, then re-optimizes the cache.

    Invalid values raise ConfigurationError before anything is written.

    Example:
        ```python
        config = ConfigManager(cache)
        await config.set_max_entries(50)  # evicts down to 50
        await config.set_ttl(60 * 60 * 1000)  # sweeps entries older than 1h
        ```
    """

    def __init__(self, cache_store: CacheStore) -> None:
        self._cache = cache_store

    async def set_max_entries(self, max_entries: int) -> None:
        """Change the entry bound and evict down to it.

        Raises:
            ConfigurationError: If `max_entries` is below 1
        """
        validate_max_entries(max_entries)
        if await self._cache.update_configuration(max_entries=max_entries):
            await self._cache.optimize()

    async def set_ttl(self, ttl_ms: int) -> None:
        """Change the TTL and sweep entries that are now expired.

        Raises:
            ConfigurationError: If `ttl_ms` is below 60 000
        """
        validate_ttl(ttl_ms)
        if await self._cache.update_configuration(ttl_ms=ttl_ms):
            await self._cache.cleanup_expired()

    async def update(self, max_entries: int | None = None, ttl_ms: int | None = None) -> None:
        """Change any of the bounds at once.

        Every supplied value is validated before anything is written, so a
        bad value leaves both bounds untouched.

        Raises:
            ConfigurationError: If any supplied value is invalid
        """
        if max_entries is not None:
            validate_max_entries(max_entries)
        if ttl_ms is not None:
            validate_ttl(ttl_ms)
        if max_entries is None and ttl_ms is None:
            return

        if not await self._cache.update_configuration(max_entries=max_entries, ttl_ms=ttl_ms):
            return
        if max_entries is not None:
            await self._cache.optimize()
        else:
            await self._cache.cleanup_expired()

    async def get_configuration(self) -> CacheConfiguration:
        return await self._cache.get_configuration()
