"""HTTP handlers for cache operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

import time

from fastapi import HTTPException, status

from autofill_cache.dto import (
    CacheEntryItem,
    CacheKeyRequest,
    CacheKeyResponse,
    CacheLookupResponse,
    CacheOperationResponse,
    CacheSearchResponse,
    CacheStatsResponse,
    CleanupResponse,
    ConfigUpdateRequest,
    ConfigurationResponse,
    HealthCheckResponse,
    LookupCacheRequest,
    OptimizeResponse,
    StoreCacheRequest,
)
from autofill_cache.errors import ConfigurationError
from autofill_cache.services import CacheStore, ConfigManager
from autofill_cache.utils.keys import KeyGenerator


def _bad_request(error: ConfigurationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


def _server_error(action: str, error: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}: {error}",
    )


class CacheHandler:
    """HTTP handlers for cache operations.

    This handler delegates business logic to the CacheStore and
    ConfigManager and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Mapping ConfigurationError to 400
    - Mapping unexpected failures to 500

    Example:
        ```python
        cache = CacheStore.create()
        handler = CacheHandler(
            cache_store=cache,
            config_manager=ConfigManager(cache),
            key_generator=KeyGenerator(),
        )

        @app.post("/cache/lookup", response_model=CacheLookupResponse)
        async def lookup(request: LookupCacheRequest):
            return await handler.lookup(request)
        ```
    """

    def __init__(
        self,
        cache_store: CacheStore,
        config_manager: ConfigManager,
        key_generator: KeyGenerator,
    ) -> None:
        """Initialize the cache handler.

        Args:
            cache_store: The cache (required).
            config_manager: Bounds configuration (required).
            key_generator: Key derivation (required).
        """
        self._cache = cache_store
        self._config = config_manager
        self._keys = key_generator

    async def generate_key(self, request: CacheKeyRequest) -> CacheKeyResponse:
        """Handle POST /cache/key requests."""
        return CacheKeyResponse(
            key=self._keys.generate(request.content, identity=request.identity),
            algorithm=self._keys.algorithm,
        )

    async def lookup(self, request: LookupCacheRequest) -> CacheLookupResponse:
        """Handle POST /cache/lookup requests.

        Args:
            request: The lookup request DTO

        Returns:
            CacheLookupResponse with hit status and the entry on a hit
        """
        try:
            start_time = time.time()
            entry = await self._cache.get_entry(request.key)
            lookup_time_ms = (time.time() - start_time) * 1000

            return CacheLookupResponse(
                key=request.key,
                is_hit=entry is not None,
                entry=CacheEntryItem.from_entity(entry) if entry is not None else None,
                lookup_time_ms=lookup_time_ms,
            )

        except Exception as e:
            raise _server_error("look up cache entry", e) from e

    async def store(self, request: StoreCacheRequest) -> CacheOperationResponse:
        """Handle POST /cache/store requests.

        Raises:
            HTTPException: 400 for an invalid priority, 500 otherwise
        """
        try:
            stored = await self._cache.set(
                request.key,
                request.artifact,
                source_url=request.source_url,
                priority=request.priority,
            )
        except ConfigurationError as e:
            raise _bad_request(e) from e
        except Exception as e:
            raise _server_error("store entry", e) from e

        return CacheOperationResponse(
            success=stored,
            key=request.key,
            message="Entry stored successfully" if stored else "Entry could not be persisted",
        )

    async def delete(self, key: str) -> CacheOperationResponse:
        """Handle DELETE /cache/{key} requests."""
        try:
            deleted = await self._cache.delete(key)
        except Exception as e:
            raise _server_error("delete entry", e) from e

        return CacheOperationResponse(
            success=deleted,
            key=key,
            message="Entry deleted" if deleted else "Deletion could not be persisted",
        )

    async def clear(self) -> CacheOperationResponse:
        """Handle DELETE /cache requests."""
        try:
            cleared = await self._cache.clear()
        except Exception as e:
            raise _server_error("clear cache", e) from e

        return CacheOperationResponse(
            success=cleared,
            message="Cache cleared successfully" if cleared else "Clear could not be persisted",
        )

    async def cleanup(self) -> CleanupResponse:
        """Handle POST /cache/cleanup requests."""
        return CleanupResponse(removed=await self._cache.cleanup_expired())

    async def optimize(self) -> OptimizeResponse:
        """Handle POST /cache/optimize requests."""
        result = await self._cache.optimize()
        return OptimizeResponse(expired_removed=result.expired_removed, evicted=result.evicted)

    async def search(self, pattern: str) -> CacheSearchResponse:
        """Handle GET /cache/search requests.

        Raises:
            HTTPException: 400 if the pattern is not a valid regex
        """
        try:
            entries = await self._cache.find_by_url(pattern)
        except ConfigurationError as e:
            raise _bad_request(e) from e

        return CacheSearchResponse(
            pattern=pattern,
            matches=[CacheEntryItem.from_entity(entry) for entry in entries],
        )

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /stats requests."""
        stats = await self._cache.get_stats()
        return CacheStatsResponse(**stats.to_dict())

    async def get_configuration(self) -> ConfigurationResponse:
        """Handle GET /config requests."""
        config = await self._config.get_configuration()
        return ConfigurationResponse(max_entries=config.max_entries, ttl_ms=config.ttl_ms)

    async def update_configuration(self, request: ConfigUpdateRequest) -> ConfigurationResponse:
        """Handle PUT /config requests.

        Raises:
            HTTPException: 400 if a bound is invalid; nothing is changed then
        """
        try:
            await self._config.update(max_entries=request.max_entries, ttl_ms=request.ttl_ms)
        except ConfigurationError as e:
            raise _bad_request(e) from e

        return await self.get_configuration()

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        is_healthy = await self._cache.is_healthy()

        return HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            cache_healthy=is_healthy,
        )
