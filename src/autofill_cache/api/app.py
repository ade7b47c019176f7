import logging
from typing import Any

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware

from autofill_cache.api.dependencies import HandlerDep, lifespan
from autofill_cache.config import settings
from autofill_cache.dto import (
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

app = FastAPI(
    title="Autofill Analysis Cache API",
    description="Priority-aware TTL cache for LLM form analyses",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "Autofill Analysis Cache API",
        "version": "0.1.0",
        "description": "Priority-aware TTL cache for LLM form analyses",
        "endpoints": {
            "cache": "/cache",
            "stats": "/stats",
            "config": "/config",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health", response_model=HealthCheckResponse)
async def health(handler: HandlerDep) -> HealthCheckResponse:
    """Health check endpoint."""
    return await handler.health_check()


@app.post("/cache/key", response_model=CacheKeyResponse)
async def generate_key(request: CacheKeyRequest, handler: HandlerDep) -> CacheKeyResponse:
    """Derive the cache key for a piece of content."""
    return await handler.generate_key(request)


@app.post("/cache/lookup", response_model=CacheLookupResponse)
async def lookup(request: LookupCacheRequest, handler: HandlerDep) -> CacheLookupResponse:
    """Read a cache entry, recording the hit."""
    return await handler.lookup(request)


@app.post("/cache/store", response_model=CacheOperationResponse)
async def store(request: StoreCacheRequest, handler: HandlerDep) -> CacheOperationResponse:
    """Store an artifact under a key."""
    return await handler.store(request)


@app.post("/cache/cleanup", response_model=CleanupResponse)
async def cleanup(handler: HandlerDep) -> CleanupResponse:
    """Remove all expired entries."""
    return await handler.cleanup()


@app.post("/cache/optimize", response_model=OptimizeResponse)
async def optimize(handler: HandlerDep) -> OptimizeResponse:
    """Remove expired entries, then evict down to max_entries."""
    return await handler.optimize()


@app.get("/cache/search", response_model=CacheSearchResponse)
async def search(
    handler: HandlerDep,
    pattern: str = Query(..., min_length=1, description="Regex matched against source URLs"),
) -> CacheSearchResponse:
    """Find entries by source URL pattern."""
    return await handler.search(pattern)


@app.delete("/cache", response_model=CacheOperationResponse)
async def clear(handler: HandlerDep) -> CacheOperationResponse:
    """Clear all entries from the cache."""
    return await handler.clear()


@app.delete("/cache/{key}", response_model=CacheOperationResponse)
async def delete(key: str, handler: HandlerDep) -> CacheOperationResponse:
    """Delete one entry."""
    return await handler.delete(key)


@app.get("/stats", response_model=CacheStatsResponse)
async def get_stats(handler: HandlerDep) -> CacheStatsResponse:
    """Get cache statistics."""
    return await handler.get_stats()


@app.get("/config", response_model=ConfigurationResponse)
async def get_config(handler: HandlerDep) -> ConfigurationResponse:
    """Get the current cache bounds."""
    return await handler.get_configuration()


@app.put("/config", response_model=ConfigurationResponse)
async def update_config(request: ConfigUpdateRequest, handler: HandlerDep) -> ConfigurationResponse:
    """Change max_entries and/or ttl_ms."""
    return await handler.update_configuration(request)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "autofill_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
