"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import CacheKeyRequest, ConfigUpdateRequest, LookupCacheRequest, StoreCacheRequest
from .responses import (
    CacheEntryItem,
    CacheKeyResponse,
    CacheLookupResponse,
    CacheOperationResponse,
    CacheSearchResponse,
    CacheStatsResponse,
    CleanupResponse,
    ConfigurationResponse,
    HealthCheckResponse,
    OptimizeResponse,
)

__all__ = [
    "CacheKeyRequest",
    "LookupCacheRequest",
    "StoreCacheRequest",
    "ConfigUpdateRequest",
    "CacheEntryItem",
    "CacheKeyResponse",
    "CacheLookupResponse",
    "CacheOperationResponse",
    "CacheSearchResponse",
    "CacheStatsResponse",
    "CleanupResponse",
    "ConfigurationResponse",
    "HealthCheckResponse",
    "OptimizeResponse",
]
