"""Response DTOs for API endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from autofill_cache.entities import CacheEntry


class CacheEntryItem(BaseModel):
    """A cache entry as returned by lookups and searches."""

    key: str = Field(..., description="The cache key")
    artifact: Any = Field(..., description="The cached payload")
    source_url: str = Field(..., description="Page the artifact was produced for")
    created_at: datetime = Field(..., description="When the entry was stored")
    last_accessed_at: datetime = Field(..., description="When the entry was last read")
    hit_count: int = Field(..., description="Number of successful reads", ge=0)
    priority: int = Field(..., description="Caller-assigned importance", ge=0, le=100)
    size_estimate: int = Field(..., description="Serialized artifact size in bytes", ge=0)

    @classmethod
    def from_entity(cls, entry: CacheEntry) -> "CacheEntryItem":
        return cls(
            key=entry.key,
            artifact=entry.artifact,
            source_url=entry.source_url,
            created_at=entry.created_at,
            last_accessed_at=entry.last_accessed_at,
            hit_count=entry.hit_count,
            priority=entry.priority,
            size_estimate=entry.size_estimate,
        )


class CacheKeyResponse(BaseModel):
    """Response DTO for key derivation."""

    key: str = Field(..., description="The derived cache key")
    algorithm: str = Field(..., description="Hash algorithm used")


class CacheLookupResponse(BaseModel):
    """Response DTO for cache lookup."""

    key: str = Field(..., description="The requested key")
    is_hit: bool = Field(..., description="Whether a live entry was found")
    entry: CacheEntryItem | None = Field(None, description="The entry, on a hit")
    lookup_time_ms: float = Field(..., description="Time taken for the lookup in milliseconds")


class CacheOperationResponse(BaseModel):
    """Response DTO for store/delete/clear operations."""

    success: bool = Field(..., description="Whether the change was persisted")
    key: str | None = Field(None, description="The affected key, if any")
    message: str = Field(..., description="Human-readable status message")


class CleanupResponse(BaseModel):
    """Response DTO for an expired-entry sweep."""

    removed: int = Field(..., description="Number of expired entries removed", ge=0)


class OptimizeResponse(BaseModel):
    """Response DTO for an optimize pass."""

    expired_removed: int = Field(..., description="Expired entries removed", ge=0)
    evicted: int = Field(..., description="Entries evicted to respect max_entries", ge=0)


class CacheSearchResponse(BaseModel):
    """Response DTO for URL pattern search."""

    pattern: str = Field(..., description="The regex that was searched")
    matches: list[CacheEntryItem] = Field(default_factory=list, description="Matching entries")


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    total_entries: int = Field(..., description="Number of cached entries", ge=0)
    total_hits: int = Field(..., description="Cumulative cache hits", ge=0)
    hit_rate: float = Field(..., description="hits / (hits + entries)", ge=0.0, le=1.0)
    oldest_entry: datetime | None = Field(None, description="Creation time of the oldest entry")
    newest_entry: datetime | None = Field(None, description="Creation time of the newest entry")
    average_age_ms: float = Field(..., description="Mean entry age in milliseconds")
    size_in_bytes: int = Field(..., description="Serialized container size", ge=0)
    expired_entries: int = Field(..., description="Expired entries awaiting cleanup", ge=0)


class ConfigurationResponse(BaseModel):
    """Response DTO for cache configuration."""

    max_entries: int = Field(..., description="Maximum number of entries", ge=1)
    ttl_ms: int = Field(..., description="Entry time-to-live in milliseconds")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_healthy: bool = Field(..., description="Whether the blob store is reachable")
