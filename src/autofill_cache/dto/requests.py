"""Request DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class CacheKeyRequest(BaseModel):
    """Request DTO for deriving a cache key from content."""

    content: str = Field(..., description="Page content, e.g. sanitized HTML", min_length=1)
    identity: str | None = Field(
        None,
        description="Optional secondary identity, e.g. a user profile hash",
    )


class LookupCacheRequest(BaseModel):
    """Request DTO for reading a cache entry.

    The handler records a hit when the entry is found.
    """

    key: str = Field(..., description="The cache key", min_length=1)


class StoreCacheRequest(BaseModel):
    """Request DTO for storing in cache."""

    key: str = Field(..., description="The cache key", min_length=1)
    artifact: Any = Field(..., description="The payload to cache (any JSON value)")
    source_url: str = Field(..., description="Page the artifact was produced for")
    priority: int = Field(
        50,
        description="Caller-assigned importance (0-100, higher survives eviction longer)",
        ge=0,
        le=100,
    )


class ConfigUpdateRequest(BaseModel):
    """Request DTO for changing cache bounds.

    Values are validated by the cache so invalid bounds get a 400 with the
    cache's own message.
    """

    max_entries: int | None = Field(None, description="Maximum number of entries (>= 1)")
    ttl_ms: int | None = Field(None, description="Entry time-to-live in milliseconds (>= 60000)")
