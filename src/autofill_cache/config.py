import os
from dataclasses import dataclass
from functools import lru_cache

import redis.asyncio as redis
from dotenv import load_dotenv

from autofill_cache.errors import ConfigurationError

load_dotenv()

MIN_TTL_MS = 60_000
DEFAULT_TTL_MS = 24 * 60 * 60 * 1000


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Storage
    storage_backend: str = os.getenv("CACHE_STORAGE_BACKEND", "memory")
    storage_key: str = os.getenv("CACHE_STORAGE_KEY", "ai-cache")
    storage_timeout: float = float(os.getenv("CACHE_STORAGE_TIMEOUT", "5.0"))

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    redis_prefix: str = os.getenv("REDIS_PREFIX", "autofill")

    # Cache bounds (applied to a freshly created container)
    cache_max_entries: int = int(os.getenv("CACHE_MAX_ENTRIES", "100"))
    cache_ttl_ms: int = int(os.getenv("CACHE_TTL_MS", str(DEFAULT_TTL_MS)))
    cache_cleanup_interval: float = float(os.getenv("CACHE_CLEANUP_INTERVAL", "1800"))  # 30 minutes
    cache_key_algorithm: str = os.getenv("CACHE_KEY_ALGORITHM", "rolling")
    cache_max_content_size: int = int(os.getenv("CACHE_MAX_CONTENT_SIZE", "50000"))

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def uses_redis(self) -> bool:
        """Check if the Redis blob store is configured.

        Returns:
            True if the storage backend is Redis, False otherwise
        """
        return self.storage_backend.lower() == "redis"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.storage_backend.lower() not in ("memory", "redis"):
            raise ConfigurationError(
                f"CACHE_STORAGE_BACKEND must be 'memory' or 'redis', got {self.storage_backend!r}"
            )

        if self.cache_max_entries < 1:
            raise ConfigurationError("CACHE_MAX_ENTRIES must be at least 1")

        if self.cache_ttl_ms < MIN_TTL_MS:
            raise ConfigurationError(f"CACHE_TTL_MS must be at least {MIN_TTL_MS}ms (1 minute)")

        if self.cache_cleanup_interval < 0:
            raise ConfigurationError("CACHE_CLEANUP_INTERVAL must not be negative")

        if self.storage_timeout <= 0:
            raise ConfigurationError("CACHE_STORAGE_TIMEOUT must be positive")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create an asyncio Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=False,
    )
