"""Redis implementation of BlobStore.

The whole cache container lives in a single Redis string at
`{prefix}:{key}`. Redis does not expire it; entry expiry is handled by the
cache itself.
"""

import redis.asyncio as redis

from autofill_cache.config import get_redis_client, settings


class RedisBlobStore:
    """Redis-backed blob store using the asyncio client.

    This class satisfies the BlobStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ) -> None:
        """Initialize the Redis blob store.

        Args:
            redis_client: Asyncio Redis client. If None, creates default.
            prefix: Key prefix. Defaults to settings.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = (prefix or settings.redis_prefix).rstrip(":")

    @classmethod
    def create(cls, prefix: str | None = None) -> "RedisBlobStore":
        """Factory method to create RedisBlobStore with defaults.

        Args:
            prefix: Key prefix. If None, uses settings.

        Returns:
            Configured RedisBlobStore
        """
        return cls(prefix=prefix)

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    async def get(self, key: str) -> bytes | None:
        raw = await self._client.get(self._key(key))
        if raw is None:
            return None
        return raw.encode("utf-8") if isinstance(raw, str) else bytes(raw)

    async def set(self, key: str, value: bytes) -> None:
        await self._client.set(self._key(key), value)

    async def is_healthy(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(await self._client.ping())
        except Exception:
            return False

    async def close(self) -> None:
        await self._client.aclose()

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
