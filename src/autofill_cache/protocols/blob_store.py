"""Blob store protocol.

Defines the interface for the key-value storage collaborator that holds the
serialized cache container. Each call is assumed to be atomic on its own;
nothing is transactional across calls.

Implementations can include:
- In-memory dict (dev/test, default)
- Redis
- Any other async key-value store (browser storage bridge, files, etc.)
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class BlobStore(Protocol):
    """Protocol for async key-value blob stores.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed.

    Example:
        ```python
        from autofill_cache.protocols import BlobStore

        store: BlobStore = InMemoryBlobStore()
        store: BlobStore = RedisBlobStore.create()
        ```
    """

    async def get(self, key: str) -> bytes | None:
        """Read a blob.

        Args:
            key: The storage key

        Returns:
            The stored bytes, or None if nothing is stored under the key
        """
        ...

    async def set(self, key: str, value: bytes) -> None:
        """Write a blob, replacing any previous value.

        Args:
            key: The storage key
            value: The bytes to store
        """
        ...

    async def is_healthy(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy, False otherwise
        """
        ...
