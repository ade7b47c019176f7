"""Repository layer for data access.

This layer puts the storage backends (in-memory, Redis) behind the
BlobStore protocol. The repositories are protocol-based (structural typing),
not inheritance-based.
"""

from autofill_cache.protocols import BlobStore

from .memory_blob_store import InMemoryBlobStore
from .redis_blob_store import RedisBlobStore

__all__ = [
    "BlobStore",
    "InMemoryBlobStore",
    "RedisBlobStore",
]
