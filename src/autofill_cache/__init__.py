"""Autofill Cache - Priority-aware TTL cache for LLM form analyses.

Memoizes model outputs keyed by a fingerprint of the page content, bounded by
entry count, expired by age, and evicted by a composite value score under
pressure. The whole cache persists as one blob in an async key-value store.

Layers:
    - protocols: Interface contracts (BlobStore)
    - repositories: Blob store implementations (in-memory, Redis)
    - services: Cache logic (CacheStore, ConfigManager, eviction, TTL, stats)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from autofill_cache.services import CacheStore
    from autofill_cache.utils import KeyGenerator

    cache = CacheStore.create()
    key = KeyGenerator().generate(html, identity=profile_hash)
    await cache.set(key, instructions, source_url=url, priority=70)
    ```

For HTTP API:
    ```python
    from autofill_cache.api.app import app
    ```
"""

from autofill_cache.codec import ContainerCodec
from autofill_cache.config import get_redis_client, settings
from autofill_cache.entities import CacheConfiguration, CacheContainer, CacheEntry, CacheStats, OptimizeResult
from autofill_cache.errors import CacheError, ConfigurationError, CorruptDataError, PersistenceError
from autofill_cache.protocols import BlobStore
from autofill_cache.repositories import InMemoryBlobStore, RedisBlobStore
from autofill_cache.services import AnalysisCacheService, CacheMaintenance, CacheStore, ConfigManager
from autofill_cache.utils import KeyGenerator

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Errors
    "CacheError",
    "ConfigurationError",
    "PersistenceError",
    "CorruptDataError",
    # Protocols (interfaces)
    "BlobStore",
    # Repositories (data access)
    "InMemoryBlobStore",
    "RedisBlobStore",
    # Services (business logic)
    "CacheStore",
    "ConfigManager",
    "AnalysisCacheService",
    "CacheMaintenance",
    # Codec and keys
    "ContainerCodec",
    "KeyGenerator",
    # Entities (domain models)
    "CacheEntry",
    "CacheContainer",
    "CacheConfiguration",
    "CacheStats",
    "OptimizeResult",
]
