"""Service layer for business logic.

This layer contains the cache itself and the components it is built from.
Services depend on protocols (interfaces), not concrete storage backends,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from autofill_cache.services import CacheStore, ConfigManager

    cache = CacheStore.create()
    config = ConfigManager(cache)
    ```
"""

from .analysis_cache import AnalysisCacheService, calculate_priority, compact_analysis
from .cache_store import CacheStore
from .config_manager import ConfigManager
from .eviction import eviction_score
from .maintenance import CacheMaintenance

__all__ = [
    "AnalysisCacheService",
    "CacheMaintenance",
    "CacheStore",
    "ConfigManager",
    "calculate_priority",
    "compact_analysis",
    "eviction_score",
]
