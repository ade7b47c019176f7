"""Domain entities for internal representation.

These are plain dataclasses used by the services, the codec and the
repositories. They are NOT used for API contracts - use DTOs from the dto
package for that.
"""

from .cache_container import CacheConfiguration, CacheContainer
from .cache_entry import CacheEntry, estimate_size
from .cache_stats import CacheStats, OptimizeResult

__all__ = [
    "CacheConfiguration",
    "CacheContainer",
    "CacheEntry",
    "CacheStats",
    "OptimizeResult",
    "estimate_size",
]
