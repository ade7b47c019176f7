"""HTTP handlers layer.

Handlers translate between DTOs and the service layer.
"""

from .cache_handler import CacheHandler

__all__ = [
    "CacheHandler",
]
