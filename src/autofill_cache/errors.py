"""Error taxonomy for the analysis cache.

Only ConfigurationError ever reaches cache consumers. PersistenceError is
raised by the storage boundary and converted by the CacheStore into the safe
result of the call; CorruptDataError never leaves the codec.
"""


class CacheError(Exception):
    """Base class for all cache errors."""


class ConfigurationError(CacheError, ValueError):
    """Invalid cache configuration (bounds, TTL, priority, settings)."""


class PersistenceError(CacheError):
    """The backing blob store failed to read or write."""


class CorruptDataError(CacheError):
    """A persisted blob could not be decoded into a container."""
