"""Protocol interfaces for swappable implementations.

Protocols use structural typing, so any storage backend that implements the
required methods can back the cache without inheriting from anything.
"""

from .blob_store import BlobStore

__all__ = [
    "BlobStore",
]
