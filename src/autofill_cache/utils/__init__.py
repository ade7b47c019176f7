"""Utility modules for the analysis cache."""

from .clock import Clock, elapsed_ms, utc_now
from .keys import KeyGenerator, hash_string

__all__ = [
    "Clock",
    "KeyGenerator",
    "elapsed_ms",
    "hash_string",
    "utc_now",
]
