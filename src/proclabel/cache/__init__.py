"""
Caching primitives used by the identification engine.
"""

from .inflight import InFlightRegistry
from .ttl_cache import CacheEntry, TTLCache

__all__ = [
    "CacheEntry",
    "InFlightRegistry",
    "TTLCache",
]
