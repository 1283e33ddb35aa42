"""
Size-bounded LRU cache with per-entry expiry.

Two independent eviction forces apply:

- TTL: an entry is valid only while ``now - inserted_at < ttl``. Expired
  entries are not swept; they are dropped lazily when ``get`` touches them.
- LRU: when ``set`` inserts a new key into a full cache, the entry that was
  accessed longest ago is evicted first.
"""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass
class CacheEntry(Generic[V]):
    value: V
    inserted_at: float


class TTLCache(Generic[K, V]):
    """
    Generic key/value store with least-recently-used eviction and expiry.

    Not thread-safe: instances are owned by one event loop.
    """

    def __init__(
        self,
        max_size: int,
        ttl: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            max_size: Maximum number of entries before LRU eviction kicks in.
            ttl: Entry lifetime in seconds.
            clock: Monotonic time source, replaceable in tests.
        """
        if max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}")
        if ttl <= 0:
            raise ValueError(f"ttl must be > 0, got {ttl}")
        self.max_size = max_size
        self.ttl = ttl
        self._clock = clock
        # Ordered from least to most recently used.
        self._entries: "OrderedDict[K, CacheEntry[V]]" = OrderedDict()

    def get(self, key: K) -> Optional[V]:
        """Return the fresh value for ``key``, or None on a miss."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() - entry.inserted_at >= self.ttl:
            del self._entries[key]
            return None

        self._entries.move_to_end(key)
        return entry.value

    def set(self, key: K, value: V) -> None:
        """Insert or overwrite ``key``, stamping it with the current time."""
        if key in self._entries:
            self._entries.move_to_end(key)
        elif len(self._entries) >= self.max_size:
            self._entries.popitem(last=False)

        self._entries[key] = CacheEntry(value=value, inserted_at=self._clock())

    def delete(self, key: K) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def size(self) -> int:
        """Number of stored entries, expired-but-untouched ones included."""
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TTLCache(size={len(self._entries)}, max_size={self.max_size}, ttl={self.ttl})"
