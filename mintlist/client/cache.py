"""
Lookup Cache

Bounded key -> (value, timestamp) store with explicit expiry.

Lives in the client layer only; the Merkle core never caches.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from typing import Callable, Generic, Hashable, Optional, TypeVar


K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class TTLCache(Generic[K, V]):
    """
    Small LRU-bounded cache with optional time-to-live.

    Args:
        ttl_seconds: Entry lifetime; None keeps entries until evicted
        max_entries: Oldest entries are evicted beyond this size
        clock: Monotonic time source (injectable for tests)
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        max_entries: int = 1024,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[K, tuple[V, float]] = OrderedDict()

    def _expired(self, stored_at: float) -> bool:
        if self.ttl_seconds is None:
            return False
        return self._clock() - stored_at >= self.ttl_seconds

    def get(self, key: K) -> Optional[V]:
        """Return the cached value, or None if absent or expired."""
        item = self._entries.get(key)
        if item is None:
            return None
        value, stored_at = item
        if self._expired(stored_at):
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return value

    def set(self, key: K, value: V) -> None:
        self._entries[key] = (value, self._clock())
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def invalidate(self, key: K) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: K) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)
