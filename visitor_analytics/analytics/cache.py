"""
Cache Tiers
===========
Process-local primitives behind the analytics cache-aside layer:
TimedCache is the primary TTL cache, KeyValueStore is the fast store that
takes multi-key batches. Both wrap cachetools.TLRUCache so every entry
carries its own TTL.
"""

import threading
import time
from typing import Any, Iterable, Tuple

from cachetools import TLRUCache

from visitor_analytics.errors import CacheUnavailable

MISS = object()


def _expires_at(_key, entry, now):
    _value, ttl = entry
    return now + ttl


class _TimedEntries:

    def __init__(self, maxsize: int = 1024, timer=time.monotonic):
        self._entries = TLRUCache(maxsize=maxsize, ttu=_expires_at, timer=timer)
        self._lock = threading.Lock()

    def get(self, key: str) -> Any:
        """Return the live value for key, or MISS."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return MISS
        return entry[0]

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self):
        with self._lock:
            self._entries.expire()
            return len(self._entries)

    @staticmethod
    def _check_ttl(key, ttl):
        if ttl <= 0:
            raise CacheUnavailable(f"ttl for {key!r} must be positive, got {ttl}")


class TimedCache(_TimedEntries):
    """Primary cache: single-key get/set with a per-entry TTL."""

    def set(self, key: str, value: Any, ttl: float):
        self._check_ttl(key, ttl)
        with self._lock:
            self._entries[key] = (value, ttl)


class KeyValueStore(_TimedEntries):
    """Fast store: applies a batch of (key, value, ttl) writes under one lock."""

    def atomic_batch(self, items: Iterable[Tuple[str, Any, float]]):
        items = list(items)
        for key, _value, ttl in items:
            self._check_ttl(key, ttl)
        with self._lock:
            for key, value, ttl in items:
                self._entries[key] = (value, ttl)
        return len(items)
