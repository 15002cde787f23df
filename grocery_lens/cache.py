"""Bounded, time-limited in-memory cache for recognition results."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


@dataclass
class _CacheEntry(Generic[T]):
    value: T
    stored_at: float


def _is_empty(value: object) -> bool:
    products = getattr(value, "products", None)
    if products is not None:
        return not products
    if isinstance(value, str):
        return not value.strip()
    return value is None


class ResultCache(Generic[T]):
    """Maps content fingerprints to previously computed results.

    Entries expire ``ttl`` seconds after insertion. When the cache is full
    the entry inserted first is evicted. Empty results are never stored so a
    transient provider outage does not stick for the whole TTL.
    """

    def __init__(
        self,
        max_size: int = 100,
        ttl: float = 30 * 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be positive: {max_size}")
        self._max_size = max_size
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, _CacheEntry[T]] = {}
        self._lock = threading.Lock()

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, key: str) -> T | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.stored_at >= self._ttl:
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: T) -> bool:
        """Store ``value``; returns False when it was skipped as empty."""
        if _is_empty(value):
            return False
        with self._lock:
            now = self._clock()
            self._sweep(now)
            if key not in self._entries and len(self._entries) >= self._max_size:
                oldest = min(
                    self._entries, key=lambda k: self._entries[k].stored_at
                )
                del self._entries[oldest]
            self._entries[key] = _CacheEntry(value=value, stored_at=now)
        return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> dict:
        return {
            "size": self.size(),
            "max_size": self._max_size,
            "ttl_seconds": self._ttl,
        }

    def _sweep(self, now: float) -> None:
        # Caller holds the lock.
        stale = [
            k for k, e in self._entries.items() if now - e.stored_at >= self._ttl
        ]
        for k in stale:
            del self._entries[k]
