"""Thread-safe TTL cache for fetched repository collections."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

from constants import Constants

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A single cache entry with its absolute expiry on the cache clock."""

    value: T
    expires_at: float

    def is_expired(self, now: float) -> bool:
        """Check if this entry has expired at ``now``."""
        return now >= self.expires_at


class TTLCache(Generic[T]):
    """Key/value store where every entry lives for the same fixed TTL.

    Expiry is passive: an expired entry is never returned and is dropped on
    lookup or by the periodic sweep. Writes replace the whole value for a key.
    """

    def __init__(
        self,
        ttl: float = Constants.PROVIDER_CACHE_TTL_SEC,
        clock: Callable[[], float] = time.monotonic,
        cleanup_interval: float = Constants.PROVIDER_CACHE_CLEANUP_SEC,
    ):
        """Initialize the cache.

        Args:
            ttl: Time-to-live in seconds applied to every write.
            clock: Monotonic time source; inject a fake one in tests.
            cleanup_interval: Seconds between sweeps of expired entries.
        """
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self._ttl = ttl
        self._clock = clock
        self._cleanup_interval = cleanup_interval
        self._entries: Dict[str, CacheEntry[T]] = {}
        self._lock = threading.RLock()
        self._last_cleanup = clock()

    @property
    def ttl(self) -> float:
        return self._ttl

    def lookup(self, key: str) -> Tuple[Optional[T], bool]:
        """Return ``(value, found)``; expired entries are not found."""
        with self._lock:
            now = self._clock()
            self._maybe_cleanup(now)
            entry = self._entries.get(key)
            if entry is None:
                return None, False
            if entry.is_expired(now):
                del self._entries[key]
                return None, False
            return entry.value, True

    def get(self, key: str) -> Optional[T]:
        """Get a cached value or None if missing or expired."""
        value, _ = self.lookup(key)
        return value

    def set(self, key: str, value: T) -> None:
        """Store ``value`` under ``key`` for the configured TTL."""
        with self._lock:
            now = self._clock()
            self._maybe_cleanup(now)
            self._entries[key] = CacheEntry(value=value, expires_at=now + self._ttl)

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            now = self._clock()
            expired_count = sum(1 for e in self._entries.values() if e.is_expired(now))
            return {
                "total_entries": len(self._entries),
                "expired_entries": expired_count,
                "active_entries": len(self._entries) - expired_count,
                "ttl": self._ttl,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _maybe_cleanup(self, now: float) -> None:
        """Sweep expired entries if enough time has passed. Caller holds the lock."""
        if now - self._last_cleanup < self._cleanup_interval:
            return
        expired = [k for k, e in self._entries.items() if e.is_expired(now)]
        for key in expired:
            del self._entries[key]
        self._last_cleanup = now
