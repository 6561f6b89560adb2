"""
Caching Module

In-memory TTL cache with LRU eviction. Holds the per-email verification
sessions (attempt counter and resend cooldown) for the running process.
"""

import time
from typing import Optional, TypeVar, Generic, Callable
from dataclasses import dataclass
from collections import OrderedDict


T = TypeVar('T')


@dataclass
class CacheEntry(Generic[T]):
    """A single cache entry with TTL support."""
    value: T
    expires_at: float

    def is_expired(self, now: float) -> bool:
        """Check if the entry has expired."""
        return now > self.expires_at


class TTLCache(Generic[T]):
    """
    TTL cache with LRU eviction.

    Features:
    - Time-based expiration
    - Maximum size limit with LRU eviction
    """

    def __init__(
        self,
        max_size: int = 1000,
        default_ttl: int = 3600,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            max_size: Maximum number of entries.
            default_ttl: Default time-to-live in seconds.
            clock: Monotonic time source, replaceable in tests.
        """
        self._cache: OrderedDict[str, CacheEntry[T]] = OrderedDict()
        self._max_size = max_size
        self._default_ttl = default_ttl
        self._clock = clock

    def get(self, key: str) -> Optional[T]:
        """
        Get a value from the cache.

        Args:
            key: Cache key.

        Returns:
            Cached value or None if not found/expired.
        """
        entry = self._cache.get(key)

        if entry is None:
            return None

        if entry.is_expired(self._clock()):
            del self._cache[key]
            return None

        # Move to end (most recently used)
        self._cache.move_to_end(key)
        return entry.value

    def set(self, key: str, value: T, ttl: Optional[int] = None) -> None:
        """
        Set a value in the cache.

        Args:
            key: Cache key.
            value: Value to cache.
            ttl: Optional TTL override in seconds.
        """
        ttl = ttl or self._default_ttl
        expires_at = self._clock() + ttl

        if key in self._cache:
            del self._cache[key]

        # Remove oldest entries if at capacity
        while len(self._cache) >= self._max_size:
            self._cache.popitem(last=False)

        self._cache[key] = CacheEntry(value=value, expires_at=expires_at)

    def delete(self, key: str) -> bool:
        """
        Delete a key from the cache.

        Returns:
            True if deleted, False if not found.
        """
        if key in self._cache:
            del self._cache[key]
            return True
        return False

    def clear(self) -> None:
        """Clear all entries from the cache."""
        self._cache.clear()
