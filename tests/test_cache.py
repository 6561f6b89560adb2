"""
Cache Unit Tests

Tests for the TTL cache that backs verification sessions.
"""

import pytest


class TestTTLCache:
    """Tests for the TTL cache implementation."""

    def test_set_and_get(self, monotonic_clock):
        """Verify basic set and get functionality."""
        from studizen.core.cache import TTLCache

        cache: TTLCache[str] = TTLCache(max_size=10, default_ttl=60, clock=monotonic_clock)

        cache.set("siti@example.com", "session")
        assert cache.get("siti@example.com") == "session"

    def test_returns_none_for_missing_key(self):
        """Verify None is returned for missing keys."""
        from studizen.core.cache import TTLCache

        cache: TTLCache[str] = TTLCache(max_size=10, default_ttl=60)

        assert cache.get("missing@example.com") is None

    def test_expires_after_ttl(self, monotonic_clock):
        """Verify entries survive up to their TTL and expire after it."""
        from studizen.core.cache import TTLCache

        cache: TTLCache[str] = TTLCache(max_size=10, default_ttl=600, clock=monotonic_clock)
        cache.set("key1", "value1", ttl=30)

        monotonic_clock.advance(30)
        assert cache.get("key1") == "value1"

        monotonic_clock.advance(0.001)
        assert cache.get("key1") is None

    def test_set_again_restarts_ttl(self, monotonic_clock):
        """Verify re-setting a key extends its lifetime."""
        from studizen.core.cache import TTLCache

        cache: TTLCache[str] = TTLCache(max_size=10, default_ttl=60, clock=monotonic_clock)
        cache.set("key1", "value1")
        monotonic_clock.advance(50)
        cache.set("key1", "value1")
        monotonic_clock.advance(50)

        assert cache.get("key1") == "value1"

    def test_lru_eviction(self, monotonic_clock):
        """Verify the least recently used entry is evicted at capacity."""
        from studizen.core.cache import TTLCache

        cache: TTLCache[str] = TTLCache(max_size=3, default_ttl=60, clock=monotonic_clock)

        cache.set("key1", "value1")
        cache.set("key2", "value2")
        cache.set("key3", "value3")

        # Access key1 to make it recently used
        cache.get("key1")
        cache.set("key4", "value4")

        assert cache.get("key1") == "value1"
        assert cache.get("key2") is None
        assert cache.get("key4") == "value4"

    def test_delete_and_clear(self):
        """Verify delete reports presence and clear empties the cache."""
        from studizen.core.cache import TTLCache

        cache: TTLCache[str] = TTLCache(max_size=10, default_ttl=60)
        cache.set("key1", "value1")
        cache.set("key2", "value2")

        assert cache.delete("key1") is True
        assert cache.delete("key1") is False

        cache.clear()
        assert cache.get("key2") is None
