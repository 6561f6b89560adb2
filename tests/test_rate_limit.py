"""
Rate Limiting Unit Tests

Tests for token bucket and rate limiter functionality.
"""

from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException


def _request(host: str = "127.0.0.1", forwarded: str | None = None) -> MagicMock:
    request = MagicMock()
    request.client.host = host
    request.headers.get.return_value = forwarded
    return request


class TestTokenBucket:
    """Tests for TokenBucket implementation."""

    def test_initial_tokens_at_capacity(self, monotonic_clock):
        """Verify bucket starts at full capacity."""
        from studizen.middleware.rate_limit import TokenBucket

        bucket = TokenBucket(capacity=10, refill_rate=1.0, clock=monotonic_clock)

        assert bucket.tokens == 10.0

    def test_consume_fails_when_empty(self, monotonic_clock):
        """Verify consume fails when insufficient tokens."""
        from studizen.middleware.rate_limit import TokenBucket

        bucket = TokenBucket(capacity=2, refill_rate=0.1, clock=monotonic_clock)

        assert bucket.consume(2) is True
        assert bucket.consume(1) is False

    def test_refill_over_time(self, monotonic_clock):
        """Verify tokens refill with elapsed time, capped at capacity."""
        from studizen.middleware.rate_limit import TokenBucket

        bucket = TokenBucket(capacity=10, refill_rate=10.0, clock=monotonic_clock)
        bucket.consume(10)

        monotonic_clock.advance(0.5)
        bucket._refill()
        assert bucket.tokens == 5.0

        monotonic_clock.advance(10)
        bucket._refill()
        assert bucket.tokens == 10.0

    def test_seconds_until_available(self, monotonic_clock):
        """Verify wait time for the next token."""
        from studizen.middleware.rate_limit import TokenBucket

        bucket = TokenBucket(capacity=1, refill_rate=0.5, clock=monotonic_clock)
        bucket.consume()

        assert bucket.seconds_until_available() == 2


class TestRateLimiter:
    """Tests for RateLimiter implementation."""

    def test_blocks_requests_over_burst(self, monotonic_clock):
        """Verify requests over burst limit are blocked."""
        from studizen.middleware.rate_limit import RateLimiter

        limiter = RateLimiter(requests_per_minute=10, burst_capacity=5, clock=monotonic_clock)
        request = _request("192.168.1.1")

        for _ in range(5):
            assert limiter.is_allowed(request) is True
        assert limiter.is_allowed(request) is False

    def test_clients_are_limited_separately(self, monotonic_clock):
        """Verify each IP gets its own bucket."""
        from studizen.middleware.rate_limit import RateLimiter

        limiter = RateLimiter(requests_per_minute=10, burst_capacity=1, clock=monotonic_clock)

        assert limiter.is_allowed(_request("10.0.0.1")) is True
        assert limiter.is_allowed(_request("10.0.0.2")) is True
        assert limiter.is_allowed(_request("10.0.0.1")) is False

    def test_uses_forwarded_for_header(self):
        """Verify the first X-Forwarded-For address is the key."""
        from studizen.middleware.rate_limit import RateLimiter

        limiter = RateLimiter()

        key = limiter._get_key(_request("10.0.0.1", forwarded="203.0.113.7, 10.0.0.1"))

        assert key == "ip:203.0.113.7"

    def test_cleanup_removes_stale_buckets(self, monotonic_clock):
        """Verify cleanup removes idle buckets."""
        from studizen.middleware.rate_limit import RateLimiter

        limiter = RateLimiter(requests_per_minute=60, burst_capacity=5, clock=monotonic_clock)
        limiter.is_allowed(_request("10.0.0.1"))
        monotonic_clock.advance(3601)

        assert limiter.cleanup(max_age=3600) == 1
        assert len(limiter._buckets) == 0

    def test_idle_buckets_dropped_while_serving(self, monotonic_clock):
        """Verify idle buckets are pruned periodically without an explicit cleanup call."""
        from studizen.middleware.rate_limit import RateLimiter

        limiter = RateLimiter(
            requests_per_minute=60,
            burst_capacity=5,
            clock=monotonic_clock,
            cleanup_every=3,
            max_idle=600,
        )
        limiter.is_allowed(_request("10.0.0.1"))
        limiter.is_allowed(_request("10.0.0.2"))
        assert set(limiter._buckets) == {"ip:10.0.0.1", "ip:10.0.0.2"}

        monotonic_clock.advance(601)
        limiter.is_allowed(_request("10.0.0.3"))

        assert set(limiter._buckets) == {"ip:10.0.0.3"}


class TestRateLimitDecorator:
    """Tests for the endpoint decorator."""

    @pytest.mark.asyncio
    async def test_raises_429_when_exhausted(self, monotonic_clock):
        """Verify the decorated endpoint is refused with Retry-After."""
        from fastapi import Request

        from studizen.middleware.rate_limit import RateLimiter, rate_limit

        limiter = RateLimiter(requests_per_minute=30, burst_capacity=1, clock=monotonic_clock)
        calls = []

        @rate_limit(limiter)
        async def endpoint(request: Request):
            calls.append(request)
            return "ok"

        request = Request({"type": "http", "headers": [], "client": ("10.0.0.9", 1234)})

        assert await endpoint(request=request) == "ok"
        with pytest.raises(HTTPException) as exc_info:
            await endpoint(request=request)

        assert exc_info.value.status_code == 429
        assert exc_info.value.headers == {"Retry-After": "2"}
        assert len(calls) == 1
