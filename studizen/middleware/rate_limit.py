"""
Rate Limiting

Token bucket limiter for the public auth endpoints (signup, login, verify,
resend), keyed by client IP.

This guards request volume per client. The per-email verify attempt ceiling
and resend cooldown live in the verification session, not here.
"""

import math
import time
from dataclasses import dataclass, field
from functools import wraps
from typing import Callable, Dict, Optional

from fastapi import HTTPException, Request, status


@dataclass
class TokenBucket:
    """Token bucket for one client key."""
    capacity: int          # Maximum tokens
    refill_rate: float     # Tokens per second
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    tokens: float = field(default=0, init=False)
    last_refill: float = field(default=0, init=False)

    def __post_init__(self):
        self.tokens = float(self.capacity)
        self.last_refill = self.clock()

    def consume(self, tokens: int = 1) -> bool:
        """Take `tokens` from the bucket. Returns False if not enough are left."""
        self._refill()
        if self.tokens >= tokens:
            self.tokens -= tokens
            return True
        return False

    def seconds_until_available(self, tokens: int = 1) -> int:
        self._refill()
        missing = tokens - self.tokens
        if missing <= 0:
            return 0
        return math.ceil(missing / self.refill_rate)

    def _refill(self) -> None:
        now = self.clock()
        elapsed = now - self.last_refill
        self.tokens = min(self.capacity, self.tokens + elapsed * self.refill_rate)
        self.last_refill = now


class RateLimiter:
    """Per-client rate limiter using the token bucket algorithm."""

    def __init__(
        self,
        requests_per_minute: int = 60,
        burst_capacity: int = 10,
        clock: Callable[[], float] = time.monotonic,
        cleanup_every: int = 1000,
        max_idle: float = 3600,
    ):
        """
        Args:
            requests_per_minute: Sustained rate.
            burst_capacity: Maximum burst size.
            clock: Monotonic time source in seconds.
            cleanup_every: Drop idle buckets once per this many checks.
            max_idle: Seconds without a request before a bucket is dropped.
        """
        self._buckets: Dict[str, TokenBucket] = {}
        self._burst_capacity = burst_capacity
        self._refill_rate = requests_per_minute / 60.0
        self._clock = clock
        self._cleanup_every = cleanup_every
        self._max_idle = max_idle
        self._checks = 0

    def _get_key(self, request: Request) -> str:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            ip = forwarded.split(",")[0].strip()
        else:
            ip = request.client.host if request.client else "unknown"
        return f"ip:{ip}"

    def _get_bucket(self, key: str) -> TokenBucket:
        if key not in self._buckets:
            self._buckets[key] = TokenBucket(
                capacity=self._burst_capacity,
                refill_rate=self._refill_rate,
                clock=self._clock,
            )
        return self._buckets[key]

    def is_allowed(self, request: Request) -> bool:
        self._checks += 1
        if self._checks % self._cleanup_every == 0:
            self.cleanup(self._max_idle)
        return self._get_bucket(self._get_key(request)).consume()

    def retry_after(self, request: Request) -> int:
        """Seconds until the client's next request would be accepted."""
        return max(self._get_bucket(self._get_key(request)).seconds_until_available(), 1)

    def cleanup(self, max_age: Optional[float] = None) -> int:
        """
        Drop buckets idle for more than `max_age` seconds (default `max_idle`).

        Returns:
            Number of buckets removed.
        """
        if max_age is None:
            max_age = self._max_idle
        now = self._clock()
        stale_keys = [
            key for key, bucket in self._buckets.items()
            if (now - bucket.last_refill) > max_age
        ]
        for key in stale_keys:
            del self._buckets[key]
        return len(stale_keys)


default_limiter = RateLimiter(requests_per_minute=60, burst_capacity=10)

# Auth endpoints: 10 requests/minute, bursts of 5
auth_limiter = RateLimiter(requests_per_minute=10, burst_capacity=5)


def rate_limit(limiter: Optional[RateLimiter] = None):
    """
    Apply a limiter to one endpoint. The endpoint must accept `request`.

    Usage:
        @router.post("/login")
        @rate_limit(auth_limiter)
        async def login(request: Request, ...):
            ...
    """
    limiter = limiter or default_limiter

    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            request = kwargs.get("request")
            if request is None:
                for arg in args:
                    if isinstance(arg, Request):
                        request = arg
                        break

            if request is not None and not limiter.is_allowed(request):
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail="Rate limit exceeded. Please try again later.",
                    headers={"Retry-After": str(limiter.retry_after(request))},
                )

            return await func(*args, **kwargs)
        return wrapper
    return decorator
