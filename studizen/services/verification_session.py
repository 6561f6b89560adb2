"""
Verification Sessions

Per-email attempt counter and resend cooldown for a verification in
progress. Sessions live in an in-process TTL cache and are never persisted.
"""

import math
import time
from dataclasses import dataclass, field
from typing import Callable

from studizen.core.cache import TTLCache
from studizen.core.config import settings


@dataclass
class VerificationSession:
    """
    Attempt and cooldown state for one email.

    Attributes:
        max_attempts: Verify calls allowed before a resend is required.
        cooldown_seconds: Minimum spacing between resends.
        attempts: Failed verify calls since the last resend.
        cooldown_until: Monotonic time before which resend is refused.
    """
    max_attempts: int = settings.OTP_MAX_ATTEMPTS
    cooldown_seconds: int = settings.OTP_RESEND_COOLDOWN_SECONDS
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    attempts: int = 0
    cooldown_until: float = 0.0

    @property
    def remaining_attempts(self) -> int:
        return max(self.max_attempts - self.attempts, 0)

    def can_attempt(self) -> bool:
        return self.attempts < self.max_attempts

    def record_failure(self) -> int:
        """Count a rejected code. Returns the attempts left."""
        self.attempts = min(self.attempts + 1, self.max_attempts)
        return self.remaining_attempts

    def cooldown_remaining(self) -> int:
        """Whole seconds until a resend is allowed (0 when allowed)."""
        remaining = self.cooldown_until - self.clock()
        if remaining <= 0:
            return 0
        return math.ceil(remaining)

    def can_resend(self) -> bool:
        return self.cooldown_remaining() == 0

    def start_cooldown(self) -> None:
        self.cooldown_until = self.clock() + self.cooldown_seconds

    def reset_for_resend(self) -> None:
        """A new code was sent: attempts start over and the cooldown restarts."""
        self.attempts = 0
        self.start_cooldown()


class SessionRegistry:
    """Verification sessions keyed by email."""

    def __init__(
        self,
        ttl_seconds: int = settings.OTP_EXPIRE_MINUTES * 60,
        max_size: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._clock = clock
        self._ttl = ttl_seconds
        self._sessions: TTLCache[VerificationSession] = TTLCache(
            max_size=max_size,
            default_ttl=ttl_seconds,
            clock=clock,
        )

    def get(self, email: str) -> VerificationSession:
        """Return the session for `email`, creating a fresh one if needed."""
        session = self._sessions.get(email)
        if session is None:
            session = VerificationSession(clock=self._clock)
            self._sessions.set(email, session)
        return session

    def touch(self, email: str, session: VerificationSession) -> None:
        """Store `session` again so its lifetime restarts from now."""
        self._sessions.set(email, session, ttl=self._ttl)

    def discard(self, email: str) -> None:
        self._sessions.delete(email)

    def clear(self) -> None:
        self._sessions.clear()


# Shared registries for the running process
session_registry = SessionRegistry()
reset_session_registry = SessionRegistry()
