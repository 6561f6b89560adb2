"""
Verification Session Unit Tests

Tests for the per-email attempt counter and resend cooldown.
"""

import pytest


class TestVerificationSession:
    """Tests for a single session."""

    def test_attempt_budget(self, monotonic_clock):
        """Verify five failures exhaust the budget."""
        from studizen.services.verification_session import VerificationSession

        session = VerificationSession(max_attempts=5, cooldown_seconds=60, clock=monotonic_clock)

        assert [session.record_failure() for _ in range(5)] == [4, 3, 2, 1, 0]
        assert session.can_attempt() is False
        assert session.record_failure() == 0

    def test_cooldown_counts_down(self, monotonic_clock):
        """Verify the cooldown rounds up to whole seconds and then clears."""
        from studizen.services.verification_session import VerificationSession

        session = VerificationSession(max_attempts=5, cooldown_seconds=60, clock=monotonic_clock)
        assert session.can_resend() is True

        session.start_cooldown()
        monotonic_clock.advance(0.5)
        assert session.cooldown_remaining() == 60

        monotonic_clock.advance(59.5)
        assert session.cooldown_remaining() == 0
        assert session.can_resend() is True

    def test_reset_for_resend(self, monotonic_clock):
        """Verify a resend restores attempts and starts the cooldown."""
        from studizen.services.verification_session import VerificationSession

        session = VerificationSession(max_attempts=5, cooldown_seconds=60, clock=monotonic_clock)
        for _ in range(5):
            session.record_failure()

        session.reset_for_resend()

        assert session.remaining_attempts == 5
        assert session.can_attempt() is True
        assert session.can_resend() is False


class TestSessionRegistry:
    """Tests for the registry of sessions keyed by email."""

    def test_get_returns_same_session(self, monotonic_clock):
        """Verify a session persists between lookups."""
        from studizen.services.verification_session import SessionRegistry

        registry = SessionRegistry(ttl_seconds=600, clock=monotonic_clock)
        session = registry.get("siti@example.com")
        session.record_failure()

        assert registry.get("siti@example.com").attempts == 1

    def test_sessions_expire(self, monotonic_clock):
        """Verify an idle session is forgotten after its TTL."""
        from studizen.services.verification_session import SessionRegistry

        registry = SessionRegistry(ttl_seconds=600, clock=monotonic_clock)
        registry.get("siti@example.com").record_failure()

        monotonic_clock.advance(601)

        assert registry.get("siti@example.com").attempts == 0

    def test_touch_extends_lifetime(self, monotonic_clock):
        """Verify touching a session restarts its TTL."""
        from studizen.services.verification_session import SessionRegistry

        registry = SessionRegistry(ttl_seconds=600, clock=monotonic_clock)
        session = registry.get("siti@example.com")
        session.record_failure()
        monotonic_clock.advance(500)
        registry.touch("siti@example.com", session)
        monotonic_clock.advance(500)

        assert registry.get("siti@example.com").attempts == 1

    def test_discard(self, monotonic_clock):
        """Verify discard removes the session."""
        from studizen.services.verification_session import SessionRegistry

        registry = SessionRegistry(ttl_seconds=600, clock=monotonic_clock)
        registry.get("siti@example.com").record_failure()
        registry.discard("siti@example.com")

        assert registry.get("siti@example.com").attempts == 0
