"""
OTP Service Unit Tests

Tests for code generation, supersession, expiry and verification against an
in-memory store and a fixed clock.
"""

from datetime import timedelta
from unittest.mock import patch

import pytest

from studizen.services.otp_service import VerificationResult


EMAIL = "siti@example.com"


class TestGenerateOTP:
    """Tests for numeric code generation."""

    def test_four_digit_codes_stay_in_range(self):
        """Verify codes are 4 digits between 1000 and 9999."""
        from studizen.services.otp_service import generate_otp

        for _ in range(500):
            code = generate_otp(4)
            assert len(code) == 4
            assert code.isdigit()
            assert 1000 <= int(code) <= 9999

    def test_bounds_are_reachable(self):
        """Verify the lowest and highest draws map to 1000 and 9999."""
        from studizen.services.otp_service import generate_otp

        with patch("studizen.services.otp_service.secrets.randbelow", return_value=0):
            assert generate_otp(4) == "1000"
        with patch("studizen.services.otp_service.secrets.randbelow", return_value=8999):
            assert generate_otp(4) == "9999"

    def test_well_formed_check(self):
        """Verify only exact-length ASCII digit strings pass."""
        from studizen.services.otp_service import is_well_formed

        assert is_well_formed("4821", 4) is True
        assert is_well_formed("482", 4) is False
        assert is_well_formed("48210", 4) is False
        assert is_well_formed("48a1", 4) is False
        assert is_well_formed("٤٨٢١", 4) is False


class TestIssue:
    """Tests for OTPService.issue."""

    @pytest.mark.asyncio
    async def test_issue_creates_active_record(self, otp_service, otp_repository, clock):
        """Verify a fresh record is unused and expires ten minutes out."""
        record = await otp_service.issue(EMAIL)

        assert record.email == EMAIL
        assert record.is_used is False
        assert record.created_at == clock.now
        assert record.expires_at == clock.now + timedelta(minutes=10)
        assert otp_repository.records == [record]
        assert otp_repository.commits == 1

    @pytest.mark.asyncio
    async def test_issue_normalizes_email(self, otp_service):
        """Verify addresses are trimmed and lower-cased."""
        record = await otp_service.issue("  Siti@Example.COM ")

        assert record.email == EMAIL

    @pytest.mark.asyncio
    async def test_issue_links_account(self, otp_service):
        """Verify the account reference is stored on the record."""
        import uuid

        account_id = uuid.uuid4()
        record = await otp_service.issue(EMAIL, account_ref=account_id)

        assert record.user_id == account_id

    @pytest.mark.asyncio
    async def test_issue_rejects_empty_email(self, otp_service, otp_repository):
        """Verify an empty address is refused before touching the store."""
        with pytest.raises(ValueError):
            await otp_service.issue("   ")

        assert otp_repository.records == []

    @pytest.mark.asyncio
    async def test_repeated_issue_leaves_one_active_record(self, otp_service, otp_repository, clock):
        """Verify N sequential issues leave exactly one live code."""
        for _ in range(5):
            last = await otp_service.issue(EMAIL)
            clock.advance(seconds=1)

        active = otp_repository.active(EMAIL, clock.now)
        assert active == [last]
        assert len(otp_repository.records) == 5

    @pytest.mark.asyncio
    async def test_issue_does_not_touch_other_emails(self, otp_service, otp_repository, clock):
        """Verify supersession is scoped to one address."""
        other = await otp_service.issue("budi@example.com")
        await otp_service.issue(EMAIL)

        assert other.is_used is False
        assert otp_repository.active("budi@example.com", clock.now) == [other]

    @pytest.mark.asyncio
    async def test_issue_propagates_store_failure(self, otp_service, otp_repository):
        """Verify a store failure surfaces as PersistenceError."""
        from studizen.core.exceptions import PersistenceError

        otp_repository.fail_next = True

        with pytest.raises(PersistenceError):
            await otp_service.issue(EMAIL)


class TestVerify:
    """Tests for OTPService.verify."""

    @pytest.mark.asyncio
    async def test_issue_then_verify_succeeds(self, otp_service):
        """Verify the happy path returns SUCCESS and the account reference."""
        import uuid

        account_id = uuid.uuid4()
        record = await otp_service.issue(EMAIL, account_ref=account_id)

        outcome = await otp_service.verify(EMAIL, record.otp_code)

        assert outcome.result is VerificationResult.SUCCESS
        assert outcome.is_success is True
        assert outcome.account_ref == account_id
        assert record.is_used is True

    @pytest.mark.asyncio
    async def test_consumed_code_cannot_be_reused(self, otp_service):
        """Verify a second verify of the same code is NOT_FOUND."""
        record = await otp_service.issue(EMAIL)

        first = await otp_service.verify(EMAIL, record.otp_code)
        second = await otp_service.verify(EMAIL, record.otp_code)

        assert first.result is VerificationResult.SUCCESS
        assert second.result is VerificationResult.NOT_FOUND

    @pytest.mark.asyncio
    async def test_wrong_code_is_not_found(self, otp_service):
        """Verify a well-formed but wrong code leaves the real one live."""
        with patch("studizen.services.otp_service.generate_otp", return_value="4821"):
            record = await otp_service.issue(EMAIL)

        outcome = await otp_service.verify(EMAIL, "1111")

        assert outcome.result is VerificationResult.NOT_FOUND
        assert record.is_used is False

    @pytest.mark.asyncio
    async def test_unknown_email_is_not_found(self, otp_service):
        """Verify a code for an email with no records is NOT_FOUND."""
        outcome = await otp_service.verify("nobody@example.com", "4821")

        assert outcome.result is VerificationResult.NOT_FOUND

    @pytest.mark.asyncio
    async def test_malformed_code_is_invalid(self, otp_service, otp_repository):
        """Verify malformed input is rejected without a store lookup."""
        await otp_service.issue(EMAIL)

        for bad in ("", "12", "12345", "12a4"):
            outcome = await otp_service.verify(EMAIL, bad)
            assert outcome.result is VerificationResult.INVALID_CODE

        assert otp_repository.commits == 1

    @pytest.mark.asyncio
    async def test_verify_matches_normalized_email(self, otp_service):
        """Verify email case and spacing do not affect lookup."""
        record = await otp_service.issue(EMAIL)

        outcome = await otp_service.verify(" SITI@example.com", record.otp_code)

        assert outcome.result is VerificationResult.SUCCESS

    @pytest.mark.asyncio
    async def test_valid_exactly_at_expiry(self, otp_service, clock):
        """Verify a code submitted at expires_at is still accepted."""
        record = await otp_service.issue(EMAIL)
        clock.now = record.expires_at

        outcome = await otp_service.verify(EMAIL, record.otp_code)

        assert outcome.result is VerificationResult.SUCCESS

    @pytest.mark.asyncio
    async def test_expired_one_microsecond_after(self, otp_service, clock):
        """Verify a code one microsecond past expiry is EXPIRED and not consumed."""
        record = await otp_service.issue(EMAIL)
        clock.now = record.expires_at + timedelta(microseconds=1)

        outcome = await otp_service.verify(EMAIL, record.otp_code)

        assert outcome.result is VerificationResult.EXPIRED
        assert record.is_used is False

    @pytest.mark.asyncio
    async def test_expired_code_stays_expired(self, otp_service, clock):
        """Verify retrying an expired code keeps returning EXPIRED."""
        record = await otp_service.issue(EMAIL)
        clock.advance(minutes=11)

        first = await otp_service.verify(EMAIL, record.otp_code)
        second = await otp_service.verify(EMAIL, record.otp_code)

        assert first.result is VerificationResult.EXPIRED
        assert second.result is VerificationResult.EXPIRED

    @pytest.mark.asyncio
    async def test_resend_supersedes_previous_code(self, otp_service, clock):
        """Verify the old code is dead after a resend and the new one works."""
        with patch("studizen.services.otp_service.generate_otp", side_effect=["4821", "7359"]):
            old = await otp_service.issue(EMAIL)
            clock.advance(seconds=61)
            new = await otp_service.issue(EMAIL)

        assert old.is_used is True
        assert (await otp_service.verify(EMAIL, "4821")).result is VerificationResult.NOT_FOUND
        assert (await otp_service.verify(EMAIL, new.otp_code)).result is VerificationResult.SUCCESS

    @pytest.mark.asyncio
    async def test_newest_duplicate_wins_and_all_are_consumed(self, otp_service, otp_repository, clock):
        """Verify racing duplicates resolve to the newest and are all consumed."""
        from studizen.models.enums import OTPPurpose
        from studizen.models.otp_verification import OTPVerification

        older = OTPVerification(
            email=EMAIL,
            otp_code="4821",
            purpose=OTPPurpose.EMAIL_VERIFICATION,
            expires_at=clock.now - timedelta(minutes=1),
            is_used=False,
            created_at=clock.now - timedelta(minutes=11),
        )
        newer = OTPVerification(
            email=EMAIL,
            otp_code="4821",
            purpose=OTPPurpose.EMAIL_VERIFICATION,
            expires_at=clock.now + timedelta(minutes=9),
            is_used=False,
            created_at=clock.now - timedelta(minutes=1),
        )
        otp_repository.records.extend([older, newer])

        outcome = await otp_service.verify(EMAIL, "4821")

        assert outcome.result is VerificationResult.SUCCESS
        assert older.is_used is True
        assert newer.is_used is True

    @pytest.mark.asyncio
    async def test_verify_propagates_store_failure(self, otp_service, otp_repository):
        """Verify lookup failures surface as PersistenceError."""
        from studizen.core.exceptions import PersistenceError

        otp_repository.fail_next = True

        with pytest.raises(PersistenceError):
            await otp_service.verify(EMAIL, "4821")


class TestHousekeeping:
    """Tests for remaining validity and purge."""

    @pytest.mark.asyncio
    async def test_remaining_validity(self, otp_service, clock):
        """Verify remaining time counts down and never goes negative."""
        record = await otp_service.issue(EMAIL)

        clock.advance(minutes=4)
        assert otp_service.get_remaining_validity(record) == timedelta(minutes=6)

        clock.advance(minutes=10)
        assert otp_service.get_remaining_validity(record) == timedelta(0)

    @pytest.mark.asyncio
    async def test_purge_stale_keeps_live_codes(self, otp_service, otp_repository, clock):
        """Verify purge drops old used or expired rows only."""
        consumed = await otp_service.issue(EMAIL)
        await otp_service.verify(EMAIL, consumed.otp_code)
        clock.advance(days=2)
        live = await otp_service.issue("budi@example.com")

        deleted = await otp_service.purge_stale(timedelta(days=1))

        assert deleted == 1
        assert otp_repository.records == [live]


class TestPurposes:
    """Tests for keeping verification and password reset codes apart."""

    @pytest.mark.asyncio
    async def test_reset_code_does_not_supersede_verification_code(self, otp_service, otp_repository, clock):
        """Verify issuing a reset code leaves the live verification code alone."""
        from studizen.models.enums import OTPPurpose

        verification = await otp_service.issue(EMAIL)
        reset = await otp_service.issue(EMAIL, purpose=OTPPurpose.PASSWORD_RESET)

        assert verification.is_used is False
        assert reset.purpose is OTPPurpose.PASSWORD_RESET
        assert len(otp_repository.active(EMAIL, clock.now)) == 2

    @pytest.mark.asyncio
    async def test_codes_do_not_cross_purposes(self, otp_service):
        """Verify a reset code cannot verify an email and vice versa."""
        from studizen.models.enums import OTPPurpose

        with patch("studizen.services.otp_service.secrets.randbelow", side_effect=[821, 3821]):
            verification = await otp_service.issue(EMAIL)
            reset = await otp_service.issue(EMAIL, purpose=OTPPurpose.PASSWORD_RESET)

        outcome = await otp_service.verify(EMAIL, reset.otp_code)
        assert outcome.result is VerificationResult.NOT_FOUND

        outcome = await otp_service.verify(EMAIL, verification.otp_code, purpose=OTPPurpose.PASSWORD_RESET)
        assert outcome.result is VerificationResult.NOT_FOUND
        assert verification.is_used is False

        outcome = await otp_service.verify(EMAIL, reset.otp_code, purpose=OTPPurpose.PASSWORD_RESET)
        assert outcome.result is VerificationResult.SUCCESS


class TestOTPRepository:
    """Tests for the SQLAlchemy-backed store."""

    @pytest.mark.asyncio
    async def test_failed_insert_rolls_back_supersession(self, mock_async_session):
        """Verify a failed insert after supersession rolls the session back."""
        from sqlalchemy.exc import OperationalError

        from studizen.core.exceptions import PersistenceError
        from studizen.services.otp_service import OTPRepository, OTPService

        mock_async_session.execute.return_value.rowcount = 1
        mock_async_session.flush.side_effect = OperationalError("INSERT", {}, Exception("connection lost"))
        service = OTPService(OTPRepository(mock_async_session))

        with pytest.raises(PersistenceError):
            await service.issue(EMAIL)

        mock_async_session.execute.assert_awaited_once()
        mock_async_session.rollback.assert_awaited_once()
        mock_async_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_update_rolls_back(self, mock_async_session):
        """Verify a failed supersession update is rolled back."""
        from sqlalchemy.exc import OperationalError

        from studizen.core.exceptions import PersistenceError
        from studizen.models.enums import OTPPurpose
        from studizen.services.otp_service import OTPRepository

        mock_async_session.execute.side_effect = OperationalError("UPDATE", {}, Exception("timeout"))

        with pytest.raises(PersistenceError):
            await OTPRepository(mock_async_session).supersede_unused(EMAIL, OTPPurpose.EMAIL_VERIFICATION)

        mock_async_session.rollback.assert_awaited_once()
