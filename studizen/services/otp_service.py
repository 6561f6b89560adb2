"""
OTP Service

Handles OTP generation, supersession, and verification.

Lifecycle of one record:
    Active (unused, now <= expires_at)
      -> Consumed   (verified successfully)
      -> Superseded (a newer code was issued for the same email and purpose)
      -> Expired    (unused, now > expires_at; left untouched)
No transition leads back to Active.
"""

import enum
import logging
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, NoReturn, Optional, Sequence

from sqlalchemy import and_, delete, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studizen.core.config import settings
from studizen.core.exceptions import PersistenceError
from studizen.models.enums import OTPPurpose
from studizen.models.otp_verification import OTPVerification


logger = logging.getLogger(__name__)


class VerificationResult(str, enum.Enum):
    """Outcome of checking a submitted code."""
    SUCCESS = "SUCCESS"
    INVALID_CODE = "INVALID_CODE"
    EXPIRED = "EXPIRED"
    NOT_FOUND = "NOT_FOUND"


@dataclass(frozen=True)
class VerificationOutcome:
    """Result of `OTPService.verify` plus the account the code resolved to."""
    result: VerificationResult
    account_ref: Optional[uuid.UUID] = None

    @property
    def is_success(self) -> bool:
        return self.result is VerificationResult.SUCCESS


def utcnow() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(timezone.utc)


def generate_otp(length: int = settings.OTP_LENGTH) -> str:
    """
    Generate a numeric OTP with no leading zero.

    Draws uniformly from [10**(length-1), 10**length - 1], so a 4-digit code
    is always between 1000 and 9999.
    """
    lower = 10 ** (length - 1)
    return str(secrets.randbelow(9 * lower) + lower)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_well_formed(code: str, length: int = settings.OTP_LENGTH) -> bool:
    """True if `code` is exactly `length` ASCII digits."""
    return len(code) == length and code.isascii() and code.isdigit()


class OTPRepository:
    """
    Persistence for OTP records.

    Every database failure rolls the session back and is re-raised as
    PersistenceError.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _fail(self, exc: SQLAlchemyError) -> NoReturn:
        await self.db.rollback()
        raise PersistenceError() from exc

    async def add(self, record: OTPVerification) -> OTPVerification:
        try:
            self.db.add(record)
            await self.db.flush()
        except SQLAlchemyError as exc:
            await self._fail(exc)
        return record

    async def supersede_unused(self, email: str, purpose: OTPPurpose) -> int:
        """Mark every unused record for (`email`, `purpose`) as used. Returns the row count."""
        try:
            result = await self.db.execute(
                update(OTPVerification)
                .where(
                    and_(
                        OTPVerification.email == email,
                        OTPVerification.purpose == purpose,
                        OTPVerification.is_used == False,  # noqa: E712
                    )
                )
                .values(is_used=True)
            )
        except SQLAlchemyError as exc:
            await self._fail(exc)
        return result.rowcount or 0

    async def list_unused_matches(
        self,
        email: str,
        code: str,
        purpose: OTPPurpose,
    ) -> list[OTPVerification]:
        """Unused records for (email, purpose, code), newest first."""
        try:
            result = await self.db.execute(
                select(OTPVerification)
                .where(
                    and_(
                        OTPVerification.email == email,
                        OTPVerification.purpose == purpose,
                        OTPVerification.otp_code == code,
                        OTPVerification.is_used == False,  # noqa: E712
                    )
                )
                .order_by(OTPVerification.created_at.desc())
            )
        except SQLAlchemyError as exc:
            await self._fail(exc)
        return list(result.scalars().all())

    async def mark_used(self, records: Sequence[OTPVerification]) -> None:
        try:
            for record in records:
                record.is_used = True
            await self.db.flush()
        except SQLAlchemyError as exc:
            await self._fail(exc)

    async def delete_stale(self, cutoff: datetime, now: datetime) -> int:
        """Delete used or expired records created before `cutoff`."""
        try:
            result = await self.db.execute(
                delete(OTPVerification).where(
                    and_(
                        OTPVerification.created_at < cutoff,
                        or_(
                            OTPVerification.is_used == True,  # noqa: E712
                            OTPVerification.expires_at < now,
                        ),
                    )
                )
            )
        except SQLAlchemyError as exc:
            await self._fail(exc)
        return result.rowcount or 0

    async def commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self._fail(exc)


class OTPService:
    """Mint, supersede and validate one-time passcodes."""

    def __init__(
        self,
        repository: OTPRepository,
        clock: Callable[[], datetime] = utcnow,
        expire_minutes: int = settings.OTP_EXPIRE_MINUTES,
        code_length: int = settings.OTP_LENGTH,
    ):
        self.repository = repository
        self.clock = clock
        self.expire_minutes = expire_minutes
        self.code_length = code_length

    async def issue(
        self,
        email: str,
        account_ref: Optional[uuid.UUID] = None,
        purpose: OTPPurpose = OTPPurpose.EMAIL_VERIFICATION,
    ) -> OTPVerification:
        """
        Create and store a new OTP for the given email.

        All unused codes for the email and purpose are superseded before the
        new record is inserted, so at most one code per (email, purpose)
        stays live.

        Args:
            email: Destination address.
            account_ref: Account the code authenticates, if already created.
            purpose: What the code authorizes.

        Returns:
            OTPVerification: The persisted record (carries the plain code).

        Raises:
            ValueError: If email is empty.
            PersistenceError: If the store rejects a write.
        """
        email = normalize_email(email)
        if not email:
            raise ValueError("email must not be empty")

        superseded = await self.repository.supersede_unused(email, purpose)
        if superseded:
            logger.info(f"Superseded {superseded} unused {purpose.value} OTP(s) for {email}")

        now = self.clock()
        record = OTPVerification(
            id=uuid.uuid4(),
            user_id=account_ref,
            email=email,
            otp_code=generate_otp(self.code_length),
            purpose=purpose,
            expires_at=now + timedelta(minutes=self.expire_minutes),
            is_used=False,
            created_at=now,
        )
        await self.repository.add(record)
        await self.repository.commit()

        logger.info(f"Issued OTP {record.id} for {email}, expires at {record.expires_at.isoformat()}")
        return record

    async def verify(
        self,
        email: str,
        submitted_code: str,
        purpose: OTPPurpose = OTPPurpose.EMAIL_VERIFICATION,
    ) -> VerificationOutcome:
        """
        Verify a submitted code.

        Looks up the newest unused record matching the email, purpose and
        code. An expired match is reported but not consumed. On success the
        record and any older unused duplicates of the same code are marked
        used.

        Raises:
            PersistenceError: If the store fails.
        """
        email = normalize_email(email)
        submitted_code = submitted_code.strip()
        if not is_well_formed(submitted_code, self.code_length):
            return VerificationOutcome(VerificationResult.INVALID_CODE)

        matches = await self.repository.list_unused_matches(email, submitted_code, purpose)
        if not matches:
            return VerificationOutcome(VerificationResult.NOT_FOUND)

        newest = matches[0]
        if self.clock() > newest.expires_at:
            logger.info(f"Rejected expired OTP {newest.id} for {email}")
            return VerificationOutcome(VerificationResult.EXPIRED)

        if len(matches) > 1:
            logger.warning(f"Found {len(matches)} live duplicates of one OTP for {email}; consuming all")
        await self.repository.mark_used(matches)
        await self.repository.commit()

        logger.info(f"Consumed OTP {newest.id} for {email}")
        return VerificationOutcome(VerificationResult.SUCCESS, account_ref=newest.user_id)

    def get_remaining_validity(self, record: OTPVerification) -> timedelta:
        """Time left before `record` expires, never negative."""
        remaining = record.expires_at - self.clock()
        return max(remaining, timedelta(0))

    async def purge_stale(self, older_than: timedelta) -> int:
        """
        Remove used or expired records created more than `older_than` ago.

        Returns:
            int: Number of records deleted.
        """
        now = self.clock()
        deleted = await self.repository.delete_stale(now - older_than, now)
        await self.repository.commit()
        logger.info(f"Purged {deleted} stale OTP record(s)")
        return deleted
