"""
Verification Service

Register, resend and verify flows built on the OTP service and the email
dispatcher, plus the password reset and email change flows that reuse them.

Issuance always completes before dispatch. A failed verification dispatch
never blocks the flow: the code is still valid and is returned to the client
as `fallback_code` so it can be shown on screen. Password reset codes are
never shown on screen.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from studizen.core.config import settings
from studizen.core.exceptions import (
    ConflictError,
    DeliveryFailedError,
    NotFoundError,
    TooManyRequestsError,
    VerificationError,
)
from studizen.core.i18n import translate
from studizen.core.security import create_access_token
from studizen.models.enums import Language, OTPPurpose
from studizen.models.profile import Profile
from studizen.schemas.auth import MessageResponse, SignupRequest, SignupResponse
from studizen.schemas.token import Token
from studizen.services import account_service, email_service
from studizen.services.email_service import DispatchResult
from studizen.services.otp_service import (
    OTPRepository,
    OTPService,
    VerificationOutcome,
    VerificationResult,
)
from studizen.services.verification_session import (
    SessionRegistry,
    VerificationSession,
    reset_session_registry,
    session_registry,
)


logger = logging.getLogger(__name__)


def get_otp_service(db: AsyncSession) -> OTPService:
    """Build the OTP service over the request's database session."""
    return OTPService(OTPRepository(db))


def get_session_registry() -> SessionRegistry:
    return session_registry


def get_reset_session_registry() -> SessionRegistry:
    return reset_session_registry


def ensure_cooldown_passed(session: VerificationSession, language: str) -> None:
    """
    Raises:
        TooManyRequestsError: While the resend cooldown is running, with a
            Retry-After header.
    """
    remaining = session.cooldown_remaining()
    if remaining > 0:
        raise TooManyRequestsError(
            "resend_cooldown",
            language=language,
            headers={"Retry-After": str(remaining)},
            seconds=remaining,
        )


async def check_code(
    db: AsyncSession,
    profile: Profile,
    code: str,
    sessions: SessionRegistry,
    purpose: OTPPurpose,
) -> VerificationOutcome:
    """
    Consume `code` for `profile` or count a failed attempt.

    Raises:
        TooManyRequestsError: Attempt ceiling reached; a new code is required.
        VerificationError: Code incorrect or expired.
    """
    language = profile.language.value
    session = sessions.get(profile.email)
    if not session.can_attempt():
        raise TooManyRequestsError("too_many_attempts", language=language)

    outcome = await get_otp_service(db).verify(profile.email, code, purpose=purpose)

    if outcome.result is VerificationResult.EXPIRED:
        raise VerificationError("code_expired", language=language)

    if outcome.result is not VerificationResult.SUCCESS:
        remaining = session.record_failure()
        logger.info(
            f"Rejected {purpose.value} code for {profile.email} ({outcome.result.value}), "
            f"{remaining} attempt(s) left"
        )
        if remaining == 0:
            raise TooManyRequestsError("too_many_attempts", language=language)
        raise VerificationError("code_incorrect", language=language, remaining=remaining)

    sessions.discard(profile.email)
    return outcome


async def send_code(
    db: AsyncSession,
    profile: Profile,
    message_key: str,
) -> SignupResponse:
    """
    Issue a fresh code for `profile`, try to email it, and reset the
    verification session.
    """
    language = profile.language.value
    otp = get_otp_service(db)
    record = await otp.issue(profile.email, account_ref=profile.id)
    expires_in = int(otp.get_remaining_validity(record).total_seconds())

    sessions = get_session_registry()
    session = sessions.get(profile.email)
    session.reset_for_resend()
    sessions.touch(profile.email, session)

    result = await email_service.dispatch(
        profile.email,
        record.otp_code,
        display_name=profile.full_name or profile.username,
        language=language,
    )

    if result is DispatchResult.FAILED:
        logger.warning(f"Falling back to on-screen code for {profile.email}")
        return SignupResponse(
            message=translate("code_fallback", language, code=record.otp_code),
            email=profile.email,
            fallback_code=record.otp_code,
            cooldown_seconds=session.cooldown_seconds,
            expires_in_seconds=expires_in,
        )

    return SignupResponse(
        message=translate(message_key, language),
        email=profile.email,
        cooldown_seconds=session.cooldown_seconds,
        expires_in_seconds=expires_in,
    )


async def register(
    db: AsyncSession,
    data: SignupRequest,
    language: str = settings.DEFAULT_LANGUAGE,
) -> SignupResponse:
    """
    Create an account and send its first verification code.

    An existing but unverified account gets a new code instead of an error,
    subject to the same cooldown as a resend.

    Raises:
        ConflictError: Email already verified, or username taken.
        TooManyRequestsError: Unverified account inside the resend cooldown.
        PersistenceError: Store failure.
    """
    chosen = data.language or Language(language)
    existing = await account_service.get_profile_by_email(db, data.email)

    if existing is not None:
        if existing.is_verified:
            raise ConflictError("email_registered", language=chosen.value)
        ensure_cooldown_passed(get_session_registry().get(existing.email), existing.language.value)
        logger.info(f"Re-sending code to unverified account {existing.id}")
        return await send_code(db, existing, "code_sent")

    profile = await account_service.create_profile(
        db,
        email=data.email,
        username=data.username,
        password=data.password,
        full_name=data.full_name,
        language=chosen,
    )
    return await send_code(db, profile, "registration_success")


async def resend(
    db: AsyncSession,
    email: str,
    language: str = settings.DEFAULT_LANGUAGE,
) -> SignupResponse:
    """
    Send a new code, superseding the previous one.

    Raises:
        NotFoundError: Unknown email.
        ConflictError: Account already verified.
        TooManyRequestsError: Resend cooldown still running.
    """
    profile = await account_service.get_profile_by_email(db, email)
    if profile is None:
        raise NotFoundError("user_not_found", language=language)
    if profile.is_verified:
        raise ConflictError("already_verified", language=profile.language.value)

    ensure_cooldown_passed(get_session_registry().get(profile.email), profile.language.value)
    return await send_code(db, profile, "code_sent")


async def verify(
    db: AsyncSession,
    email: str,
    code: str,
    language: str = settings.DEFAULT_LANGUAGE,
) -> Token:
    """
    Check a submitted code and, on success, verify the account.

    A token is only ever returned for a code that was actually consumed.

    Raises:
        NotFoundError: Unknown email.
        ConflictError: Account already verified; log in instead.
        TooManyRequestsError: Attempt ceiling reached; a resend is required.
        VerificationError: Code incorrect or expired.
    """
    profile = await account_service.get_profile_by_email(db, email)
    if profile is None:
        raise NotFoundError("user_not_found", language=language)
    if profile.is_verified:
        raise ConflictError("already_verified", language=profile.language.value)

    outcome = await check_code(db, profile, code, get_session_registry(), OTPPurpose.EMAIL_VERIFICATION)

    verified = await account_service.mark_profile_verified(db, outcome.account_ref or profile.id)
    return Token(
        access_token=create_access_token(subject=verified.id, role=verified.role.value),
        message=translate("verification_success", profile.language.value),
    )


async def send_login_code(db: AsyncSession, profile: Profile) -> Optional[str]:
    """
    Issue and send a code for an unverified account that tried to log in.

    Nothing is issued while the resend cooldown is running.

    Returns:
        The raw code when email delivery failed, otherwise None.
    """
    session = get_session_registry().get(profile.email)
    if not session.can_resend():
        logger.info(f"Login by unverified {profile.email} during cooldown; no new code issued")
        return None
    response = await send_code(db, profile, "email_not_verified")
    return response.fallback_code


async def request_password_reset(
    db: AsyncSession,
    email: str,
    language: str = settings.DEFAULT_LANGUAGE,
) -> MessageResponse:
    """
    Email a password reset code.

    Unknown addresses get the same answer as known ones.

    Raises:
        TooManyRequestsError: A reset code was sent less than a cooldown ago.
        DeliveryFailedError: The email could not be sent.
    """
    response = MessageResponse(message=translate("reset_code_sent", language))
    profile = await account_service.get_profile_by_email(db, email)
    if profile is None:
        logger.info(f"Password reset requested for unknown email {email}")
        return response

    sessions = get_reset_session_registry()
    session = sessions.get(profile.email)
    ensure_cooldown_passed(session, language)

    record = await get_otp_service(db).issue(
        profile.email,
        account_ref=profile.id,
        purpose=OTPPurpose.PASSWORD_RESET,
    )
    session.reset_for_resend()
    sessions.touch(profile.email, session)

    result = await email_service.dispatch(
        profile.email,
        record.otp_code,
        display_name=profile.full_name or profile.username,
        language=profile.language.value,
        purpose=OTPPurpose.PASSWORD_RESET,
    )
    if result is DispatchResult.FAILED:
        raise DeliveryFailedError(language=language)

    return response


async def reset_password(
    db: AsyncSession,
    email: str,
    code: str,
    new_password: str,
    language: str = settings.DEFAULT_LANGUAGE,
) -> MessageResponse:
    """
    Set a new password after checking a reset code.

    Raises:
        NotFoundError: Unknown email.
        TooManyRequestsError: Attempt ceiling reached; request a new code.
        VerificationError: Code incorrect or expired.
    """
    profile = await account_service.get_profile_by_email(db, email)
    if profile is None:
        raise NotFoundError("user_not_found", language=language)

    await check_code(db, profile, code, get_reset_session_registry(), OTPPurpose.PASSWORD_RESET)
    await account_service.set_password(db, profile, new_password)

    return MessageResponse(message=translate("password_reset_success", profile.language.value))


async def change_email(
    db: AsyncSession,
    profile: Profile,
    new_email: str,
    password: str,
) -> SignupResponse:
    """
    Move the account to a new address and send a verification code there.

    The account is unverified until the new address is confirmed.

    Raises:
        CredentialsError: Wrong password.
        ConflictError: Address unchanged or already registered.
    """
    account_service.require_password(profile, password)
    old_email = profile.email
    profile = await account_service.change_email(db, profile, new_email)
    discard_sessions(old_email)
    return await send_code(db, profile, "email_changed")


def discard_sessions(email: str) -> None:
    """Forget attempt and cooldown state for `email` in every flow."""
    get_session_registry().discard(email)
    get_reset_session_registry().discard(email)
