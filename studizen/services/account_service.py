"""
Account Service

Profile lookup, creation, credential checks, verification flag, preference
updates, password and email changes, and account deletion.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studizen.core.exceptions import ConflictError, CredentialsError, NotFoundError, PersistenceError
from studizen.core.security import hash_password, verify_password
from studizen.models.enums import Language, Theme, UserRole
from studizen.models.otp_verification import OTPVerification
from studizen.models.profile import Profile


logger = logging.getLogger(__name__)


async def get_profile_by_email(db: AsyncSession, email: str) -> Optional[Profile]:
    try:
        result = await db.execute(
            select(Profile).where(Profile.email == email.strip().lower())
        )
    except SQLAlchemyError as exc:
        raise PersistenceError() from exc
    return result.scalar_one_or_none()


async def get_profile(db: AsyncSession, user_id: uuid.UUID) -> Optional[Profile]:
    try:
        result = await db.execute(select(Profile).where(Profile.id == user_id))
    except SQLAlchemyError as exc:
        raise PersistenceError() from exc
    return result.scalar_one_or_none()


async def username_taken(db: AsyncSession, username: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
    query = select(Profile.id).where(Profile.username == username)
    if exclude_id is not None:
        query = query.where(Profile.id != exclude_id)
    try:
        result = await db.execute(query)
    except SQLAlchemyError as exc:
        raise PersistenceError() from exc
    return result.first() is not None


async def create_profile(
    db: AsyncSession,
    email: str,
    username: str,
    password: str,
    full_name: Optional[str] = None,
    language: Language = Language.EN,
) -> Profile:
    """
    Create an unverified student account.

    Raises:
        ConflictError: If the username is taken.
        PersistenceError: If the insert fails for any other reason.
    """
    if await username_taken(db, username):
        raise ConflictError("username_taken", language=language.value)

    profile = Profile(
        id=uuid.uuid4(),
        email=email.strip().lower(),
        username=username,
        full_name=full_name or username,
        password_hash=hash_password(password),
        is_verified=False,
        provider="email",
        role=UserRole.STUDENT,
        language=language,
        theme=Theme.SYSTEM,
    )
    db.add(profile)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise ConflictError("email_registered", language=language.value) from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        raise PersistenceError() from exc

    logger.info(f"Created profile {profile.id} for {profile.email}")
    return profile


async def mark_profile_verified(db: AsyncSession, user_id: uuid.UUID) -> Profile:
    """
    Flag an account as email-verified.

    Raises:
        NotFoundError: If the account no longer exists.
    """
    profile = await get_profile(db, user_id)
    if profile is None:
        raise NotFoundError("user_not_found")

    profile.is_verified = True
    profile.verified_at = datetime.now(timezone.utc)
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        raise PersistenceError() from exc

    logger.info(f"Marked profile {user_id} as verified")
    return profile


async def authenticate(db: AsyncSession, email: str, password: str) -> Optional[Profile]:
    """Return the profile if the email/password pair is valid, else None."""
    profile = await get_profile_by_email(db, email)
    if profile is None or not verify_password(password, profile.password_hash):
        return None
    return profile


async def update_profile(
    db: AsyncSession,
    profile: Profile,
    full_name: Optional[str] = None,
    username: Optional[str] = None,
) -> Profile:
    """Update the provided profile fields only."""
    if username and username != profile.username:
        if await username_taken(db, username, exclude_id=profile.id):
            raise ConflictError("username_taken", language=profile.language.value)
        profile.username = username
    if full_name:
        profile.full_name = full_name

    try:
        await db.commit()
        await db.refresh(profile)
    except SQLAlchemyError as exc:
        await db.rollback()
        raise PersistenceError() from exc
    return profile


async def update_preferences(
    db: AsyncSession,
    profile: Profile,
    language: Optional[Language] = None,
    theme: Optional[Theme] = None,
) -> Profile:
    """Persist display language and theme."""
    if language is not None:
        profile.language = language
    if theme is not None:
        profile.theme = theme

    try:
        await db.commit()
        await db.refresh(profile)
    except SQLAlchemyError as exc:
        await db.rollback()
        raise PersistenceError() from exc
    return profile


def require_password(profile: Profile, password: str, message_key: str = "password_incorrect") -> None:
    """
    Re-check the account password before a sensitive change.

    Raises:
        CredentialsError: If `password` does not match.
    """
    if not verify_password(password, profile.password_hash):
        raise CredentialsError(message_key, language=profile.language.value)


async def set_password(db: AsyncSession, profile: Profile, new_password: str) -> Profile:
    """Store a new bcrypt hash for the account."""
    profile.password_hash = hash_password(new_password)
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        raise PersistenceError() from exc

    logger.info(f"Password updated for profile {profile.id}")
    return profile


async def change_password(
    db: AsyncSession,
    profile: Profile,
    current_password: str,
    new_password: str,
) -> Profile:
    """
    Replace the password after confirming the current one.

    Raises:
        CredentialsError: If `current_password` is wrong.
    """
    require_password(profile, current_password, "current_password_incorrect")
    return await set_password(db, profile, new_password)


async def change_email(db: AsyncSession, profile: Profile, new_email: str) -> Profile:
    """
    Move the account to `new_email` and require it to be verified again.

    Raises:
        ConflictError: If the address is the current one or belongs to
            another account.
    """
    new_email = new_email.strip().lower()
    language = profile.language.value
    if new_email == profile.email:
        raise ConflictError("email_unchanged", language=language)
    if await get_profile_by_email(db, new_email) is not None:
        raise ConflictError("email_registered", language=language)

    old_email = profile.email
    profile.email = new_email
    profile.is_verified = False
    profile.verified_at = None
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise ConflictError("email_registered", language=language) from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        raise PersistenceError() from exc

    logger.info(f"Profile {profile.id} moved from {old_email} to {new_email}")
    return profile


async def delete_account(db: AsyncSession, profile: Profile) -> None:
    """
    Permanently delete the account with its OTP records.

    Schedules, tasks, subtasks and subscriptions go with the profile through
    the ON DELETE CASCADE foreign keys.
    """
    try:
        await db.execute(
            delete(OTPVerification).where(
                or_(
                    OTPVerification.user_id == profile.id,
                    OTPVerification.email == profile.email,
                )
            )
        )
        await db.delete(profile)
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        raise PersistenceError() from exc

    logger.info(f"Deleted profile {profile.id} and all of its data")
