"""
User Routes

Endpoints for the current user's profile, preferences, credentials and
account deletion.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from studizen.api.deps import get_current_active_user
from studizen.core.database import get_db
from studizen.core.i18n import translate
from studizen.models.profile import Profile
from studizen.schemas.auth import MessageResponse, SignupResponse
from studizen.schemas.user import (
    AccountDelete,
    EmailChange,
    PasswordChange,
    PreferencesUpdate,
    ProfileResponse,
    ProfileUpdate,
)
from studizen.services import account_service, premium_service, verification_service


router = APIRouter(prefix="/users", tags=["Users"])


async def _with_premium_flag(db: AsyncSession, profile: Profile) -> ProfileResponse:
    response = ProfileResponse.model_validate(profile)
    is_premium = await premium_service.is_premium(db, profile.id)
    return response.model_copy(update={"is_premium": is_premium})


@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Get current user profile",
)
async def get_me(
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProfileResponse:
    """
    Get the logged-in user's profile, including whether a premium plan is
    currently active.
    """
    return await _with_premium_flag(db, current_user)


@router.patch(
    "/me",
    response_model=ProfileResponse,
    summary="Update current user profile",
)
async def update_me(
    profile_update: ProfileUpdate,
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProfileResponse:
    """
    Update display name and/or username. Only provided fields change.

    Raises:
        ConflictError: 400 if the new username is taken.
    """
    profile = await account_service.update_profile(
        db,
        current_user,
        full_name=profile_update.full_name,
        username=profile_update.username,
    )
    return await _with_premium_flag(db, profile)


@router.put(
    "/me/preferences",
    response_model=ProfileResponse,
    summary="Save language and theme",
)
async def update_preferences(
    preferences: PreferencesUpdate,
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProfileResponse:
    profile = await account_service.update_preferences(
        db,
        current_user,
        language=preferences.language,
        theme=preferences.theme,
    )
    return await _with_premium_flag(db, profile)


@router.put(
    "/me/password",
    response_model=MessageResponse,
    summary="Change password",
)
async def change_password(
    data: PasswordChange,
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    """
    Replace the password. The current password is checked first.

    Raises:
        CredentialsError: 400 if the current password is wrong.
    """
    await account_service.change_password(db, current_user, data.current_password, data.new_password)
    return MessageResponse(message=translate("password_changed", current_user.language.value))


@router.put(
    "/me/email",
    response_model=SignupResponse,
    summary="Change email address",
)
async def change_email(
    data: EmailChange,
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SignupResponse:
    """
    Move the account to a new email address.

    The account must verify the new address (and log in again) before it can
    use authenticated endpoints.
    """
    return await verification_service.change_email(db, current_user, data.new_email, data.password)


@router.delete(
    "/me",
    response_model=MessageResponse,
    summary="Delete account",
)
async def delete_me(
    data: AccountDelete,
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    """
    Permanently delete the account with its schedules, tasks,
    subscriptions and verification codes. Requires the current password.
    """
    account_service.require_password(current_user, data.password)
    email = current_user.email
    language = current_user.language.value
    await account_service.delete_account(db, current_user)
    verification_service.discard_sessions(email)
    return MessageResponse(message=translate("account_deleted", language))
