"""
API Dependencies

Reusable dependencies for API routes including authentication and the
request language.
"""

import uuid
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from studizen.core.config import settings
from studizen.core.database import get_db
from studizen.core.exceptions import PermissionDeniedError
from studizen.core.i18n import language_from_header
from studizen.core.security import decode_access_token
from studizen.models.enums import UserRole
from studizen.models.profile import Profile
from studizen.services import account_service


# OAuth2 scheme for token extraction from Authorization header
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


def get_request_language(
    accept_language: Annotated[Optional[str], Header()] = None,
) -> str:
    """Language for responses sent before an account is known."""
    return language_from_header(accept_language, default=settings.DEFAULT_LANGUAGE)


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Profile:
    """
    Dependency to get the current authenticated user.

    This dependency:
    1. Extracts the JWT token from the Authorization header
    2. Decodes and validates the token
    3. Fetches the profile from the database
    4. Raises 401 if token is invalid or profile not found

    Raises:
        HTTPException: 401 if authentication fails.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_access_token(token)
    if payload is None:
        raise credentials_exception

    user_id_str: str | None = payload.get("sub")
    if user_id_str is None:
        raise credentials_exception

    try:
        user_id = uuid.UUID(user_id_str)
    except ValueError:
        raise credentials_exception

    user = await account_service.get_profile(db, user_id)
    if user is None:
        raise credentials_exception

    return user


async def get_current_active_user(
    current_user: Annotated[Profile, Depends(get_current_user)],
) -> Profile:
    """
    Dependency to get the current verified user.

    Raises:
        HTTPException: 403 if the email has not been verified yet.
    """
    if not current_user.is_verified:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Email not verified",
        )
    return current_user


async def require_admin(
    current_user: Annotated[Profile, Depends(get_current_active_user)],
) -> Profile:
    """
    Dependency that only lets administrators through.

    The role comes from the profile row loaded for this request, never from
    the token's claims.

    Raises:
        PermissionDeniedError: 403 for non-admin users.
    """
    if current_user.role != UserRole.ADMIN:
        raise PermissionDeniedError("admin_required", language=current_user.language.value)
    return current_user
