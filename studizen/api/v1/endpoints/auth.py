"""
Authentication Routes

Handles signup, email verification with OTP, resend, login and password
reset.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from studizen.api.deps import get_request_language
from studizen.core.database import get_db
from studizen.core.i18n import translate
from studizen.core.security import create_access_token
from studizen.middleware.rate_limit import auth_limiter, rate_limit
from studizen.schemas.auth import (
    ForgotPasswordRequest,
    MessageResponse,
    ResendOTPRequest,
    ResetPasswordRequest,
    SignupRequest,
    SignupResponse,
    VerifyEmailRequest,
)
from studizen.schemas.token import Token
from studizen.services import account_service, verification_service


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new account (requires email verification)",
)
@rate_limit(auth_limiter)
async def signup(
    request: Request,
    user_data: SignupRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    language: Annotated[str, Depends(get_request_language)],
) -> SignupResponse:
    """
    Create a new account and send an email verification code.

    **Flow:**
    1. Reject emails that already belong to a verified account
    2. Create the profile (or reuse an unverified one)
    3. Issue a 4-digit code, superseding older ones
    4. Email the code; if email fails, return it as `fallback_code`
    """
    return await verification_service.register(db, user_data, language)


@router.post(
    "/verify-email",
    response_model=Token,
    summary="Verify email with OTP code",
)
@rate_limit(auth_limiter)
async def verify_email(
    request: Request,
    data: VerifyEmailRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    language: Annotated[str, Depends(get_request_language)],
) -> Token:
    """
    Verify the user's email with the OTP code and return a JWT token.

    Wrong codes count against a 5-attempt ceiling; after that a resend is
    required. Expired codes are rejected with a prompt to resend.
    """
    return await verification_service.verify(db, data.email, data.otp, language)


@router.post(
    "/resend-otp",
    response_model=SignupResponse,
    summary="Resend verification OTP",
)
@rate_limit(auth_limiter)
async def resend_otp(
    request: Request,
    data: ResendOTPRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    language: Annotated[str, Depends(get_request_language)],
) -> SignupResponse:
    """
    Issue a new code (invalidating the previous one) after the 60 second
    cooldown. Resets the attempt counter.
    """
    return await verification_service.resend(db, data.email, language)


@router.post(
    "/login",
    response_model=Token,
    summary="Login and get access token",
)
@rate_limit(auth_limiter)
async def login(
    request: Request,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    db: Annotated[AsyncSession, Depends(get_db)],
    language: Annotated[str, Depends(get_request_language)],
) -> Token:
    """
    Authenticate with email (in the `username` field) and password.

    Unverified accounts get a fresh code and a 403.
    """
    user = await account_service.authenticate(db, form_data.username, form_data.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=translate("incorrect_credentials", language),
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_verified:
        fallback_code = await verification_service.send_login_code(db, user)
        detail = translate("email_not_verified", user.language.value)
        if fallback_code:
            detail = translate("code_fallback", user.language.value, code=fallback_code)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

    access_token = create_access_token(subject=user.id, role=user.role.value)
    return Token(access_token=access_token, token_type="bearer")


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    summary="Request password reset OTP",
)
@rate_limit(auth_limiter)
async def forgot_password(
    request: Request,
    data: ForgotPasswordRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    language: Annotated[str, Depends(get_request_language)],
) -> MessageResponse:
    """
    Email a 4-digit password reset code.

    The answer is the same whether or not the email is registered. Codes are
    spaced by the same 60 second cooldown as verification codes.
    """
    return await verification_service.request_password_reset(db, data.email, language)


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    summary="Reset password with OTP",
)
@rate_limit(auth_limiter)
async def reset_password(
    request: Request,
    data: ResetPasswordRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    language: Annotated[str, Depends(get_request_language)],
) -> MessageResponse:
    """
    **Flow:**
    1. Check the reset code (5 attempts, expired codes rejected)
    2. Store the new password hash
    3. Consume the code
    """
    return await verification_service.reset_password(
        db,
        data.email,
        data.otp,
        data.new_password,
        language,
    )
