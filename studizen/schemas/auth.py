"""
Auth Schemas

Pydantic models for registration, verification, login and password reset.
"""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, model_validator

from studizen.models.enums import Language


class SignupRequest(BaseModel):
    """Schema for account registration."""

    email: EmailStr = Field(..., description="User's email address")
    username: str = Field(..., min_length=3, max_length=50, description="Username (min 3 characters)")
    password: str = Field(..., min_length=6, description="Password (min 6 characters)")
    confirm_password: str = Field(..., description="Must match password")
    full_name: Optional[str] = Field(None, max_length=255, description="Display name (defaults to username)")
    language: Optional[Language] = Field(None, description="Preferred display language")

    @model_validator(mode="after")
    def passwords_match(self) -> "SignupRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class SignupResponse(BaseModel):
    """
    Schema for signup and resend responses.

    `fallback_code` is only set when the verification email could not be
    sent; the client shows it to the user instead.
    """

    message: str
    email: str
    requires_verification: bool = True
    fallback_code: Optional[str] = None
    cooldown_seconds: Optional[int] = None
    expires_in_seconds: Optional[int] = None


class VerifyEmailRequest(BaseModel):
    """Schema for email verification request."""

    email: EmailStr = Field(..., description="User's email address")
    otp: str = Field(..., min_length=4, max_length=4, pattern=r"^[0-9]{4}$", description="4-digit OTP code")


class ResendOTPRequest(BaseModel):
    """Schema for resend OTP request."""

    email: EmailStr = Field(..., description="User's email address")


class ForgotPasswordRequest(BaseModel):
    """Schema for forgot password request."""

    email: EmailStr = Field(..., description="User's email address")


class ResetPasswordRequest(BaseModel):
    """Schema for reset password request."""

    email: EmailStr = Field(..., description="User's email address")
    otp: str = Field(..., min_length=4, max_length=4, pattern=r"^[0-9]{4}$", description="4-digit reset code")
    new_password: str = Field(..., min_length=6, description="New password (min 6 characters)")
    confirm_password: str = Field(..., description="Must match new_password")

    @model_validator(mode="after")
    def passwords_match(self) -> "ResetPasswordRequest":
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str
