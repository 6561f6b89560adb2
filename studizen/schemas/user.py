"""
User Schemas

Pydantic models for profile request/response validation.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, model_validator

from studizen.models.enums import Language, Theme, UserRole


class ProfileResponse(BaseModel):
    """Schema for profile response (excludes password hash)."""

    id: uuid.UUID
    email: str
    username: str
    full_name: Optional[str] = None
    is_verified: bool
    role: UserRole
    language: Language
    theme: Theme
    is_premium: bool = False
    created_at: datetime

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    """Schema for updating profile fields."""

    full_name: Optional[str] = Field(None, min_length=1, max_length=255, description="New display name")
    username: Optional[str] = Field(None, min_length=3, max_length=50, description="New username")


class PreferencesUpdate(BaseModel):
    """Schema for display preferences."""

    language: Optional[Language] = Field(None, description="Display language (en, id, zh)")
    theme: Optional[Theme] = Field(None, description="UI theme (light, dark, system)")


class PasswordChange(BaseModel):
    """Schema for changing the password while logged in."""

    current_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(..., min_length=6, description="New password (min 6 characters)")
    confirm_password: str = Field(..., description="Must match new_password")

    @model_validator(mode="after")
    def passwords_match(self) -> "PasswordChange":
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class EmailChange(BaseModel):
    """Schema for moving the account to a new email address."""

    new_email: EmailStr = Field(..., description="New email address")
    password: str = Field(..., min_length=1, description="Current password")


class AccountDelete(BaseModel):
    """Schema for permanent account deletion."""

    password: str = Field(..., min_length=1, description="Current password")
