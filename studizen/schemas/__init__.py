"""
Studizen Backend - Schemas Module

Pydantic models for request/response validation.
"""

from studizen.schemas.auth import (
    ForgotPasswordRequest,
    MessageResponse,
    ResendOTPRequest,
    ResetPasswordRequest,
    SignupRequest,
    SignupResponse,
    VerifyEmailRequest,
)
from studizen.schemas.token import Token, TokenPayload
from studizen.schemas.user import (
    AccountDelete,
    EmailChange,
    PasswordChange,
    PreferencesUpdate,
    ProfileResponse,
    ProfileUpdate,
)
from studizen.schemas.schedule import ScheduleCreate, ScheduleResponse, ScheduleUpdate
from studizen.schemas.task import (
    SubtaskCreate,
    SubtaskResponse,
    SubtaskUpdate,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)
from studizen.schemas.premium import (
    PlanResponse,
    PremiumStatusResponse,
    SubscribeRequest,
    SubscriptionResponse,
)

__all__ = [
    # Auth
    "SignupRequest",
    "SignupResponse",
    "VerifyEmailRequest",
    "ResendOTPRequest",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "MessageResponse",
    # Token
    "Token",
    "TokenPayload",
    # Profile
    "ProfileResponse",
    "ProfileUpdate",
    "PreferencesUpdate",
    "PasswordChange",
    "EmailChange",
    "AccountDelete",
    # Schedule
    "ScheduleCreate",
    "ScheduleUpdate",
    "ScheduleResponse",
    # Task
    "TaskCreate",
    "TaskUpdate",
    "TaskResponse",
    "SubtaskCreate",
    "SubtaskUpdate",
    "SubtaskResponse",
    # Premium
    "PlanResponse",
    "SubscribeRequest",
    "SubscriptionResponse",
    "PremiumStatusResponse",
]
