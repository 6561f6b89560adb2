"""
Admin Schemas

Read models for the admin record listings and OTP housekeeping.
"""

import uuid
from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel

from studizen.models.enums import UserRole
from studizen.schemas.schedule import ScheduleResponse
from studizen.schemas.task import TaskResponse


T = TypeVar("T")


class AdminUserResponse(BaseModel):
    id: uuid.UUID
    email: str
    username: str
    full_name: str | None = None
    role: UserRole
    is_verified: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class AdminScheduleResponse(ScheduleResponse):
    user_id: uuid.UUID


class AdminTaskResponse(TaskResponse):
    user_id: uuid.UUID


class Page(BaseModel, Generic[T]):
    """Paginated listing."""

    items: list[T]
    total: int
    page: int
    size: int


class OTPPurgeResponse(BaseModel):
    """Result of an OTP housekeeping run."""

    deleted: int
    older_than_hours: int
