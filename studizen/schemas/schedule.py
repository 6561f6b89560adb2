"""
Schedule Schemas

Pydantic models for class schedule request/response validation.
"""

import uuid
from datetime import datetime, time
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from studizen.models.enums import Weekday


class ScheduleCreate(BaseModel):
    """Schema for creating a class schedule entry."""

    course_name: str = Field(..., min_length=1, max_length=255, description="Course name")
    day: Weekday = Field(..., description="Day of the week")
    start_time: time = Field(..., description="Start time (HH:MM)")
    end_time: time = Field(..., description="End time (HH:MM)")
    location: Optional[str] = Field(None, max_length=255)
    lecturer: Optional[str] = Field(None, max_length=255)

    @model_validator(mode="after")
    def end_after_start(self) -> "ScheduleCreate":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class ScheduleUpdate(BaseModel):
    """Schema for updating a class schedule entry. Only provided fields change."""

    course_name: Optional[str] = Field(None, min_length=1, max_length=255)
    day: Optional[Weekday] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    location: Optional[str] = Field(None, max_length=255)
    lecturer: Optional[str] = Field(None, max_length=255)


class ScheduleResponse(BaseModel):
    """Schema for a class schedule entry."""

    id: uuid.UUID
    course_name: str
    day: Weekday
    start_time: time
    end_time: time
    location: Optional[str] = None
    lecturer: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
