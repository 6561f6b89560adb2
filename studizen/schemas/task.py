"""
Task Schemas

Pydantic models for task and subtask request/response validation.
"""

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from studizen.models.enums import TaskPriority, TaskStatus


class TaskCreate(BaseModel):
    """Schema for creating a task."""

    title: str = Field(..., min_length=1, max_length=255, description="Task title")
    description: Optional[str] = Field(None, description="Task details")
    course_name: str = Field(..., min_length=1, max_length=255)
    lecturer_name: str = Field(..., min_length=1, max_length=255)
    deadline: date = Field(..., description="Due date")
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    estimated_hours: int = Field(1, ge=1, le=1000)


class TaskUpdate(BaseModel):
    """Schema for updating a task. Only provided fields change."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    course_name: Optional[str] = Field(None, min_length=1, max_length=255)
    lecturer_name: Optional[str] = Field(None, min_length=1, max_length=255)
    deadline: Optional[date] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    estimated_hours: Optional[int] = Field(None, ge=1, le=1000)


class SubtaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)


class SubtaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    is_completed: Optional[bool] = None


class SubtaskResponse(BaseModel):
    id: uuid.UUID
    title: str
    is_completed: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class TaskResponse(BaseModel):
    """Schema for a task with derived overdue flag."""

    id: uuid.UUID
    title: str
    description: Optional[str] = None
    course_name: str
    lecturer_name: str
    deadline: date
    status: TaskStatus
    priority: TaskPriority
    estimated_hours: int
    is_overdue: bool = False
    subtasks: list[SubtaskResponse] = []
    created_at: datetime

    model_config = {"from_attributes": True}
