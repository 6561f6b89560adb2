"""
Task Models

Assignments with status, priority and (for premium users) subtasks.
"""

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, CheckConstraint, Date, DateTime, Enum, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studizen.core.database import Base
from studizen.models.enums import TaskPriority, TaskStatus, enum_values

if TYPE_CHECKING:
    from studizen.models.profile import Profile


class Task(Base):
    """
    Assignment owned by a single user.

    Attributes:
        id: UUID primary key.
        user_id: Owner.
        title: Short title.
        description: Optional details.
        course_name: Course the assignment belongs to.
        lecturer_name: Lecturer who set it.
        deadline: Due date.
        status: pending, in_progress or completed.
        priority: high, medium or low.
        estimated_hours: Estimated effort, at least 1.
    """

    __tablename__ = "tasks"

    __table_args__ = (
        CheckConstraint("estimated_hours >= 1", name="ck_tasks_estimated_hours"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    course_name: Mapped[str] = mapped_column(String(255), nullable=False)
    lecturer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    deadline: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[TaskStatus] = mapped_column(
        Enum(TaskStatus, name="task_status", create_constraint=True, values_callable=enum_values),
        default=TaskStatus.PENDING,
        nullable=False,
    )
    priority: Mapped[TaskPriority] = mapped_column(
        Enum(TaskPriority, name="task_priority", create_constraint=True, values_callable=enum_values),
        default=TaskPriority.MEDIUM,
        nullable=False,
    )
    estimated_hours: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    user: Mapped["Profile"] = relationship("Profile", back_populates="tasks")
    subtasks: Mapped[list["Subtask"]] = relationship(
        "Subtask",
        back_populates="task",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="Subtask.created_at",
    )

    def overdue_on(self, today: date) -> bool:
        """A task is overdue once its deadline has passed and it is not completed."""
        return self.deadline < today and self.status != TaskStatus.COMPLETED

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title={self.title}, status={self.status})>"


class Subtask(Base):
    """Checklist item under a task."""

    __tablename__ = "subtasks"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    task_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("tasks.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    task: Mapped["Task"] = relationship("Task", back_populates="subtasks")

    def __repr__(self) -> str:
        return f"<Subtask(id={self.id}, task_id={self.task_id}, done={self.is_completed})>"
