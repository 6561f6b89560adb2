"""
Class Schedule Model

A recurring weekly lecture slot.
"""

import uuid
from datetime import datetime, time
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, String, Time, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studizen.core.database import Base
from studizen.models.enums import Weekday

if TYPE_CHECKING:
    from studizen.models.profile import Profile


class ClassSchedule(Base):
    """
    Weekly class slot owned by a single user.

    Attributes:
        id: UUID primary key.
        user_id: Owner.
        course_name: Name of the course.
        day: Day of the week.
        start_time: Lecture start.
        end_time: Lecture end, strictly after start_time.
        location: Room or building.
        lecturer: Lecturer name.
    """

    __tablename__ = "class_schedules"

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_class_schedules_time_range"),
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
    course_name: Mapped[str] = mapped_column(String(255), nullable=False)
    day: Mapped[Weekday] = mapped_column(
        Enum(Weekday, name="weekday", create_constraint=True),
        nullable=False,
    )
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    lecturer: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
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

    user: Mapped["Profile"] = relationship("Profile", back_populates="schedules")

    def __repr__(self) -> str:
        return f"<ClassSchedule(id={self.id}, course={self.course_name}, day={self.day})>"
