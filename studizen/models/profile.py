"""
Profile Model

Account identity with credentials, verification state, role and display
preferences.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, Enum, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studizen.core.database import Base
from studizen.models.enums import Language, Theme, UserRole, enum_values

if TYPE_CHECKING:
    from studizen.models.schedule import ClassSchedule
    from studizen.models.task import Task
    from studizen.models.premium_subscription import PremiumSubscription


class Profile(Base):
    """
    Student or administrator account.

    Attributes:
        id: UUID primary key, also the account reference on OTP records.
        email: Unique email address, stored lower-cased.
        username: Unique handle chosen at registration.
        password_hash: bcrypt hash.
        is_verified: Set once the email OTP has been confirmed.
        role: STUDENT or ADMIN; the only source of admin authorization.
        language: Display language for messages and emails.
        theme: UI theme preference.
    """

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
    )
    full_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    is_verified: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    verified_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    provider: Mapped[str] = mapped_column(
        String(50),
        default="email",
        nullable=False,
    )
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role", create_constraint=True),
        default=UserRole.STUDENT,
        nullable=False,
    )
    language: Mapped[Language] = mapped_column(
        Enum(Language, name="language", create_constraint=True, values_callable=enum_values),
        default=Language.EN,
        nullable=False,
    )
    theme: Mapped[Theme] = mapped_column(
        Enum(Theme, name="theme", create_constraint=True, values_callable=enum_values),
        default=Theme.SYSTEM,
        nullable=False,
    )
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

    # Relationships
    schedules: Mapped[list["ClassSchedule"]] = relationship(
        "ClassSchedule",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    tasks: Mapped[list["Task"]] = relationship(
        "Task",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    subscriptions: Mapped[list["PremiumSubscription"]] = relationship(
        "PremiumSubscription",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, email={self.email}, role={self.role})>"
