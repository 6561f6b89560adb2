"""
OTP Verification Model

One issued email passcode.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from studizen.core.database import Base
from studizen.models.enums import OTPPurpose


class OTPVerification(Base):
    """
    OTP record for email verification or password reset.

    A record is live while `is_used` is false and `expires_at` has not
    passed. `is_used` flips to true exactly once, either when the code is
    consumed or when a newer code for the same email supersedes it.

    Attributes:
        id: UUID primary key.
        user_id: Account the code authenticates (nullable before linkage).
        email: Destination address, lower-cased.
        otp_code: 4-digit numeric code.
        purpose: EMAIL_VERIFICATION or PASSWORD_RESET; codes never cross purposes.
        expires_at: Creation time + OTP_EXPIRE_MINUTES.
        is_used: Consumed or superseded flag.
        created_at: Creation timestamp.
    """

    __tablename__ = "otp_verifications"

    __table_args__ = (
        Index("ix_otp_verifications_lookup", "email", "purpose", "otp_code", "is_used"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=True,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
    )
    otp_code: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
    )
    purpose: Mapped[OTPPurpose] = mapped_column(
        Enum(OTPPurpose, name="otp_purpose", create_constraint=True),
        default=OTPPurpose.EMAIL_VERIFICATION,
        nullable=False,
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    is_used: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<OTPVerification(id={self.id}, email={self.email}, is_used={self.is_used})>"
