"""
Premium Subscription Model

One row per (user, plan type); renewing a plan overwrites its row.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Numeric, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studizen.core.database import Base
from studizen.models.enums import PlanType, enum_values

if TYPE_CHECKING:
    from studizen.models.profile import Profile


class PremiumSubscription(Base):
    """
    Premium plan purchase.

    Attributes:
        id: UUID primary key.
        user_id: Subscriber.
        plan_type: monthly, quarterly or yearly.
        price: Price paid in IDR.
        start_date: Activation time.
        end_date: Expiry; the subscription counts only while end_date > now.
        is_active: Cleared when a subscription is cancelled.
    """

    __tablename__ = "premium_subscriptions"

    __table_args__ = (
        UniqueConstraint("user_id", "plan_type", name="uq_premium_user_plan"),
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
    plan_type: Mapped[PlanType] = mapped_column(
        Enum(
            PlanType,
            name="plan_type",
            create_constraint=True,
            values_callable=enum_values,
        ),
        nullable=False,
    )
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
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

    user: Mapped["Profile"] = relationship("Profile", back_populates="subscriptions")

    def is_current(self, now: datetime) -> bool:
        """Active and not yet past its end date."""
        return self.is_active and self.end_date > now

    def __repr__(self) -> str:
        return f"<PremiumSubscription(user_id={self.user_id}, plan={self.plan_type}, end={self.end_date})>"
