"""
Premium Service

Plan catalogue, subscription upsert and premium status checks.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy import and_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studizen.core.exceptions import PermissionDeniedError, PersistenceError
from studizen.models.enums import PlanType
from studizen.models.premium_subscription import PremiumSubscription
from studizen.models.profile import Profile


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Plan:
    """A purchasable premium plan. Prices are in IDR."""
    plan_type: PlanType
    price: Decimal
    duration_months: int


PLANS: dict[PlanType, Plan] = {
    PlanType.MONTHLY: Plan(PlanType.MONTHLY, Decimal("20000"), 1),
    PlanType.QUARTERLY: Plan(PlanType.QUARTERLY, Decimal("45000"), 3),
    PlanType.YEARLY: Plan(PlanType.YEARLY, Decimal("60000"), 12),
}


def compute_end_date(start: datetime, plan: Plan) -> datetime:
    """Calendar-month arithmetic: Jan 31 + 1 month is the last day of February."""
    return start + relativedelta(months=plan.duration_months)


async def get_active_subscription(
    db: AsyncSession,
    user_id,
    now: Optional[datetime] = None,
) -> Optional[PremiumSubscription]:
    """Return the active subscription with the latest end date, if any."""
    now = now or datetime.now(timezone.utc)
    try:
        result = await db.execute(
            select(PremiumSubscription)
            .where(
                and_(
                    PremiumSubscription.user_id == user_id,
                    PremiumSubscription.is_active == True,  # noqa: E712
                    PremiumSubscription.end_date > now,
                )
            )
            .order_by(PremiumSubscription.end_date.desc())
            .limit(1)
        )
    except SQLAlchemyError as exc:
        raise PersistenceError() from exc
    return result.scalar_one_or_none()


async def is_premium(db: AsyncSession, user_id) -> bool:
    return await get_active_subscription(db, user_id) is not None


async def require_premium(db: AsyncSession, user: Profile) -> None:
    """
    Raises:
        PermissionDeniedError: If the user has no current subscription.
    """
    if not await is_premium(db, user.id):
        raise PermissionDeniedError("premium_required", language=user.language.value)


async def subscribe(
    db: AsyncSession,
    user: Profile,
    plan_type: PlanType,
    now: Optional[datetime] = None,
) -> PremiumSubscription:
    """
    Activate or renew a plan for `user`.

    One row exists per (user, plan type); renewing overwrites its price and
    period starting from now.
    """
    plan = PLANS[plan_type]
    now = now or datetime.now(timezone.utc)

    try:
        result = await db.execute(
            select(PremiumSubscription).where(
                and_(
                    PremiumSubscription.user_id == user.id,
                    PremiumSubscription.plan_type == plan_type,
                )
            )
        )
        subscription = result.scalar_one_or_none()

        if subscription is None:
            subscription = PremiumSubscription(user_id=user.id, plan_type=plan_type)
            db.add(subscription)

        subscription.price = plan.price
        subscription.start_date = now
        subscription.end_date = compute_end_date(now, plan)
        subscription.is_active = True

        await db.commit()
        await db.refresh(subscription)
    except SQLAlchemyError as exc:
        await db.rollback()
        raise PersistenceError() from exc

    logger.info(f"User {user.id} subscribed to {plan_type.value} until {subscription.end_date.isoformat()}")
    return subscription
