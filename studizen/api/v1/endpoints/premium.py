"""
Premium Routes

Plan catalogue, subscription status and checkout.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from studizen.api.deps import get_current_active_user
from studizen.core.database import get_db
from studizen.core.i18n import translate
from studizen.models.profile import Profile
from studizen.schemas.premium import (
    PlanResponse,
    PremiumStatusResponse,
    SubscribeRequest,
    SubscriptionResponse,
)
from studizen.services import premium_service


router = APIRouter(prefix="/premium", tags=["Premium"])


@router.get(
    "/plans",
    response_model=list[PlanResponse],
    summary="List premium plans",
)
async def list_plans() -> list[PlanResponse]:
    """Available plans with their price in IDR and duration in months."""
    return [
        PlanResponse(
            plan_type=plan.plan_type,
            price=plan.price,
            duration_months=plan.duration_months,
        )
        for plan in premium_service.PLANS.values()
    ]


@router.get(
    "/status",
    response_model=PremiumStatusResponse,
    summary="Get premium status",
)
async def get_status(
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PremiumStatusResponse:
    subscription = await premium_service.get_active_subscription(db, current_user.id)
    if subscription is None:
        return PremiumStatusResponse(is_premium=False)
    return PremiumStatusResponse(
        is_premium=True,
        subscription=SubscriptionResponse.model_validate(subscription),
    )


@router.post(
    "/subscribe",
    response_model=PremiumStatusResponse,
    summary="Subscribe to a plan",
)
async def subscribe(
    request_data: SubscribeRequest,
    current_user: Annotated[Profile, Depends(get_current_active_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PremiumStatusResponse:
    """
    Activate the chosen plan starting now. Subscribing again to the same
    plan renews it in place.
    """
    subscription = await premium_service.subscribe(db, current_user, request_data.plan_type)
    return PremiumStatusResponse(
        is_premium=True,
        subscription=SubscriptionResponse.model_validate(subscription),
        message=translate("subscription_success", current_user.language.value),
    )
