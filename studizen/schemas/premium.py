"""
Premium Schemas

Pydantic models for plans and subscriptions.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from studizen.models.enums import PlanType


class PlanResponse(BaseModel):
    plan_type: PlanType
    price: Decimal
    duration_months: int

    model_config = {"from_attributes": True}


class SubscribeRequest(BaseModel):
    plan_type: PlanType


class SubscriptionResponse(BaseModel):
    id: uuid.UUID
    plan_type: PlanType
    price: Decimal
    start_date: datetime
    end_date: datetime
    is_active: bool

    model_config = {"from_attributes": True}


class PremiumStatusResponse(BaseModel):
    is_premium: bool
    subscription: Optional[SubscriptionResponse] = None
    message: Optional[str] = None
