from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from stayhub.models.enums import BusinessStatus, SubscriptionPlan, SystemModule


class BusinessStatusPayload(BaseModel):
    """
    Schema for an admin approval, rejection, suspension or reinstatement.
    """

    status: BusinessStatus
    actor: Optional[str] = Field(None, description="Admin performing the change")


class PlanChangePayload(BaseModel):
    plan: SubscriptionPlan
    actor: Optional[str] = None


class FeaturedRequestPayload(BaseModel):
    actor: Optional[str] = None


class FeaturedDecisionPayload(BaseModel):
    approve: bool
    price: Optional[Decimal] = Field(None, ge=0, description="Boost fee, defaults to the platform listing price")
    actor: Optional[str] = None


class PenaltyPayload(BaseModel):
    reason: str = Field(..., min_length=1)
    actor: Optional[str] = None


class BusinessOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    category: str
    subscription: SubscriptionPlan
    subscription_expiry: Optional[date] = None
    is_trial: bool
    status: BusinessStatus
    is_featured: bool
    is_featured_requested: bool
    penalty_count: int


class EntitlementsOut(BaseModel):
    """
    Modules, unit quota and commission rate a tenant currently gets.

    ``unit_quota`` is null for unlimited plans.
    """

    model_config = ConfigDict(from_attributes=True)

    plan: SubscriptionPlan
    modules: list[SystemModule]
    unit_quota: Optional[int] = None
    commission_rate: Decimal
