from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from stayhub.models.enums import AdjustmentType, RuleScope


class PromotionCreatePayload(BaseModel):
    """
    Schema for publishing a voucher code. The code is stored upper-case.
    """

    code: str = Field(..., min_length=1, max_length=64)
    type: AdjustmentType
    discount_value: Decimal = Field(..., gt=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: Optional[str] = None
    actor: Optional[str] = None


class PromotionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    business_id: str
    code: str
    type: AdjustmentType
    discount_value: Decimal
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: bool
    description: Optional[str] = None


class PricingRuleCreatePayload(BaseModel):
    name: str = Field(..., min_length=1)
    scope: RuleScope
    adjustment_type: AdjustmentType
    value: Decimal = Field(..., description="Signed: negative discounts, positive marks up")
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    actor: Optional[str] = None


class PricingRuleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    business_id: str
    name: str
    scope: RuleScope
    adjustment_type: AdjustmentType
    value: Decimal
    is_active: bool
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class TogglePayload(BaseModel):
    actor: Optional[str] = None
