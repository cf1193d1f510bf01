from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from stayhub.models.enums import TransactionType


class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    type: TransactionType
    amount: Decimal
    business_id: str
    booking_id: Optional[str] = None
    status: str
    created_at: datetime


class LedgerSummaryOut(BaseModel):
    """
    Platform financial figures, for one tenant or the whole marketplace.
    """

    model_config = ConfigDict(from_attributes=True)

    gtv: Decimal
    platform_commission: Decimal
    net_owner_revenue: Decimal
    subscription_revenue: Decimal
    ad_revenue: Decimal
    settled_value: Decimal
    pending_value: Decimal


class PlatformChargePayload(BaseModel):
    business_id: str
    type: TransactionType = Field(..., description="subscription or ad_promotion")
    amount: Decimal = Field(..., ge=0)
    actor: Optional[str] = None
