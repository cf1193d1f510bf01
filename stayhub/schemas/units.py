from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from stayhub.models.enums import UnitStatus


class UnitCreatePayload(BaseModel):
    """
    Schema for registering a unit under a business.
    """

    name: str = Field(..., min_length=1, description="Room or property name")
    price: Decimal = Field(..., ge=0, description="Nightly base rate in Rupiah")
    type: Optional[str] = Field(None, description="Room type, e.g. Deluxe, Suite")
    capacity: int = Field(1, ge=1)
    amenities: list[str] = Field(default_factory=list)
    actor: Optional[str] = None


class UnitStatusPayload(BaseModel):
    status: UnitStatus
    actor: Optional[str] = None


class UnitOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    business_id: str
    name: str
    type: Optional[str] = None
    price: Decimal
    capacity: int
    amenities: list[str]
    status: UnitStatus
    available: bool


class RuleAdjustmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rule_id: Optional[int] = None
    name: str
    amount: Decimal


class QuoteOut(BaseModel):
    """
    Price breakdown for a prospective stay.
    """

    model_config = ConfigDict(from_attributes=True)

    nights: int
    room_total: Decimal
    adjustments: list[RuleAdjustmentOut]
    adjusted_total: Decimal
    service_fee: Decimal
    grand_total: Decimal
