"""
Request and response schemas for bookings.

Lifecycle actions are a tagged union keyed by ``action`` so one endpoint
(and one service entry point) accepts every transition.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from stayhub.models.enums import BookingStatus


class GuestIdentity(BaseModel):
    """Identity captured at the desk during digital check-in."""

    identity_number: str = Field(..., min_length=1, description="KTP/passport number")
    nationality: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: Optional[str] = Field(None)


class ApproveAction(BaseModel):
    action: Literal["approve"] = "approve"
    actor: Optional[str] = Field(None, description="Staff or owner performing the action")


class RejectAction(BaseModel):
    action: Literal["reject"] = "reject"
    actor: Optional[str] = None
    reason: Optional[str] = None


class CancelAction(BaseModel):
    action: Literal["cancel"] = "cancel"
    actor: Optional[str] = None
    reason: Optional[str] = None


class CheckInAction(BaseModel):
    action: Literal["check_in"] = "check_in"
    actor: Optional[str] = None
    identity: GuestIdentity


class CheckOutAction(BaseModel):
    action: Literal["check_out"] = "check_out"
    actor: Optional[str] = None
    damage_note: Optional[str] = Field(None, description="Damage or loss found at inspection")


class RescheduleAction(BaseModel):
    action: Literal["reschedule"] = "reschedule"
    actor: Optional[str] = None
    check_in: date
    check_out: date
    auth_reference: str = Field(
        ..., min_length=1, description="Reference to the owner's out-of-band authorisation"
    )
    reprice: bool = Field(False, description="Recompute the total for the new dates")

    @model_validator(mode="after")
    def _reference_not_blank(self) -> "RescheduleAction":
        if not self.auth_reference.strip():
            raise ValueError("auth_reference must not be blank")
        return self


BookingCommand = Annotated[
    Union[
        ApproveAction,
        RejectAction,
        CancelAction,
        CheckInAction,
        CheckOutAction,
        RescheduleAction,
    ],
    Field(discriminator="action"),
]


class BookingCreatePayload(BaseModel):
    business_id: str
    unit_id: str
    guest_id: str = Field(..., description="Guest id, or the walk-in sentinel for desk bookings")
    check_in: date
    check_out: date
    price_override: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None
    actor: Optional[str] = None


class PaymentVerificationPayload(BaseModel):
    verified: bool
    payment_proof: Optional[str] = None
    actor: Optional[str] = None


class PromotionPayload(BaseModel):
    code: str = Field(..., min_length=1)
    actor: Optional[str] = None


class BookingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    business_id: str
    unit_id: str
    guest_id: str
    check_in: date
    check_out: date
    total_price: Decimal
    status: BookingStatus
    verified_payment: bool
    payment_proof: Optional[str] = None
    notes: Optional[str] = None
    promotion_code: Optional[str] = None
    damage_note: Optional[str] = None
    auth_reference: Optional[str] = None
    guest_identity: Optional[dict[str, Any]] = None
    created_at: datetime


class AuditEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    action: str
    actor: Optional[str] = None
    message: str
    details: dict[str, Any]
    created_at: datetime
