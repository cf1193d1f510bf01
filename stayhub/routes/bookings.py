from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session, sessionmaker

from stayhub.dependencies import get_session_factory
from stayhub.routes._runner import run_in_session
from stayhub.schemas.bookings import (
    AuditEntryOut,
    BookingCommand,
    BookingCreatePayload,
    BookingOut,
    PaymentVerificationPayload,
    PromotionPayload,
)
from stayhub.schemas.ledger import TransactionOut
from stayhub.services import reservations, settlement
from stayhub.services.pricing import apply_promotion

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/bookings", status_code=status.HTTP_201_CREATED, response_model=BookingOut)
async def create_booking(
    payload: BookingCreatePayload,
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    """
    Create a booking. Guests get a PENDING booking; the walk-in guest id
    creates a CONFIRMED, paid booking straight away.
    """

    def work(session: Session) -> BookingOut:
        booking = reservations.create_booking(
            session,
            business_id=payload.business_id,
            unit_id=payload.unit_id,
            guest_id=payload.guest_id,
            check_in=payload.check_in,
            check_out=payload.check_out,
            price_override=payload.price_override,
            notes=payload.notes,
            actor=payload.actor,
        )
        return BookingOut.model_validate(booking)

    return await run_in_session(factory, work, "create_booking")


@router.get("/bookings/{booking_id}", response_model=BookingOut)
async def read_booking(
    booking_id: str,
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    def work(session: Session) -> BookingOut:
        return BookingOut.model_validate(reservations.get_booking_or_raise(session, booking_id))

    return await run_in_session(factory, work, "read_booking")


@router.post("/bookings/{booking_id}/transitions", response_model=BookingOut)
async def transition_booking(
    booking_id: str,
    command: BookingCommand = Body(...),
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    """
    Apply one lifecycle action. The body is tagged by ``action``:
    approve, reject, cancel, check_in, check_out or reschedule.
    """

    def work(session: Session) -> BookingOut:
        return BookingOut.model_validate(reservations.transition(session, booking_id, command))

    return await run_in_session(factory, work, f"transition_{command.action}")


@router.put("/bookings/{booking_id}/payment", response_model=BookingOut)
async def set_payment(
    booking_id: str,
    payload: PaymentVerificationPayload,
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    def work(session: Session) -> BookingOut:
        booking = reservations.set_payment_verified(
            session,
            booking_id,
            payload.verified,
            payment_proof=payload.payment_proof,
            actor=payload.actor,
        )
        return BookingOut.model_validate(booking)

    return await run_in_session(factory, work, "set_payment_verified")


@router.post("/bookings/{booking_id}/promotion", response_model=BookingOut)
async def apply_promotion_code(
    booking_id: str,
    payload: PromotionPayload,
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    def work(session: Session) -> BookingOut:
        booking = apply_promotion(session, booking_id, payload.code, actor=payload.actor)
        return BookingOut.model_validate(booking)

    return await run_in_session(factory, work, "apply_promotion")


@router.get("/bookings/{booking_id}/history", response_model=list[AuditEntryOut])
async def read_history(
    booking_id: str,
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    """Audit trail of the booking, oldest entry first."""

    def work(session: Session) -> list[AuditEntryOut]:
        return [
            AuditEntryOut.model_validate(entry)
            for entry in reservations.booking_history(session, booking_id)
        ]

    return await run_in_session(factory, work, "booking_history")


@router.post("/bookings/{booking_id}/settlement", response_model=TransactionOut)
async def settle_booking(
    booking_id: str,
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    """Record the platform commission of a completed booking. Safe to retry."""

    def work(session: Session) -> TransactionOut:
        return TransactionOut.model_validate(settlement.settle_completed_booking(session, booking_id))

    return await run_in_session(factory, work, "settle_completed_booking")
