"""
Reservation lifecycle service.

Creates bookings and drives them through the state machine. Each public
function is one atomic unit of work keyed by booking id: it takes the
per-booking lock, loads the row, validates, mutates, appends audit entries
and commits once.
"""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

import structlog
from sqlalchemy.orm import Session

from stayhub.config import REQUIRE_PAYMENT_FOR_CHECKIN, WALKIN_GUEST_ID
from stayhub.db.readers.bookings import get_booking, get_booking_for_update, list_bookings
from stayhub.db.readers.businesses import get_business, get_category_modules
from stayhub.db.readers.ledger import get_audit_entries
from stayhub.db.readers.pricing import get_promotion
from stayhub.db.readers.units import get_unit
from stayhub.db.session import commit_or_conflict
from stayhub.db.writers.audit import log_audit
from stayhub.errors import (
    BookingNotFound,
    BusinessNotFound,
    InvalidTransition,
    PaymentNotVerified,
    UnitNotFound,
    UnitUnavailable,
)
from stayhub.metrics import booking_transitions, bookings_created
from stayhub.models.bookings import Booking
from stayhub.models.enums import BookingStatus, SystemModule, UnitStatus
from stayhub.models.ledger import AuditLog
from stayhub.schemas.bookings import (
    BookingCommand,
    CheckInAction,
    CheckOutAction,
    RejectAction,
    RescheduleAction,
)
from stayhub.services.entitlements import ensure_module_enabled, resolve_entitlements
from stayhub.services.locks import entity_lock
from stayhub.services.pricing import count_nights, promotion_discount, quote_for_unit
from stayhub.services.settlement import record_commission
from stayhub.services.state_machine import BookingAction, next_status

logger = structlog.get_logger(__name__)

UNBOOKABLE_STATES = frozenset({UnitStatus.BLOCKED, UnitStatus.MAINTENANCE})


def is_walk_in(guest_id: str) -> bool:
    return guest_id == WALKIN_GUEST_ID


def create_booking(
    session: Session,
    business_id: str,
    unit_id: str,
    guest_id: str,
    check_in: date,
    check_out: date,
    price_override: Optional[Decimal] = None,
    notes: Optional[str] = None,
    actor: Optional[str] = None,
) -> Booking:
    """
    Create a booking from guest self-service or a desk walk-in.

    Guest bookings enter PENDING and unpaid. Walk-ins (``guest_id`` equal to
    the walk-in sentinel) enter CONFIRMED with payment verified, since they
    settle at the desk. The total is ``price_override`` when given, else the
    quoted grand total.

    Raises:
        BusinessNotFound: unknown business
        UnitNotFound: unknown unit, or unit owned by another business
        InvalidDateRange: check-out not after check-in
        UnitUnavailable: unit is blocked, in maintenance or not public
        ModuleNotEnabled: the business category has no booking module
    """
    business = get_business(session, business_id)
    if business is None:
        raise BusinessNotFound(business_id)

    unit = get_unit(session, unit_id)
    if unit is None or unit.business_id != business_id:
        raise UnitNotFound(unit_id)

    count_nights(check_in, check_out)

    if not unit.available or unit.status in UNBOOKABLE_STATES:
        raise UnitUnavailable(f"Unit {unit_id} is not available for booking ({unit.status.value})")

    entitlements = resolve_entitlements(business, get_category_modules(session, business.category))
    ensure_module_enabled(entitlements, SystemModule.BOOKING)

    if price_override is not None:
        total = Decimal(str(price_override))
    else:
        total = quote_for_unit(session, business, unit.price, check_in, check_out).grand_total

    walk_in = is_walk_in(guest_id)
    prefix = "WALK" if walk_in else "BK"
    booking = Booking(
        id=f"{prefix}-{uuid.uuid4().hex[:10].upper()}",
        business_id=business_id,
        unit_id=unit_id,
        guest_id=guest_id,
        check_in=check_in,
        check_out=check_out,
        total_price=max(Decimal(0), total),
        status=BookingStatus.CONFIRMED if walk_in else BookingStatus.PENDING,
        verified_payment=walk_in,
        notes=notes if notes is not None else ("Direct Walk-In" if walk_in else None),
    )
    session.add(booking)
    log_audit(
        session,
        "booking",
        booking.id,
        "create",
        f"Booking created as {booking.status.value}",
        actor=actor,
        details={
            "status": booking.status.value,
            "walk_in": walk_in,
            "total_price": str(booking.total_price),
            "price_override": price_override is not None,
        },
    )
    commit_or_conflict(session, "booking", booking.id)

    channel = "walk_in" if walk_in else "guest"
    bookings_created.labels(channel=channel).inc()
    logger.info(
        "booking_created",
        booking_id=booking.id,
        business_id=business_id,
        unit_id=unit_id,
        channel=channel,
        total_price=str(booking.total_price),
    )
    return booking


def _check_in(session: Session, booking: Booking, command: CheckInAction) -> dict:
    if REQUIRE_PAYMENT_FOR_CHECKIN and not booking.verified_payment:
        raise PaymentNotVerified(f"Booking {booking.id} must have verified payment before check-in")
    booking.guest_identity = command.identity.model_dump()
    return {"nationality": command.identity.nationality}


def _check_out(session: Session, booking: Booking, command: CheckOutAction) -> dict:
    booking.damage_note = command.damage_note
    unit = get_unit(session, booking.unit_id)
    if unit is not None:
        # Unit must go through housekeeping before it is bookable again
        unit.status = UnitStatus.DIRTY
        unit.available = False
        log_audit(
            session,
            "unit",
            unit.id,
            "mark_dirty",
            f"Unit released by booking {booking.id}; awaiting cleaning",
            actor=command.actor,
        )
    return {"damage_note": command.damage_note} if command.damage_note else {}


def _reschedule(session: Session, booking: Booking, command: RescheduleAction) -> dict:
    count_nights(command.check_in, command.check_out)
    details = {
        "previous": [booking.check_in.isoformat(), booking.check_out.isoformat()],
        "new": [command.check_in.isoformat(), command.check_out.isoformat()],
        "auth_reference": command.auth_reference,
    }
    if command.reprice:
        unit = get_unit(session, booking.unit_id)
        business = get_business(session, booking.business_id)
        if unit is None or business is None:
            raise UnitNotFound(booking.unit_id)
        quoted = quote_for_unit(session, business, unit.price, command.check_in, command.check_out)
        details["previous_total"] = str(booking.total_price)
        booking.total_price = quoted.grand_total
        if booking.promotion_code is not None:
            details.update(_reapply_promotion(session, booking))
        details["new_total"] = str(booking.total_price)

    booking.check_in = command.check_in
    booking.check_out = command.check_out
    booking.auth_reference = command.auth_reference
    return details


def _reapply_promotion(session: Session, booking: Booking) -> dict:
    # A granted promotion stays with the booking even if its window has since closed
    promotion = get_promotion(session, booking.business_id, booking.promotion_code)
    if promotion is None:
        dropped = booking.promotion_code
        booking.promotion_code = None
        logger.warning("promotion_dropped_on_reprice", booking_id=booking.id, code=dropped)
        return {"promotion_dropped": dropped}
    discount = promotion_discount(booking.total_price, promotion)
    booking.total_price = max(Decimal(0), booking.total_price - discount)
    return {"promotion_code": promotion.code, "discount": str(discount)}


def _reject(session: Session, booking: Booking, command: RejectAction) -> dict:
    return {"reason": command.reason} if command.reason else {}


def _no_side_effects(session: Session, booking: Booking, command: BookingCommand) -> dict:
    return {}


_HANDLERS: dict[BookingAction, Callable[..., dict]] = {
    BookingAction.APPROVE: _no_side_effects,
    BookingAction.REJECT: _reject,
    BookingAction.CANCEL: _reject,
    BookingAction.CHECK_IN: _check_in,
    BookingAction.CHECK_OUT: _check_out,
    BookingAction.RESCHEDULE: _reschedule,
}


def transition(session: Session, booking_id: str, command: BookingCommand) -> Booking:
    """
    Apply one lifecycle action to a booking.

    Args:
        session: Active ORM session
        booking_id: Booking to transition
        command: One of the tagged booking actions

    Returns:
        Booking: the committed booking

    Raises:
        BookingNotFound: unknown booking
        InvalidTransition: action not allowed from the current state
        PaymentNotVerified: check-in attempted on an unpaid booking
        InvalidDateRange: reschedule to an empty or inverted stay
        ConcurrentModification: another writer committed first
    """
    action = BookingAction(command.action)

    with entity_lock("booking", booking_id):
        booking = get_booking_for_update(session, booking_id)
        if booking is None:
            raise BookingNotFound(booking_id)

        previous = booking.status
        try:
            target = next_status(previous, action)
            details = _HANDLERS[action](session, booking, command)
        except InvalidTransition:
            booking_transitions.labels(action=action.value, result="rejected").inc()
            session.rollback()
            raise
        except Exception:
            session.rollback()
            raise

        booking.status = target
        log_audit(
            session,
            "booking",
            booking.id,
            action.value,
            f"{action.value}: {previous.value} -> {target.value}",
            actor=command.actor,
            details={"from": previous.value, "to": target.value, **details},
        )

        if target is BookingStatus.COMPLETED:
            record_commission(session, booking)

        commit_or_conflict(session, "booking", booking_id)

    booking_transitions.labels(action=action.value, result="ok").inc()
    logger.info(
        "booking_transitioned",
        booking_id=booking_id,
        action=action.value,
        from_status=previous.value,
        to_status=target.value,
    )
    return booking


def set_payment_verified(
    session: Session,
    booking_id: str,
    verified: bool,
    payment_proof: Optional[str] = None,
    actor: Optional[str] = None,
) -> Booking:
    """
    Mark a booking's payment as verified (or revoke it).

    Orthogonal to the lifecycle: allowed in any state before COMPLETED and
    never changes ``status``.

    Raises:
        BookingNotFound: unknown booking
        InvalidTransition: booking already completed
    """
    with entity_lock("booking", booking_id):
        booking = get_booking_for_update(session, booking_id)
        if booking is None:
            raise BookingNotFound(booking_id)
        if booking.status is BookingStatus.COMPLETED:
            raise InvalidTransition(f"Booking {booking_id} is completed; payment is final")

        booking.verified_payment = verified
        if payment_proof is not None:
            booking.payment_proof = payment_proof
        log_audit(
            session,
            "booking",
            booking.id,
            "verify_payment" if verified else "revoke_payment",
            "Payment verified" if verified else "Payment verification revoked",
            actor=actor,
            details={"verified": verified, "payment_proof": payment_proof},
        )
        commit_or_conflict(session, "booking", booking_id)

    logger.info("payment_verification_set", booking_id=booking_id, verified=verified)
    return booking


def get_booking_or_raise(session: Session, booking_id: str) -> Booking:
    booking = get_booking(session, booking_id)
    if booking is None:
        raise BookingNotFound(booking_id)
    return booking


def booking_history(session: Session, booking_id: str) -> list[AuditLog]:
    """Audit entries of a booking, oldest first."""
    get_booking_or_raise(session, booking_id)
    return get_audit_entries(session, "booking", booking_id)


def status_history(session: Session, booking_id: str) -> list[BookingStatus]:
    """Sequence of states the booking has been in, starting with its creation state."""
    states: list[BookingStatus] = []
    for entry in booking_history(session, booking_id):
        if entry.action == "create":
            states.append(BookingStatus(entry.details["status"]))
        elif "to" in entry.details and entry.details["to"] != entry.details.get("from"):
            states.append(BookingStatus(entry.details["to"]))
    return states


def list_arrivals(session: Session, business_id: str, on: date) -> list[Booking]:
    """Confirmed bookings due to check in on ``on`` (front desk arrivals queue)."""
    return [
        b
        for b in list_bookings(session, business_id, BookingStatus.CONFIRMED)
        if b.check_in == on
    ]


def list_departures(session: Session, business_id: str, on: date) -> list[Booking]:
    """Checked-in bookings due to leave on ``on`` (front desk departures queue)."""
    return [
        b
        for b in list_bookings(session, business_id, BookingStatus.CHECKED_IN)
        if b.check_out == on
    ]


def list_payment_queue(session: Session, business_id: str, settled: bool) -> list[Booking]:
    """
    Finance view of bookings by payment state, cancelled bookings excluded.

    Args:
        session: Active ORM session
        business_id: Tenant
        settled: True for verified payments, False for those awaiting verification
    """
    return [
        b
        for b in list_bookings(session, business_id)
        if b.status is not BookingStatus.CANCELLED and bool(b.verified_payment) is settled
    ]
