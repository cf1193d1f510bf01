"""
Unit tests for booking creation and lifecycle transitions.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Callable
from unittest.mock import patch

import pytest
from pydantic import ValidationError
from sqlalchemy.orm import Session

from stayhub.errors import (
    BookingNotFound,
    BusinessNotFound,
    InvalidDateRange,
    InvalidTransition,
    ModuleNotEnabled,
    PaymentNotVerified,
    UnitNotFound,
    UnitUnavailable,
)
from stayhub.models.bookings import Booking
from stayhub.models.businesses import Business
from stayhub.models.enums import BookingStatus, UnitStatus
from stayhub.models.pricing import PricingRule
from stayhub.models.units import Unit
from stayhub.schemas.bookings import (
    ApproveAction,
    CancelAction,
    CheckInAction,
    CheckOutAction,
    GuestIdentity,
    RejectAction,
    RescheduleAction,
)
from stayhub.services import reservations
from stayhub.services.reservations import create_booking, set_payment_verified, transition

IDENTITY = GuestIdentity(identity_number="3174000000000001", nationality="ID", phone="+628111")


def _book(session: Session, unit: Unit, guest_id: str = "u-guest-1", **kw: object) -> Booking:
    return create_booking(
        session,
        business_id=unit.business_id,
        unit_id=unit.id,
        guest_id=guest_id,
        check_in=kw.pop("check_in", date(2024, 12, 24)),  # type: ignore[arg-type]
        check_out=kw.pop("check_out", date(2024, 12, 26)),  # type: ignore[arg-type]
        **kw,  # type: ignore[arg-type]
    )


def _checked_in(session: Session, unit: Unit) -> Booking:
    booking = _book(session, unit)
    transition(session, booking.id, ApproveAction())
    set_payment_verified(session, booking.id, True)
    return transition(session, booking.id, CheckInAction(identity=IDENTITY))


@pytest.mark.unit
def test_guest_booking_starts_pending_unpaid(session: Session, deluxe: Unit) -> None:
    booking = _book(session, deluxe)

    assert booking.status is BookingStatus.PENDING
    assert booking.verified_payment is False
    # 2 nights x 1,500,000 + 25,000 fee
    assert booking.total_price == Decimal("3025000")


@pytest.mark.unit
def test_walk_in_starts_confirmed_and_paid(session: Session, deluxe: Unit) -> None:
    booking = _book(session, deluxe, guest_id="u-walkin")

    assert booking.status is BookingStatus.CONFIRMED
    assert booking.verified_payment is True
    assert booking.id.startswith("WALK-")


@pytest.mark.unit
def test_price_override_replaces_quote(session: Session, deluxe: Unit, weekend_surge: PricingRule) -> None:
    booking = _book(session, deluxe, price_override=Decimal("2000000"))

    assert booking.total_price == Decimal("2000000")


@pytest.mark.unit
def test_booking_price_includes_active_rules(
    session: Session, deluxe: Unit, weekend_surge: PricingRule
) -> None:
    booking = _book(session, deluxe, check_out=date(2024, 12, 27))

    assert booking.total_price == Decimal("5200000")


@pytest.mark.unit
def test_create_booking_validation(
    session: Session,
    deluxe: Unit,
    make_business: Callable[..., Business],
    make_unit: Callable[..., Unit],
) -> None:
    other = make_business("b-other")
    foreign = make_unit("u-foreign", other.id)

    with pytest.raises(BusinessNotFound):
        create_booking(session, "nope", deluxe.id, "g", date(2024, 1, 1), date(2024, 1, 2))
    with pytest.raises(UnitNotFound):
        create_booking(session, deluxe.business_id, foreign.id, "g", date(2024, 1, 1), date(2024, 1, 2))
    with pytest.raises(InvalidDateRange):
        _book(session, deluxe, check_in=date(2024, 1, 2), check_out=date(2024, 1, 1))


@pytest.mark.unit
def test_blocked_unit_cannot_be_booked(session: Session, hotel: Business, make_unit: Callable[..., Unit]) -> None:
    blocked = make_unit("u-blocked", hotel.id, status=UnitStatus.BLOCKED, available=False)

    with pytest.raises(UnitUnavailable):
        _book(session, blocked)


@pytest.mark.unit
def test_category_without_booking_module(
    session: Session, make_business: Callable[..., Business], make_unit: Callable[..., Unit]
) -> None:
    kost = make_business("b-kost", category="Kost")
    room = make_unit("u-kost", kost.id)

    with pytest.raises(ModuleNotEnabled):
        _book(session, room)


@pytest.mark.unit
def test_check_in_on_pending_is_invalid(session: Session, deluxe: Unit) -> None:
    booking = _book(session, deluxe)

    with pytest.raises(InvalidTransition):
        transition(session, booking.id, CheckInAction(identity=IDENTITY))

    session.expire_all()
    assert session.get(Booking, booking.id).status is BookingStatus.PENDING


@pytest.mark.unit
def test_check_in_requires_verified_payment(session: Session, deluxe: Unit) -> None:
    booking = _book(session, deluxe)
    transition(session, booking.id, ApproveAction())

    with pytest.raises(PaymentNotVerified):
        transition(session, booking.id, CheckInAction(identity=IDENTITY))

    with patch("stayhub.services.reservations.REQUIRE_PAYMENT_FOR_CHECKIN", False):
        checked_in = transition(session, booking.id, CheckInAction(identity=IDENTITY))
    assert checked_in.status is BookingStatus.CHECKED_IN


@pytest.mark.unit
def test_check_in_captures_identity(session: Session, deluxe: Unit) -> None:
    booking = _checked_in(session, deluxe)

    assert booking.status is BookingStatus.CHECKED_IN
    assert booking.guest_identity["identity_number"] == "3174000000000001"
    assert booking.guest_identity["email"] is None


@pytest.mark.unit
def test_check_out_marks_unit_dirty_and_unavailable(session: Session, deluxe: Unit) -> None:
    booking = _checked_in(session, deluxe)

    completed = transition(session, booking.id, CheckOutAction(damage_note="Broken lamp"))

    assert completed.status is BookingStatus.COMPLETED
    assert completed.damage_note == "Broken lamp"
    session.expire_all()
    unit = session.get(Unit, deluxe.id)
    assert unit.status is UnitStatus.DIRTY
    assert unit.available is False


@pytest.mark.unit
def test_reject_and_cancel(session: Session, deluxe: Unit) -> None:
    rejected = transition(session, _book(session, deluxe).id, RejectAction(reason="Overbooked"))
    confirmed = _book(session, deluxe)
    transition(session, confirmed.id, ApproveAction())
    cancelled = transition(session, confirmed.id, CancelAction())

    assert rejected.status is BookingStatus.CANCELLED
    assert cancelled.status is BookingStatus.CANCELLED
    with pytest.raises(InvalidTransition):
        transition(session, cancelled.id, ApproveAction())


@pytest.mark.unit
def test_reschedule_keeps_price_unless_repriced(session: Session, deluxe: Unit) -> None:
    booking = _book(session, deluxe)

    moved = transition(
        session,
        booking.id,
        RescheduleAction(check_in=date(2025, 1, 10), check_out=date(2025, 1, 13), auth_reference="OWN-42"),
    )
    assert moved.status is BookingStatus.PENDING
    assert (moved.check_in, moved.check_out) == (date(2025, 1, 10), date(2025, 1, 13))
    assert moved.total_price == Decimal("3025000")
    assert moved.auth_reference == "OWN-42"

    repriced = transition(
        session,
        booking.id,
        RescheduleAction(
            check_in=date(2025, 1, 10), check_out=date(2025, 1, 13), auth_reference="OWN-43", reprice=True
        ),
    )
    assert repriced.total_price == Decimal("4525000")


@pytest.mark.unit
def test_reschedule_requires_authorisation_reference() -> None:
    with pytest.raises(ValidationError):
        RescheduleAction(check_in=date(2025, 1, 1), check_out=date(2025, 1, 2), auth_reference="  ")


@pytest.mark.unit
def test_reschedule_rejects_inverted_dates(session: Session, deluxe: Unit) -> None:
    booking = _book(session, deluxe)

    with pytest.raises(InvalidDateRange):
        transition(
            session,
            booking.id,
            RescheduleAction(check_in=date(2025, 1, 5), check_out=date(2025, 1, 5), auth_reference="X"),
        )


@pytest.mark.unit
def test_payment_verification_is_orthogonal_until_completed(session: Session, deluxe: Unit) -> None:
    booking = _book(session, deluxe)

    paid = set_payment_verified(session, booking.id, True, payment_proof="https://proof/1.jpg")
    assert paid.status is BookingStatus.PENDING
    assert paid.verified_payment is True

    _checked_in_booking = _checked_in(session, deluxe)
    transition(session, _checked_in_booking.id, CheckOutAction())
    with pytest.raises(InvalidTransition):
        set_payment_verified(session, _checked_in_booking.id, False)


@pytest.mark.unit
def test_history_records_every_state(session: Session, deluxe: Unit) -> None:
    booking = _checked_in(session, deluxe)
    transition(session, booking.id, CheckOutAction())

    assert reservations.status_history(session, booking.id) == [
        BookingStatus.PENDING,
        BookingStatus.CONFIRMED,
        BookingStatus.CHECKED_IN,
        BookingStatus.COMPLETED,
    ]
    actions = [entry.action for entry in reservations.booking_history(session, booking.id)]
    assert actions == ["create", "approve", "verify_payment", "check_in", "check_out", "settle_commission"]


@pytest.mark.unit
def test_unknown_booking(session: Session) -> None:
    with pytest.raises(BookingNotFound):
        transition(session, "BK-NONE", ApproveAction())
    with pytest.raises(BookingNotFound):
        reservations.booking_history(session, "BK-NONE")


@pytest.mark.unit
def test_desk_queues(session: Session, deluxe: Unit) -> None:
    arriving = _book(session, deluxe, guest_id="u-walkin")
    staying = _checked_in(session, deluxe)
    unpaid = _book(session, deluxe)

    assert [b.id for b in reservations.list_arrivals(session, deluxe.business_id, date(2024, 12, 24))] == [
        arriving.id
    ]
    assert [b.id for b in reservations.list_departures(session, deluxe.business_id, date(2024, 12, 26))] == [
        staying.id
    ]
    pending_ids = {b.id for b in reservations.list_payment_queue(session, deluxe.business_id, settled=False)}
    assert pending_ids == {unpaid.id}
