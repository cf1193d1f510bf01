"""
Unit tests for one-shot promotion application.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Callable

import pytest
from sqlalchemy.orm import Session

from stayhub.errors import (
    InvalidPromotionScope,
    InvalidTransition,
    PromotionAlreadyApplied,
    PromotionExpired,
    PromotionNotFound,
)
from stayhub.models.bookings import Booking
from stayhub.models.businesses import Business
from stayhub.models.enums import AdjustmentType
from stayhub.models.pricing import Promotion
from stayhub.models.units import Unit
from stayhub.schemas.bookings import RejectAction, RescheduleAction
from stayhub.services.pricing import apply_promotion
from stayhub.services.reservations import booking_history, create_booking, transition

TODAY = date(2024, 12, 20)


@pytest.fixture
def booking(session: Session, deluxe: Unit) -> Booking:
    return create_booking(
        session, deluxe.business_id, deluxe.id, "u-guest-1", date(2024, 12, 24), date(2024, 12, 26)
    )


@pytest.mark.unit
def test_percentage_promotion(
    session: Session, booking: Booking, make_promotion: Callable[..., Promotion]
) -> None:
    make_promotion("WELCOME10", booking.business_id, "10")

    result = apply_promotion(session, booking.id, "welcome10", today=TODAY)

    assert result.total_price == Decimal("2722500")
    assert result.promotion_code == "WELCOME10"
    note = booking_history(session, booking.id)[-1]
    assert note.action == "apply_promotion"
    assert "WELCOME10" in note.message and "302,500" in note.message


@pytest.mark.unit
def test_discount_larger_than_total_clamps_to_zero(
    session: Session, deluxe: Unit, make_promotion: Callable[..., Promotion]
) -> None:
    cheap = create_booking(
        session,
        deluxe.business_id,
        deluxe.id,
        "u-guest-2",
        date(2024, 12, 24),
        date(2024, 12, 25),
        price_override=Decimal("100000"),
    )
    make_promotion("HUGE", deluxe.business_id, "150000", AdjustmentType.FIXED)

    assert apply_promotion(session, cheap.id, "HUGE", today=TODAY).total_price == Decimal("0")


@pytest.mark.unit
def test_second_promotion_is_refused(
    session: Session, booking: Booking, make_promotion: Callable[..., Promotion]
) -> None:
    make_promotion("A", booking.business_id, "10")
    make_promotion("B", booking.business_id, "5")
    apply_promotion(session, booking.id, "A", today=TODAY)

    with pytest.raises(PromotionAlreadyApplied):
        apply_promotion(session, booking.id, "A", today=TODAY)
    with pytest.raises(PromotionAlreadyApplied):
        apply_promotion(session, booking.id, "B", today=TODAY)


@pytest.mark.unit
def test_unknown_code(session: Session, booking: Booking) -> None:
    with pytest.raises(PromotionNotFound):
        apply_promotion(session, booking.id, "NOPE", today=TODAY)


@pytest.mark.unit
def test_code_of_another_business(
    session: Session,
    booking: Booking,
    make_business: Callable[..., Business],
    make_promotion: Callable[..., Promotion],
) -> None:
    rival = make_business("b-rival")
    make_promotion("RIVAL", rival.id, "50")

    with pytest.raises(InvalidPromotionScope):
        apply_promotion(session, booking.id, "RIVAL", today=TODAY)


@pytest.mark.unit
def test_expired_and_inactive_codes(
    session: Session, booking: Booking, make_promotion: Callable[..., Promotion]
) -> None:
    make_promotion("OLD", booking.business_id, "10", end_date=TODAY - timedelta(days=1))
    make_promotion("OFF", booking.business_id, "10", is_active=False)

    with pytest.raises(PromotionExpired):
        apply_promotion(session, booking.id, "OLD", today=TODAY)
    with pytest.raises(PromotionExpired):
        apply_promotion(session, booking.id, "OFF", today=TODAY)


@pytest.mark.unit
def test_validity_window_is_inclusive(
    session: Session, booking: Booking, make_promotion: Callable[..., Promotion]
) -> None:
    make_promotion("LASTDAY", booking.business_id, "10", end_date=TODAY)

    assert apply_promotion(session, booking.id, "LASTDAY", today=TODAY).promotion_code == "LASTDAY"


@pytest.mark.unit
def test_cancelled_booking_takes_no_promotion(
    session: Session, booking: Booking, make_promotion: Callable[..., Promotion]
) -> None:
    make_promotion("A", booking.business_id, "10")
    transition(session, booking.id, RejectAction())

    with pytest.raises(InvalidTransition):
        apply_promotion(session, booking.id, "A", today=TODAY)


@pytest.mark.unit
def test_repriced_reschedule_keeps_the_discount(
    session: Session, booking: Booking, make_promotion: Callable[..., Promotion]
) -> None:
    make_promotion("WELCOME10", booking.business_id, "10")
    apply_promotion(session, booking.id, "WELCOME10", today=TODAY)

    same_dates = transition(
        session,
        booking.id,
        RescheduleAction(
            check_in=date(2024, 12, 24), check_out=date(2024, 12, 26), auth_reference="OWN-1", reprice=True
        ),
    )
    assert same_dates.total_price == Decimal("2722500")
    assert same_dates.promotion_code == "WELCOME10"

    longer = transition(
        session,
        booking.id,
        RescheduleAction(
            check_in=date(2025, 1, 10), check_out=date(2025, 1, 13), auth_reference="OWN-2", reprice=True
        ),
    )
    # 3 nights x 1,500,000 + 25,000 fee, less 10%
    assert longer.total_price == Decimal("4072500")
    assert booking_history(session, booking.id)[-1].details["promotion_code"] == "WELCOME10"


@pytest.mark.unit
def test_repriced_reschedule_drops_a_deleted_promotion(
    session: Session, booking: Booking, make_promotion: Callable[..., Promotion]
) -> None:
    promotion = make_promotion("GONE", booking.business_id, "10")
    apply_promotion(session, booking.id, "GONE", today=TODAY)
    session.delete(promotion)
    session.commit()

    repriced = transition(
        session,
        booking.id,
        RescheduleAction(
            check_in=date(2024, 12, 24), check_out=date(2024, 12, 26), auth_reference="OWN-3", reprice=True
        ),
    )

    assert repriced.total_price == Decimal("3025000")
    assert repriced.promotion_code is None
    assert booking_history(session, booking.id)[-1].details["promotion_dropped"] == "GONE"
