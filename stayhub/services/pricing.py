"""
Pricing calculator.

``price_stay`` and ``promotion_discount`` are pure; ``quote`` reads the unit,
its business and the active rules; ``apply_promotion`` is the one write path
and changes a booking's total exactly once.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

import structlog
from sqlalchemy.orm import Session

from stayhub.config import DEFAULT_SERVICE_FEE
from stayhub.db.readers.businesses import get_business
from stayhub.db.readers.bookings import get_booking_for_update
from stayhub.db.readers.pricing import (
    find_promotions_by_code,
    get_active_rules,
    promotion_window_contains,
)
from stayhub.db.readers.units import get_unit
from stayhub.db.session import commit_or_conflict
from stayhub.db.writers.audit import log_audit
from stayhub.errors import (
    BookingNotFound,
    InvalidDateRange,
    InvalidPromotionScope,
    InvalidTransition,
    PromotionAlreadyApplied,
    PromotionExpired,
    PromotionNotFound,
    UnitNotFound,
)
from stayhub.metrics import promotions_applied, quote_duration
from stayhub.models.bookings import Booking
from stayhub.models.businesses import Business
from stayhub.models.enums import AdjustmentType
from stayhub.models.pricing import PricingRule, Promotion
from stayhub.services.locks import entity_lock
from stayhub.services.state_machine import is_terminal
from stayhub.utils.datetime import utc_today

logger = structlog.get_logger(__name__)

CENT = Decimal("0.01")
SECONDS_PER_DAY = 86400

DateLike = Union[date, datetime]


@dataclass(frozen=True)
class RuleAdjustment:
    rule_id: Optional[int]
    name: str
    amount: Decimal


@dataclass(frozen=True)
class Quote:
    nights: int
    room_total: Decimal
    adjusted_total: Decimal
    service_fee: Decimal
    grand_total: Decimal
    adjustments: tuple[RuleAdjustment, ...] = field(default_factory=tuple)


def money(value: Union[Decimal, int, float, str]) -> Decimal:
    """Normalise an amount to two decimal places, rounding half-up."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def count_nights(check_in: DateLike, check_out: DateLike) -> int:
    """
    Number of billable nights for a stay.

    ``max(1, ceil(days))``; partial days round up.

    Raises:
        InvalidDateRange: if check-out is not strictly after check-in
    """
    if type(check_in) is not type(check_out):
        raise InvalidDateRange("Check-in and check-out must be the same kind of value")
    if check_out <= check_in:  # type: ignore[operator]
        raise InvalidDateRange(f"Check-out {check_out} must be after check-in {check_in}")
    seconds = (check_out - check_in).total_seconds()  # type: ignore[operator]
    return max(1, math.ceil(seconds / SECONDS_PER_DAY))


def rule_applies(rule: PricingRule, check_in: DateLike) -> bool:
    """A rule applies when active and its optional date range contains the check-in date."""
    if not rule.is_active:
        return False
    day = check_in.date() if isinstance(check_in, datetime) else check_in
    if rule.start_date is not None and day < rule.start_date:
        return False
    if rule.end_date is not None and day > rule.end_date:
        return False
    return True


def rule_contribution(rule: PricingRule, room_total: Decimal) -> Decimal:
    value = Decimal(str(rule.value))
    if rule.adjustment_type == AdjustmentType.PERCENTAGE:
        return room_total * value / Decimal(100)
    return value


def price_stay(
    base_price: Decimal,
    check_in: DateLike,
    check_out: DateLike,
    rules: Iterable[PricingRule] = (),
    service_fee: Optional[Decimal] = None,
) -> Quote:
    """
    Price a stay from a nightly base rate.

    Rule contributions are computed against the undiscounted room total and
    summed, never compounded. The grand total is floored at zero.

    Args:
        base_price: Nightly rate of the unit
        check_in: Arrival date
        check_out: Departure date
        rules: Candidate pricing rules in insertion order
        service_fee: Business fee, or None for the platform default

    Returns:
        Quote: nights, room total, rule adjustments, fee and grand total
    """
    nights = count_nights(check_in, check_out)
    room_total = Decimal(str(base_price)) * nights

    adjustments = tuple(
        RuleAdjustment(rule.id, rule.name, rule_contribution(rule, room_total))
        for rule in rules
        if rule_applies(rule, check_in)
    )
    adjusted_total = room_total + sum((a.amount for a in adjustments), Decimal(0))
    fee = DEFAULT_SERVICE_FEE if service_fee is None else Decimal(str(service_fee))
    grand_total = max(Decimal(0), adjusted_total + fee)

    return Quote(
        nights=nights,
        room_total=money(room_total),
        adjusted_total=money(adjusted_total),
        service_fee=money(fee),
        grand_total=money(grand_total),
        adjustments=tuple(RuleAdjustment(a.rule_id, a.name, money(a.amount)) for a in adjustments),
    )


def quote_for_unit(
    session: Session,
    business: Business,
    base_price: Decimal,
    check_in: DateLike,
    check_out: DateLike,
) -> Quote:
    return price_stay(
        base_price,
        check_in,
        check_out,
        get_active_rules(session, business.id),
        business.service_fee,
    )


def quote(session: Session, unit_id: str, check_in: DateLike, check_out: DateLike) -> Quote:
    """
    Read-only price quote for a prospective stay in one unit.

    Raises:
        UnitNotFound: if the unit (or its business) does not exist
        InvalidDateRange: if check-out is not after check-in
    """
    with quote_duration.time():
        unit = get_unit(session, unit_id)
        if unit is None:
            raise UnitNotFound(unit_id)
        business = get_business(session, unit.business_id)
        if business is None:
            raise UnitNotFound(unit_id)
        return quote_for_unit(session, business, unit.price, check_in, check_out)


def promotion_discount(total: Decimal, promotion: Promotion) -> Decimal:
    """Discount a promotion grants on ``total`` (percentage of it, or a flat amount)."""
    value = Decimal(str(promotion.discount_value))
    if promotion.type == AdjustmentType.PERCENTAGE:
        return money(Decimal(str(total)) * value / Decimal(100))
    return money(value)


def _select_promotion(session: Session, booking: Booking, code: str) -> Promotion:
    candidates = find_promotions_by_code(session, code)
    if not candidates:
        raise PromotionNotFound(code)
    for promotion in candidates:
        if promotion.business_id == booking.business_id:
            return promotion
    raise InvalidPromotionScope(
        f"Promotion {code} does not belong to business {booking.business_id}"
    )


def apply_promotion(
    session: Session,
    booking_id: str,
    code: str,
    actor: Optional[str] = None,
    today: Optional[date] = None,
) -> Booking:
    """
    Apply a promotion code to one booking, once.

    The discount is taken off the current total and clamped at zero. A
    booking carries at most one promotion; a second attempt is rejected
    rather than discounting twice.

    Raises:
        BookingNotFound, PromotionNotFound, InvalidPromotionScope,
        PromotionExpired, PromotionAlreadyApplied, InvalidTransition
    """
    today = today or utc_today()
    with entity_lock("booking", booking_id):
        booking = get_booking_for_update(session, booking_id)
        if booking is None:
            raise BookingNotFound(booking_id)
        if is_terminal(booking.status):
            raise InvalidTransition(
                f"Cannot apply a promotion to a {booking.status.value} booking"
            )
        if booking.promotion_code is not None:
            raise PromotionAlreadyApplied(
                f"Booking {booking_id} already carries promotion {booking.promotion_code}"
            )

        promotion = _select_promotion(session, booking, code)
        if not promotion.is_active or not promotion_window_contains(promotion, today):
            raise PromotionExpired(f"Promotion {promotion.code} is not valid on {today}")

        previous = Decimal(str(booking.total_price))
        discount = promotion_discount(previous, promotion)
        booking.total_price = max(Decimal(0), previous - discount)
        booking.promotion_code = promotion.code

        log_audit(
            session,
            "booking",
            booking.id,
            "apply_promotion",
            f"Promo {promotion.code} applied: discount Rp {discount:,.0f}",
            actor=actor,
            details={
                "code": promotion.code,
                "discount": str(discount),
                "previous_total": str(previous),
                "new_total": str(booking.total_price),
            },
        )
        commit_or_conflict(session, "booking", booking_id)

    promotions_applied.labels(type=promotion.type.value).inc()
    logger.info(
        "promotion_applied",
        booking_id=booking_id,
        code=promotion.code,
        discount=str(discount),
        total_price=str(booking.total_price),
    )
    return booking
