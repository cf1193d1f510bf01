"""
Settlement and commission ledger.

The ledger is append-only. A completed booking yields exactly one
commission entry; subscription and ad charges are recorded as they are
billed. ``ledger_summary`` derives the platform's financial figures from
the bookings and the ledger, never from stored totals.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stayhub.db.readers.bookings import get_booking_for_update, list_bookings
from stayhub.db.readers.businesses import get_business
from stayhub.db.readers.ledger import get_commission_for_booking, sum_transactions
from stayhub.db.writers.audit import log_audit
from stayhub.db.writers.ledger import insert_transaction
from stayhub.errors import BookingNotFound, BusinessNotFound, InvalidTransition
from stayhub.metrics import commission_settled
from stayhub.models.bookings import Booking
from stayhub.models.enums import BookingStatus, TransactionType
from stayhub.models.ledger import Transaction
from stayhub.services.entitlements import get_entitlements
from stayhub.services.locks import entity_lock
from stayhub.services.pricing import money

logger = structlog.get_logger(__name__)

PLATFORM_CHARGE_TYPES = frozenset({TransactionType.SUBSCRIPTION, TransactionType.AD_PROMOTION})


@dataclass(frozen=True)
class LedgerSummary:
    gtv: Decimal
    platform_commission: Decimal
    net_owner_revenue: Decimal
    subscription_revenue: Decimal
    ad_revenue: Decimal
    settled_value: Decimal
    pending_value: Decimal


def commission_for(booking: Booking, rate: Decimal) -> Decimal:
    return money(Decimal(str(booking.total_price)) * rate)


def record_commission(session: Session, booking: Booking) -> Transaction:
    """
    Add the commission entry for a completed booking to the session.

    Returns the existing entry when one is already recorded. The caller
    owns the commit.
    """
    existing = get_commission_for_booking(session, booking.id)
    if existing is not None:
        return existing

    rate = get_entitlements(session, booking.business_id).commission_rate
    amount = commission_for(booking, rate)
    tx = insert_transaction(
        session, TransactionType.COMMISSION, booking.business_id, amount, booking_id=booking.id
    )
    log_audit(
        session,
        "booking",
        booking.id,
        "settle_commission",
        f"Commission Rp {amount:,.0f} settled at {rate * 100:.2f}%",
        details={"transaction_id": tx.id, "rate": str(rate), "amount": str(amount)},
    )
    commission_settled.inc(float(amount))
    logger.info(
        "commission_settled",
        booking_id=booking.id,
        business_id=booking.business_id,
        rate=str(rate),
        amount=str(amount),
    )
    return tx


def settle_completed_booking(session: Session, booking_id: str) -> Transaction:
    """
    Record the platform commission for a completed booking, idempotently.

    Calling it again for the same booking returns the entry written the first
    time. Check-out settles automatically, so this mostly serves retries and
    bookings completed before settlement was wired in.

    Raises:
        BookingNotFound: unknown booking
        InvalidTransition: booking is not COMPLETED
    """
    with entity_lock("booking", booking_id):
        booking = get_booking_for_update(session, booking_id)
        if booking is None:
            raise BookingNotFound(booking_id)
        if booking.status is not BookingStatus.COMPLETED:
            raise InvalidTransition(
                f"Booking {booking_id} is {booking.status.value}; only completed bookings settle"
            )

        existing = get_commission_for_booking(session, booking_id)
        if existing is not None:
            logger.debug("commission_already_settled", booking_id=booking_id, tx_id=existing.id)
            return existing

        tx = record_commission(session, booking)
        try:
            session.commit()
        except IntegrityError:
            # Another process settled first; the unique (booking_id, type) pair kept it single
            session.rollback()
            logger.warning("commission_settle_race", booking_id=booking_id)
            existing = get_commission_for_booking(session, booking_id)
            if existing is None:
                raise
            return existing
    return tx


def record_platform_charge(
    session: Session,
    business_id: str,
    tx_type: TransactionType,
    amount: Decimal,
    actor: Optional[str] = None,
) -> Transaction:
    """
    Append a subscription or ad promotion charge for a tenant.

    Raises:
        BusinessNotFound: unknown business
        ValueError: for commission entries (those come from settlement) or negative amounts
    """
    if tx_type not in PLATFORM_CHARGE_TYPES:
        raise ValueError(f"{tx_type.value} entries are not platform charges")
    if get_business(session, business_id) is None:
        raise BusinessNotFound(business_id)

    tx = insert_transaction(session, tx_type, business_id, money(amount))
    log_audit(
        session,
        "business",
        business_id,
        f"charge_{tx_type.value}",
        f"{tx_type.value} charge Rp {tx.amount:,.0f}",
        actor=actor,
        details={"transaction_id": tx.id, "amount": str(tx.amount)},
    )
    session.commit()
    return tx


def ledger_summary(session: Session, business_id: Optional[str] = None) -> LedgerSummary:
    """
    Aggregate the platform's financial figures.

    GTV sums the totals of every non-cancelled booking. Net owner revenue is
    GTV minus commission. Settled and pending split the same bookings by
    payment verification.

    Args:
        session: Active ORM session
        business_id: Restrict to one tenant, or None for the whole platform

    Returns:
        LedgerSummary
    """
    gtv = Decimal(0)
    settled = Decimal(0)
    pending = Decimal(0)
    for booking in list_bookings(session, business_id):
        if booking.status is BookingStatus.CANCELLED:
            continue
        total = Decimal(str(booking.total_price))
        gtv += total
        if booking.verified_payment:
            settled += total
        else:
            pending += total

    commission = sum_transactions(session, TransactionType.COMMISSION, business_id)
    return LedgerSummary(
        gtv=money(gtv),
        platform_commission=money(commission),
        net_owner_revenue=money(gtv - commission),
        subscription_revenue=money(
            sum_transactions(session, TransactionType.SUBSCRIPTION, business_id)
        ),
        ad_revenue=money(sum_transactions(session, TransactionType.AD_PROMOTION, business_id)),
        settled_value=money(settled),
        pending_value=money(pending),
    )
