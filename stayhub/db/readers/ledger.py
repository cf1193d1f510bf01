from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from stayhub.models.enums import TransactionType
from stayhub.models.ledger import AuditLog, Transaction


def get_commission_for_booking(session: Session, booking_id: str) -> Optional[Transaction]:
    """
    Return the commission entry already recorded for a booking, if any.

    Args:
        session (Session): Active ORM session.
        booking_id (str): Booking identifier.

    Returns:
        Optional[Transaction]: Existing commission transaction or None.
    """
    result = session.execute(
        select(Transaction)
        .where(Transaction.booking_id == booking_id)
        .where(Transaction.type == TransactionType.COMMISSION)
    )
    return result.scalar_one_or_none()


def sum_transactions(
    session: Session, tx_type: TransactionType, business_id: Optional[str] = None
) -> Decimal:
    """Total amount of all ledger entries of one type, optionally for one tenant."""
    stmt = select(func.coalesce(func.sum(Transaction.amount), 0)).where(
        Transaction.type == tx_type
    )
    if business_id is not None:
        stmt = stmt.where(Transaction.business_id == business_id)
    return Decimal(str(session.execute(stmt).scalar_one()))


def list_transactions(session: Session, business_id: Optional[str] = None) -> list[Transaction]:
    stmt = select(Transaction).order_by(Transaction.created_at, Transaction.id)
    if business_id is not None:
        stmt = stmt.where(Transaction.business_id == business_id)
    return list(session.execute(stmt).scalars().all())


def get_audit_entries(session: Session, entity_type: str, entity_id: str) -> list[AuditLog]:
    """
    Audit trail of one entity in the order it was written.

    Args:
        session (Session): Active ORM session.
        entity_type (str): "booking", "business", "unit", ...
        entity_id (str): Entity identifier.

    Returns:
        list[AuditLog]: Entries ordered oldest first.
    """
    result = session.execute(
        select(AuditLog)
        .where(AuditLog.entity_type == entity_type)
        .where(AuditLog.entity_id == entity_id)
        .order_by(AuditLog.id)
    )
    return list(result.scalars().all())
