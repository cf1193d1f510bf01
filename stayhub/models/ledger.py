"""SQLAlchemy models for the append-only settlement ledger and audit trail."""

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    event,
)

from stayhub.models.base import Base
from stayhub.models.enums import TransactionType, stored_as_value
from stayhub.utils.datetime import utc_now


class Transaction(Base):
    """
    One settlement event: a commission on a completed booking, a
    subscription charge, or a paid marketplace boost.

    Rows are immutable once written. ``(booking_id, type)`` is unique so a
    retried completion can never produce a second commission entry.
    """

    __tablename__ = "transactions"
    __table_args__ = (
        UniqueConstraint("booking_id", "type", name="uq_transactions_booking_type"),
    )

    id = Column(String(64), primary_key=True)
    type = Column(stored_as_value(TransactionType), nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    business_id = Column(
        String(64), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    booking_id = Column(String(64), ForeignKey("bookings.id"), nullable=True)
    status = Column(String(32), nullable=False, default="settled")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)


@event.listens_for(Transaction, "before_update")
def _refuse_ledger_updates(mapper, connection, target) -> None:  # type: ignore[no-untyped-def]
    raise ValueError(f"Transaction {target.id} is immutable")


class AuditLog(Base):
    """
    Structured audit entry keyed by entity.

    Booking transitions, payment verification, promotion use and tenant
    administration all append here instead of rewriting free text on the
    entity itself.
    """

    __tablename__ = "audit_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    entity_type = Column(String(32), nullable=False)
    entity_id = Column(String(64), nullable=False, index=True)
    action = Column(String(64), nullable=False)
    actor = Column(String(64), nullable=True)
    message = Column(Text, nullable=False)
    details = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
