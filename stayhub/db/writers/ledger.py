import uuid
from decimal import Decimal
from typing import Optional

import structlog
from sqlalchemy.orm import Session

from stayhub.models.enums import TransactionType
from stayhub.models.ledger import Transaction

logger = structlog.get_logger(__name__)


def insert_transaction(
    session: Session,
    tx_type: TransactionType,
    business_id: str,
    amount: Decimal,
    booking_id: Optional[str] = None,
) -> Transaction:
    """
    Append a settled ledger entry.

    Args:
        session: Active ORM session (the caller owns the commit)
        tx_type: commission, subscription or ad_promotion
        business_id: Tenant the entry belongs to
        amount: Entry amount, never negative
        booking_id: Source booking for commission entries

    Returns:
        Transaction: The pending ORM object
    """
    if amount < 0:
        raise ValueError("Ledger amounts cannot be negative")

    tx = Transaction(
        id=f"tx-{uuid.uuid4().hex[:12]}",
        type=tx_type,
        amount=amount,
        business_id=business_id,
        booking_id=booking_id,
        status="settled",
    )
    session.add(tx)
    logger.info(
        "ledger_entry_added",
        tx_type=tx_type.value,
        business_id=business_id,
        booking_id=booking_id,
        amount=str(amount),
    )
    return tx
