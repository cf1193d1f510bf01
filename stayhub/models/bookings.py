# models/bookings.py

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)

from stayhub.models.base import Base
from stayhub.models.enums import BookingStatus, stored_as_value
from stayhub.utils.datetime import utc_now


class Booking(Base):
    """
    ORM model for a reservation, the central mutable entity of the engine.

    Bookings are never hard-deleted; cancelled ones stay in the table and
    are excluded from GTV by the ledger. ``version`` is the optimistic lock
    counter: every flush checks and bumps it, so two writers racing on the
    same booking cannot both commit a transition.
    """

    __tablename__ = "bookings"

    id = Column(String(64), primary_key=True)
    business_id = Column(
        String(64), ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    unit_id = Column(String(64), ForeignKey("units.id"), nullable=False, index=True)
    guest_id = Column(String(64), nullable=False, index=True)
    check_in = Column(Date, nullable=False)
    check_out = Column(Date, nullable=False)
    total_price = Column(Numeric(14, 2), nullable=False)
    status = Column(stored_as_value(BookingStatus), nullable=False, index=True)
    verified_payment = Column(Boolean, nullable=False, default=False)
    payment_proof = Column(String(512), nullable=True)
    notes = Column(Text, nullable=True)
    promotion_code = Column(String(64), nullable=True)
    guest_identity = Column(JSON, nullable=True)
    damage_note = Column(Text, nullable=True)
    auth_reference = Column(String(255), nullable=True)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    __mapper_args__ = {"version_id_col": version}
