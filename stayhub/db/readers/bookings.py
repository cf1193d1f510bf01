from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from stayhub.models.bookings import Booking
from stayhub.models.enums import BookingStatus


def get_booking(session: Session, booking_id: str) -> Optional[Booking]:
    """
    Fetch a booking by id.

    Args:
        session (Session): Active ORM session.
        booking_id (str): Booking identifier.

    Returns:
        Optional[Booking]: The booking, or None if not found.
    """
    return session.get(Booking, booking_id)


def get_booking_for_update(session: Session, booking_id: str) -> Optional[Booking]:
    """
    Fetch a booking with a row lock where the backend supports one.

    PostgreSQL takes ``SELECT ... FOR UPDATE``; SQLite ignores the clause and
    relies on the optimistic ``version`` check instead.
    """
    result = session.execute(
        select(Booking).where(Booking.id == booking_id).with_for_update()
    )
    return result.scalar_one_or_none()


def list_bookings(
    session: Session,
    business_id: Optional[str] = None,
    status: Optional[BookingStatus] = None,
) -> list[Booking]:
    """
    List bookings, newest first, optionally filtered by tenant and status.

    Args:
        session (Session): Active ORM session.
        business_id (Optional[str]): Restrict to one business.
        status (Optional[BookingStatus]): Restrict to one lifecycle state.

    Returns:
        list[Booking]: Matching bookings ordered by creation time descending.
    """
    stmt = select(Booking)
    if business_id is not None:
        stmt = stmt.where(Booking.business_id == business_id)
    if status is not None:
        stmt = stmt.where(Booking.status == status)
    stmt = stmt.order_by(Booking.created_at.desc(), Booking.id)
    return list(session.execute(stmt).scalars().all())
