from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from stayhub.models.units import Unit


def get_unit(session: Session, unit_id: str) -> Optional[Unit]:
    """
    Fetch a unit by id.

    Args:
        session (Session): Active ORM session.
        unit_id (str): Unit identifier.

    Returns:
        Optional[Unit]: The unit, or None if not found.
    """
    return session.get(Unit, unit_id)


def list_units(session: Session, business_id: str) -> list[Unit]:
    result = session.execute(select(Unit).where(Unit.business_id == business_id).order_by(Unit.id))
    return list(result.scalars().all())
