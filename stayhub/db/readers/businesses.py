from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from stayhub.models.businesses import Business, CategoryModule
from stayhub.models.enums import SystemModule
from stayhub.models.units import Unit


def get_business(session: Session, business_id: str) -> Optional[Business]:
    """
    Fetch a tenant by id.

    Args:
        session (Session): Active ORM session.
        business_id (str): Business identifier.

    Returns:
        Optional[Business]: The business, or None if it does not exist.
    """
    return session.get(Business, business_id)


def count_units(session: Session, business_id: str) -> int:
    """Number of units currently registered to the business."""
    result = session.execute(
        select(func.count()).select_from(Unit).where(Unit.business_id == business_id)
    )
    return int(result.scalar_one())


def get_category_modules(session: Session, category: str) -> set[SystemModule]:
    """
    Modules the admin has enabled for one business category.

    An unknown category has no rows and therefore yields an empty set.
    """
    result = session.execute(
        select(CategoryModule.module).where(CategoryModule.category == category)
    )
    return set(result.scalars().all())
