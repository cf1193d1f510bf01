"""Unit inventory: creation under the plan quota and housekeeping status."""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Optional, Sequence

import structlog
from sqlalchemy.orm import Session

from stayhub.db.readers.businesses import get_business
from stayhub.db.readers.units import get_unit
from stayhub.db.readers.units import list_units as read_units
from stayhub.db.writers.audit import log_audit
from stayhub.errors import BusinessNotFound, UnitNotFound
from stayhub.models.enums import UnitStatus
from stayhub.models.units import Unit
from stayhub.services.entitlements import ensure_unit_quota
from stayhub.services.locks import entity_lock

logger = structlog.get_logger(__name__)


def create_unit(
    session: Session,
    business_id: str,
    name: str,
    price: Decimal,
    unit_type: Optional[str] = None,
    capacity: int = 1,
    amenities: Sequence[str] = (),
    unit_id: Optional[str] = None,
    actor: Optional[str] = None,
) -> Unit:
    """
    Register a new unit for a business, enforcing the plan's unit quota.

    Raises:
        BusinessNotFound: unknown business
        QuotaExceeded: the business already holds its plan's maximum
        ValueError: negative price or capacity below one
    """
    if Decimal(str(price)) < 0:
        raise ValueError("Unit price cannot be negative")
    if capacity < 1:
        raise ValueError("Unit capacity must be at least 1")

    with entity_lock("business", business_id):
        business = get_business(session, business_id)
        if business is None:
            raise BusinessNotFound(business_id)
        ensure_unit_quota(session, business)

        unit = Unit(
            id=unit_id or f"u-{uuid.uuid4().hex[:10]}",
            business_id=business_id,
            name=name,
            type=unit_type,
            price=Decimal(str(price)),
            capacity=capacity,
            amenities=list(amenities),
            status=UnitStatus.READY,
            available=True,
        )
        session.add(unit)
        log_audit(session, "unit", unit.id, "create", f"Unit {name} created", actor=actor)
        session.commit()

    logger.info("unit_created", unit_id=unit.id, business_id=business_id)
    return unit


def set_unit_status(
    session: Session, unit_id: str, status: UnitStatus, actor: Optional[str] = None
) -> Unit:
    """
    Move a unit through housekeeping, or block and release it.

    Public availability is re-derived from the status: only a ready unit is
    bookable.

    Raises:
        UnitNotFound: unknown unit
    """
    with entity_lock("unit", unit_id):
        unit = get_unit(session, unit_id)
        if unit is None:
            raise UnitNotFound(unit_id)

        previous = unit.status
        unit.status = status
        unit.available = status is UnitStatus.READY
        log_audit(
            session,
            "unit",
            unit.id,
            "set_status",
            f"Status {previous.value} -> {status.value}",
            actor=actor,
            details={"from": previous.value, "to": status.value},
        )
        session.commit()

    logger.info("unit_status_changed", unit_id=unit_id, from_status=previous.value, to_status=status.value)
    return unit


def list_units(session: Session, business_id: str) -> list[Unit]:
    """Units of one business. Raises BusinessNotFound for an unknown business."""
    if get_business(session, business_id) is None:
        raise BusinessNotFound(business_id)
    return read_units(session, business_id)
