"""
Unit tests for unit creation and housekeeping status.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Callable

import pytest
from sqlalchemy.orm import Session

from stayhub.errors import BusinessNotFound, QuotaExceeded, UnitNotFound
from stayhub.models.businesses import Business
from stayhub.models.enums import SubscriptionPlan, UnitStatus
from stayhub.models.units import Unit
from stayhub.services import units


@pytest.mark.unit
def test_create_unit_is_ready_and_available(session: Session, hotel: Business) -> None:
    unit = units.create_unit(session, hotel.id, "Garden Villa", Decimal("2500000"), amenities=["Pool"])

    assert unit.status is UnitStatus.READY
    assert unit.available is True
    assert [u.id for u in units.list_units(session, hotel.id)] == [unit.id]


@pytest.mark.unit
def test_create_unit_respects_quota(session: Session, make_business: Callable[..., Business]) -> None:
    business = make_business("b-small", subscription=SubscriptionPlan.BASIC)
    for i in range(10):
        units.create_unit(session, business.id, f"Room {i}", Decimal("300000"))

    with pytest.raises(QuotaExceeded):
        units.create_unit(session, business.id, "Room 11", Decimal("300000"))


@pytest.mark.unit
def test_create_unit_validation(session: Session, hotel: Business) -> None:
    with pytest.raises(BusinessNotFound):
        units.create_unit(session, "nope", "Room", Decimal("1"))
    with pytest.raises(ValueError):
        units.create_unit(session, hotel.id, "Room", Decimal("-1"))
    with pytest.raises(ValueError):
        units.create_unit(session, hotel.id, "Room", Decimal("1"), capacity=0)


@pytest.mark.unit
@pytest.mark.parametrize(
    "status, available",
    [
        (UnitStatus.BLOCKED, False),
        (UnitStatus.MAINTENANCE, False),
        (UnitStatus.CLEANING, False),
        (UnitStatus.DIRTY, False),
        (UnitStatus.READY, True),
    ],
)
def test_status_drives_availability(
    session: Session, deluxe: Unit, status: UnitStatus, available: bool
) -> None:
    unit = units.set_unit_status(session, deluxe.id, status, actor="staff-1")

    assert unit.status is status
    assert unit.available is available


@pytest.mark.unit
def test_set_status_unknown_unit(session: Session) -> None:
    with pytest.raises(UnitNotFound):
        units.set_unit_status(session, "nope", UnitStatus.READY)
