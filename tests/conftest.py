"""
Shared fixtures: a fresh in-memory database per test and a small tenant.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Callable, Generator

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from stayhub.db.engine import build_engine
from stayhub.db.schema import init_db
from stayhub.models.businesses import Business
from stayhub.models.enums import (
    AdjustmentType,
    BusinessStatus,
    RuleScope,
    SubscriptionPlan,
)
from stayhub.models.pricing import PricingRule, Promotion
from stayhub.models.units import Unit

TODAY = date(2024, 12, 20)


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """In-memory SQLite engine with the schema and default category modules."""
    engine = build_engine("sqlite+pysqlite:///:memory:")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def session(session_factory: sessionmaker) -> Generator[Session, None, None]:
    with session_factory() as session:
        yield session


@pytest.fixture
def make_business(session: Session) -> Callable[..., Business]:
    """Factory for committed businesses; keyword arguments override the defaults."""

    def _make(business_id: str = "b-hotel", **overrides: Any) -> Business:
        values: dict[str, Any] = {
            "name": "Hotel Sentosa",
            "category": "Hotel",
            "subscription": SubscriptionPlan.PREMIUM,
            "subscription_expiry": date(2099, 12, 31),
            "is_trial": False,
            "status": BusinessStatus.ACTIVE,
        }
        values.update(overrides)
        business = Business(id=business_id, **values)
        session.add(business)
        session.commit()
        return business

    return _make


@pytest.fixture
def make_unit(session: Session) -> Callable[..., Unit]:
    def _make(unit_id: str, business_id: str, price: str = "1500000", **overrides: Any) -> Unit:
        unit = Unit(id=unit_id, business_id=business_id, name=f"Room {unit_id}", price=Decimal(price))
        for key, value in overrides.items():
            setattr(unit, key, value)
        session.add(unit)
        session.commit()
        return unit

    return _make


@pytest.fixture
def hotel(make_business: Callable[..., Business]) -> Business:
    """Premium hotel: 5% commission, unlimited units, default service fee."""
    return make_business()


@pytest.fixture
def deluxe(hotel: Business, make_unit: Callable[..., Unit]) -> Unit:
    """Ready unit at Rp 1,500,000 per night."""
    return make_unit("u-deluxe", hotel.id)


@pytest.fixture
def weekend_surge(session: Session, hotel: Business) -> PricingRule:
    rule = PricingRule(
        business_id=hotel.id,
        name="Weekend Surge",
        scope=RuleScope.WEEKEND,
        adjustment_type=AdjustmentType.PERCENTAGE,
        value=Decimal("15"),
        is_active=True,
    )
    session.add(rule)
    session.commit()
    return rule


@pytest.fixture
def make_promotion(session: Session) -> Callable[..., Promotion]:
    def _make(
        code: str,
        business_id: str,
        discount_value: str,
        promo_type: AdjustmentType = AdjustmentType.PERCENTAGE,
        **overrides: Any,
    ) -> Promotion:
        values: dict[str, Any] = {
            "start_date": TODAY - timedelta(days=10),
            "end_date": TODAY + timedelta(days=10),
            "is_active": True,
        }
        values.update(overrides)
        promotion = Promotion(
            id=f"p-{business_id}-{code}",
            business_id=business_id,
            code=code,
            type=promo_type,
            discount_value=Decimal(discount_value),
            **values,
        )
        session.add(promotion)
        session.commit()
        return promotion

    return _make
