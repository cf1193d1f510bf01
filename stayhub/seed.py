"""
Demo marketplace dataset.

Two approved tenants (a Premium hotel and a Basic kost), their units, a
weekend surcharge and two promotion codes. Loading is skipped when the
hotel already exists, so seeding an existing database is a no-op.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

import structlog
from sqlalchemy.orm import Session

from stayhub.db.readers.businesses import get_business
from stayhub.models.businesses import Business
from stayhub.models.enums import (
    AdjustmentType,
    BusinessStatus,
    RuleScope,
    SubscriptionPlan,
    UnitStatus,
)
from stayhub.models.pricing import PricingRule, Promotion
from stayhub.models.units import Unit
from stayhub.utils.datetime import utc_today

logger = structlog.get_logger(__name__)

DEMO_HOTEL_ID = "b1"
DEMO_KOST_ID = "b2"


def seed_demo_data(session: Session, today: Optional[date] = None) -> bool:
    """
    Load the demo dataset.

    Returns:
        bool: True if rows were written, False if the dataset was already present
    """
    if get_business(session, DEMO_HOTEL_ID) is not None:
        logger.info("demo_seed_skipped", reason="already_present")
        return False

    today = today or utc_today()
    session.add_all(
        [
            Business(
                id=DEMO_HOTEL_ID,
                name="Grand Hyatt Jakarta",
                owner_id="u-owner-1",
                category="Hotel",
                subscription=SubscriptionPlan.PREMIUM,
                subscription_expiry=today + timedelta(days=365),
                status=BusinessStatus.ACTIVE,
                is_featured=True,
            ),
            Business(
                id=DEMO_KOST_ID,
                name="Kost Melati",
                owner_id="u-owner-2",
                category="Kost",
                subscription=SubscriptionPlan.BASIC,
                status=BusinessStatus.ACTIVE,
            ),
        ]
    )
    session.flush()

    session.add_all(
        [
            Unit(
                id="r1",
                business_id=DEMO_HOTEL_ID,
                name="Deluxe King 101",
                type="Deluxe",
                price=Decimal("1500000"),
                capacity=2,
                amenities=["WiFi", "Breakfast", "City View"],
                check_in_policy="From 14:00",
                check_out_policy="Until 12:00",
                cancellation_policy="Free cancellation up to 24 hours before arrival",
            ),
            Unit(
                id="r2",
                business_id=DEMO_HOTEL_ID,
                name="Executive Suite 1201",
                type="Suite",
                price=Decimal("3200000"),
                capacity=4,
                amenities=["WiFi", "Breakfast", "Lounge Access"],
            ),
            Unit(
                id="r3",
                business_id=DEMO_HOTEL_ID,
                name="Superior Twin 204",
                type="Superior",
                price=Decimal("950000"),
                capacity=2,
                amenities=["WiFi"],
                status=UnitStatus.MAINTENANCE,
                available=False,
            ),
            Unit(
                id="k1",
                business_id=DEMO_KOST_ID,
                name="Kamar A1",
                type="Monthly Room",
                price=Decimal("1800000"),
                capacity=1,
                amenities=["WiFi", "AC"],
            ),
            PricingRule(
                business_id=DEMO_HOTEL_ID,
                name="Weekend Surge",
                scope=RuleScope.WEEKEND,
                adjustment_type=AdjustmentType.PERCENTAGE,
                value=Decimal("15"),
                is_active=True,
            ),
            PricingRule(
                business_id=DEMO_HOTEL_ID,
                name="Low Season",
                scope=RuleScope.SEASONAL,
                adjustment_type=AdjustmentType.PERCENTAGE,
                value=Decimal("-10"),
                is_active=False,
            ),
            Promotion(
                id="p1",
                business_id=DEMO_HOTEL_ID,
                code="WELCOME10",
                type=AdjustmentType.PERCENTAGE,
                discount_value=Decimal("10"),
                start_date=today,
                end_date=today + timedelta(days=90),
                description="10% off for first-time guests",
            ),
            Promotion(
                id="p2",
                business_id=DEMO_HOTEL_ID,
                code="HEMAT100",
                type=AdjustmentType.FIXED,
                discount_value=Decimal("100000"),
                start_date=today,
                end_date=today + timedelta(days=30),
                description="Rp 100.000 off any stay",
            ),
        ]
    )
    session.commit()
    logger.info("demo_seed_loaded", businesses=2, units=4)
    return True
