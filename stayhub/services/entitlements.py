"""
Entitlement resolver.

Answers "which modules does this tenant get" and "what are its unit quota
and commission rate". Everything except the two session helpers at the
bottom is a pure lookup.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

import structlog
from sqlalchemy.orm import Session

from stayhub.db.readers.businesses import count_units, get_business, get_category_modules
from stayhub.errors import BusinessNotFound, ModuleNotEnabled, QuotaExceeded
from stayhub.models.businesses import Business
from stayhub.models.enums import SubscriptionPlan, SystemModule
from stayhub.utils.datetime import utc_today

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PlanLimits:
    unit_quota: Optional[int]  # None means unlimited
    commission_rate: Decimal
    price: Decimal


PLAN_LIMITS: dict[SubscriptionPlan, PlanLimits] = {
    SubscriptionPlan.BASIC: PlanLimits(10, Decimal("0.15"), Decimal("0")),
    SubscriptionPlan.PRO: PlanLimits(50, Decimal("0.10"), Decimal("499000")),
    SubscriptionPlan.PREMIUM: PlanLimits(None, Decimal("0.05"), Decimal("1200000")),
}


@dataclass(frozen=True)
class Entitlements:
    plan: SubscriptionPlan
    modules: frozenset[SystemModule]
    unit_quota: Optional[int]
    commission_rate: Decimal

    def allows(self, module: SystemModule) -> bool:
        return module in self.modules


def effective_plan(business: Business, today: Optional[date] = None) -> SubscriptionPlan:
    """
    Plan whose limits currently apply to the business.

    An unrecognised plan, or a paid or trial plan whose expiry date has
    passed, falls back to Basic.
    """
    try:
        plan = SubscriptionPlan(business.subscription)
    except ValueError:
        return SubscriptionPlan.BASIC

    today = today or utc_today()
    expiry = business.subscription_expiry
    if plan is not SubscriptionPlan.BASIC and expiry is not None and expiry < today:
        return SubscriptionPlan.BASIC
    return plan


def resolve_entitlements(
    business: Business,
    category_modules: Iterable[SystemModule],
    today: Optional[date] = None,
) -> Entitlements:
    """
    Combine plan limits with the category module configuration.

    Args:
        business: Tenant being resolved
        category_modules: Modules enabled for the tenant's category (may be empty)
        today: Reference date for subscription expiry

    Returns:
        Entitlements: modules, unit quota and commission rate
    """
    plan = effective_plan(business, today)
    limits = PLAN_LIMITS[plan]
    rate = limits.commission_rate
    if business.commission_rate is not None:
        rate = Decimal(str(business.commission_rate))

    return Entitlements(
        plan=plan,
        modules=frozenset(category_modules),
        unit_quota=limits.unit_quota,
        commission_rate=rate,
    )


def ensure_module_enabled(entitlements: Entitlements, module: SystemModule) -> None:
    """Raise ModuleNotEnabled unless ``module`` is part of the entitlements."""
    if not entitlements.allows(module):
        raise ModuleNotEnabled(f"Module {module.value} is not enabled for this business")


def get_entitlements(
    session: Session, business_id: str, today: Optional[date] = None
) -> Entitlements:
    """
    Resolve entitlements for a stored business.

    Raises:
        BusinessNotFound: if the business id is unknown
    """
    business = get_business(session, business_id)
    if business is None:
        raise BusinessNotFound(business_id)
    return resolve_entitlements(business, get_category_modules(session, business.category), today)


def ensure_unit_quota(session: Session, business: Business, adding: int = 1) -> None:
    """
    Refuse to grow a tenant's inventory past its plan quota.

    Args:
        session: Active ORM session
        business: Tenant about to receive new units
        adding: Number of units about to be created

    Raises:
        QuotaExceeded: if the new total would exceed the quota
    """
    quota = PLAN_LIMITS[effective_plan(business)].unit_quota
    if quota is None:
        return
    current = count_units(session, business.id)
    if current + adding > quota:
        logger.warning(
            "unit_quota_exceeded", business_id=business.id, current=current, quota=quota
        )
        raise QuotaExceeded(
            f"Business {business.id} holds {current} of {quota} units allowed by its plan"
        )
