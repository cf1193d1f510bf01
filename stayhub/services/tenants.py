"""
Tenant administration.

Registration, the admin approval workflow, subscription plan changes,
featured listings, trust penalties and the category-to-module matrix.
"""

from __future__ import annotations

import uuid
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from stayhub.config import FEATURED_LISTING_PRICE, PENALTY_ALERT_THRESHOLD
from stayhub.db.readers.businesses import count_units, get_business, get_category_modules
from stayhub.db.writers.audit import log_audit
from stayhub.db.writers.ledger import insert_transaction
from stayhub.errors import BusinessNotFound, InvalidTransition, QuotaExceeded
from stayhub.models.businesses import Business, CategoryModule
from stayhub.models.enums import BusinessStatus, SubscriptionPlan, SystemModule, TransactionType
from stayhub.services.entitlements import PLAN_LIMITS
from stayhub.services.locks import entity_lock
from stayhub.utils.datetime import utc_today

logger = structlog.get_logger(__name__)

# current status -> statuses the admin may move it to
STATUS_TRANSITIONS: dict[BusinessStatus, frozenset[BusinessStatus]] = {
    BusinessStatus.PENDING: frozenset({BusinessStatus.ACTIVE, BusinessStatus.REJECTED}),
    BusinessStatus.ACTIVE: frozenset({BusinessStatus.SUSPENDED}),
    BusinessStatus.SUSPENDED: frozenset({BusinessStatus.ACTIVE}),
    BusinessStatus.REJECTED: frozenset(),
}

NEW_CATEGORY_MODULES = (SystemModule.REVIEWS,)


def _one_year_after(day: date) -> date:
    try:
        return day.replace(year=day.year + 1)
    except ValueError:
        # 29 February
        return day + timedelta(days=365)


def register_business(
    session: Session,
    name: str,
    category: str,
    owner_id: Optional[str] = None,
    business_id: Optional[str] = None,
    trial_days: Optional[int] = None,
    today: Optional[date] = None,
) -> Business:
    """
    Register a tenant awaiting admin approval, on the Basic plan.

    With ``trial_days`` the tenant starts a Pro trial instead.
    """
    today = today or utc_today()
    business = Business(
        id=business_id or f"b-{uuid.uuid4().hex[:10]}",
        name=name,
        owner_id=owner_id,
        category=category,
        status=BusinessStatus.PENDING,
        subscription=SubscriptionPlan.BASIC,
        is_trial=False,
    )
    if trial_days:
        business.subscription = SubscriptionPlan.PRO
        business.is_trial = True
        business.subscription_expiry = today + timedelta(days=trial_days)

    session.add(business)
    log_audit(session, "business", business.id, "register", f"Registered as {category}", actor=owner_id)
    session.commit()
    logger.info("business_registered", business_id=business.id, category=category)
    return business


def set_business_status(
    session: Session, business_id: str, status: BusinessStatus, actor: Optional[str] = None
) -> Business:
    """
    Move a tenant through the admin approval workflow.

    Raises:
        BusinessNotFound: unknown business
        InvalidTransition: move not allowed from the current status
    """
    with entity_lock("business", business_id):
        business = get_business(session, business_id)
        if business is None:
            raise BusinessNotFound(business_id)

        previous = business.status
        if status not in STATUS_TRANSITIONS[previous]:
            raise InvalidTransition(
                f"Cannot move business {business_id} from {previous.value} to {status.value}"
            )

        business.status = status
        log_audit(
            session,
            "business",
            business_id,
            "set_status",
            f"Status {previous.value} -> {status.value}",
            actor=actor,
            details={"from": previous.value, "to": status.value},
        )
        session.commit()

    logger.info(
        "business_status_changed",
        business_id=business_id,
        from_status=previous.value,
        to_status=status.value,
    )
    return business


def change_plan(
    session: Session,
    business_id: str,
    plan: SubscriptionPlan,
    actor: Optional[str] = None,
    today: Optional[date] = None,
) -> Business:
    """
    Switch a tenant to ``plan`` (or renew it) for one year.

    A paid plan is billed immediately as a subscription ledger entry. The
    trial flag is cleared.

    Args:
        session: Active ORM session
        business_id: Tenant
        plan: Target plan
        actor: Who requested the change
        today: Billing date, defaults to today (UTC)

    Raises:
        BusinessNotFound: unknown business
        QuotaExceeded: the tenant holds more units than the target plan allows
    """
    today = today or utc_today()
    limits = PLAN_LIMITS[plan]

    with entity_lock("business", business_id):
        business = get_business(session, business_id)
        if business is None:
            raise BusinessNotFound(business_id)

        units = count_units(session, business_id)
        if limits.unit_quota is not None and units > limits.unit_quota:
            raise QuotaExceeded(
                f"Business {business_id} holds {units} units; {plan.value} allows {limits.unit_quota}"
            )

        previous = business.subscription
        business.subscription = plan
        business.is_trial = False
        business.subscription_expiry = _one_year_after(today)

        details = {"from": previous.value, "to": plan.value, "expiry": business.subscription_expiry.isoformat()}
        if limits.price > 0:
            tx = insert_transaction(session, TransactionType.SUBSCRIPTION, business_id, limits.price)
            details["transaction_id"] = tx.id
        log_audit(
            session,
            "business",
            business_id,
            "change_plan",
            f"Plan {previous.value} -> {plan.value}",
            actor=actor,
            details=details,
        )
        session.commit()

    logger.info("plan_changed", business_id=business_id, from_plan=previous.value, to_plan=plan.value)
    return business


def _business_or_raise(session: Session, business_id: str) -> Business:
    business = get_business(session, business_id)
    if business is None:
        raise BusinessNotFound(business_id)
    return business


def request_featured(session: Session, business_id: str, actor: Optional[str] = None) -> Business:
    """
    Ask the platform to feature the business on the marketplace.

    Asking again while a request is open changes nothing.

    Raises:
        BusinessNotFound: unknown business
        InvalidTransition: the business is already featured
    """
    with entity_lock("business", business_id):
        business = _business_or_raise(session, business_id)
        if business.is_featured:
            raise InvalidTransition(f"Business {business_id} is already featured")
        if business.is_featured_requested:
            return business

        business.is_featured_requested = True
        log_audit(session, "business", business_id, "request_featured", "Featured listing requested", actor=actor)
        session.commit()

    logger.info("featured_requested", business_id=business_id)
    return business


def list_featured_requests(session: Session) -> list[Business]:
    """Tenants waiting for a featured listing decision."""
    result = session.execute(
        select(Business)
        .where(Business.is_featured_requested == True)  # noqa: E712
        .where(Business.is_featured == False)  # noqa: E712
        .order_by(Business.id)
    )
    return list(result.scalars().all())


def decide_featured(
    session: Session,
    business_id: str,
    approve: bool,
    actor: Optional[str] = None,
    price: Optional[Decimal] = None,
) -> Business:
    """
    Approve or deny an open featured listing request.

    Approval features the business and bills the boost as an ad promotion
    ledger entry at ``price`` (``FEATURED_LISTING_PRICE`` by default).

    Raises:
        BusinessNotFound: unknown business
        InvalidTransition: no request is open
    """
    amount = FEATURED_LISTING_PRICE if price is None else Decimal(str(price))

    with entity_lock("business", business_id):
        business = _business_or_raise(session, business_id)
        if not business.is_featured_requested or business.is_featured:
            raise InvalidTransition(f"Business {business_id} has no open featured request")

        business.is_featured_requested = False
        details: dict = {"approved": approve}
        if approve:
            business.is_featured = True
            tx = insert_transaction(session, TransactionType.AD_PROMOTION, business_id, amount)
            details.update(transaction_id=tx.id, amount=str(tx.amount))
        log_audit(
            session,
            "business",
            business_id,
            "approve_featured" if approve else "deny_featured",
            "Featured listing approved" if approve else "Featured listing denied",
            actor=actor,
            details=details,
        )
        session.commit()

    logger.info("featured_decided", business_id=business_id, approved=approve)
    return business


def issue_penalty(
    session: Session, business_id: str, reason: str, actor: Optional[str] = None
) -> Business:
    """
    Record one trust penalty against a tenant.

    Penalties only accumulate; reaching ``PENALTY_ALERT_THRESHOLD`` logs a
    suspension alert for the admin but does not suspend on its own.

    Raises:
        BusinessNotFound: unknown business
        ValueError: blank reason
    """
    if not reason.strip():
        raise ValueError("A penalty needs a reason")

    with entity_lock("business", business_id):
        business = _business_or_raise(session, business_id)
        business.penalty_count = (business.penalty_count or 0) + 1
        log_audit(
            session,
            "business",
            business_id,
            "issue_penalty",
            f"Penalty {business.penalty_count} issued: {reason.strip()}",
            actor=actor,
            details={"penalty_count": business.penalty_count, "reason": reason.strip()},
        )
        session.commit()

    if business.penalty_count >= PENALTY_ALERT_THRESHOLD:
        logger.warning("penalty_alert", business_id=business_id, penalty_count=business.penalty_count)
    else:
        logger.info("penalty_issued", business_id=business_id, penalty_count=business.penalty_count)
    return business


def set_category_modules(
    session: Session, category: str, modules: Iterable[SystemModule]
) -> set[SystemModule]:
    """Replace the module set of a category; returns the stored set."""
    wanted = set(modules)
    session.execute(delete(CategoryModule).where(CategoryModule.category == category))
    session.add_all(CategoryModule(category=category, module=module) for module in wanted)
    session.commit()
    logger.info("category_modules_set", category=category, modules=sorted(m.value for m in wanted))
    return wanted


def create_category(session: Session, category: str) -> set[SystemModule]:
    """Create a category with the starter module set. Existing categories are left alone."""
    existing = get_category_modules(session, category)
    if existing:
        return existing
    return set_category_modules(session, category, NEW_CATEGORY_MODULES)


def toggle_category_module(session: Session, category: str, module: SystemModule) -> set[SystemModule]:
    """Enable ``module`` for a category if disabled, disable it if enabled."""
    modules = get_category_modules(session, category)
    modules.symmetric_difference_update({module})
    return set_category_modules(session, category, modules)


def rename_category(session: Session, old: str, new: str) -> int:
    """
    Rename a category in the module matrix and on every tenant using it.

    Returns:
        int: number of businesses moved to the new name
    """
    session.execute(
        update(CategoryModule).where(CategoryModule.category == old).values(category=new)
    )
    result = session.execute(update(Business).where(Business.category == old).values(category=new))
    session.commit()
    logger.info("category_renamed", old=old, new=new, businesses=result.rowcount)
    return result.rowcount


def delete_category(session: Session, category: str) -> None:
    """
    Drop a category's module configuration.

    Tenants keep the category name and resolve to an empty module set.
    """
    session.execute(delete(CategoryModule).where(CategoryModule.category == category))
    session.commit()
    logger.info("category_deleted", category=category)
