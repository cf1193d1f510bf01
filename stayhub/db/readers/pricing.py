from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from stayhub.models.pricing import PricingRule, Promotion


def get_active_rules(session: Session, business_id: str) -> list[PricingRule]:
    """
    Active pricing rules of a business in insertion order.

    Date-range filtering is left to the pricing calculator, which knows the
    stay being priced.
    """
    result = session.execute(
        select(PricingRule)
        .where(PricingRule.business_id == business_id)
        .where(PricingRule.is_active == True)  # noqa: E712
        .order_by(PricingRule.id)
    )
    return list(result.scalars().all())


def find_promotions_by_code(session: Session, code: str) -> list[Promotion]:
    """All promotions across tenants carrying ``code`` (codes are stored upper-case)."""
    result = session.execute(
        select(Promotion).where(Promotion.code == code.strip().upper()).order_by(Promotion.id)
    )
    return list(result.scalars().all())


def get_promotion(session: Session, business_id: str, code: str) -> Optional[Promotion]:
    result = session.execute(
        select(Promotion)
        .where(Promotion.business_id == business_id)
        .where(Promotion.code == code.strip().upper())
    )
    return result.scalars().first()


def promotion_window_contains(promotion: Promotion, on: date) -> bool:
    """True when ``on`` falls inside the promotion's validity window (bounds inclusive)."""
    if promotion.start_date is not None and on < promotion.start_date:
        return False
    if promotion.end_date is not None and on > promotion.end_date:
        return False
    return True


def get_pricing_rule(session: Session, rule_id: int) -> Optional[PricingRule]:
    return session.get(PricingRule, rule_id)


def list_pricing_rules(session: Session, business_id: str) -> list[PricingRule]:
    """Every pricing rule of a business, active or not, in insertion order."""
    result = session.execute(
        select(PricingRule).where(PricingRule.business_id == business_id).order_by(PricingRule.id)
    )
    return list(result.scalars().all())


def get_promotion_by_id(session: Session, promotion_id: str) -> Optional[Promotion]:
    return session.get(Promotion, promotion_id)


def list_promotions(
    session: Session, business_id: str, active_only: bool = False
) -> list[Promotion]:
    """
    Promotions of a business ordered by code.

    Args:
        session: Active ORM session
        business_id: Tenant
        active_only: Skip promotions switched off by the owner
    """
    stmt = select(Promotion).where(Promotion.business_id == business_id)
    if active_only:
        stmt = stmt.where(Promotion.is_active == True)  # noqa: E712
    result = session.execute(stmt.order_by(Promotion.code))
    return list(result.scalars().all())
