"""
Owner marketing tools: voucher codes and dynamic pricing rules.

Both feed the pricing calculator. Vouchers are applied explicitly to one
booking; active pricing rules adjust every quote whose check-in falls in
their window. Neither is ever deleted here, only switched off.
"""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

import structlog
from sqlalchemy.orm import Session

from stayhub.db.readers.businesses import get_business
from stayhub.db.readers.pricing import (
    get_pricing_rule,
    get_promotion,
    get_promotion_by_id,
    list_pricing_rules,
    list_promotions,
)
from stayhub.db.writers.audit import log_audit
from stayhub.errors import (
    BusinessNotFound,
    InvalidDateRange,
    PricingRuleNotFound,
    PromotionCodeTaken,
    PromotionNotFound,
)
from stayhub.models.enums import AdjustmentType, RuleScope
from stayhub.models.pricing import PricingRule, Promotion
from stayhub.services.locks import entity_lock

logger = structlog.get_logger(__name__)


def _check_window(start_date: Optional[date], end_date: Optional[date]) -> None:
    if start_date is not None and end_date is not None and end_date < start_date:
        raise InvalidDateRange(f"Window ends {end_date} before it starts {start_date}")


def _require_business(session: Session, business_id: str) -> None:
    if get_business(session, business_id) is None:
        raise BusinessNotFound(business_id)


def create_promotion(
    session: Session,
    business_id: str,
    code: str,
    promo_type: AdjustmentType,
    discount_value: Decimal,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    description: Optional[str] = None,
    actor: Optional[str] = None,
) -> Promotion:
    """
    Publish a voucher code for a business.

    Codes are stored upper-case and are unique within a business; two
    tenants may hand out the same code.

    Raises:
        BusinessNotFound: unknown business
        PromotionCodeTaken: the business already has this code
        InvalidDateRange: window ends before it starts
        ValueError: blank code, non-positive value or a percentage above 100
    """
    normalized = code.strip().upper()
    if not normalized:
        raise ValueError("Promotion code cannot be blank")
    value = Decimal(str(discount_value))
    if value <= 0:
        raise ValueError("Discount value must be positive")
    if promo_type == AdjustmentType.PERCENTAGE and value > 100:
        raise ValueError("Percentage discount cannot exceed 100")
    _check_window(start_date, end_date)

    with entity_lock("business", business_id):
        _require_business(session, business_id)
        if get_promotion(session, business_id, normalized) is not None:
            raise PromotionCodeTaken(f"Business {business_id} already uses code {normalized}")

        promotion = Promotion(
            id=f"prm-{uuid.uuid4().hex[:10]}",
            business_id=business_id,
            code=normalized,
            type=promo_type,
            discount_value=value,
            start_date=start_date,
            end_date=end_date,
            is_active=True,
            description=description,
        )
        session.add(promotion)
        log_audit(
            session,
            "business",
            business_id,
            "create_promotion",
            f"Voucher {normalized} published",
            actor=actor,
            details={"promotion_id": promotion.id, "type": promo_type.value, "value": str(value)},
        )
        session.commit()

    logger.info("promotion_created", business_id=business_id, code=normalized)
    return promotion


def toggle_promotion(session: Session, promotion_id: str, actor: Optional[str] = None) -> Promotion:
    """
    Switch a voucher on or off.

    Bookings that already carry the code keep their discount.
    """
    promotion = get_promotion_by_id(session, promotion_id)
    if promotion is None:
        raise PromotionNotFound(promotion_id)

    promotion.is_active = not promotion.is_active
    log_audit(
        session,
        "business",
        promotion.business_id,
        "toggle_promotion",
        f"Voucher {promotion.code} {'enabled' if promotion.is_active else 'disabled'}",
        actor=actor,
        details={"promotion_id": promotion.id, "is_active": promotion.is_active},
    )
    session.commit()
    logger.info("promotion_toggled", promotion_id=promotion_id, is_active=promotion.is_active)
    return promotion


def business_promotions(
    session: Session, business_id: str, active_only: bool = False
) -> list[Promotion]:
    _require_business(session, business_id)
    return list_promotions(session, business_id, active_only)


def create_pricing_rule(
    session: Session,
    business_id: str,
    name: str,
    scope: RuleScope,
    adjustment_type: AdjustmentType,
    value: Decimal,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    actor: Optional[str] = None,
) -> PricingRule:
    """
    Add an active pricing rule to a business.

    ``value`` is signed: negative values discount, positive values mark up.
    New rules are accumulated after every existing rule of the business.

    Args:
        session: Active ORM session
        business_id: Tenant the rule belongs to
        name: Label shown on quotes
        scope: weekend or seasonal
        adjustment_type: percentage of the room total, or a flat amount
        value: Signed adjustment
        start_date: First check-in date the rule covers, None for open
        end_date: Last check-in date the rule covers, None for open
        actor: Who created the rule

    Raises:
        BusinessNotFound: unknown business
        InvalidDateRange: window ends before it starts
        ValueError: blank name
    """
    if not name.strip():
        raise ValueError("Pricing rule name cannot be blank")
    _check_window(start_date, end_date)

    with entity_lock("business", business_id):
        _require_business(session, business_id)
        rule = PricingRule(
            business_id=business_id,
            name=name.strip(),
            scope=scope,
            adjustment_type=adjustment_type,
            value=Decimal(str(value)),
            is_active=True,
            start_date=start_date,
            end_date=end_date,
        )
        session.add(rule)
        session.flush()
        log_audit(
            session,
            "business",
            business_id,
            "create_pricing_rule",
            f"Pricing rule {rule.name} added",
            actor=actor,
            details={"rule_id": rule.id, "adjustment_type": adjustment_type.value, "value": str(rule.value)},
        )
        session.commit()

    logger.info("pricing_rule_created", business_id=business_id, rule_id=rule.id)
    return rule


def toggle_pricing_rule(session: Session, rule_id: int, actor: Optional[str] = None) -> PricingRule:
    """Switch a pricing rule on or off. Existing bookings keep their agreed price."""
    rule = get_pricing_rule(session, rule_id)
    if rule is None:
        raise PricingRuleNotFound(rule_id)

    rule.is_active = not rule.is_active
    log_audit(
        session,
        "business",
        rule.business_id,
        "toggle_pricing_rule",
        f"Pricing rule {rule.name} {'enabled' if rule.is_active else 'disabled'}",
        actor=actor,
        details={"rule_id": rule.id, "is_active": rule.is_active},
    )
    session.commit()
    logger.info("pricing_rule_toggled", rule_id=rule_id, is_active=rule.is_active)
    return rule


def business_pricing_rules(session: Session, business_id: str) -> list[PricingRule]:
    _require_business(session, business_id)
    return list_pricing_rules(session, business_id)
