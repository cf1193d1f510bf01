from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session, sessionmaker

from stayhub.dependencies import get_session_factory
from stayhub.routes._runner import run_in_session
from stayhub.schemas.marketing import (
    PricingRuleCreatePayload,
    PricingRuleOut,
    PromotionCreatePayload,
    PromotionOut,
    TogglePayload,
)
from stayhub.services import marketing

router = APIRouter()


@router.post(
    "/businesses/{business_id}/promotions",
    status_code=status.HTTP_201_CREATED,
    response_model=PromotionOut,
)
async def create_promotion(
    business_id: str,
    payload: PromotionCreatePayload,
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    """Publish a voucher code; 409 when the business already uses the code."""

    def work(session: Session) -> PromotionOut:
        promotion = marketing.create_promotion(
            session,
            business_id,
            payload.code,
            payload.type,
            payload.discount_value,
            start_date=payload.start_date,
            end_date=payload.end_date,
            description=payload.description,
            actor=payload.actor,
        )
        return PromotionOut.model_validate(promotion)

    return await run_in_session(factory, work, "create_promotion")


@router.get("/businesses/{business_id}/promotions", response_model=list[PromotionOut])
async def read_promotions(
    business_id: str,
    active_only: bool = Query(False),
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    def work(session: Session) -> list[PromotionOut]:
        return [
            PromotionOut.model_validate(p)
            for p in marketing.business_promotions(session, business_id, active_only)
        ]

    return await run_in_session(factory, work, "list_promotions")


@router.post("/promotions/{promotion_id}/toggle", response_model=PromotionOut)
async def toggle_promotion(
    promotion_id: str,
    payload: Optional[TogglePayload] = Body(None),
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    actor = payload.actor if payload else None

    def work(session: Session) -> PromotionOut:
        return PromotionOut.model_validate(marketing.toggle_promotion(session, promotion_id, actor))

    return await run_in_session(factory, work, "toggle_promotion")


@router.post(
    "/businesses/{business_id}/pricing-rules",
    status_code=status.HTTP_201_CREATED,
    response_model=PricingRuleOut,
)
async def create_pricing_rule(
    business_id: str,
    payload: PricingRuleCreatePayload,
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    """Add an active pricing rule; it applies to quotes from now on."""

    def work(session: Session) -> PricingRuleOut:
        rule = marketing.create_pricing_rule(
            session,
            business_id,
            payload.name,
            payload.scope,
            payload.adjustment_type,
            payload.value,
            start_date=payload.start_date,
            end_date=payload.end_date,
            actor=payload.actor,
        )
        return PricingRuleOut.model_validate(rule)

    return await run_in_session(factory, work, "create_pricing_rule")


@router.get("/businesses/{business_id}/pricing-rules", response_model=list[PricingRuleOut])
async def read_pricing_rules(
    business_id: str,
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    def work(session: Session) -> list[PricingRuleOut]:
        return [
            PricingRuleOut.model_validate(r)
            for r in marketing.business_pricing_rules(session, business_id)
        ]

    return await run_in_session(factory, work, "list_pricing_rules")


@router.post("/pricing-rules/{rule_id}/toggle", response_model=PricingRuleOut)
async def toggle_pricing_rule(
    rule_id: int,
    payload: Optional[TogglePayload] = Body(None),
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    actor = payload.actor if payload else None

    def work(session: Session) -> PricingRuleOut:
        return PricingRuleOut.model_validate(marketing.toggle_pricing_rule(session, rule_id, actor))

    return await run_in_session(factory, work, "toggle_pricing_rule")
