from typing import Any, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session, sessionmaker

from stayhub.dependencies import get_session_factory
from stayhub.routes._runner import run_in_session
from stayhub.schemas.businesses import (
    BusinessOut,
    BusinessStatusPayload,
    EntitlementsOut,
    FeaturedDecisionPayload,
    FeaturedRequestPayload,
    PenaltyPayload,
    PlanChangePayload,
)
from stayhub.services import tenants
from stayhub.services.entitlements import get_entitlements

router = APIRouter()


@router.get("/businesses/{business_id}/entitlements", response_model=EntitlementsOut)
async def read_entitlements(
    business_id: str,
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    """Modules, unit quota and commission rate currently granted to the business."""

    def work(session: Session) -> EntitlementsOut:
        entitlements = get_entitlements(session, business_id)
        return EntitlementsOut(
            plan=entitlements.plan,
            modules=sorted(entitlements.modules, key=lambda m: m.value),
            unit_quota=entitlements.unit_quota,
            commission_rate=entitlements.commission_rate,
        )

    return await run_in_session(factory, work, "get_entitlements")


@router.put("/businesses/{business_id}/status", response_model=BusinessOut)
async def set_status(
    business_id: str,
    payload: BusinessStatusPayload,
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    def work(session: Session) -> BusinessOut:
        business = tenants.set_business_status(
            session, business_id, payload.status, actor=payload.actor
        )
        return BusinessOut.model_validate(business)

    return await run_in_session(factory, work, "set_business_status")


@router.put("/businesses/{business_id}/plan", response_model=BusinessOut)
async def change_plan(
    business_id: str,
    payload: PlanChangePayload,
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    """Switch or renew the subscription plan; paid plans are billed to the ledger."""

    def work(session: Session) -> BusinessOut:
        business = tenants.change_plan(session, business_id, payload.plan, actor=payload.actor)
        return BusinessOut.model_validate(business)

    return await run_in_session(factory, work, "change_plan")


@router.post("/businesses/{business_id}/featured-request", response_model=BusinessOut)
async def request_featured(
    business_id: str,
    payload: Optional[FeaturedRequestPayload] = Body(None),
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    actor = payload.actor if payload else None

    def work(session: Session) -> BusinessOut:
        return BusinessOut.model_validate(tenants.request_featured(session, business_id, actor=actor))

    return await run_in_session(factory, work, "request_featured")


@router.get("/featured-requests", response_model=list[BusinessOut])
async def read_featured_requests(factory: sessionmaker = Depends(get_session_factory)) -> Any:
    """Marketplace moderation queue: tenants waiting for a featured listing decision."""

    def work(session: Session) -> list[BusinessOut]:
        return [BusinessOut.model_validate(b) for b in tenants.list_featured_requests(session)]

    return await run_in_session(factory, work, "list_featured_requests")


@router.put("/businesses/{business_id}/featured", response_model=BusinessOut)
async def decide_featured(
    business_id: str,
    payload: FeaturedDecisionPayload,
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    """Approve (and bill) or deny an open featured listing request."""

    def work(session: Session) -> BusinessOut:
        business = tenants.decide_featured(
            session, business_id, payload.approve, actor=payload.actor, price=payload.price
        )
        return BusinessOut.model_validate(business)

    return await run_in_session(factory, work, "decide_featured")


@router.post("/businesses/{business_id}/penalties", response_model=BusinessOut)
async def issue_penalty(
    business_id: str,
    payload: PenaltyPayload,
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    def work(session: Session) -> BusinessOut:
        business = tenants.issue_penalty(session, business_id, payload.reason, actor=payload.actor)
        return BusinessOut.model_validate(business)

    return await run_in_session(factory, work, "issue_penalty")
