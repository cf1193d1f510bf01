from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, sessionmaker

from stayhub.dependencies import get_session_factory
from stayhub.routes._runner import run_in_session
from stayhub.schemas.units import QuoteOut, UnitCreatePayload, UnitOut, UnitStatusPayload
from stayhub.services import units
from stayhub.services.pricing import quote

router = APIRouter()


@router.get("/units/{unit_id}/quote", response_model=QuoteOut)
async def quote_stay(
    unit_id: str,
    check_in: date = Query(..., description="Arrival date"),
    check_out: date = Query(..., description="Departure date"),
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    """
    Price a prospective stay. Read-only: nothing is reserved.

    Returns:
        QuoteOut: nights, room total, rule adjustments, service fee, grand total
    """

    def work(session: Session) -> QuoteOut:
        return QuoteOut.model_validate(quote(session, unit_id, check_in, check_out))

    return await run_in_session(factory, work, "quote")


@router.post(
    "/businesses/{business_id}/units",
    status_code=status.HTTP_201_CREATED,
    response_model=UnitOut,
)
async def create_unit(
    business_id: str,
    payload: UnitCreatePayload,
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    def work(session: Session) -> UnitOut:
        unit = units.create_unit(
            session,
            business_id,
            name=payload.name,
            price=payload.price,
            unit_type=payload.type,
            capacity=payload.capacity,
            amenities=payload.amenities,
            actor=payload.actor,
        )
        return UnitOut.model_validate(unit)

    return await run_in_session(factory, work, "create_unit")


@router.get("/businesses/{business_id}/units", response_model=list[UnitOut])
async def list_units(
    business_id: str,
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    def work(session: Session) -> list[UnitOut]:
        return [UnitOut.model_validate(u) for u in units.list_units(session, business_id)]

    return await run_in_session(factory, work, "list_units")


@router.put("/units/{unit_id}/status", response_model=UnitOut)
async def set_unit_status(
    unit_id: str,
    payload: UnitStatusPayload,
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    """Housekeeping moves and owner blocks; only a ready unit stays publicly available."""

    def work(session: Session) -> UnitOut:
        return UnitOut.model_validate(
            units.set_unit_status(session, unit_id, payload.status, actor=payload.actor)
        )

    return await run_in_session(factory, work, "set_unit_status")
