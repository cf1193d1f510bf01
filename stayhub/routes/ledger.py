from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, sessionmaker

from stayhub.db.readers.ledger import list_transactions
from stayhub.dependencies import get_session_factory
from stayhub.routes._runner import run_in_session
from stayhub.schemas.ledger import LedgerSummaryOut, PlatformChargePayload, TransactionOut
from stayhub.services.settlement import ledger_summary, record_platform_charge

router = APIRouter()


@router.get("/ledger", response_model=LedgerSummaryOut)
async def read_ledger(
    business_id: Optional[str] = Query(None, description="Restrict to one business"),
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    """
    Platform financial summary: GTV (cancelled bookings excluded), commission,
    owner net revenue, subscription and ad revenue, settled and pending value.
    """

    def work(session: Session) -> LedgerSummaryOut:
        return LedgerSummaryOut.model_validate(ledger_summary(session, business_id))

    return await run_in_session(factory, work, "ledger_summary")


@router.get("/ledger/transactions", response_model=list[TransactionOut])
async def read_transactions(
    business_id: Optional[str] = Query(None),
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    def work(session: Session) -> list[TransactionOut]:
        return [TransactionOut.model_validate(tx) for tx in list_transactions(session, business_id)]

    return await run_in_session(factory, work, "list_transactions")


@router.post("/ledger/charges", status_code=status.HTTP_201_CREATED, response_model=TransactionOut)
async def create_charge(
    payload: PlatformChargePayload,
    factory: sessionmaker = Depends(get_session_factory),
) -> Any:
    """Bill a tenant for a subscription or a marketplace ad boost."""

    def work(session: Session) -> TransactionOut:
        tx = record_platform_charge(
            session, payload.business_id, payload.type, payload.amount, actor=payload.actor
        )
        return TransactionOut.model_validate(tx)

    return await run_in_session(factory, work, "record_platform_charge")
