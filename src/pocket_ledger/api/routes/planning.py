import asyncio
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from pocket_ledger.api.dependencies import get_ledger
from pocket_ledger.api.routes.transactions import storage_unavailable
from pocket_ledger.api.schemas import PlannedExpenseInput
from pocket_ledger.domain.transactions import build_transaction_payload
from pocket_ledger.services.ledger import LedgerService
from pocket_ledger.storage.store import LedgerWriteError

router = APIRouter(prefix="/api/planned")


@router.get("")
async def list_planned(
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> dict[str, Any]:
    groups = await asyncio.to_thread(ledger.planned_overview)
    return {"groups": groups}


@router.post("", status_code=201)
async def plan_expense(
    data: PlannedExpenseInput,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> dict[str, Any]:
    try:
        transaction = await asyncio.to_thread(ledger.plan_expense, data)
    except LedgerWriteError as exc:
        raise storage_unavailable(exc) from exc
    return build_transaction_payload(transaction, now=ledger.now(), decimals=0)


@router.post("/{transaction_id}/convert")
async def convert_planned(
    transaction_id: str,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> dict[str, Any]:
    try:
        realized = await asyncio.to_thread(ledger.convert_planned, transaction_id)
    except LedgerWriteError as exc:
        raise storage_unavailable(exc) from exc
    if realized is None:
        return {"status": "ignored", "id": transaction_id}
    return {
        "status": "converted",
        "id": transaction_id,
        "transaction": build_transaction_payload(realized, now=ledger.now()),
    }


@router.delete("/{transaction_id}")
async def delete_planned(
    transaction_id: str,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> dict[str, str]:
    try:
        deleted = await asyncio.to_thread(ledger.delete_planned, transaction_id)
    except LedgerWriteError as exc:
        raise storage_unavailable(exc) from exc
    return {"status": "deleted" if deleted else "unchanged", "id": transaction_id}
