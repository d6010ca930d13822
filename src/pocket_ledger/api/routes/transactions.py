import asyncio
from typing import Annotated, Any, Literal

from fastapi import APIRouter, Depends, HTTPException

from pocket_ledger.api.dependencies import get_ledger
from pocket_ledger.api.schemas import TransactionInput
from pocket_ledger.domain.transactions import build_transaction_payload, build_transactions_display
from pocket_ledger.logger import get_logger
from pocket_ledger.models import TransactionType
from pocket_ledger.services.ledger import LedgerService
from pocket_ledger.storage.store import LedgerWriteError

logger = get_logger(__name__)

router = APIRouter(prefix="/api/transactions")

_TYPE_FILTERS = {
    "revenue": TransactionType.REVENUE,
    "expense": TransactionType.EXPENSE,
}


def storage_unavailable(exc: LedgerWriteError) -> HTTPException:
    logger.error("[LEDGER] Write failed: %s", exc)
    return HTTPException(status_code=503, detail="Storage unavailable")


@router.get("")
async def list_transactions(
    ledger: Annotated[LedgerService, Depends(get_ledger)],
    type: Literal["all", "revenue", "expense"] = "all",
) -> dict[str, Any]:
    kind = _TYPE_FILTERS.get(type)
    transactions = await asyncio.to_thread(ledger.list_transactions, kind)
    return {
        "transactions": build_transactions_display(transactions, now=ledger.now()),
        "count": len(transactions),
    }


@router.get("/{transaction_id}")
async def get_transaction(
    transaction_id: str,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> dict[str, Any]:
    transaction = await asyncio.to_thread(ledger.get_transaction, transaction_id)
    if transaction is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return build_transaction_payload(transaction, now=ledger.now())


@router.post("", status_code=201)
async def create_transaction(
    data: TransactionInput,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> dict[str, Any]:
    try:
        transaction = await asyncio.to_thread(ledger.add_transaction, data)
    except LedgerWriteError as exc:
        raise storage_unavailable(exc) from exc
    return build_transaction_payload(transaction, now=ledger.now())


@router.put("/{transaction_id}")
async def update_transaction(
    transaction_id: str,
    data: TransactionInput,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> dict[str, Any]:
    try:
        transaction = await asyncio.to_thread(ledger.edit_transaction, transaction_id, data)
    except LedgerWriteError as exc:
        raise storage_unavailable(exc) from exc
    return build_transaction_payload(transaction, now=ledger.now())


@router.delete("/{transaction_id}")
async def delete_transaction(
    transaction_id: str,
    ledger: Annotated[LedgerService, Depends(get_ledger)],
) -> dict[str, str]:
    try:
        deleted = await asyncio.to_thread(ledger.delete_transaction, transaction_id)
    except LedgerWriteError as exc:
        raise storage_unavailable(exc) from exc
    return {"status": "deleted" if deleted else "unchanged", "id": transaction_id}
