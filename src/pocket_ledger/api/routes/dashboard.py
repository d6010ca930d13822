import asyncio
from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from pocket_ledger.api.dependencies import get_ledger
from pocket_ledger.domain.categories import list_categories
from pocket_ledger.models import Category
from pocket_ledger.services.ledger import LedgerService

router = APIRouter(prefix="/api")


@router.get("/dashboard")
async def dashboard(
    ledger: Annotated[LedgerService, Depends(get_ledger)],
    reference: datetime | None = None,
) -> dict[str, Any]:
    return await asyncio.to_thread(ledger.dashboard, reference)


@router.get("/categories")
async def get_categories() -> list[Category]:
    return list(list_categories())
