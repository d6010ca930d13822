from collections.abc import Iterable
from datetime import datetime

from pocket_ledger.domain.timefmt import now_local, to_iso
from pocket_ledger.models import PlannedGroup, Transaction, TransactionType

UNSPECIFIED_MONTH = "Non spécifié"


def planned_expenses(transactions: Iterable[Transaction]) -> list[Transaction]:
    return [
        tx for tx in transactions
        if tx.is_planned and tx.type is TransactionType.EXPENSE
    ]


def list_planned(transactions: Iterable[Transaction]) -> list[PlannedGroup]:
    """
    Group planned expenses by target month.

    Groups come in ascending month order with untagged records in a final
    ``UNSPECIFIED_MONTH`` group. Records keep their collection order inside
    a group.
    """
    grouped: dict[str, list[Transaction]] = {}
    for tx in planned_expenses(transactions):
        month = tx.planned_month or UNSPECIFIED_MONTH
        grouped.setdefault(month, []).append(tx)

    months = sorted(month for month in grouped if month != UNSPECIFIED_MONTH)
    if UNSPECIFIED_MONTH in grouped:
        months.append(UNSPECIFIED_MONTH)

    return [
        PlannedGroup(
            month=month,
            transactions=grouped[month],
            total=sum((tx.amount for tx in grouped[month]), 0.0),
        )
        for month in months
    ]


def planned_months(transactions: Iterable[Transaction]) -> list[str]:
    return sorted({tx.planned_month for tx in planned_expenses(transactions) if tx.planned_month})


def total_for_month(transactions: Iterable[Transaction], month: str) -> float:
    return sum(
        (tx.amount for tx in planned_expenses(transactions) if tx.planned_month == month),
        0.0,
    )


def convert_to_realized(transaction: Transaction, now: datetime | None = None) -> Transaction:
    if not transaction.is_planned:
        raise ValueError(f"Transaction {transaction.id} is not planned")
    return transaction.model_copy(
        update={
            "is_planned": False,
            "planned_month": None,
            "date": to_iso(now or now_local()),
        }
    )
