from collections.abc import Iterable
from datetime import datetime

from pocket_ledger.domain.timefmt import parse_timestamp
from pocket_ledger.models import MonthlySummary, Transaction, TransactionType


def _date_key(tx: Transaction) -> datetime:
    # Unparseable dates sort as the oldest.
    return parse_timestamp(tx.date) or datetime.min


def sort_by_date_desc(transactions: Iterable[Transaction]) -> list[Transaction]:
    # sorted() is stable with reverse=True, equal dates keep input order.
    return sorted(transactions, key=_date_key, reverse=True)


def filter_by_type(
    transactions: Iterable[Transaction],
    kind: TransactionType | None,
) -> list[Transaction]:
    if kind is None:
        return list(transactions)
    return [tx for tx in transactions if tx.type is kind]


def in_month(tx: Transaction, reference: datetime) -> bool:
    occurred = parse_timestamp(tx.date)
    if occurred is None:
        return False
    return occurred.year == reference.year and occurred.month == reference.month


def summarize_month(transactions: Iterable[Transaction], reference: datetime) -> MonthlySummary:
    """Totals of realized transactions dated in the reference's calendar month."""
    reference = parse_timestamp(reference) or reference.replace(tzinfo=None)
    revenue = 0.0
    expenses = 0.0
    for tx in transactions:
        if tx.is_planned or not in_month(tx, reference):
            continue
        if tx.type is TransactionType.REVENUE:
            revenue += tx.amount
        else:
            expenses += tx.amount
    return MonthlySummary(revenue=revenue, expenses=expenses, balance=revenue - expenses)


def recent_transactions(transactions: Iterable[Transaction], n: int = 5) -> list[Transaction]:
    return sort_by_date_desc(transactions)[:n]


def recent_expenses(transactions: Iterable[Transaction], n: int = 3) -> list[Transaction]:
    expenses = filter_by_type(transactions, TransactionType.EXPENSE)
    return sort_by_date_desc(expenses)[:n]
