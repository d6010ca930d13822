from __future__ import annotations

from datetime import datetime
from typing import Any

from pocket_ledger.domain.categories import get_category
from pocket_ledger.domain.formatting import (
    format_currency,
    format_long_date,
    format_relative_date,
    format_short_date,
    month_label,
    planned_month_label,
    signed_amount,
)
from pocket_ledger.domain.planning import UNSPECIFIED_MONTH
from pocket_ledger.models import MonthlySummary, PlannedGroup, Transaction


def build_transaction_payload(
    transaction: Transaction,
    *,
    now: datetime | None = None,
    decimals: int = 2,
) -> dict[str, Any]:
    category = get_category(transaction.category)
    return {
        **transaction.to_record(),
        "amount_display": signed_amount(transaction, decimals),
        "date_relative": format_relative_date(transaction.date, now),
        "date_short": format_short_date(transaction.date),
        "date_long": format_long_date(transaction.date),
        "category_info": category.model_dump(),
    }


def build_transactions_display(
    transactions: list[Transaction],
    *,
    now: datetime | None = None,
    decimals: int = 2,
) -> list[dict[str, Any]]:
    return [
        build_transaction_payload(tx, now=now, decimals=decimals)
        for tx in transactions
    ]


def build_summary_payload(summary: MonthlySummary, reference: datetime) -> dict[str, Any]:
    return {
        "month": month_label(reference),
        "revenue": summary.revenue,
        "expenses": summary.expenses,
        "balance": summary.balance,
        "revenue_display": format_currency(summary.revenue),
        "expenses_display": format_currency(summary.expenses),
        # Balance can be negative; the sign is shown separately.
        "balance_display": ("-" if summary.balance < 0 else "") + format_currency(summary.balance),
    }


def build_planned_group_payload(
    group: PlannedGroup,
    *,
    now: datetime | None = None,
) -> dict[str, Any]:
    label = UNSPECIFIED_MONTH if group.month == UNSPECIFIED_MONTH else planned_month_label(group.month)
    return {
        "month": group.month,
        "label": label,
        "total": group.total,
        "total_display": format_currency(group.total),
        "transactions": build_transactions_display(group.transactions, now=now, decimals=0),
    }
