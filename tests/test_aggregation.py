from datetime import datetime, timezone

from pocket_ledger.domain.aggregation import (
    filter_by_type,
    recent_expenses,
    recent_transactions,
    sort_by_date_desc,
    summarize_month,
)
from pocket_ledger.models import Transaction, TransactionType

REVENUE = TransactionType.REVENUE
EXPENSE = TransactionType.EXPENSE


def _tx(tx_id: str, kind: TransactionType, amount: float, date: str, **overrides) -> Transaction:
    return Transaction(
        id=tx_id,
        type=kind,
        title=tx_id,
        amount=amount,
        category="autre",
        date=date,
        **overrides,
    )


def test_summarize_month_example():
    transactions = [
        _tx("r", REVENUE, 100, "2025-01-05T12:00:00"),
        _tx("e", EXPENSE, 40, "2025-01-10T12:00:00"),
        _tx("p", EXPENSE, 30, "2025-02-01T12:00:00", is_planned=True, planned_month="2025-02"),
    ]

    summary = summarize_month(transactions, datetime(2025, 1, 15))

    assert summary.revenue == 100
    assert summary.expenses == 40
    assert summary.balance == 60


def test_summarize_month_excludes_planned_in_same_month():
    transactions = [
        _tx("e", EXPENSE, 40, "2025-01-10T12:00:00"),
        _tx("p", EXPENSE, 500, "2025-01-11T12:00:00", is_planned=True, planned_month="2025-01"),
    ]

    summary = summarize_month(transactions, datetime(2025, 1, 15))

    assert summary.expenses == 40


def test_summarize_month_requires_same_year():
    transactions = [_tx("old", REVENUE, 100, "2024-01-05T12:00:00")]

    summary = summarize_month(transactions, datetime(2025, 1, 15))

    assert summary.revenue == 0
    assert summary.balance == 0


def test_summarize_month_empty_defaults_to_zero():
    summary = summarize_month([], datetime(2025, 1, 15))
    assert (summary.revenue, summary.expenses, summary.balance) == (0, 0, 0)


def test_summarize_month_accepts_aware_reference():
    transactions = [_tx("r", REVENUE, 10, "2025-06-15T12:00:00Z")]

    summary = summarize_month(transactions, datetime(2025, 6, 15, 12, tzinfo=timezone.utc))

    assert summary.revenue == 10


def test_invalid_dates_never_match_and_sort_last():
    transactions = [
        _tx("bad", EXPENSE, 10, "not a date"),
        _tx("good", EXPENSE, 20, "2025-01-02T00:00:00"),
    ]

    assert summarize_month(transactions, datetime(2025, 1, 15)).expenses == 20
    assert [tx.id for tx in sort_by_date_desc(transactions)] == ["good", "bad"]


def test_recent_transactions_includes_planned_and_truncates():
    transactions = [
        _tx(f"t{day}", EXPENSE if day % 2 else REVENUE, day, f"2025-03-{day:02d}T09:00:00")
        for day in range(1, 8)
    ]
    transactions.append(_tx("plan", EXPENSE, 1, "2025-03-20T09:00:00", is_planned=True))

    recent = recent_transactions(transactions)

    assert [tx.id for tx in recent] == ["plan", "t7", "t6", "t5", "t4"]


def test_recent_expenses_filters_type():
    transactions = [
        _tx("r1", REVENUE, 1, "2025-03-10T09:00:00"),
        _tx("e1", EXPENSE, 1, "2025-03-01T09:00:00"),
        _tx("e2", EXPENSE, 1, "2025-03-02T09:00:00"),
        _tx("e3", EXPENSE, 1, "2025-03-03T09:00:00"),
        _tx("e4", EXPENSE, 1, "2025-03-04T09:00:00"),
    ]

    assert [tx.id for tx in recent_expenses(transactions)] == ["e4", "e3", "e2"]
    assert [tx.id for tx in recent_expenses(transactions, n=1)] == ["e4"]


def test_equal_dates_keep_input_order():
    same = "2025-03-01T09:00:00"
    transactions = [
        _tx("first", EXPENSE, 1, same),
        _tx("second", REVENUE, 1, same),
        _tx("third", EXPENSE, 1, same),
    ]

    assert [tx.id for tx in recent_transactions(transactions)] == ["first", "second", "third"]
    assert [tx.id for tx in recent_expenses(transactions)] == ["first", "third"]


def test_filter_by_type():
    transactions = [
        _tx("r", REVENUE, 1, "2025-03-01T09:00:00"),
        _tx("e", EXPENSE, 1, "2025-03-01T09:00:00"),
    ]

    assert [tx.id for tx in filter_by_type(transactions, REVENUE)] == ["r"]
    assert [tx.id for tx in filter_by_type(transactions, EXPENSE)] == ["e"]
    assert len(filter_by_type(transactions, None)) == 2
