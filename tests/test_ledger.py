from datetime import datetime
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from pocket_ledger.api.schemas import PlannedExpenseInput, TransactionInput
from pocket_ledger.models import TransactionType
from pocket_ledger.services.ledger import LedgerService
from pocket_ledger.storage.store import LedgerWriteError, TransactionStore

NOW = datetime(2025, 3, 15, 10, 0)


@pytest.fixture
def ledger(tmp_path, monkeypatch):
    monkeypatch.delenv("RECENT_TRANSACTIONS_LIMIT", raising=False)
    monkeypatch.delenv("RECENT_EXPENSES_LIMIT", raising=False)
    monkeypatch.delenv("CURRENCY_UNIT", raising=False)
    store = TransactionStore(data_path=str(tmp_path / "transactions.json"))
    return LedgerService(store=store, now=lambda: NOW)


def _input(**overrides) -> TransactionInput:
    fields = {
        "type": "Dépense",
        "title": "Courses",
        "amount": "2500",
        "category": "Nourriture",
    }
    fields.update(overrides)
    return TransactionInput(**fields)


def test_add_assigns_id_and_normalizes_fields(ledger):
    tx = ledger.add_transaction(_input(title="  Marché ", amount="12,5", description=" note "))

    assert tx.id
    assert tx.title == "Marché"
    assert tx.amount == 12.5
    assert tx.category == "nourriture"
    assert tx.description == "note"
    assert tx.date == "2025-03-15T10:00:00.000"
    assert ledger.get_transaction(tx.id) == tx


def test_added_transactions_have_distinct_ids(ledger):
    ids = {ledger.add_transaction(_input()).id for _ in range(20)}
    assert len(ids) == 20


def test_edit_keeps_id_date_and_length(ledger):
    first = ledger.add_transaction(_input(title="First"))
    second = ledger.add_transaction(_input(title="Second", type="Revenu", category="salaire"))

    edited = ledger.edit_transaction(first.id, _input(title="First edited", amount=99))

    transactions = ledger.list_transactions()
    assert len(transactions) == 2
    assert edited.id == first.id
    assert edited.date == first.date
    assert ledger.get_transaction(first.id).title == "First edited"
    assert ledger.get_transaction(second.id) == second


def test_edit_missing_id_reinserts(ledger):
    edited = ledger.edit_transaction("gone", _input(title="Back"))

    assert edited.id == "gone"
    assert [tx.id for tx in ledger.list_transactions()] == ["gone"]


def test_editing_planned_record_keeps_it_an_expense(ledger):
    planned = ledger.plan_expense(PlannedExpenseInput(
        title="Loyer", amount=1000, category="logement", planned_month="2025-04",
    ))

    edited = ledger.edit_transaction(planned.id, _input(title="Loyer avril", type="Revenu", amount=1200))

    assert edited.type is TransactionType.EXPENSE
    assert edited.is_planned is True
    groups = ledger.planned_overview()
    assert [group["month"] for group in groups] == ["2025-04"]
    assert groups[0]["total"] == 1200


def test_list_filters_by_type(ledger):
    ledger.add_transaction(_input(type="revenue", category="salaire"))
    ledger.add_transaction(_input(type="expense"))

    assert len(ledger.list_transactions(TransactionType.REVENUE)) == 1
    assert len(ledger.list_transactions(TransactionType.EXPENSE)) == 1
    assert len(ledger.list_transactions()) == 2


def test_delete_reports_outcome(ledger):
    tx = ledger.add_transaction(_input())

    assert ledger.delete_transaction("missing") is False
    assert ledger.delete_transaction(tx.id) is True
    assert ledger.list_transactions() == []


def test_plan_convert_and_requery(ledger):
    planned = ledger.plan_expense(PlannedExpenseInput(
        title="Vacances", amount=50, category="loisirs", plannedMonth="2025-06",
    ))

    groups = ledger.planned_overview()
    assert groups[0]["month"] == "2025-06"
    assert groups[0]["label"] == "juin 2025"
    assert groups[0]["total"] == 50

    realized = ledger.convert_planned(planned.id)

    assert realized.id == planned.id
    assert realized.is_planned is False
    assert realized.planned_month is None
    matches = [tx for tx in ledger.list_transactions() if tx.id == planned.id]
    assert len(matches) == 1
    assert matches[0].is_planned is False
    assert ledger.planned_overview() == []


def test_convert_unknown_or_realized_is_noop(ledger):
    tx = ledger.add_transaction(_input())

    assert ledger.convert_planned("missing") is None
    assert ledger.convert_planned(tx.id) is None
    assert ledger.get_transaction(tx.id) == tx


def test_delete_planned_matches_general_delete(ledger):
    planned = ledger.plan_expense(PlannedExpenseInput(
        title="Loyer", amount=1000, category="logement", planned_month="2025-04",
    ))

    assert ledger.delete_planned(planned.id) is True
    assert ledger.delete_planned(planned.id) is False


def test_dashboard_summary_and_recents(ledger):
    ledger.add_transaction(_input(type="Revenu", amount=100, category="salaire"))
    ledger.add_transaction(_input(amount=40))
    ledger.plan_expense(PlannedExpenseInput(
        title="Plan", amount=30, category="autre", planned_month="2025-03",
    ))

    view = ledger.dashboard()

    summary = view["summary"]
    assert summary["month"] == "Mars 2025"
    assert (summary["revenue"], summary["expenses"], summary["balance"]) == (100, 40, 60)
    assert summary["balance_display"] == "60 F CFA"
    assert len(view["recent_transactions"]) == 3
    assert len(view["recent_expenses"]) == 2
    assert view["recent_transactions"][0]["date_relative"] == "Aujourd'hui"


def test_write_failure_leaves_state_unchanged(ledger):
    tx = ledger.add_transaction(_input())

    with patch("pocket_ledger.storage.store.os.replace", side_effect=OSError("read-only")):
        with pytest.raises(LedgerWriteError):
            ledger.add_transaction(_input(title="Lost"))

    assert ledger.list_transactions() == [tx]


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": "   "},
        {"amount": "0"},
        {"amount": "-5"},
        {"amount": "abc"},
        {"amount": "nan"},
        {"category": ""},
        {"type": "Virement"},
    ],
)
def test_invalid_input_is_rejected(overrides):
    with pytest.raises(ValidationError):
        _input(**overrides)


@pytest.mark.parametrize("month", ["2025-13", "2025-00", "25-06", "2025-0²"])
def test_planned_month_format_is_checked(month):
    with pytest.raises(ValidationError):
        PlannedExpenseInput(title="x", amount=1, category="autre", planned_month=month)
