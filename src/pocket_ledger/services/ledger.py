from collections.abc import Callable
from datetime import datetime
from typing import Any

from pocket_ledger.api.schemas import PlannedExpenseInput, TransactionInput
from pocket_ledger.core import settings
from pocket_ledger.domain.aggregation import (
    filter_by_type,
    recent_expenses,
    recent_transactions,
    summarize_month,
)
from pocket_ledger.domain.normalizer import generate_id
from pocket_ledger.domain.planning import convert_to_realized, list_planned
from pocket_ledger.domain.timefmt import now_local, parse_timestamp, to_iso
from pocket_ledger.domain.transactions import (
    build_planned_group_payload,
    build_summary_payload,
    build_transactions_display,
)
from pocket_ledger.logger import get_logger
from pocket_ledger.models import Transaction, TransactionType
from pocket_ledger.storage.store import TransactionStore

logger = get_logger(__name__)


class LedgerService:
    def __init__(
        self,
        store: TransactionStore,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.now = now or now_local

    def list_transactions(self, kind: TransactionType | None = None) -> list[Transaction]:
        return filter_by_type(self.store.load(), kind)

    def get_transaction(self, transaction_id: str) -> Transaction | None:
        return self.store.get(transaction_id)

    def add_transaction(self, data: TransactionInput) -> Transaction:
        transaction = Transaction(
            id=generate_id(self.store.known_ids()),
            type=data.type,
            title=data.title,
            amount=data.amount,
            category=data.category,
            description=data.description,
            date=to_iso(self.now()),
        )
        self.store.replace_or_insert(transaction)
        logger.info(
            "[LEDGER] Added %s '%s' (%s).",
            transaction.type.value,
            transaction.title,
            transaction.id,
        )
        return transaction

    def edit_transaction(self, transaction_id: str, data: TransactionInput) -> Transaction:
        """
        Replace the editable fields of a transaction, keeping id and date.

        Planned records stay expenses so the planning views keep showing them.
        If the record no longer exists it is inserted again under the same id.
        """
        existing = self.store.get(transaction_id)
        date_value = existing.date if existing else ""
        if parse_timestamp(date_value) is None:
            date_value = to_iso(self.now())

        kind = data.type
        if existing and existing.is_planned and kind is not TransactionType.EXPENSE:
            logger.warning(
                "[LEDGER] Transaction %s is planned; keeping it an expense instead of %s.",
                transaction_id,
                kind.value,
            )
            kind = TransactionType.EXPENSE

        update: dict[str, Any] = {
            "type": kind,
            "title": data.title,
            "amount": data.amount,
            "category": data.category,
            "description": data.description,
            "date": date_value,
        }
        if existing:
            transaction = existing.model_copy(update=update)
        else:
            logger.warning("[LEDGER] Edited transaction %s no longer exists; re-inserting.", transaction_id)
            transaction = Transaction(id=transaction_id, **update)

        self.store.replace_or_insert(transaction)
        logger.info("[LEDGER] Updated transaction %s.", transaction_id)
        return transaction

    def delete_transaction(self, transaction_id: str) -> bool:
        before = self.store.load()
        after = self.store.delete_by_id(transaction_id)
        return len(after) != len(before)

    def dashboard(self, reference: datetime | None = None) -> dict[str, Any]:
        reference = reference or self.now()
        transactions = self.store.load()
        summary = summarize_month(transactions, reference)
        now = self.now()
        return {
            "summary": build_summary_payload(summary, reference),
            "recent_transactions": build_transactions_display(
                recent_transactions(transactions, settings.get_recent_transactions_limit()),
                now=now,
                decimals=0,
            ),
            "recent_expenses": build_transactions_display(
                recent_expenses(transactions, settings.get_recent_expenses_limit()),
                now=now,
                decimals=0,
            ),
        }

    def planned_overview(self) -> list[dict[str, Any]]:
        now = self.now()
        return [
            build_planned_group_payload(group, now=now)
            for group in list_planned(self.store.load())
        ]

    def plan_expense(self, data: PlannedExpenseInput) -> Transaction:
        transaction = Transaction(
            id=generate_id(self.store.known_ids()),
            type=TransactionType.EXPENSE,
            title=data.title,
            amount=data.amount,
            category=data.category,
            description=data.description,
            date=to_iso(self.now()),
            is_planned=True,
            planned_month=data.planned_month,
        )
        self.store.replace_or_insert(transaction)
        logger.info(
            "[PLAN] Planned '%s' for %s (%s).",
            transaction.title,
            transaction.planned_month,
            transaction.id,
        )
        return transaction

    def convert_planned(self, transaction_id: str) -> Transaction | None:
        existing = self.store.get(transaction_id)
        if existing is None:
            logger.info("[PLAN] Conversion of unknown id %s ignored.", transaction_id)
            return None
        if not existing.is_planned:
            logger.info("[PLAN] Transaction %s is not planned; nothing to convert.", transaction_id)
            return None

        realized = convert_to_realized(existing, self.now())
        self.store.replace_or_insert(realized)
        logger.info("[PLAN] Converted planned transaction %s.", transaction_id)
        return realized

    def delete_planned(self, transaction_id: str) -> bool:
        return self.delete_transaction(transaction_id)
