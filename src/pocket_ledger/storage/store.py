import json
import os
import tempfile
from typing import Any

from pocket_ledger.domain.aggregation import sort_by_date_desc
from pocket_ledger.domain.normalizer import normalize_records
from pocket_ledger.logger import get_logger
from pocket_ledger.models import RawRecord, Transaction

logger = get_logger(__name__)


class LedgerStorageError(Exception):
    """Base class for failures of the ledger file."""


class LedgerReadError(LedgerStorageError):
    pass


class LedgerWriteError(LedgerStorageError):
    pass


class TransactionStore:
    """
    Owns the single JSON file holding the whole transaction collection.

    Every mutation reads the full collection, changes it in memory and
    rewrites the file. Writes go to a temporary file that replaces the
    target in one step, so readers see either the old or the new collection.

    Stored records that cannot be read as transactions are kept aside from
    the last load and written back unchanged after the valid ones.
    """

    def __init__(self, data_path: str):
        self.data_path = data_path
        self._rejected: list[RawRecord] = []

    def read_raw(self) -> Any:
        if not os.path.exists(self.data_path):
            return None
        try:
            with open(self.data_path, encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise LedgerReadError(f"Malformed ledger file {self.data_path}: {exc}") from exc
        except OSError as exc:
            raise LedgerReadError(f"Cannot read ledger file {self.data_path}: {exc}") from exc

    def load(self) -> list[Transaction]:
        try:
            raw = self.read_raw()
        except LedgerReadError as exc:
            logger.warning("[STORE] %s. Treating collection as empty.", exc)
            self._rejected = []
            return []

        result = normalize_records(raw)
        self._rejected = result.rejected
        if result.rejected:
            logger.warning(
                "[STORE] %d stored record(s) could not be read and are left as they are.",
                len(result.rejected),
            )
        if result.changed:
            try:
                self.save(result.transactions)
                logger.info(
                    "[STORE] Normalized collection persisted (%d record(s)).",
                    len(result.transactions),
                )
            except LedgerWriteError as exc:
                logger.warning("[STORE] Could not persist normalized collection: %s", exc)
        return result.transactions

    def save(self, transactions: list[Transaction]) -> None:
        directory = os.path.dirname(os.path.abspath(self.data_path))
        tmp_path: str | None = None
        try:
            os.makedirs(directory, exist_ok=True)
            payload = json.dumps(
                [tx.to_record() for tx in transactions] + self._rejected,
                indent=2,
                ensure_ascii=False,
            )
            fd, tmp_path = tempfile.mkstemp(
                prefix=".ledger-",
                suffix=".tmp",
                dir=directory,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.data_path)
            tmp_path = None
        except (OSError, TypeError, ValueError) as exc:
            raise LedgerWriteError(f"Cannot write ledger file {self.data_path}: {exc}") from exc
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
        logger.debug("[STORE] Saved %d transaction(s) to %s.", len(transactions), self.data_path)

    def known_ids(self) -> set[str]:
        """Ids of every stored record, including the ones kept aside on load."""
        ids = {tx.id for tx in self.load()}
        ids.update(record["id"] for record in self._rejected)
        return ids

    def get(self, transaction_id: str) -> Transaction | None:
        for tx in self.load():
            if tx.id == transaction_id:
                return tx
        return None

    def delete_by_id(self, transaction_id: str) -> list[Transaction]:
        transactions = self.load()
        remaining = [tx for tx in transactions if tx.id != transaction_id]
        if len(remaining) == len(transactions):
            logger.debug("[STORE] Delete of unknown id %s ignored.", transaction_id)
            return transactions
        self.save(remaining)
        logger.info("[STORE] Deleted transaction %s.", transaction_id)
        return remaining

    def replace_or_insert(self, transaction: Transaction) -> list[Transaction]:
        transactions = self.load()
        replaced = False
        updated: list[Transaction] = []
        for tx in transactions:
            if tx.id == transaction.id:
                updated.append(transaction)
                replaced = True
            else:
                updated.append(tx)
        if not replaced:
            updated.insert(0, transaction)

        updated = sort_by_date_desc(updated)
        self.save(updated)
        logger.info(
            "[STORE] %s transaction %s.",
            "Replaced" if replaced else "Inserted",
            transaction.id,
        )
        return updated
