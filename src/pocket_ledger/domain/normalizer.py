"""Turn decoded storage content into validated transactions.

This is the only place where raw records become ``Transaction`` objects.
Legacy records without a usable string id get a generated one, legacy
signed amounts are stored as magnitudes, and the caller is told whether the
collection has to be written back.

Records that still fail validation are not part of the returned
transactions, but they are handed back untouched in ``rejected`` so the
store can keep them on disk.
"""

from __future__ import annotations

import secrets
import string
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from pocket_ledger.logger import get_logger
from pocket_ledger.models import RawRecord, Transaction

logger = get_logger(__name__)

_BASE36 = string.digits + string.ascii_lowercase
ID_SUFFIX_LENGTH = 6


@dataclass(frozen=True)
class NormalizationResult:
    transactions: list[Transaction]
    changed: bool
    assigned_ids: list[str] = field(default_factory=list)
    dropped: int = 0
    rejected: list[RawRecord] = field(default_factory=list)


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_id(existing: Iterable[str] | None = None) -> str:
    """Millisecond clock in base36 followed by a random base36 suffix."""
    taken = set(existing or ())
    while True:
        stamp = _to_base36(time.time_ns() // 1_000_000)
        suffix = "".join(secrets.choice(_BASE36) for _ in range(ID_SUFFIX_LENGTH))
        candidate = stamp + suffix
        if candidate not in taken:
            return candidate


def coerce_records(raw: Any) -> tuple[list[Any], bool]:
    """Return the decoded value as a list, plus whether its shape had to change."""
    if raw is None:
        return [], False
    if isinstance(raw, list):
        return list(raw), False
    if isinstance(raw, dict):
        return [raw], True
    logger.warning("[NORMALIZE] Unexpected collection type %s; treating as empty.", type(raw).__name__)
    return [], True


def _has_usable_id(record: RawRecord, seen: set[str]) -> bool:
    value = record.get("id")
    return isinstance(value, str) and bool(value) and value not in seen


def _repair_signed_amount(record: RawRecord) -> bool:
    """Store a negative numeric amount as its magnitude; True if it was changed."""
    amount = record.get("amount")
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        return False
    if amount >= 0:
        return False
    record["amount"] = abs(amount)
    logger.info("[NORMALIZE] Record %s had signed amount %s; stored as magnitude.", record.get("id"), amount)
    return True


def normalize_records(raw: Any) -> NormalizationResult:
    records, changed = coerce_records(raw)

    objects: list[RawRecord] = []
    dropped = 0
    for item in records:
        if isinstance(item, dict):
            objects.append(dict(item))
        else:
            logger.warning("[NORMALIZE] Dropping non-object entry of type %s.", type(item).__name__)
            dropped += 1

    present = {
        record["id"] for record in objects
        if isinstance(record.get("id"), str) and record["id"]
    }
    seen: set[str] = set()
    assigned: list[str] = []
    for record in objects:
        if not _has_usable_id(record, seen):
            new_id = generate_id(present | seen)
            logger.info(
                "[NORMALIZE] Assigned id %s (previous id: %r).",
                new_id,
                record.get("id"),
            )
            record["id"] = new_id
            assigned.append(new_id)
        seen.add(record["id"])

    repaired = 0
    transactions: list[Transaction] = []
    rejected: list[RawRecord] = []
    for record in objects:
        if _repair_signed_amount(record):
            repaired += 1
        try:
            transactions.append(Transaction.model_validate(record))
        except ValidationError as exc:
            logger.warning(
                "[NORMALIZE] Keeping invalid record %s out of the ledger: %d validation error(s).",
                record.get("id"),
                exc.error_count(),
            )
            rejected.append(record)

    # Rejected records alone never force a rewrite.
    changed = changed or bool(assigned) or dropped > 0 or repaired > 0
    if changed:
        logger.debug(
            "[NORMALIZE] Collection changed: %d id(s) assigned, %d amount(s) repaired, %d entry(ies) dropped.",
            len(assigned),
            repaired,
            dropped,
        )
    return NormalizationResult(
        transactions=transactions,
        changed=changed,
        assigned_ids=assigned,
        dropped=dropped,
        rejected=rejected,
    )
