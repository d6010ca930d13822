import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pocket_ledger.domain.timefmt import is_valid_month_tag
from pocket_ledger.models import TransactionType

_TYPE_ALIASES = {
    "revenu": TransactionType.REVENUE,
    "revenue": TransactionType.REVENUE,
    "income": TransactionType.REVENUE,
    "dépense": TransactionType.EXPENSE,
    "depense": TransactionType.EXPENSE,
    "expense": TransactionType.EXPENSE,
}


def parse_transaction_type(value: Any) -> Any:
    if isinstance(value, str):
        return _TYPE_ALIASES.get(value.strip().lower(), value)
    return value


class _EntryInput(BaseModel):
    title: str
    amount: float
    category: str
    description: str = ""

    @field_validator("title")
    @classmethod
    def _title_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, value: Any) -> Any:
        if isinstance(value, str):
            cleaned = value.strip().replace(",", ".")
            if not cleaned:
                raise ValueError("Amount is required")
            return cleaned
        return value

    @field_validator("amount")
    @classmethod
    def _positive_amount(cls, value: float) -> float:
        if not math.isfinite(value) or value <= 0:
            raise ValueError("Amount must be a positive number")
        return abs(value)

    @field_validator("category")
    @classmethod
    def _category_required(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("Category is required")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _description_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value


class TransactionInput(_EntryInput):
    type: TransactionType = TransactionType.EXPENSE

    @field_validator("type", mode="before")
    @classmethod
    def _type_label(cls, value: Any) -> Any:
        return parse_transaction_type(value)


class PlannedExpenseInput(_EntryInput):
    model_config = ConfigDict(populate_by_name=True)

    planned_month: str = Field(alias="plannedMonth")

    @field_validator("planned_month")
    @classmethod
    def _month_tag(cls, value: str) -> str:
        value = value.strip()
        if not is_valid_month_tag(value):
            raise ValueError("Planned month must use the YYYY-MM format")
        return value
