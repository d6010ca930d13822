from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Decoded JSON object as read from storage, before normalization.
RawRecord = dict[str, Any]

DEFAULT_CATEGORY_ID = "autre"


class TransactionType(str, Enum):
    REVENUE = "Revenu"
    EXPENSE = "Dépense"


class Transaction(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    type: TransactionType
    title: str = ""
    amount: float = Field(ge=0)  # magnitude only, sign comes from type
    category: str = DEFAULT_CATEGORY_ID
    description: str = ""
    date: str = ""  # ISO-8601 as stored
    is_planned: bool = Field(default=False, alias="isPlanned")
    planned_month: Optional[str] = Field(default=None, alias="plannedMonth")

    @field_validator("title", "description", "date", mode="before")
    @classmethod
    def _text_or_empty(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _lower_category(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_CATEGORY_ID
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("is_planned", mode="before")
    @classmethod
    def _planned_flag(cls, value: Any) -> Any:
        return False if value is None else value

    @property
    def is_expense(self) -> bool:
        return self.type is TransactionType.EXPENSE

    def to_record(self) -> RawRecord:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Category(BaseModel):
    id: str
    name: str
    icon: str
    color: str


class MonthlySummary(BaseModel):
    revenue: float = 0.0
    expenses: float = 0.0
    balance: float = 0.0


class PlannedGroup(BaseModel):
    month: str  # YYYY-MM, or the unspecified-month sentinel
    transactions: list[Transaction]
    total: float = 0.0
