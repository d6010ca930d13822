"""Display rules for amounts and dates.

Formatters never raise: anything that cannot be parsed as a date renders
as ``INVALID_DATE``.
"""

from datetime import datetime, timedelta
from typing import Any

from pocket_ledger.core import settings
from pocket_ledger.domain.timefmt import is_valid_month_tag, now_local, parse_timestamp, to_local
from pocket_ledger.models import Transaction

INVALID_DATE = "Date invalide"
TODAY = "Aujourd'hui"
YESTERDAY = "Hier"

MONTH_NAMES = (
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
)
MONTH_ABBREVIATIONS = (
    "janv.", "févr.", "mars", "avr.", "mai", "juin",
    "juil.", "août", "sept.", "oct.", "nov.", "déc.",
)


def format_currency(amount: float, decimals: int = 0, unit: str | None = None) -> str:
    unit = unit or settings.get_currency_unit()
    return f"{abs(amount):.{decimals}f} {unit}"


def signed_amount(transaction: Transaction, decimals: int = 0, unit: str | None = None) -> str:
    sign = "-" if transaction.is_expense else "+"
    return f"{sign}{format_currency(transaction.amount, decimals, unit)}"


def format_relative_date(value: Any, now: datetime | None = None) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        return INVALID_DATE
    today = to_local(now or now_local()).date()
    if parsed.date() == today:
        return TODAY
    if parsed.date() == today - timedelta(days=1):
        return YESTERDAY
    return parsed.strftime("%d/%m/%Y")


def format_short_date(value: Any) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        return INVALID_DATE
    return f"{parsed.day:02d} {MONTH_ABBREVIATIONS[parsed.month - 1]} {parsed.year}"


def format_long_date(value: Any) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        return INVALID_DATE
    return f"{parsed.day:02d} {MONTH_NAMES[parsed.month - 1]} {parsed.year}"


def month_label(value: Any) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        return INVALID_DATE
    return f"{MONTH_NAMES[parsed.month - 1].capitalize()} {parsed.year}"


def planned_month_label(month: str | None) -> str:
    if not month or not is_valid_month_tag(month):
        return INVALID_DATE
    year, number = month.split("-")
    return f"{MONTH_NAMES[int(number) - 1]} {year}"
