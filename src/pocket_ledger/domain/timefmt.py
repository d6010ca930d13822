import re
from datetime import date, datetime
from typing import Any

_MONTH_TAG = re.compile(r"\d{4}-(0[1-9]|1[0-2])", re.ASCII)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a stored timestamp into a naive local datetime, or None if unusable."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    try:
        return to_local(parsed)
    except (OverflowError, ValueError):
        # Aware values at the edges of the datetime range have no local equivalent.
        return None


def to_local(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def now_local() -> datetime:
    return datetime.now()


def to_iso(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds")


def is_valid_month_tag(value: str) -> bool:
    return isinstance(value, str) and _MONTH_TAG.fullmatch(value) is not None
