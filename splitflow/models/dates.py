"""
Calendar Dates

Ledger dates are plain `datetime.date` values. On disk they are written as
DD-MM-YYYY; ISO strings are accepted too so hand-edited files still load.
"""

from datetime import date, datetime, timedelta
from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer


DATE_FORMAT = "%d-%m-%Y"
DATE_STRING_WIDTH = len("DD-MM-YYYY")

ONE_DAY = timedelta(days=1)


def today() -> date:
    return date.today()


def succ(day: date) -> date:
    """The following calendar day."""
    return day + ONE_DAY


def pred(day: date) -> date:
    """The preceding calendar day."""
    return day - ONE_DAY


def format_date(day: date) -> str:
    return day.strftime(DATE_FORMAT)


def parse_date(text: str) -> date:
    """Parse DD-MM-YYYY, falling back to ISO YYYY-MM-DD."""
    text = text.strip()
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        return date.fromisoformat(text)


def _coerce_date(value: Any) -> Any:
    if isinstance(value, str):
        return parse_date(value)
    return value


LedgerDate = Annotated[
    date,
    BeforeValidator(_coerce_date),
    PlainSerializer(format_date, return_type=str, when_used="json"),
]
