from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Invalid date format. Use YYYY-MM-DD")


def parse_iso_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat((value or "").strip())
    except ValueError:
        raise ValidationError("Invalid timestamp. Use ISO 8601")


def month_bounds(value: str) -> tuple[date, date]:
    """First and last day of a YYYY-MM month."""
    try:
        year_s, month_s = (value or "").strip().split("-")
        year, month = int(year_s), int(month_s)
        last = monthrange(year, month)[1]
        return date(year, month, 1), date(year, month, last)
    except ValueError:
        raise ValidationError("Invalid month format. Use YYYY-MM")


def year_bounds(value) -> tuple[date, date]:
    """First and last day of a calendar year."""
    try:
        year = int(str(value).strip())
        return date(year, 1, 1), date(year, 12, 31)
    except ValueError:
        raise ValidationError("Invalid year. Use YYYY")


def iso_or_none(value):
    return value.isoformat() if value is not None else None
