"""Calendar-month helpers. A period is a month written 'YYYY-MM'."""

import calendar
import datetime as dt
from typing import Optional


def parse_month(month: str) -> tuple[int, int]:
    """Split 'YYYY-MM' into (year, month), raising ValueError if malformed."""
    try:
        year_text, month_text = month.split("-")
        year, month_number = int(year_text), int(month_text)
    except (AttributeError, ValueError):
        raise ValueError(f"Month must be YYYY-MM, got {month!r}")
    if len(year_text) != 4 or len(month_text) != 2 or not 1 <= month_number <= 12:
        raise ValueError(f"Month must be YYYY-MM, got {month!r}")
    return year, month_number


def month_key(day: dt.date) -> str:
    return day.isoformat()[:7]


def current_month(today: Optional[dt.date] = None) -> str:
    return month_key(today or dt.date.today())


def previous_month(month: str) -> str:
    """The calendar month before ``month``."""
    year, month_number = parse_month(month)
    if month_number == 1:
        return f"{year - 1:04d}-12"
    return f"{year:04d}-{month_number - 1:02d}"


def days_in_month(month: str) -> int:
    year, month_number = parse_month(month)
    return calendar.monthrange(year, month_number)[1]


def month_label(month: str) -> str:
    """'2024-03' -> 'March 2024'."""
    year, month_number = parse_month(month)
    return f"{calendar.month_name[month_number]} {year}"
