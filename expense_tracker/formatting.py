"""
Display formatting with Indian conventions.

Amounts use Indian digit grouping (lakh/crore): the last three digits
form one group, everything before that is grouped in pairs.

    1234567.5 -> 12,34,567.50
"""

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from expense_tracker.periods import month_label


Number = Union[Decimal, int, float]


def group_indian(digits: str) -> str:
    """Insert Indian thousands separators into a string of digits."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs) + "," + tail


def format_number(amount: Number, decimals: int = 2) -> str:
    """Format with Indian grouping and a fixed number of decimals."""
    value = Decimal(str(amount))
    quantum = Decimal(1).scaleb(-decimals)
    value = value.quantize(quantum, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    text = f"{abs(value):.{decimals}f}"
    if decimals:
        whole, fraction = text.split(".")
        return f"{sign}{group_indian(whole)}.{fraction}"
    return f"{sign}{group_indian(text)}"


def format_inr(amount: Number, symbol: str = "₹", decimals: int = 2) -> str:
    """Currency with the rupee glyph, for the UI: ₹1,23,456.70"""
    text = format_number(amount, decimals)
    if text.startswith("-"):
        return f"-{symbol}{text[1:]}"
    return f"{symbol}{text}"


def format_inr_text(amount: Number, marker: str = "Rs.", decimals: int = 2) -> str:
    """
    Currency with a plain-text marker, for exported documents.

    The standard PDF fonts have no rupee glyph, so documents say
    'Rs. 1,23,456.70' instead.
    """
    text = format_number(amount, decimals)
    if text.startswith("-"):
        return f"-{marker} {text[1:]}"
    return f"{marker} {text}"


def format_date(day: dt.date) -> str:
    """'2024-03-05' -> '05 Mar 2024'."""
    return day.strftime("%d %b %Y")


def format_short_date(day: dt.date) -> str:
    """Axis label for trend charts: '5 Mar'."""
    return f"{day.day} {day.strftime('%b')}"


def format_month(month: str) -> str:
    return month_label(month)


def format_percentage(value: Number, decimals: int = 1) -> str:
    return f"{Decimal(str(value)):.{decimals}f}%"
