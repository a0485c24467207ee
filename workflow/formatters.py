"""Display formatters for amounts, dates and phone numbers (French conventions)."""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP

NOT_AVAILABLE = "N/A"

_PHONE_PATTERN = re.compile(r"^(\d{2})(\d{2})(\d{2})(\d{2})(\d{2})$")


def format_currency(value: float | int | Decimal) -> str:
    """Format an amount in francs CFA, e.g. 1 000 000 FCFA.

    Rounded to the unit (half up); thousands separated by a space.
    """
    amount = Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    grouped = f"{abs(int(amount)):,}".replace(",", " ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{grouped} FCFA"


def _to_datetime(value: date | datetime | str) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))


def format_date(value: date | datetime | str | None) -> str:
    """Format a date as dd/mm/yyyy. ISO strings are accepted; empty values give N/A."""
    if not value:
        return NOT_AVAILABLE
    return _to_datetime(value).strftime("%d/%m/%Y")


def format_datetime(value: date | datetime | str | None) -> str:
    """Format a date and time as dd/mm/yyyy à HH:MM."""
    if not value:
        return NOT_AVAILABLE
    return _to_datetime(value).strftime("%d/%m/%Y à %H:%M")


def format_phone_number(phone: str | None) -> str:
    """Format a 10-digit number as +xx xx xx xx xx; other values are returned unchanged."""
    if not phone:
        return NOT_AVAILABLE
    return _PHONE_PATTERN.sub(r"+\1 \2 \3 \4 \5", phone)
