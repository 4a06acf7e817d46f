from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from common.reconciliation.amounts import format_amount, parse_amount, quantize_amount

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_currency(amount: Optional[Decimal], *, is_discount: bool = False) -> str:
    """"$x.xx"; negatives and non-zero discounts carry a leading "-" ("-$5.00")."""
    if amount is None:
        return "$0.00"
    text = format_amount(abs(amount))
    if text != "0.00" and (amount < 0 or is_discount):
        return f"-${text}"
    return f"${text}"


def format_currency_grouped(value: Any) -> str:
    """"$1,234.50" style, used in message bodies."""
    amount = quantize_amount(parse_amount(value))
    text = f"${abs(amount):,.2f}"
    return f"-{text}" if amount < 0 else text


def format_date(value: Any, default: str = "") -> str:
    """
    Render a stored date as "09 Jan 2026".

    Empty values give `default`; values that do not parse as ISO dates are
    returned unchanged.
    """
    if isinstance(value, datetime):
        parsed: date = value.date()
    elif isinstance(value, date):
        parsed = value
    else:
        text = str(value or "").strip()
        if not text:
            return default
        parsed_or_none = _parse_iso_date(text)
        if parsed_or_none is None:
            return text
        parsed = parsed_or_none
    return f"{parsed.day:02d} {_MONTHS[parsed.month - 1]} {parsed.year}"


def _parse_iso_date(text: str) -> date | None:
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def text_or_empty(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()
