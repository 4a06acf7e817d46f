from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

CENTS = Decimal("0.01")
ZERO = Decimal("0")


def parse_amount(value: Any) -> Decimal:
    """Parse a stored numeric value; anything unparseable or not representable in cents counts as zero."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        parsed = value
    else:
        text = str(value).strip()
        if not text:
            return ZERO
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            return ZERO
    if not parsed.is_finite() or not fits_cents(parsed):
        return ZERO
    return parsed


def quantize_amount(value: Decimal, quantize: Decimal = CENTS) -> Decimal:
    return value.quantize(quantize, rounding=ROUND_HALF_UP)


def fits_cents(value: Decimal) -> bool:
    try:
        quantize_amount(value)
    except InvalidOperation:
        return False
    return True


def format_amount(value: Decimal) -> str:
    """Fixed-point string with two fraction digits ("99.98"); unrepresentable values give "0.00"."""
    try:
        q = quantize_amount(value)
    except InvalidOperation:
        q = quantize_amount(ZERO)
    if q.is_zero():
        # Decimal keeps the sign of zero ("-0.00"); stored zeros never carry one.
        q = q.copy_abs()
    return f"{q:f}"


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")
