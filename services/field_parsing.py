"""
services.field_parsing - Coerce request values into column values.

Single-responsibility: given a raw JSON value, either return the typed
value or raise ValidationError naming the field.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation

import config
from services.errors import ValidationError

_CENT = Decimal("0.01")


def parse_money(raw, label: str) -> Decimal:
    """
    Non-negative currency with 2 decimals.  Accepts numbers and strings
    such as "$12.50" or "1,200".  Empty → 0.
    """
    if raw is None or raw == "":
        return Decimal("0.00")
    if isinstance(raw, bool):
        raise ValidationError(f"{label} must be a number")
    text = str(raw).replace("$", "").replace(",", "").strip()
    if not text:
        return Decimal("0.00")
    try:
        value = Decimal(text)
    except InvalidOperation:
        raise ValidationError(f"{label} must be a number") from None
    if not value.is_finite():
        raise ValidationError(f"{label} must be a number")
    if value < 0:
        raise ValidationError(f"{label} cannot be negative")
    try:
        value = value.quantize(_CENT)
    except InvalidOperation:
        raise ValidationError(f"{label} is too large") from None
    if value >= Decimal("100000000"):
        raise ValidationError(f"{label} is too large")
    return value


def parse_quantity(raw) -> int:
    """Positive integer up to ORDER_ITEM_MAX_QUANTITY.  Empty → 1."""
    if raw is None or raw == "":
        return 1
    if isinstance(raw, bool):
        raise ValidationError("Quantity must be a whole number")
    try:
        if isinstance(raw, float):
            if not raw.is_integer():
                raise ValueError(raw)
            value = int(raw)
        else:
            value = int(str(raw).strip())
    except ValueError:
        raise ValidationError("Quantity must be a whole number") from None
    if value < 1:
        raise ValidationError("Quantity must be at least 1")
    if value > config.ORDER_ITEM_MAX_QUANTITY:
        raise ValidationError(
            f"Quantity cannot exceed {config.ORDER_ITEM_MAX_QUANTITY}"
        )
    return value


def parse_date(raw, label: str):
    """ISO 'YYYY-MM-DD' (a trailing time part is ignored).  Empty → None."""
    if raw is None or raw == "":
        return None
    try:
        return date.fromisoformat(str(raw).strip()[:10])
    except ValueError:
        raise ValidationError(f"{label} must be a date (YYYY-MM-DD)") from None


def optional_text(raw) -> str | None:
    """Strip; empty → None."""
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None
