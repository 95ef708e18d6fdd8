from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any


# Maximum money value accepted from forms: 9,999,999,999.99
MAX_MONEY = Decimal("9999999999.99")
CENT = Decimal("0.01")


class ValidationError(ValueError):
    """400-level input problem."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate SKU)."""


def to_money(value: Any) -> Decimal:
    """Normalize a trusted backend value (float, str, Decimal) to a 2dp Decimal."""
    if value is None:
        return Decimal("0.00")
    if isinstance(value, Decimal):
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_money(value: Any, field: str, *, allow_zero: bool = True) -> Decimal:
    """
    Parse user-supplied money (JSON number or string).

    Rejects booleans, empty strings, non-numeric text, NaN/Infinity and
    negative amounts. Returns a Decimal rounded to cents.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")

    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValidationError(f"{field} must be a number")

    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number")

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number")
    if amount < 0:
        raise ValidationError(f"{field} cannot be negative")
    if not allow_zero and amount == 0:
        raise ValidationError(f"{field} must be greater than zero")
    if amount > MAX_MONEY:
        raise ValidationError(f"{field} exceeds maximum allowed value")

    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_non_negative_int(value: Any, field: str, *, default: int | None = None) -> int:
    """
    Strict integer parsing - rejects floats, decimals and scientific notation.
    Empty values fall back to `default` when one is given.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if default is not None:
            return default
        raise ValidationError(f"{field} must be an integer")

    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")

    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        stripped = value.strip()
        if 'e' in stripped.lower() or '.' in stripped:
            raise ValidationError(f"{field} must be a plain integer")
        try:
            parsed = int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    else:
        raise ValidationError(f"{field} must be an integer")

    if parsed < 0:
        raise ValidationError(f"{field} cannot be negative")
    return parsed


def clean_text(value: Any) -> str | None:
    """Strip strings; empty or missing values become None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None
