"""
Decimal helpers for currency arithmetic.

Amounts are rounded to two places with ROUND_HALF_UP,
the usual commercial rounding rule.
"""

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """Convert a number, string or None to Decimal (None -> 0)."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_currency(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def safe_add(a, b) -> Decimal:
    return round_currency(to_decimal(a) + to_decimal(b))


def safe_subtract(a, b) -> Decimal:
    return round_currency(to_decimal(a) - to_decimal(b))


def sum_amounts(values) -> Decimal:
    """Sum without intermediate rounding, then round once."""
    return round_currency(sum((to_decimal(v) for v in values), ZERO))


def zero_floor(value) -> Decimal:
    rounded = round_currency(value)
    return ZERO.quantize(CENT) if rounded < 0 else rounded
