"""Helpers for Decimal normalization and exact arithmetic."""

from decimal import (
    Context,
    Decimal,
    InvalidOperation,
    MAX_EMAX,
    MAX_PREC,
    MIN_EMIN,
    ROUND_HALF_UP,
)

# Additions and multiplications under this context never round.
EXACT_CONTEXT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)

ZERO = Decimal("0")
ONE = Decimal("1")


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from SQL or adapters.

    Returns:
        Decimal: Normalized numeric value.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def parse_decimal(value) -> Decimal | None:
    """Parse a decimal string, returning None when it is not a number.

    Args:
        value: Raw value (str, int, Decimal).

    Returns:
        Decimal | None: Parsed finite value or None.
    """
    if value is None or isinstance(value, float):
        return None
    try:
        parsed = coerce_decimal(value)
    except InvalidOperation:
        return None
    if not parsed.is_finite():
        return None
    return parsed


def add_exact(left: Decimal, right: Decimal) -> Decimal:
    """Return left + right without any rounding."""
    return EXACT_CONTEXT.add(left, right)


def multiply_exact(left: Decimal, right: Decimal) -> Decimal:
    """Return left * right without any rounding."""
    return EXACT_CONTEXT.multiply(left, right)


def positive(amount: Decimal) -> Decimal:
    """Return the absolute value of an amount."""
    return amount.copy_abs()


def negative(amount: Decimal) -> Decimal:
    """Return an amount forced to zero or below.

    Zero keeps its unsigned form so that sums never render as ``-0``.
    """
    if amount.is_zero():
        return amount.copy_abs()
    return amount.copy_abs().copy_negate()


def round_to_places(amount: Decimal, places: int) -> Decimal:
    """Round half away from zero to a number of decimal places.

    Args:
        amount: Exact amount.
        places: Decimal places of the target currency.

    Returns:
        Decimal: Rounded amount.
    """
    exponent = Decimal(1).scaleb(-places)
    rounded = amount.quantize(exponent, rounding=ROUND_HALF_UP, context=EXACT_CONTEXT)
    if rounded.is_zero():
        return rounded.copy_abs()
    return rounded


def to_plain_string(amount: Decimal) -> str:
    """Render a Decimal without scientific notation."""
    return format(amount, "f")


def to_display_float(amount: Decimal) -> float:
    """Return a lossy float for sorting and display only."""
    return float(to_plain_string(amount))


__all__ = [
    "EXACT_CONTEXT",
    "ONE",
    "ZERO",
    "add_exact",
    "coerce_decimal",
    "multiply_exact",
    "negative",
    "parse_decimal",
    "positive",
    "round_to_places",
    "to_display_float",
    "to_plain_string",
]
