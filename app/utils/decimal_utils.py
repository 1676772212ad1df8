"""Decimal arithmetic helpers"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

# Smallest currency unit; also the tolerance used for total checks
MINOR_UNIT = Decimal("0.01")

# Largest amount a Numeric(12, 2) column holds
MAX_AMOUNT = Decimal("9999999999.99")


def round_decimal(value: Decimal, decimal_places: int = 2) -> Decimal:
    """
    Round a decimal value to specified decimal places.

    Args:
        value: Decimal value to round
        decimal_places: Number of decimal places (default 2)

    Returns:
        Rounded decimal value
    """
    quantize_value = Decimal(10) ** -decimal_places
    return value.quantize(quantize_value, rounding=ROUND_HALF_UP)


def sum_decimals(values: Iterable[Decimal]) -> Decimal:
    """
    Sum decimal values.

    Args:
        values: Decimal values

    Returns:
        Sum of all values
    """
    return sum(values, Decimal("0"))


def to_decimal(value) -> Decimal:
    """Convert ints, floats and strings to Decimal without float artifacts"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_minor_units(value: Decimal) -> int:
    """
    Convert a currency amount to an integer count of minor units.

    Args:
        value: Amount, rounded half-up to 2 places first

    Returns:
        Amount in minor units (e.g. 12.34 -> 1234)
    """
    return int(round_decimal(value) / MINOR_UNIT)


def from_minor_units(units: int) -> Decimal:
    """Convert an integer count of minor units back to a 2-place Decimal"""
    return round_decimal(Decimal(units) * MINOR_UNIT)


def within_tolerance(value: Decimal, expected: Decimal, tolerance: Decimal = MINOR_UNIT) -> bool:
    """Check that value is no further than tolerance from expected"""
    return abs(value - expected) <= tolerance
