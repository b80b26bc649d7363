"""
Money Arithmetic Module

Fixed-point decimal helpers for all monetary values in the loan service.
Amounts carry exactly 2 fraction digits and interest rates 3, both rounded
half-up. NEVER uses float for monetary values.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation, getcontext
from typing import Optional, Union
import re

# Set global decimal context for financial precision
getcontext().prec = 28

MONEY_QUANTUM = Decimal('0.01')
RATE_QUANTUM = Decimal('0.001')
ZERO = Decimal('0.00')

Number = Union[Decimal, int, str]


def to_decimal(value: Number) -> Decimal:
    """Coerce an int, str or Decimal to Decimal without going through float"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        raise TypeError("Monetary values must not be floats")
    return Decimal(str(value))


def round_money(value: Number) -> Decimal:
    """Round to 2 decimal places, half-up"""
    return to_decimal(value).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def round_rate(value: Number) -> Decimal:
    """Round an interest rate to 3 decimal places, half-up"""
    return to_decimal(value).quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP)


def money_or_zero(value: Optional[Decimal]) -> Decimal:
    """Treat a missing amount as zero"""
    return value if value is not None else ZERO


def format_money(value: Decimal) -> str:
    """Format an amount for the wire: plain string with 2 fraction digits"""
    return str(round_money(value))


def format_rate(value: Decimal) -> str:
    """Format an interest rate for the wire: plain string with 3 fraction digits"""
    return str(round_rate(value))


def decimal_from_string(value: str, max_fraction_digits: Optional[int] = None) -> Decimal:
    """
    Strictly parse a decimal string read from storage or the wire

    Args:
        value: String representation such as "1000.50"
        max_fraction_digits: Reject values with more fraction digits than this

    Returns:
        Decimal value

    Raises:
        ValueError: If the string is not a plain decimal number
    """
    if not value or not isinstance(value, str):
        raise ValueError("Value must be a non-empty string")

    clean_value = value.strip()
    if not re.match(r'^[+-]?\d+(\.\d+)?$', clean_value):
        raise ValueError(f"Cannot convert '{value}' to Decimal")

    try:
        result = Decimal(clean_value)
    except InvalidOperation:
        raise ValueError(f"Cannot convert '{value}' to Decimal")

    if max_fraction_digits is not None:
        exponent = result.as_tuple().exponent
        if isinstance(exponent, int) and -exponent > max_fraction_digits:
            raise ValueError(
                f"'{value}' has more than {max_fraction_digits} fraction digits"
            )

    return result
