"""
Formatting utilities for number and date normalization.
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN, localcontext
from typing import Optional


# Pre-compiled regex patterns (compiled once at module load)
_DATE_PATTERN_DDMMYYYY = re.compile(r'(\d{1,2})/(\d{1,2})/(\d{4})', re.ASCII)
_PLAIN_DECIMAL = re.compile(r'[+-]?(\d+(\.\d*)?|\.\d+)', re.ASCII)

_CENTS = Decimal(100)


def parse_date(date_str: str) -> date:
    """
    Parse a DD/MM/YYYY date.

    Day and month may be written with one or two digits, the year always
    has four. No other layout is accepted.

    Args:
        date_str: Date string to parse

    Returns:
        The parsed date

    Raises:
        ValueError: if the string is not a DD/MM/YYYY date or names a day
            that does not exist
    """
    match = _DATE_PATTERN_DDMMYYYY.fullmatch(date_str or '')
    if not match:
        raise ValueError(f"date {date_str!r} does not match DD/MM/YYYY")

    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as e:
        raise ValueError(f"date {date_str!r} is out of range: {e}") from None


def parse_amount(amount_str: Optional[str]) -> Optional[Decimal]:
    """
    Parse an amount written with a comma as decimal separator.

    Handles formats:
    - 12,50
    - 12.50
    - 3
    - -4,2

    Anything else (empty cell, thousands separators, exponents, NaN)
    means the cell holds no amount.

    Args:
        amount_str: Raw cell content

    Returns:
        Decimal value of the amount, or None when the cell holds no number
    """
    if amount_str is None:
        return None

    amount_str = amount_str.strip().replace(',', '.')
    if not _PLAIN_DECIMAL.fullmatch(amount_str):
        return None

    try:
        return Decimal(amount_str)
    except InvalidOperation:
        return None


def format_cents(amount: Decimal) -> str:
    """
    Format an amount as a whole number of cents.

    Examples:
        Decimal("-12.50") -> "-1250"
        Decimal("3.005") -> "300"

    Args:
        amount: Signed amount in currency units

    Returns:
        amount * 100 rounded half to even, without decimal places
    """
    # Enough precision to keep every digit of the amount
    with localcontext() as ctx:
        ctx.prec = len(amount.as_tuple().digits) + 3
        cents = (amount * _CENTS).quantize(Decimal(1), rounding=ROUND_HALF_EVEN)
    return f"{cents:f}"


def format_iso_date(value: date) -> str:
    """Format a date as YYYY-MM-DD."""
    return value.isoformat()
