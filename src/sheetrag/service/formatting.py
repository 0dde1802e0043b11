"""Indonesian (id-ID) rendering of numbers, currency amounts and dates."""

import math
from datetime import date

CURRENCY_SYMBOL = "Rp"

# id-ID swaps the English separators: "." groups thousands, "," marks decimals
_ID_SEPARATORS = str.maketrans({",": ".", ".": ","})


def format_number(value: float, max_fraction_digits: int = 3) -> str:
    """Format a number with id-ID digit grouping.

    Args:
        value: The number to format
        max_fraction_digits: Decimal places kept before trailing zeros are dropped

    Returns:
        str: e.g. 1234567.5 -> "1.234.567,5"
    """
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "NaN"
        return "-∞" if value < 0 else "∞"

    rounded = round(value, max_fraction_digits)
    text = f"{abs(rounded):,.{max_fraction_digits}f}"
    if max_fraction_digits:
        text = text.rstrip("0").rstrip(".")
    sign = "-" if rounded < 0 else ""
    return sign + text.translate(_ID_SEPARATORS)


def format_currency(value: float) -> str:
    """Format an amount as Indonesian rupiah, e.g. "Rp 1.000.000"."""
    return f"{CURRENCY_SYMBOL} {format_number(value)}"


def format_date(value: date) -> str:
    """Format a date the way id-ID short dates read (day/month/year, unpadded)."""
    return f"{value.day}/{value.month}/{value.year}"
