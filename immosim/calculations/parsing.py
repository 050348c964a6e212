"""
Numeric Input Parsing

Converts locale-formatted user input ("1 234,56", "3,20", "250000") into
floats, and formats floats back for display.
"""

import math
import re
from typing import Any

PLACEHOLDER = "—"

_WHITESPACE = re.compile(r"\s+")


def finite_or_zero(value: float) -> float:
    """Return the value, or 0.0 when it is NaN or infinite."""
    return value if math.isfinite(value) else 0.0


def parse_number(value: Any) -> float:
    """
    Parse a French-formatted number.

    Whitespace is the thousands separator and is removed. When a comma is
    present it is the decimal separator, so any periods are thousands
    separators and are dropped first.

    Args:
        value: Raw text (or an already numeric value)

    Returns:
        Parsed float, or 0.0 for empty, unparsable or non-finite input
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        try:
            return finite_or_zero(float(value))
        except OverflowError:
            return 0.0

    text = _WHITESPACE.sub("", str(value))
    if "_" in text:
        return 0.0
    if "," in text:
        text = text.replace(".", "").replace(",", ".")

    try:
        number = float(text)
    except ValueError:
        return 0.0

    return finite_or_zero(number)


def format_number(value: float, decimals: int = 2) -> str:
    """Format a number fr-FR style ("1 234,56"), or a placeholder if non-finite."""
    if value is None or not math.isfinite(value):
        return PLACEHOLDER
    text = f"{value:,.{decimals}f}"
    return text.replace(",", " ").replace(".", ",")
