"""Money presentation helpers."""

import math
from typing import Optional


def round_money(value: Optional[float]) -> float:
    """Round to 2 decimals, with halves rounded up.

    Sums of floats drift (``0.1 + 0.2``); every total shown to a user or
    compared for variance goes through this helper.
    """
    if value is None:
        return 0.0
    return math.floor(value * 100 + 0.5) / 100


def format_money(value: Optional[float]) -> str:
    """Format a value as dollars with thousands separators."""
    rounded = round_money(value)
    if rounded < 0:
        return f"-${-rounded:,.2f}"
    return f"${rounded:,.2f}"
