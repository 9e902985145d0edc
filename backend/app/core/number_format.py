"""Number Formatting — display strings for calculator results.

Invariants:
    - Non-finite values always render as "∞" (never "inf" or "nan")
"""

import math

INFINITY_SYMBOL = "∞"


def format_number(value: float, decimals: int = 2) -> str:
    if not math.isfinite(value):
        return INFINITY_SYMBOL
    return f"{value:.{decimals}f}"


def format_percentage(value: float, decimals: int = 2) -> str:
    if not math.isfinite(value):
        return INFINITY_SYMBOL
    return f"{value:.{decimals}f}%"


def format_currency(value: float, currency: str = "SAR") -> str:
    if not math.isfinite(value):
        return INFINITY_SYMBOL
    return f"{value:.2f} {currency}"


def format_units(value: float) -> str:
    """Round up to whole units with thousands separators."""
    if not math.isfinite(value):
        return INFINITY_SYMBOL
    return f"{math.ceil(value):,}"


def finite_or_none(value: float) -> float | None:
    """JSON has no infinity: unbounded results travel as null."""
    return value if math.isfinite(value) else None
