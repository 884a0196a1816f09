"""
MediaBudget - Display Formatting Module.

Fixed-decimal formatting for report and console output. Rounding is
ROUND_HALF_UP so figures read the way planners expect; the underlying
plan values are never rounded.

Functions:
    format_fixed: Fixed decimal places, no grouping (percentages, ratios).
    format_grouped: Thousands-grouped, fixed places (currency totals).
    format_plain: Thousands-grouped, up to 3 places, no trailing zeros.
"""

from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Union

Number = Union[Decimal, int]


def round_half_up(value: Number, places: int) -> Decimal:
    """
    Rounds a value to a fixed number of decimal places.

    The working precision grows with the magnitude of the value, so
    large budgets never overflow the default 28-digit context.

    Example:
        >>> round_half_up(Decimal("2.345"), 2)
        Decimal('2.35')
    """
    value = Decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + places + 2)
        return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def format_fixed(value: Number, places: int = 2) -> str:
    """
    Formats a value with exactly `places` decimals.

    Example:
        >>> format_fixed(Decimal("14.4"))
        '14.40'
    """
    return f"{round_half_up(value, places):.{places}f}"


def format_grouped(value: Number, places: int = 0) -> str:
    """
    Formats a value with thousands separators.

    Example:
        >>> format_grouped(Decimal("111028.04"))
        '111,028'
    """
    return f"{round_half_up(value, places):,.{places}f}"


def format_plain(value: Number) -> str:
    """
    Formats a value with up to 3 decimals and no trailing zeros.

    Example:
        >>> format_plain(Decimal("1.20"))
        '1.2'
        >>> format_plain(Decimal("12500"))
        '12,500'
    """
    text = f"{round_half_up(value, 3):,.3f}"
    text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text
