"""
Display formatting helpers shared by insights, reports and CSV exports.
"""

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3)."""
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _trim(value: float) -> str:
    # 1.0 -> "1", 1.25 -> "1.3"
    rounded = Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    if rounded == rounded.to_integral_value():
        return str(int(rounded))
    return str(rounded)


def format_large_number(num: float) -> str:
    """
    Abbreviate a large count.

    >>> format_large_number(1_500_000)
    '1.5M'
    >>> format_large_number(45_000)
    '45K'
    >>> format_large_number(4_650)
    '4,650'
    """
    if num >= 1_000_000:
        return f"{_trim(num / 1_000_000)}M"
    if num >= 10_000:
        return f"{_trim(num / 1_000)}K"
    if num >= 1_000:
        return f"{num:,.0f}" if float(num).is_integer() else f"{num:,}"
    return f"{num:g}" if isinstance(num, float) else str(num)


def format_percentage(decimal: float, decimals: int = 1) -> str:
    """Format a ratio (1 = 100%) as a percentage string, e.g. ``0.031 -> '3.1%'``."""
    return f"{decimal * 100:.{decimals}f}%"


def format_currency(value: float) -> str:
    """US-dollar currency with cents, e.g. ``'$1,234.56'`` or ``'-$12.00'``."""
    amount = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def hours_to_label(hours: float) -> str:
    """
    Human-readable duration for an estimated number of hours.

    >>> hours_to_label(0.5)
    '< 1 hour'
    >>> hours_to_label(15)
    '15 hours'
    >>> hours_to_label(48)
    '2 days'
    """
    if hours < 1:
        return "< 1 hour"
    if hours < 24:
        return f"{round_half_up(hours)} hours"
    days = round_half_up(hours / 24)
    return f"{days} day{'s' if days > 1 else ''}"