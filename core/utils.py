"""Assorted display helpers."""
from __future__ import annotations

from typing import Optional


def format_currency(amount, decimals: int = 0) -> str:
    """Format ``amount`` as US dollars, e.g. ``-$1,235``."""
    try:
        value = float(amount)
    except (TypeError, ValueError):
        value = 0.0
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.{decimals}f}"


def format_percent(rate, decimals: int = 3) -> str:
    try:
        value = float(rate)
    except (TypeError, ValueError):
        value = 0.0
    return f"{value:.{decimals}f}%"


def format_break_even(months: Optional[int]) -> str:
    """Render whole months as ``"2y 3m"``; ``None`` renders as ``"N/A"``."""
    if months is None:
        return "N/A"
    years, rest = divmod(int(months), 12)
    return f"{years}y {rest}m" if years else f"{rest}m"
