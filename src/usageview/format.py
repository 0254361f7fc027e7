"""Human-readable renderings of costs, token counts, dates and statistics."""

from __future__ import annotations

import math
from datetime import datetime


def _trim_fraction(text: str) -> str:
    if "." not in text:
        return text
    return text.rstrip("0").rstrip(".")


def format_cost(value: float) -> str:
    """``1234.5`` -> ``"$1,234.50"``."""

    return f"${value:,.2f}"


def format_tokens(value: float) -> str:
    """Compact token count: ``45736126`` -> ``"45.7M"``."""

    if value >= 1_000_000_000:
        return f"{value / 1_000_000_000:.1f}B"
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{value / 1_000:.1f}K"
    return format_stat_value(value, 3)


def format_date(date_text: str) -> str:
    """``"2025-07-07"`` -> ``"Jul 7"``; anything else is returned unchanged."""

    try:
        parsed = datetime.strptime(date_text, "%Y-%m-%d")
    except ValueError:
        return date_text
    return f"{parsed:%b} {parsed.day}"


def format_month(month_text: str) -> str:
    """``"2025-07"`` -> ``"Jul 2025"``; anything else is returned unchanged."""

    try:
        parsed = datetime.strptime(month_text, "%Y-%m")
    except ValueError:
        return month_text
    return f"{parsed:%b %Y}"


def format_stat_value(value: float, decimals: int = 2) -> str:
    """Thousands separators and at most ``decimals`` fraction digits."""

    if not math.isfinite(value):
        return "N/A"
    return _trim_fraction(f"{value:,.{decimals}f}")


def format_skewness(value: float) -> str:
    if not math.isfinite(value):
        return "N/A"
    if abs(value) < 0.1:
        label = "symmetric"
    elif value > 0:
        label = "right-skewed"
    else:
        label = "left-skewed"
    return f"{value:.2f} ({label})"


__all__ = [
    "format_cost",
    "format_date",
    "format_month",
    "format_skewness",
    "format_stat_value",
    "format_tokens",
]
