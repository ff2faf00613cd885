# utils/strategic_performance/formatting.py
"""
Display formatting for performance values

- Target / realized: two decimals with locale separators
  (pt_BR -> 1.234,56 ; en_US -> 1,234.56)
- Percentage: two decimals and a percent sign (120.00%)
"""

import logging
import math
from typing import Optional

from .constants import (
    DEFAULT_NUMBER_LOCALE,
    MONTH_FULL_NAMES,
    MONTH_ORDER,
    NO_DATA_DISPLAY,
    NUMBER_LOCALES,
)

logger = logging.getLogger(__name__)


def _is_missing(value) -> bool:
    if value is None:
        return True
    try:
        return math.isnan(float(value))
    except (TypeError, ValueError):
        return True


def format_number(
    value: Optional[float],
    number_locale: str = DEFAULT_NUMBER_LOCALE,
    decimals: int = 2
) -> str:
    """
    Format number with thousand separator for the given locale.

    Args:
        value: Number to format
        number_locale: Key of NUMBER_LOCALES (unknown keys fall back to default)
        decimals: Number of decimal places

    Returns:
        Formatted string, or "-" for missing values
    """
    if _is_missing(value):
        return NO_DATA_DISPLAY

    thousands, decimal = NUMBER_LOCALES.get(
        number_locale, NUMBER_LOCALES[DEFAULT_NUMBER_LOCALE]
    )
    value = round(float(value), decimals) + 0.0
    text = f"{value:,.{decimals}f}"
    # Swap through a placeholder so "," and "." can trade places
    return text.replace(",", "\x00").replace(".", decimal).replace("\x00", thousands)


def format_percentage(value: Optional[float], decimals: int = 2) -> str:
    """Format percentage value, e.g. 120 -> '120.00%'."""
    if _is_missing(value):
        return NO_DATA_DISPLAY
    return f"{float(value):.{decimals}f}%"


def format_month(month_index: int, full: bool = False) -> str:
    """Short (or full) Portuguese month name for a 0-based index."""
    names = MONTH_FULL_NAMES if full else MONTH_ORDER
    if 0 <= month_index < len(names):
        return names[month_index]
    return str(month_index)
