# utils/strategic_performance/parsing.py
"""
Value parsing for monthly cells

Stored monthly values are free text typed by users ("1.500", "R$ 2,5",
"") so every read goes through the helpers here:
- parse_numeric: lenient text -> float (0.0 when nothing usable)
- has_value: whether anything was entered at all
- parse_cell: the two combined into an optional float
"""

import logging
import math
import re
from typing import Optional

logger = logging.getLogger(__name__)

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_LEADING_FLOAT = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


def has_value(value) -> bool:
    """True when a cell holds anything other than blanks."""
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return not (isinstance(value, float) and math.isnan(value))
    return str(value).strip() != ""


def parse_numeric(value) -> float:
    """
    Parse a free-text number.

    Comma becomes the decimal point, every character other than digits,
    '.' and '-' is dropped, and the leading numeric prefix is read.
    Empty or unparseable text gives 0.0.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else 0.0

    cleaned = _NON_NUMERIC.sub("", str(value).replace(",", "."))
    match = _LEADING_FLOAT.match(cleaned)
    if not match:
        return 0.0
    try:
        number = float(match.group(0))
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_cell(value) -> Optional[float]:
    """None for an empty cell, otherwise the parsed number."""
    if not has_value(value):
        return None
    return parse_numeric(value)
