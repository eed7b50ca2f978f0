"""
Coerce located JSON values into clean numbers.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional

from .models import Number

NON_NUMERIC_PATTERN = re.compile(r"[^\d.]")

# Field names carrying the number when a value is wrapped in an object
AMOUNT_KEYS = ("amount", "value")


def parse_numeric_string(text: str) -> Optional[Number]:
    """
    Parse a string such as ``"$1,234,500"`` by dropping everything that is not
    a digit or a decimal point.

    >>> parse_numeric_string("$1,234,500")
    1234500
    >>> parse_numeric_string("1.2.3") is None
    True
    """
    cleaned = NON_NUMERIC_PATTERN.sub("", text)
    if not cleaned:
        return None
    try:
        if "." in cleaned:
            value = float(cleaned)
            return value if math.isfinite(value) else None
        return int(cleaned)
    except ValueError:
        return None


def normalize_number(raw: Any) -> Optional[Number]:
    """
    Turn a number, numeric string, or ``{"amount": ...}``/``{"value": ...}``
    object into a finite, non-negative number. Anything else yields None.
    """
    # bool is an int subclass, a True flag is not a price
    if isinstance(raw, bool):
        return None

    if isinstance(raw, (int, float)):
        if isinstance(raw, float) and not math.isfinite(raw):
            return None
        # Valuations are non-negative
        if raw < 0:
            return None
        return raw

    if isinstance(raw, str):
        return parse_numeric_string(raw)

    if isinstance(raw, dict):
        for key in AMOUNT_KEYS:
            inner = raw.get(key)
            if inner is not None:
                return normalize_number(inner)
        return None

    return None
