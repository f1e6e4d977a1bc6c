"""Price parsing and formatting.

Listing prices are stored as digit strings so that values past the range of
JS-safe integers round-trip unchanged. Python ints are arbitrary precision,
so every boundary here converts between ``str`` and ``int`` only.
"""

import re
from typing import Any, Optional

_NON_DIGITS = re.compile(r"\D")


def normalize_price(value: Any) -> Optional[str]:
    """Reduce a raw price value to its digit string, or None when empty."""
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if value != value or value < 0:
            return None
        value = int(value)
    digits = _NON_DIGITS.sub("", str(value))
    return digits or None


def parse_price(value: Any) -> Optional[int]:
    """Parse a stored price into an int by stripping every non-digit.

    Returns None when nothing numeric remains ("invalid", "-", "").
    """
    digits = normalize_price(value)
    return int(digits) if digits is not None else None


def format_thousands(value: Any, separator: str = ",") -> str:
    """Group digits in threes for display in a form input."""
    digits = normalize_price(value)
    if digits is None:
        return ""
    digits = digits.lstrip("0") or "0"
    groups = []
    while digits:
        groups.append(digits[-3:])
        digits = digits[:-3]
    return separator.join(reversed(groups))


def format_idr(value: Any) -> str:
    """Render a price the way listings display it: ``IDR 1.500.000.000``."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if value is None or value == "" or value == 0:
        return "-"
    text = str(value).strip()
    if not text.isdigit():
        return "-"
    return "IDR " + format_thousands(text, separator=".")
