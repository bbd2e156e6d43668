"""
Field coercion primitives used by the record validators.

CSV decoding hands every value over as a string, while records re-read from
JSON partitions carry real numbers. Both shapes are accepted here.
"""

import math
import re
from datetime import date, datetime
from typing import Any

# Plain decimal literal with optional sign and exponent: "12", "-0.5", ".5", "1e3"
_NUMERIC_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$", re.ASCII)

# Extended ISO-8601: date, optional "T"/space time, optional "Z"/"±hh:mm" offset
_ISO_TIMESTAMP_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})"
    r"(?:[T ](\d{2}):(\d{2})(?::(\d{2})(?:\.(\d+))?)?"
    r"(Z|z|[+-](\d{2}):(\d{2}))?)?$",
    re.ASCII,
)


def _finite_float(value: Any) -> float | None:
    try:
        number = float(value)
    except (OverflowError, ValueError):
        return None
    return number if math.isfinite(number) else None


def is_numeric(value: Any) -> bool:
    """
    Check whether a value is a number or a string holding exactly one number.

    Empty and whitespace-only strings are not numeric, and no prefix parsing
    is done ("12abc" is not numeric). Booleans are not numeric, and neither is
    anything that does not fit a finite float (NaN, infinities, "1e400",
    integers past the float range).

    Examples:
        >>> is_numeric(0)
        True
        >>> is_numeric(" 9.99 ")
        True
        >>> is_numeric("12abc")
        False
        >>> is_numeric("")
        False
        >>> is_numeric(10 ** 400)
        False
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return _finite_float(value) is not None
    if isinstance(value, str):
        text = value.strip()
        return bool(_NUMERIC_PATTERN.match(text)) and _finite_float(text) is not None
    return False


def to_number(value: Any) -> float:
    """
    Coerce a numeric value to a finite float.

    Raises:
        ValueError: If the value is not numeric per is_numeric()
    """
    if not is_numeric(value):
        raise ValueError(f"Cannot coerce {value!r} to a number")
    if isinstance(value, str):
        return float(value.strip())
    return float(value)


def is_iso_timestamp(value: Any) -> bool:
    """
    Check whether a value is an ISO-8601 date or date-time in extended format.

    Accepts date-only ("2024-01-15"), date-time ("2024-01-15T10:30",
    "2024-01-15 10:30:00.5") and offset forms ("2024-01-15T10:30:00+02:00",
    "2024-01-15T10:30:00Z"). Basic ("20240115") and week ("2024-W03-1") forms
    are not accepted, and calendar values must exist.

    Examples:
        >>> is_iso_timestamp("2024-01-15T10:30:00Z")
        True
        >>> is_iso_timestamp("2024-02-30")
        False
        >>> is_iso_timestamp("not-a-date")
        False
    """
    if isinstance(value, (datetime, date)):
        return True
    if not isinstance(value, str):
        return False

    match = _ISO_TIMESTAMP_PATTERN.match(value.strip())
    if not match:
        return False

    year, month, day, hour, minute, second, _, _, offset_hours, offset_minutes = match.groups()
    try:
        datetime(int(year), int(month), int(day), int(hour or 0), int(minute or 0), int(second or 0))
    except ValueError:
        return False

    if offset_hours is not None and (int(offset_hours) > 23 or int(offset_minutes) > 59):
        return False
    return True
