"""
Core Utilities

Shared helpers used across the application.
"""
from datetime import datetime, timezone
from typing import Any, Optional


def utcnow() -> datetime:
    """
    Return timezone-aware UTC datetime.

    Use this instead of datetime.utcnow() which returns naive datetime.
    """
    return datetime.now(timezone.utc)


def parse_record_id(value: Any) -> Optional[int]:
    """
    Coerce an incoming record reference to a positive integer id.

    Returns None for anything that is not a well-formed id (bools, floats
    with a fraction, non-numeric strings, zero or negatives).
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        value = value.strip()
        if value.isdigit():
            parsed = int(value)
            return parsed if parsed > 0 else None
    return None
