"""
Utility helper functions for safe data handling.
"""
import math
from datetime import datetime, timezone
from typing import Any, Mapping, Optional


_MISSING = object()


def read(record: Any, path: str, default: Any = None) -> Any:
    """
    Read a (dotted) field from a nested record, falling back to default.

    Missing keys, None values and non-mapping intermediates all resolve
    to the default, so callers never need their own null checks.

    Args:
        record: Raw record (usually a dict from the document store)
        path: Field name, or dotted path such as "scores.player1.game1"
        default: Value returned when the field is absent

    Returns:
        The stored value or default
    """
    current = record
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return default
        current = current.get(part, _MISSING)
        if current is _MISSING or current is None:
            return default
    return current


def safe_str(value: Any, default: str = "") -> str:
    """
    Safely convert value to string, handling None and empty strings.

    Args:
        value: Any value to convert
        default: Default string if value is None or empty

    Returns:
        String representation or default
    """
    if value is None or value == "":
        return default
    return str(value)


def safe_int(value: Any, default: int = 0) -> int:
    """
    Safely convert value to int, handling None and invalid values.

    Args:
        value: Any value to convert
        default: Default int if conversion fails

    Returns:
        Integer or default
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (ValueError, TypeError, OverflowError):
        try:
            number = float(value)
        except (ValueError, TypeError, OverflowError):
            return default
        # inf and nan have no int value
        return int(number) if math.isfinite(number) else default


def numeric_or_zero(value: Any) -> float:
    """Return value if it is a finite real number (not bool), else 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return value
    return 0


def read_list(record: Any, path: str) -> list:
    """Read a list field; anything that is not a list yields []."""
    value = read(record, path, [])
    return value if isinstance(value, list) else []


def read_mapping(record: Any, path: str) -> dict:
    """Read a mapping field; anything that is not a mapping yields {}."""
    value = read(record, path, {})
    return dict(value) if isinstance(value, Mapping) else {}


def utc_now_iso(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with a trailing Z."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).replace(tzinfo=None).isoformat() + "Z"


def json_safe(value: Any) -> Any:
    """Deep copy of JSON-like data with inf/nan replaced by None."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, Mapping):
        return {k: json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(v) for v in value]
    return value
