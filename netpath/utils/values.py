"""Conversion of loaded property values to plain structured values.

Node files are TOML, which adds date/time types on top of the JSON-like core.
Query results are restricted to None, bool, int, float, str, list and dict so
they can be printed as JSON or YAML without further conversion.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any


def to_structured(value: Any) -> Any:
    """Return ``value`` converted to a plain structured value.

    Mapping keys are coerced to strings, sequences become lists, and TOML
    date/time values are rendered in ISO 8601 form.

    Examples:
        >>> to_structured({"a": (1, 2)})
        {'a': [1, 2]}
        >>> to_structured(date(2024, 1, 31))
        '2024-01-31'
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(key): to_structured(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_structured(item) for item in value]
    return str(value)


def is_number(value: Any) -> bool:
    """True for int and float values, excluding bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)
