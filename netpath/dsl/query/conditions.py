"""Filter condition evaluation for query paths.

A filter compares one field of each array element against the literal string
written in the path. Equality operators are type-aware; ordering operators
are numeric only.
"""

from __future__ import annotations

import sys
from typing import Any, List

from netpath.utils.values import is_number

from .errors import InvalidTypeError, PropertyNotFoundError
from .schema import FilterOperator

__all__ = [
    "evaluate_condition",
    "matches_value",
    "compare_numeric",
    "lookup_field",
    "get_property",
    "filter_items",
]

_BOOL_LITERALS = {"true": True, "false": False}


def get_property(value: Any, name: str) -> Any:
    """Exact key lookup on an object value.

    Requesting ``data`` on an object without that key returns the object
    itself, so paths written against the diagram export shape
    (``<node>/data/blocks``) keep working.

    Raises:
        InvalidTypeError: If ``value`` is not an object.
        PropertyNotFoundError: If the key is missing.
    """
    if not isinstance(value, dict):
        raise InvalidTypeError(f"Cannot access property '{name}' on non-object")
    if name in value:
        return value[name]
    if name == "data":
        return value
    raise PropertyNotFoundError(name)


def lookup_field(item: Any, field: str) -> Any:
    """Resolve a dotted field path on ``item`` via repeated property lookups."""
    current = item
    for part in field.split("."):
        current = get_property(current, part)
    return current


def matches_value(value: Any, literal: str) -> bool:
    """Type-aware equality between a stored value and a path literal.

    Strings compare exactly, numbers within float epsilon, booleans against
    ``true``/``false``. Any other type never matches.
    """
    if isinstance(value, bool):
        parsed = _BOOL_LITERALS.get(literal)
        return parsed is not None and value is parsed
    if isinstance(value, str):
        return value == literal
    if is_number(value):
        try:
            expected = float(literal)
        except ValueError:
            return False
        return abs(float(value) - expected) < sys.float_info.epsilon
    return False


def compare_numeric(value: Any, literal: str, operator: FilterOperator) -> bool:
    """Evaluate an ordering operator.

    Raises:
        InvalidTypeError: If ``value`` is not numeric or ``literal`` is not a float.
    """
    if not is_number(value):
        raise InvalidTypeError("Comparison operators only work with numbers")
    try:
        right = float(literal)
    except ValueError:
        raise InvalidTypeError(
            f"Cannot parse filter value as number: {literal}"
        ) from None
    left = float(value)

    if operator is FilterOperator.GREATER_THAN:
        return left > right
    if operator is FilterOperator.LESS_THAN:
        return left < right
    if operator is FilterOperator.GREATER_THAN_OR_EQUAL:
        return left >= right
    if operator is FilterOperator.LESS_THAN_OR_EQUAL:
        return left <= right
    raise ValueError(f"Not an ordering operator: {operator.value}")


def evaluate_condition(value: Any, operator: FilterOperator, literal: str) -> bool:
    """Evaluate ``value <operator> literal``."""
    if operator is FilterOperator.EQUALS:
        return matches_value(value, literal)
    if operator is FilterOperator.NOT_EQUALS:
        return not matches_value(value, literal)
    return compare_numeric(value, literal, operator)


def filter_items(
    items: List[Any], field: str, operator: FilterOperator, literal: str
) -> List[Any]:
    """Keep items whose ``field`` satisfies the condition.

    Items on which the field cannot be looked up, or whose value cannot be
    compared with the operator (a string under ``>``), are excluded.
    """
    kept = []
    for item in items:
        try:
            field_value = lookup_field(item, field)
            matched = evaluate_condition(field_value, operator, literal)
        except (PropertyNotFoundError, InvalidTypeError):
            continue
        if matched:
            kept.append(item)
    return kept

