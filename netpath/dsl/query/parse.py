"""Query path parser.

Converts a slash-delimited path string into a ``QueryPath`` chain:

    branch-4                          node by id
    branch-4/label                    property
    branch-4/blocks/0                 array index
    branch-4/blocks/1:2               inclusive range (also ":2", "1:", ":")
    branch-4/blocks[type=Compressor]  filter (=, !=, >, <, >=, <=)
    branch-4/blocks/0:1[type=Pipe]    range, then filter
    branch-4/blocks/0/ambientTemperature?scope=block,group
                                      explicit scope resolution
    nodes, edges, nodes[type=branch]  network-level collections
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from .errors import (
    EmptyPathError,
    InvalidCharacterError,
    InvalidIndexError,
    UnexpectedEndError,
)
from .schema import (
    NETWORK_COLLECTIONS,
    NETWORK_ROOT,
    OPERATOR_MATCH_ORDER,
    FilterOperator,
    FilterPath,
    IndexPath,
    NodePath,
    PropertyPath,
    QueryPath,
    RangePath,
    ScopeResolvePath,
)

__all__ = [
    "parse_query_path",
    "parse_filter_expression",
]

_DIGITS = re.compile(r"[0-9]+")
_SCOPE_MARKER = "scope="

RangeBounds = Tuple[Optional[int], Optional[int]]
FilterParts = Tuple[str, str, FilterOperator, str]


def parse_query_path(path: str) -> QueryPath:
    """Parse a query path string.

    Args:
        path: Slash-delimited query path.

    Returns:
        Root of the parsed QueryPath chain.

    Raises:
        EmptyPathError: If ``path`` is empty.
        InvalidIndexError: If an index or range bound is not a non-negative integer.
        UnexpectedEndError: If a scope-resolution path has an empty base path
            or an empty property name.
        InvalidCharacterError: If a filter has no operator or a network-level
            query has an unrecognized shape.
    """
    if not path:
        raise EmptyPathError()

    head = path.split("/", 1)[0].split("[", 1)[0]
    if head in NETWORK_COLLECTIONS:
        return _parse_network_query(path)

    base_path, sep, query = path.partition("?")
    if sep and query.startswith(_SCOPE_MARKER):
        return _parse_scope_query(base_path, query[len(_SCOPE_MARKER) :])

    parts = path.split("/")
    current: QueryPath = NodePath(parts[0])

    for part in parts[1:]:
        if not part:
            continue

        # Fused "start:end[filter]": range first, then filter on top
        if ":" in part and "[" in part:
            bracket = part.index("[")
            bounds = _parse_range(part[:bracket])
            if bounds is not None:
                current = RangePath(bounds[0], bounds[1], current)
                parsed = _parse_filter(part[bracket:])
                if parsed is None:
                    raise UnexpectedEndError()
                _, field, operator, value = parsed
                current = FilterPath(field, operator, value, current)
                continue

        parsed = _parse_filter(part)
        if parsed is not None:
            name, field, operator, value = parsed
            if name:
                current = PropertyPath(name, current)
            current = FilterPath(field, operator, value, current)
            continue

        bounds = _parse_range(part)
        if bounds is not None:
            current = RangePath(bounds[0], bounds[1], current)
            continue

        if _DIGITS.fullmatch(part):
            current = IndexPath(int(part), current)
        else:
            current = PropertyPath(part, current)

    return current


def parse_filter_expression(expr: str) -> Tuple[str, FilterOperator, str]:
    """Split ``field<op>value`` at the first operator in match order.

    Raises:
        InvalidCharacterError: If no operator is present.
    """
    for operator in OPERATOR_MATCH_ORDER:
        pos = expr.find(operator.value)
        if pos != -1:
            field = expr[:pos].strip()
            value = expr[pos + len(operator.value) :].strip()
            return field, operator, value
    raise InvalidCharacterError("]", len(expr))


def _parse_scope_query(base_path: str, scope_list: str) -> ScopeResolvePath:
    if not base_path:
        raise UnexpectedEndError()
    inner_path, sep, property_name = base_path.rpartition("/")
    # "prop?scope=..." resolves against a node named like the property
    if not sep:
        inner_path = base_path
    if not inner_path or not property_name:
        raise UnexpectedEndError()
    scopes = tuple(s.strip() for s in scope_list.split(","))
    return ScopeResolvePath(property_name, scopes, parse_query_path(inner_path))


def _parse_range(part: str) -> Optional[RangeBounds]:
    """Parse ``start:end``; None when ``part`` is not range-shaped."""
    pieces = part.split(":")
    if len(pieces) != 2:
        return None
    start_str, end_str = pieces
    return (
        _parse_bound(start_str, "Invalid range start"),
        _parse_bound(end_str, "Invalid range end"),
    )


def _parse_bound(text: str, label: str) -> Optional[int]:
    if not text:
        return None
    if not _DIGITS.fullmatch(text):
        raise InvalidIndexError(f"{label}: {text}")
    return int(text)


def _parse_filter(part: str) -> Optional[FilterParts]:
    """Parse ``name[expr]``; None when there is no closed bracket pair."""
    bracket_start = part.find("[")
    if bracket_start == -1:
        return None
    bracket_end = part.find("]", bracket_start + 1)
    if bracket_end == -1:
        return None
    field, operator, value = parse_filter_expression(
        part[bracket_start + 1 : bracket_end]
    )
    return part[:bracket_start], field, operator, value


def _parse_network_query(path: str) -> QueryPath:
    if path in NETWORK_COLLECTIONS:
        return PropertyPath(path, NodePath(NETWORK_ROOT))

    parsed = _parse_filter(path)
    if parsed is not None:
        collection, field, operator, value = parsed
        if collection in NETWORK_COLLECTIONS and path.endswith("]"):
            return FilterPath(
                field,
                operator,
                value,
                PropertyPath(collection, NodePath(NETWORK_ROOT)),
            )

    position = _first_unexpected(path)
    raise InvalidCharacterError(path[position], position)


def _first_unexpected(path: str) -> int:
    """Position of the first character that breaks the collection shape."""
    bracket_end = path.find("]")
    if bracket_end != -1 and bracket_end + 1 < len(path):
        return bracket_end + 1
    head = path.split("/", 1)[0].split("[", 1)[0]
    return min(len(head), len(path) - 1)

