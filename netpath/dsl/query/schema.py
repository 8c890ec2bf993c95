"""Abstract syntax for query paths.

A parsed path is a singly-rooted chain: every node except ``NodePath`` wraps
exactly one inner path, and evaluation starts from the innermost ``NodePath``.

    "branch-4/blocks/0" -> IndexPath(0, PropertyPath("blocks", NodePath("branch-4")))
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

#: Pseudo node id selecting the network-level ``nodes``/``edges`` collections.
NETWORK_ROOT = "network"

#: Root segments reserved for network-level queries.
NETWORK_COLLECTIONS = ("nodes", "edges")


class FilterOperator(str, Enum):
    """Comparison operators available inside ``[field<op>value]``."""

    EQUALS = "="
    NOT_EQUALS = "!="
    GREATER_THAN = ">"
    LESS_THAN = "<"
    GREATER_THAN_OR_EQUAL = ">="
    LESS_THAN_OR_EQUAL = "<="


#: Operator match order: two-character operators before their one-character prefixes.
OPERATOR_MATCH_ORDER = (
    FilterOperator.GREATER_THAN_OR_EQUAL,
    FilterOperator.LESS_THAN_OR_EQUAL,
    FilterOperator.NOT_EQUALS,
    FilterOperator.GREATER_THAN,
    FilterOperator.LESS_THAN,
    FilterOperator.EQUALS,
)


@dataclass(frozen=True)
class NodePath:
    """Root: a node by id, or the network pseudo-node."""

    id: str


@dataclass(frozen=True)
class PropertyPath:
    """Field access on the inner value."""

    name: str
    inner: "QueryPath"


@dataclass(frozen=True)
class IndexPath:
    """Zero-based array element access."""

    index: int
    inner: "QueryPath"


@dataclass(frozen=True)
class RangePath:
    """Inclusive array slice; missing bounds mean first/last element."""

    start: Optional[int]
    end: Optional[int]
    inner: "QueryPath"


@dataclass(frozen=True)
class FilterPath:
    """Array filter on a (possibly dotted) field.

    Attributes:
        field: Field name; dots descend into nested objects.
        operator: Comparison operator.
        value: Literal right-hand side as written in the path.
        inner: Path producing the array to filter.
    """

    field: str
    operator: FilterOperator
    value: str
    inner: "QueryPath"


@dataclass(frozen=True)
class ScopeResolvePath:
    """Cascade resolution of ``property`` in the context set up by ``inner``.

    Attributes:
        property: Property name to resolve.
        scopes: Scope names from ``?scope=``; empty means the configured chain.
        inner: Path establishing the node and block context.
    """

    property: str
    scopes: Tuple[str, ...]
    inner: "QueryPath"


QueryPath = Union[
    NodePath, PropertyPath, IndexPath, RangePath, FilterPath, ScopeResolvePath
]
