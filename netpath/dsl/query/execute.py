"""Query path evaluation against a loaded network.

Evaluation is a bottom-up walk: each path node evaluates its inner path to
obtain the current value, then applies its own operation. A small
``QueryContext`` is threaded through the walk to remember the last node id and
the last array index seen, which is what scope resolution needs to locate a
concrete block.

Scope resolution happens in two places:

- ``ScopeResolvePath`` (``...?scope=block,global``) resolves explicitly.
- A property lookup that misses on a block-shaped value (an object with a
  string ``type``) falls back to the configured scope chain, provided both a
  node id and a block index are known.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from netpath.logging import get_logger
from netpath.model.network import Block, BranchNode, Network, NodeData
from netpath.scope.config import ScopeLevel
from netpath.scope.resolver import ScopeResolver
from netpath.utils.values import to_structured

from .conditions import filter_items, get_property
from .errors import (
    IndexOutOfRangeError,
    InvalidTypeError,
    NodeNotFoundError,
    ParseError,
    PropertyNotFoundError,
    QueryParseError,
)
from .parse import parse_query_path
from .schema import (
    NETWORK_ROOT,
    FilterPath,
    IndexPath,
    NodePath,
    PropertyPath,
    QueryPath,
    RangePath,
    ScopeResolvePath,
)

__all__ = [
    "QueryContext",
    "QueryExecutor",
    "UnitFormatter",
    "execute",
    "run_query",
]

logger = get_logger(__name__)

#: Hook applied to each block property while building node values:
#: ``(key, value, block_type, original_string) -> formatted value``.
UnitFormatter = Callable[[str, Any, Optional[str], Optional[str]], Any]


@dataclass
class QueryContext:
    """Evaluation-local state: last node id and last index seen."""

    node_id: Optional[str] = None
    block_index: Optional[int] = None


class QueryExecutor:
    """Evaluate parsed query paths against one network.

    Args:
        network: Loaded network; never modified.
        scope_resolver: Resolver used for scope fallback and ``?scope=`` paths.
        unit_formatter: Optional hook formatting block property values.
    """

    def __init__(
        self,
        network: Network,
        scope_resolver: Optional[ScopeResolver] = None,
        unit_formatter: Optional[UnitFormatter] = None,
    ) -> None:
        self.network = network
        self.scope_resolver = scope_resolver
        self.unit_formatter = unit_formatter

    def execute(self, path: QueryPath) -> Any:
        """Evaluate ``path`` and return a structured value.

        Raises:
            QueryError: On any evaluation failure; no partial result is returned.
        """
        return self._evaluate(path, QueryContext())

    def _evaluate(self, path: QueryPath, context: QueryContext) -> Any:
        if isinstance(path, NodePath):
            context.node_id = path.id
            return self.node_value(path.id)

        if isinstance(path, PropertyPath):
            if isinstance(path.inner, NodePath) and path.inner.id == NETWORK_ROOT:
                return self.network_collection(path.name)
            value = self._evaluate(path.inner, context)
            return self._property(value, path.name, context)

        if isinstance(path, IndexPath):
            # Recorded before descending so the innermost index wins
            context.block_index = path.index
            value = self._evaluate(path.inner, context)
            return _index(value, path.index)

        if isinstance(path, RangePath):
            value = self._evaluate(path.inner, context)
            return _range(value, path.start, path.end)

        if isinstance(path, FilterPath):
            value = self._evaluate(path.inner, context)
            if not isinstance(value, list):
                raise InvalidTypeError("Filter can only be applied to arrays")
            return filter_items(value, path.field, path.operator, path.value)

        if isinstance(path, ScopeResolvePath):
            self._evaluate(path.inner, context)
            if self.scope_resolver is None:
                raise InvalidTypeError(
                    "Scope resolution requires a scope resolver (load a network "
                    "configuration)"
                )
            return self._resolve_from_context(
                self.scope_resolver, path.property, path.scopes, context
            )

        raise InvalidTypeError(f"Unsupported query path node: {type(path).__name__}")

    def _property(self, value: Any, name: str, context: QueryContext) -> Any:
        is_block = isinstance(value, dict) and isinstance(value.get("type"), str)
        if not (
            is_block and context.block_index is not None and context.node_id is not None
        ):
            return get_property(value, name)

        try:
            return get_property(value, name)
        except PropertyNotFoundError:
            if self.scope_resolver is None:
                raise
            logger.debug(
                f"Property '{name}' not on block {context.node_id}"
                f"[{context.block_index}]; falling back to scope chain"
            )
            return self._resolve_from_context(self.scope_resolver, name, (), context)

    def _resolve_from_context(
        self,
        resolver: ScopeResolver,
        property_name: str,
        explicit_scopes: Sequence[str],
        context: QueryContext,
    ) -> Any:
        if context.node_id is None:
            raise InvalidTypeError("Scope resolution requires a node context")
        if context.block_index is None:
            raise InvalidTypeError(
                "Scope resolution requires a block context "
                "(use a path like branch-4/blocks/0)"
            )

        branch = self.network.find_branch(context.node_id)
        if branch is None:
            raise NodeNotFoundError(context.node_id)
        if context.block_index >= len(branch.blocks):
            raise IndexOutOfRangeError(context.block_index, len(branch.blocks))
        block = branch.blocks[context.block_index]

        group = None
        if branch.base.parent_id is not None:
            group = self.network.find_group(branch.base.parent_id)

        scopes = ScopeLevel.parse_chain(explicit_scopes)
        if scopes:
            found = resolver.resolve_property_with_explicit_scopes(
                property_name, block, branch, group, scopes
            )
        else:
            found = resolver.resolve_property_with_scope(
                property_name, block, branch, group
            )

        if found is None:
            raise PropertyNotFoundError(property_name)
        return to_structured(found[0])

    def node_value(self, node_id: str) -> Dict[str, Any]:
        """Canonical structured representation of a node.

        Raises:
            NodeNotFoundError: If no node has ``node_id``.
        """
        node = self.network.find_node(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return self._node_to_value(node)

    def network_collection(self, name: str) -> List[Dict[str, Any]]:
        """Network-level ``nodes`` or ``edges`` collection."""
        if name == "nodes":
            return [self._node_to_value(node) for node in self.network.nodes]
        if name == "edges":
            return [edge.to_dict() for edge in self.network.edges]
        raise InvalidTypeError(f"Unknown network collection: {name}")

    def _node_to_value(self, node: NodeData) -> Dict[str, Any]:
        base = node.base
        value: Dict[str, Any] = {"id": base.id, "type": base.type}
        if base.label is not None:
            value["label"] = base.label
        value["position"] = base.position.to_dict()

        if isinstance(node, BranchNode):
            value["blocks"] = [self._block_to_value(block) for block in node.blocks]
            if node.outgoing:
                value["outgoing"] = [
                    {"target": out.target, "weight": out.weight}
                    for out in node.outgoing
                ]

        if base.parent_id is not None:
            value["parentId"] = base.parent_id
        return value

    def _block_to_value(self, block: Block) -> Dict[str, Any]:
        value: Dict[str, Any] = {
            "type": block.type,
            "quantity": block.effective_quantity,
        }
        for key, raw in block.extra.items():
            structured = to_structured(raw)
            if self.unit_formatter is None:
                value[key] = structured
                continue
            if _is_original_key(key):
                continue
            original = block.extra.get(f"_{key}_original")
            value[key] = self.unit_formatter(
                key,
                structured,
                block.type,
                original if isinstance(original, str) else None,
            )
        return value


def execute(
    path: QueryPath,
    network: Network,
    resolver: Optional[ScopeResolver] = None,
) -> Any:
    """Evaluate a parsed path against ``network``."""
    return QueryExecutor(network, resolver).execute(path)


def run_query(
    query: str,
    network: Network,
    resolver: Optional[ScopeResolver] = None,
    unit_formatter: Optional[UnitFormatter] = None,
) -> Any:
    """Parse and evaluate a query string.

    Raises:
        QueryParseError: If the string does not parse.
        QueryError: If evaluation fails.
    """
    try:
        path = parse_query_path(query)
    except ParseError as exc:
        raise QueryParseError(exc) from exc
    return QueryExecutor(network, resolver, unit_formatter).execute(path)


def _is_original_key(key: str) -> bool:
    return key.startswith("_") and key.endswith("_original")


def _index(value: Any, index: int) -> Any:
    if not isinstance(value, list):
        raise InvalidTypeError(f"Cannot index into non-array (index: {index})")
    if index >= len(value):
        raise IndexOutOfRangeError(index, len(value))
    return value[index]


def _range(value: Any, start: Optional[int], end: Optional[int]) -> List[Any]:
    if not isinstance(value, list):
        raise InvalidTypeError("Cannot apply range to non-array")
    length = len(value)
    start_idx = 0 if start is None else start
    end_idx = max(length - 1, 0) if end is None else end

    if start_idx >= length:
        raise IndexOutOfRangeError(start_idx, length)
    if end_idx >= length:
        raise IndexOutOfRangeError(end_idx, length)
    if start_idx > end_idx:
        raise InvalidTypeError(f"Range start ({start_idx}) must be <= end ({end_idx})")

    return value[start_idx : end_idx + 1]
