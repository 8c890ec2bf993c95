"""Cascading property resolution across block, branch, group and global scopes.

Resolution walks an ordered scope chain and returns the first scope whose
storage defines the property:

- block: the block's own ``extra`` mapping
- branch: the owning branch's ``base.extra`` mapping
- group: the owning group's ``base.extra`` mapping (skipped when there is none)
- global: the configuration's ``[properties]`` table

The chain comes from the configuration: a per-property rule (with an optional
override for the block's type) or the general default chain.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple

from netpath.logging import get_logger
from netpath.scope.config import ComplexRule, Config, ScopeLevel, SimpleRule

if TYPE_CHECKING:
    from netpath.model.network import Block, BranchNode, GroupNode

logger = get_logger(__name__)


class ScopeResolver:
    """Resolve block properties through the configured scope chain."""

    def __init__(self, config: Config) -> None:
        self.config = config

    def resolve_property(
        self,
        property_name: str,
        block: "Block",
        branch: "BranchNode",
        group: Optional["GroupNode"] = None,
    ) -> Optional[Any]:
        """Return the first value found for ``property_name``, or None.

        Args:
            property_name: Property to resolve.
            block: Block the lookup starts from.
            branch: Branch owning ``block``.
            group: Group owning ``branch``, if any.
        """
        found = self.resolve_property_with_scope(property_name, block, branch, group)
        return None if found is None else found[0]

    def resolve_property_with_scope(
        self,
        property_name: str,
        block: "Block",
        branch: "BranchNode",
        group: Optional["GroupNode"] = None,
    ) -> Optional[Tuple[Any, ScopeLevel]]:
        """Like ``resolve_property`` but also report which scope matched."""
        chain = self.get_scope_chain(property_name, block.type)
        return self._walk(property_name, chain, block, branch, group)

    def resolve_property_with_explicit_scopes(
        self,
        property_name: str,
        block: "Block",
        branch: "BranchNode",
        group: Optional["GroupNode"],
        scopes: Sequence[ScopeLevel],
    ) -> Optional[Tuple[Any, ScopeLevel]]:
        """Resolve using ``scopes`` instead of the configured chain."""
        return self._walk(property_name, scopes, block, branch, group)

    def get_scope_chain(self, property_name: str, block_type: str) -> List[ScopeLevel]:
        """Scope chain for a property on a block of ``block_type``."""
        rule = self.config.inheritance.rules.get(property_name)
        if isinstance(rule, SimpleRule):
            return list(rule.scopes)
        if isinstance(rule, ComplexRule):
            override = rule.overrides.get(block_type)
            return list(override if override is not None else rule.inheritance)
        return list(self.config.inheritance.general)

    def get_scope_chain_for_property(
        self, property_name: str, block_type: Optional[str] = None
    ) -> List[ScopeLevel]:
        """Scope chain for a property, optionally specialised by block type.

        Without a block type, a rule with overrides contributes its base chain.
        """
        if block_type is not None:
            return self.get_scope_chain(property_name, block_type)
        rule = self.config.inheritance.rules.get(property_name)
        if isinstance(rule, SimpleRule):
            return list(rule.scopes)
        if isinstance(rule, ComplexRule):
            return list(rule.inheritance)
        return list(self.config.inheritance.general)

    def has_global_property(self, property_name: str) -> bool:
        return property_name in self.config.properties

    def scope_storage(
        self,
        scope: ScopeLevel,
        block: "Block",
        branch: "BranchNode",
        group: Optional["GroupNode"],
    ) -> Optional[Dict[str, Any]]:
        """Backing mapping for ``scope``; None when the scope has no owner."""
        if scope is ScopeLevel.BLOCK:
            return block.extra
        if scope is ScopeLevel.BRANCH:
            return branch.base.extra
        if scope is ScopeLevel.GROUP:
            return group.base.extra if group is not None else None
        return self.config.properties

    def _walk(
        self,
        property_name: str,
        chain: Sequence[ScopeLevel],
        block: "Block",
        branch: "BranchNode",
        group: Optional["GroupNode"],
    ) -> Optional[Tuple[Any, ScopeLevel]]:
        for scope in chain:
            storage = self.scope_storage(scope, block, branch, group)
            if storage is not None and property_name in storage:
                logger.debug(
                    f"Resolved '{property_name}' on {block.type} block of "
                    f"'{branch.id}' at {scope.value} scope"
                )
                return storage[property_name], scope
        searched = ", ".join(scope.value for scope in chain)
        logger.debug(f"'{property_name}' not found in scopes [{searched}]")
        return None
