"""Read-only view over global properties and inheritance rules."""

from __future__ import annotations

from typing import Any, List, Optional

from netpath.scope.config import Config, PropertyInheritanceRule


class PropertyRegistry:
    """Lookup helpers over a loaded Config."""

    def __init__(self, config: Config) -> None:
        self.config = config

    def get_global_property(self, name: str) -> Optional[Any]:
        return self.config.properties.get(name)

    def list_global_properties(self) -> List[str]:
        return sorted(self.config.properties)

    def has_inheritance_rule(self, name: str) -> bool:
        return name in self.config.inheritance.rules

    def get_inheritance_rule(self, name: str) -> Optional[PropertyInheritanceRule]:
        return self.config.inheritance.rules.get(name)

    def list_inheritance_rules(self) -> List[str]:
        return sorted(self.config.inheritance.rules)
