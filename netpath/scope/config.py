"""Inheritance configuration for cascading property resolution.

The configuration is read from ``config.toml`` in the network directory:

    [properties]
    ambientTemperature = 20.0

    [inheritance]
    general = ["block", "branch", "group", "global"]

    [inheritance.rules]
    pressure = ["block", "global"]
    ambientTemperature = { inheritance = ["group", "global"], overrides = { Compressor = ["block", "global"] } }

``[properties]`` is the storage of the global scope. ``general`` is the default
scope chain; each entry in ``rules`` either replaces the chain for one property
(a list) or replaces it and adds per-block-type overrides (a table).

Other top-level tables (such as ``[unitPreferences.<BlockType>]``) belong to
other consumers of the same file and are ignored here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import jsonschema
import toml

from netpath.schemas import load_packaged_schema


class ScopeLevel(str, Enum):
    """Storage level searched during property resolution."""

    BLOCK = "block"
    BRANCH = "branch"
    GROUP = "group"
    GLOBAL = "global"

    @classmethod
    def parse(cls, name: str) -> Optional["ScopeLevel"]:
        """Case-insensitive lookup; unknown names return None."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None

    @classmethod
    def parse_chain(cls, names: Iterable[str]) -> List["ScopeLevel"]:
        """Parse scope names, silently dropping unknown ones."""
        chain = []
        for name in names:
            level = cls.parse(name)
            if level is not None:
                chain.append(level)
        return chain


def default_general_inheritance() -> List[ScopeLevel]:
    """Block, then branch, then group, then global."""
    return [ScopeLevel.BLOCK, ScopeLevel.BRANCH, ScopeLevel.GROUP, ScopeLevel.GLOBAL]


@dataclass
class SimpleRule:
    """Per-property scope chain."""

    scopes: List[ScopeLevel]


@dataclass
class ComplexRule:
    """Per-property scope chain with per-block-type overrides.

    Attributes:
        inheritance: Chain used when the block type has no override.
        overrides: Mapping from block type to its chain.
    """

    inheritance: List[ScopeLevel]
    overrides: Dict[str, List[ScopeLevel]] = field(default_factory=dict)


PropertyInheritanceRule = Union[SimpleRule, ComplexRule]


@dataclass
class InheritanceConfig:
    """Default scope chain plus per-property rules."""

    general: List[ScopeLevel] = field(default_factory=default_general_inheritance)
    rules: Dict[str, PropertyInheritanceRule] = field(default_factory=dict)


@dataclass
class Config:
    """Global property storage and inheritance configuration."""

    properties: Dict[str, Any] = field(default_factory=dict)
    inheritance: InheritanceConfig = field(default_factory=InheritanceConfig)

    @classmethod
    def empty(cls) -> "Config":
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Build a Config from parsed ``config.toml`` content.

        Raises:
            ValueError: If the data does not match the configuration schema.
        """
        try:
            jsonschema.validate(data, load_packaged_schema("config"))
        except jsonschema.ValidationError as exc:
            location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
            raise ValueError(
                f"Invalid configuration at '{location}': {exc.message}"
            ) from None

        inheritance_data = data.get("inheritance", {})
        general = inheritance_data.get("general")
        rules = {
            name: _parse_rule(raw)
            for name, raw in inheritance_data.get("rules", {}).items()
        }
        inheritance = InheritanceConfig(
            general=(
                _parse_chain(general)
                if general is not None
                else default_general_inheritance()
            ),
            rules=rules,
        )
        return cls(properties=dict(data.get("properties", {})), inheritance=inheritance)

    @classmethod
    def from_toml(cls, text: str) -> "Config":
        """Parse TOML text into a Config.

        Raises:
            ValueError: On TOML syntax errors or schema violations.
        """
        try:
            data = toml.loads(text)
        except toml.TomlDecodeError as exc:
            raise ValueError(f"Invalid TOML in configuration: {exc}") from exc
        return cls.from_dict(data)

    @classmethod
    def load_from_file(cls, path: Union[str, Path]) -> "Config":
        """Read and parse a ``config.toml`` file."""
        return cls.from_toml(Path(path).read_text(encoding="utf-8"))


def _parse_chain(names: List[str]) -> List[ScopeLevel]:
    return [ScopeLevel(name) for name in names]


def _parse_rule(raw: Union[List[str], Dict[str, Any]]) -> PropertyInheritanceRule:
    if isinstance(raw, list):
        return SimpleRule(scopes=_parse_chain(raw))
    return ComplexRule(
        inheritance=_parse_chain(raw["inheritance"]),
        overrides={
            block_type: _parse_chain(chain)
            for block_type, chain in raw.get("overrides", {}).items()
        },
    )
