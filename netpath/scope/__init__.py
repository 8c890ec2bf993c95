"""Scope cascade: inheritance configuration and property resolution.

Usage:
    from netpath.scope import Config, ScopeResolver

    config = Config.load_from_file("network/config.toml")
    resolver = ScopeResolver(config)
    value = resolver.resolve_property("ambientTemperature", block, branch, group)
"""

from .config import (
    ComplexRule,
    Config,
    InheritanceConfig,
    PropertyInheritanceRule,
    ScopeLevel,
    SimpleRule,
    default_general_inheritance,
)
from .registry import PropertyRegistry
from .resolver import ScopeResolver

__all__ = [
    # Configuration
    "Config",
    "InheritanceConfig",
    "ScopeLevel",
    "SimpleRule",
    "ComplexRule",
    "PropertyInheritanceRule",
    "default_general_inheritance",
    # Resolution
    "ScopeResolver",
    "PropertyRegistry",
]
