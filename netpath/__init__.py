"""netpath: network configuration parsing and path queries.

A network is a directory of TOML node files plus an optional ``config.toml``.
netpath loads it into a typed model, resolves block properties through a
block -> branch -> group -> global scope cascade, and evaluates slash-delimited
query paths against it.

Primary API:
    load_network_from_directory() - Load a network and its validation report
    load_config() - Load global properties and inheritance rules
    ScopeResolver - Cascading property resolution
    run_query() - Parse and evaluate a query string

Example:
    from netpath import ScopeResolver, load_config, load_network_from_directory, run_query

    network, validation = load_network_from_directory("examples/plant")
    resolver = ScopeResolver(load_config("examples/plant"))
    compressors = run_query("branch-4/blocks[type=Compressor]", network, resolver)
"""

from __future__ import annotations

from netpath import cli, logging
from netpath._version import __version__
from netpath.dsl.loader import load_config, load_network_from_directory
from netpath.dsl.query import QueryError, QueryExecutor, parse_query_path, run_query
from netpath.model.network import Block, BranchNode, Edge, Network, NodeData
from netpath.model.validation import ValidationResult
from netpath.scope import Config, ScopeLevel, ScopeResolver

__all__ = [
    "__version__",
    # Loading
    "load_network_from_directory",
    "load_config",
    # Model
    "Network",
    "NodeData",
    "BranchNode",
    "Block",
    "Edge",
    "ValidationResult",
    # Scope
    "Config",
    "ScopeLevel",
    "ScopeResolver",
    # Query
    "parse_query_path",
    "run_query",
    "QueryExecutor",
    "QueryError",
    # Modules
    "cli",
    "logging",
]
