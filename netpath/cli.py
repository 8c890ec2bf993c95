"""Command-line interface for netpath."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, List, Optional

from netpath.dsl.loader import load_config, load_network_from_directory
from netpath.dsl.query import QueryExecutor, format_query_result, parse_query_path
from netpath.dsl.query.errors import ParseError
from netpath.dsl.query.format import OUTPUT_FORMATS
from netpath.logging import configure_cli_logging, get_logger
from netpath.model.network import Network
from netpath.model.validation import ValidationResult
from netpath.scope import PropertyRegistry, ScopeLevel, ScopeResolver
from netpath.scope.config import ComplexRule, SimpleRule
from netpath.utils.values import to_structured

logger = get_logger(__name__)


def _format_chain(chain: List[ScopeLevel]) -> str:
    return " -> ".join(scope.value for scope in chain)


def _report_validation(validation: ValidationResult) -> None:
    """Print load issues to stderr so stdout stays parseable."""
    if validation.has_issues():
        print(validation, file=sys.stderr)


def _load(path: Path) -> Network:
    network, validation = load_network_from_directory(path)
    _report_validation(validation)
    return network


def _export_network(path: Path, output: Optional[Path], output_format: str) -> None:
    """Write the export form of the network to ``output`` or stdout."""
    network = _load(path)
    text = format_query_result(network.to_dict(), output_format)
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text + "\n", encoding="utf-8")
        logger.info(f"Writing {output_format} export of '{network.id}' to {output}")
        print(f"Network exported to {output}")
    else:
        print(text)


def _list_nodes(path: Path) -> None:
    network = _load(path)

    print(f"Network: {network.label} ({network.id})")
    print(f"\nNodes ({len(network.nodes)}):")
    for node in network.nodes:
        base = node.base
        print(
            f"  - {base.id} ({base.label_display()}) at "
            f"({base.position.x}, {base.position.y})"
        )

    print(f"\nEdges ({len(network.edges)}):")
    for edge in network.edges:
        print(f"  - {edge.source} -> {edge.target} (weight: {edge.weight})")


def _query_network(path: Path, query: str, output_format: str) -> None:
    network = _load(path)
    try:
        query_path = parse_query_path(query)
    except ParseError as exc:
        raise ValueError(f"Failed to parse query: {exc}") from exc

    resolver = ScopeResolver(load_config(path))
    logger.debug(f"Parsed query {query!r} as {query_path!r}")
    logger.info(f"Executing query: {query}")
    result = QueryExecutor(network, resolver).execute(query_path)
    print(format_query_result(result, output_format))


def _resolve_property(
    path: Path, node_id: str, block_index: int, property_name: str
) -> None:
    """Resolve one block property and show how the scope chain was walked."""
    network = _load(path)
    resolver = ScopeResolver(load_config(path))

    branch = network.find_branch(node_id)
    if branch is None:
        raise ValueError(f"Node '{node_id}' not found or is not a branch node")
    if not 0 <= block_index < len(branch.blocks):
        raise ValueError(
            f"Block index {block_index} out of range ({len(branch.blocks)} blocks)"
        )
    block = branch.blocks[block_index]
    group = (
        network.find_group(branch.base.parent_id)
        if branch.base.parent_id is not None
        else None
    )

    chain = resolver.get_scope_chain_for_property(property_name, block.type)
    found = resolver.resolve_property_with_scope(property_name, block, branch, group)

    print(f"Property: {property_name}")
    print(f"Node: {node_id}")
    print(f"Block: {block.type} (index {block_index})")
    print(f"Scope chain: {_format_chain(chain)}")

    if found is not None:
        value, scope = found
        print(f"Resolved value: {format_query_result(to_structured(value))}")
        print(f"Resolved from: {scope.value}")
        return

    print("Property not found in any scope")
    print("\nChecked scopes:")
    for scope in chain:
        storage = resolver.scope_storage(scope, block, branch, group)
        if storage is None:
            print(f"  - {scope.value}: (no parent)")
        else:
            print(f"  - {scope.value}: {property_name in storage}")


def _show_properties(path: Path) -> None:
    registry = PropertyRegistry(load_config(path))
    config = registry.config

    print(f"General inheritance: {_format_chain(config.inheritance.general)}")

    names = registry.list_global_properties()
    print(f"\nGlobal properties ({len(names)}):")
    for name in names:
        value: Any = registry.get_global_property(name)
        print(f"  - {name} = {format_query_result(to_structured(value))}")

    rule_names = registry.list_inheritance_rules()
    print(f"\nInheritance rules ({len(rule_names)}):")
    for name in rule_names:
        rule = registry.get_inheritance_rule(name)
        if isinstance(rule, SimpleRule):
            print(f"  - {name}: {_format_chain(rule.scopes)}")
        elif isinstance(rule, ComplexRule):
            print(f"  - {name}: {_format_chain(rule.inheritance)}")
            for block_type, chain in sorted(rule.overrides.items()):
                print(f"      {block_type}: {_format_chain(chain)}")


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``netpath`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="netpath",
        description="Network configuration parser and query tool.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{export,list,query,resolve,properties}",
        help="Available commands",
    )

    export_parser = subparsers.add_parser("export", help="Export network as JSON/YAML")
    export_parser.add_argument(
        "--output", "-o", type=Path, default=None, help="Output file (default: stdout)"
    )

    list_parser = subparsers.add_parser("list", help="List nodes and edges")

    query_parser = subparsers.add_parser("query", help="Query a path in the network")
    query_parser.add_argument("query", help='Query path (e.g. "branch-4/label")')

    resolve_parser = subparsers.add_parser(
        "resolve", help="Resolve a block property through scope inheritance"
    )
    resolve_parser.add_argument("node_id", help='Branch node id (e.g. "branch-4")')
    resolve_parser.add_argument("block_index", type=int, help="Block index (0-based)")
    resolve_parser.add_argument("property", help="Property name to resolve")

    properties_parser = subparsers.add_parser(
        "properties", help="Show global properties and inheritance rules"
    )

    for p in (export_parser, query_parser):
        p.add_argument(
            "--format",
            "-f",
            choices=OUTPUT_FORMATS,
            default="json",
            help="Output format (default: json)",
        )
    for p in (
        export_parser,
        list_parser,
        query_parser,
        resolve_parser,
        properties_parser,
    ):
        p.add_argument(
            "path",
            type=Path,
            nargs="?",
            default=Path("."),
            help="Network directory (default: current directory)",
        )

    effective_args = sys.argv[1:] if argv is None else argv
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    configure_cli_logging(verbose=args.verbose, quiet=args.quiet)
    if args.verbose:
        logger.debug("Debug logging enabled")

    try:
        if args.command == "export":
            _export_network(args.path, args.output, args.format)
        elif args.command == "list":
            _list_nodes(args.path)
        elif args.command == "query":
            _query_network(args.path, args.query, args.format)
        elif args.command == "resolve":
            _resolve_property(args.path, args.node_id, args.block_index, args.property)
        elif args.command == "properties":
            _show_properties(args.path)
    except Exception as e:
        logger.error(f"Command '{args.command}' failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
