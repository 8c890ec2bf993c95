"""TOML loader + schema validation for network directories.

A network directory holds one TOML file per node (the filename stem is the
node id) and an optional ``config.toml`` with global properties and
inheritance rules. Each node file is parsed, validated against the packaged
JSON schema, and split into known fields plus an ``extra`` mapping. Problems
with individual files are collected in a ``ValidationResult`` rather than
aborting the load.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import jsonschema
import toml

from netpath.logging import get_logger
from netpath.model.network import (
    NODE_CLASSES,
    Block,
    BranchNode,
    Edge,
    Network,
    NodeBase,
    NodeData,
    Outgoing,
    Position,
)
from netpath.model.validation import ValidationResult
from netpath.schemas import load_packaged_schema
from netpath.scope.config import Config

logger = get_logger(__name__)

CONFIG_FILENAME = "config.toml"

_BASE_KEYS = {"type", "label", "position", "parentId", "width", "height"}
_BRANCH_KEYS = {"block", "outgoing"}
_BLOCK_KEYS = {"type", "quantity"}


def load_network_from_directory(
    directory: Union[str, Path],
) -> Tuple[Network, ValidationResult]:
    """Load every node file in ``directory``.

    Files are read in sorted filename order; ``config.toml`` is skipped. The
    network id and label are taken from the directory name.

    Raises:
        FileNotFoundError: If ``directory`` does not exist.
        NotADirectoryError: If ``directory`` is not a directory.
    """
    dir_path = Path(directory)
    if not dir_path.exists():
        raise FileNotFoundError(f"Directory does not exist: {dir_path}")
    if not dir_path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {dir_path}")

    files: Dict[str, str] = {}
    for path in sorted(dir_path.glob("*.toml")):
        if path.name == CONFIG_FILENAME:
            continue
        files[path.name] = path.read_text(encoding="utf-8")

    name = dir_path.resolve().name
    return load_network_from_files(files, network_id=name, label=name)


def load_network_from_files(
    files: Mapping[str, str],
    network_id: str = "untitled",
    label: Optional[str] = None,
) -> Tuple[Network, ValidationResult]:
    """Load a network from a filename -> TOML content mapping.

    Args:
        files: Node file contents keyed by filename (``branch-4.toml``).
        network_id: Id for the resulting network.
        label: Label for the resulting network; defaults to ``network_id``.

    Returns:
        The network and the validation issues found while loading it.
    """
    validation = ValidationResult()
    nodes: List[NodeData] = []

    for filename, content in files.items():
        if filename == CONFIG_FILENAME:
            continue
        node_id = Path(filename).stem
        try:
            nodes.append(load_node_from_content(content, node_id))
        except ValueError as exc:
            logger.warning(f"Skipping {filename}: {exc}")
            validation.add_error(f"Failed to parse {filename}: {exc}", filename)

    network = build_network(
        nodes, validation, network_id, label if label is not None else network_id
    )
    logger.info(
        f"Loaded network '{network.id}': {len(network.nodes)} nodes, "
        f"{len(network.edges)} edges"
    )
    return network, validation


def load_node_from_content(content: str, node_id: str) -> NodeData:
    """Parse one node file.

    Raises:
        ValueError: On TOML syntax errors, a missing or unknown ``type``, or a
            schema violation.
    """
    try:
        data = toml.loads(content)
    except toml.TomlDecodeError as exc:
        raise ValueError(f"invalid TOML: {exc}") from exc

    node_type = data.get("type")
    if not isinstance(node_type, str):
        raise ValueError("Missing 'type' field")
    if node_type not in NODE_CLASSES:
        raise ValueError(f"Unknown node type: {node_type}")

    try:
        jsonschema.validate(data, load_packaged_schema("node"))
    except jsonschema.ValidationError as exc:
        location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        raise ValueError(f"at '{location}': {exc.message}") from None

    base = _parse_base(data, node_id)
    if node_type == "branch":
        return BranchNode(
            base=base,
            blocks=[_parse_block(raw) for raw in data.get("block", [])],
            outgoing=[
                Outgoing(target=raw["target"], weight=raw.get("weight", 1))
                for raw in data.get("outgoing", [])
            ],
        )
    return NODE_CLASSES[node_type](base=base)


def load_config(directory: Union[str, Path]) -> Config:
    """Load ``config.toml`` from a network directory, or an empty Config."""
    config_path = Path(directory) / CONFIG_FILENAME
    if not config_path.exists():
        logger.debug(f"No {CONFIG_FILENAME} in {directory}; using empty configuration")
        return Config.empty()
    return Config.load_from_file(config_path)


def build_network(
    nodes: List[NodeData],
    validation: ValidationResult,
    network_id: str,
    label: str,
) -> Network:
    """Assemble nodes into a network and derive edges from branch outgoing lists.

    Outgoing targets and parent ids that name no loaded node are reported as
    warnings; the edges are kept.
    """
    known_ids = {node.id for node in nodes}
    edges: List[Edge] = []

    for node in nodes:
        if isinstance(node, BranchNode):
            for idx, outgoing in enumerate(node.outgoing):
                if outgoing.target not in known_ids:
                    validation.add_warning(
                        f"Outgoing target '{outgoing.target}' does not exist",
                        f"{node.id}/outgoing[{idx}]/target",
                    )
                edges.append(
                    Edge(
                        id=f"{node.id}_{outgoing.target}",
                        source=node.id,
                        target=outgoing.target,
                        weight=outgoing.weight,
                    )
                )

        parent_id = node.base.parent_id
        if parent_id is not None and parent_id not in known_ids:
            validation.add_warning(
                f"Parent ID '{parent_id}' does not exist", f"{node.id}/parentId"
            )

    return Network(id=network_id, label=label, nodes=nodes, edges=edges)


def _parse_base(data: Dict[str, Any], node_id: str) -> NodeBase:
    known_keys = _BASE_KEYS | (_BRANCH_KEYS if data["type"] == "branch" else set())
    position = data["position"]
    return NodeBase(
        id=node_id,
        type=data["type"],
        position=Position(x=position["x"], y=position["y"]),
        label=data.get("label"),
        parent_id=data.get("parentId"),
        width=data.get("width"),
        height=data.get("height"),
        extra={k: v for k, v in data.items() if k not in known_keys},
    )


def _parse_block(raw: Dict[str, Any]) -> Block:
    return Block(
        type=raw["type"],
        quantity=raw.get("quantity"),
        extra={k: v for k, v in raw.items() if k not in _BLOCK_KEYS},
    )
