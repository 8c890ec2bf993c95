"""Network model: typed nodes, blocks, and directed weighted edges.

A network is loaded once from a directory of node files and then treated as
read-only. Each node wraps a ``NodeBase`` record holding the fields every node
type shares plus an open ``extra`` mapping for everything not modelled
explicitly; the scope resolver reads branch- and group-level properties from
that mapping.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from netpath.utils.values import to_structured

# Node type tags as they appear in the ``type`` field of node files.
BRANCH_TYPE = "branch"
GROUP_TYPE = "labeledGroup"
GEOGRAPHIC_ANCHOR_TYPE = "geographicAnchor"
GEOGRAPHIC_WINDOW_TYPE = "geographicWindow"
IMAGE_TYPE = "image"


@dataclass
class Position:
    """Canvas position of a node."""

    x: Union[int, float] = 0
    y: Union[int, float] = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y}


@dataclass
class Outgoing:
    """Directed connection from a branch to another node.

    Attributes:
        target (str): Id of the target node.
        weight (int): Connection weight.
    """

    target: str
    weight: int = 1


@dataclass
class Block:
    """Element within a branch's ordered block list.

    Attributes:
        type (str): Block type tag (e.g. ``Compressor``, ``Pipe``).
        quantity (Optional[int]): Declared quantity; ``None`` when not given.
        extra (Dict[str, Any]): All other block properties.
    """

    type: str
    quantity: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def effective_quantity(self) -> int:
        """Declared quantity, defaulting to 1."""
        return 1 if self.quantity is None else self.quantity

    @property
    def kind(self) -> str:
        """Diagram role of the block: source, sink, or transform."""
        if self.type == "Source":
            return "source"
        if self.type == "Sink":
            return "sink"
        return "transform"


@dataclass
class NodeBase:
    """Fields shared by every node type.

    Attributes:
        id (str): Node id, derived from the source filename.
        type (str): Node type tag.
        position (Position): Canvas position.
        label (Optional[str]): Human-readable label.
        parent_id (Optional[str]): Id of the containing group, if any.
        width (Optional[int]): Optional display width.
        height (Optional[int]): Optional display height.
        extra (Dict[str, Any]): All other node properties.
    """

    id: str
    type: str
    position: Position = field(default_factory=Position)
    label: Optional[str] = None
    parent_id: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def label_display(self) -> str:
        """Label if set, otherwise the node id."""
        return self.label if self.label is not None else self.id

    def to_dict(self) -> Dict[str, Any]:
        """Flattened export form: known fields first, then ``extra``."""
        data: Dict[str, Any] = {"id": self.id, "type": self.type}
        if self.label is not None:
            data["label"] = self.label
        data["position"] = self.position.to_dict()
        if self.parent_id is not None:
            data["parentId"] = self.parent_id
        if self.width is not None:
            data["width"] = self.width
        if self.height is not None:
            data["height"] = self.height
        for key, value in self.extra.items():
            data[key] = to_structured(value)
        return data


@dataclass
class NodeData:
    """Common wrapper for all node variants."""

    base: NodeBase

    @property
    def id(self) -> str:
        return self.base.id

    def to_dict(self) -> Dict[str, Any]:
        return self.base.to_dict()


@dataclass
class BranchNode(NodeData):
    """A sequence of process blocks with outgoing connections."""

    blocks: List[Block] = field(default_factory=list)
    outgoing: List[Outgoing] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Diagram export form with blocks nested under ``data``."""
        data: Dict[str, Any] = {
            "id": self.base.id,
            "position": self.base.position.to_dict(),
            "data": {
                "id": self.base.id,
                "label": self.base.label_display(),
                "blocks": [
                    {
                        "quantity": block.effective_quantity,
                        "type": block.type,
                        "kind": block.kind,
                        "label": block.type,
                    }
                    for block in self.blocks
                ],
            },
        }
        if self.base.parent_id is not None:
            data["parentId"] = self.base.parent_id
            data["extent"] = "parent"
        data["type"] = self.base.type
        return data


@dataclass
class GroupNode(NodeData):
    """Container node that other nodes may name as their parent."""


@dataclass
class GeographicAnchorNode(NodeData):
    """Fixed geographic reference point."""


@dataclass
class GeographicWindowNode(NodeData):
    """Geographic viewport node."""


@dataclass
class ImageNode(NodeData):
    """Image node placed on the canvas."""


NODE_CLASSES: Dict[str, type] = {
    BRANCH_TYPE: BranchNode,
    GROUP_TYPE: GroupNode,
    GEOGRAPHIC_ANCHOR_TYPE: GeographicAnchorNode,
    GEOGRAPHIC_WINDOW_TYPE: GeographicWindowNode,
    IMAGE_TYPE: ImageNode,
}


@dataclass
class Edge:
    """Directed weighted edge derived from a branch's outgoing list."""

    id: str
    source: str
    target: str
    weight: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "data": {"weight": self.weight},
        }


@dataclass
class Network:
    """A loaded network: ordered nodes and the edges between them.

    Node order is discovery order. Ids are expected to be unique but this is not
    enforced; lookups scan linearly and return the first match.

    Attributes:
        id (str): Network id.
        label (str): Network label.
        nodes (List[NodeData]): Nodes in discovery order.
        edges (List[Edge]): Edges built from branch outgoing connections.
    """

    id: str
    label: str
    nodes: List[NodeData] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def find_node(self, node_id: str) -> Optional[NodeData]:
        """Return the first node with ``node_id``, or None."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def find_branch(self, node_id: str) -> Optional[BranchNode]:
        """Return the first branch node with ``node_id``, or None."""
        for node in self.nodes:
            if isinstance(node, BranchNode) and node.id == node_id:
                return node
        return None

    def find_group(self, node_id: str) -> Optional[GroupNode]:
        """Return the first group node with ``node_id``, or None."""
        for node in self.nodes:
            if isinstance(node, GroupNode) and node.id == node_id:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Export form of the whole network."""
        return {
            "id": self.id,
            "label": self.label,
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }
