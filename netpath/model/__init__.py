"""Network model package.

Defines the loaded network graph (nodes, blocks, edges) and the validation
report produced alongside it by the loader.
"""

from netpath.model.network import (
    Block,
    BranchNode,
    Edge,
    GeographicAnchorNode,
    GeographicWindowNode,
    GroupNode,
    ImageNode,
    Network,
    NodeBase,
    NodeData,
    Outgoing,
    Position,
)
from netpath.model.validation import IssueSeverity, ValidationIssue, ValidationResult

__all__ = [
    # Network topology
    "Network",
    "NodeData",
    "NodeBase",
    "BranchNode",
    "GroupNode",
    "GeographicAnchorNode",
    "GeographicWindowNode",
    "ImageNode",
    "Block",
    "Outgoing",
    "Position",
    "Edge",
    # Validation
    "IssueSeverity",
    "ValidationIssue",
    "ValidationResult",
]
