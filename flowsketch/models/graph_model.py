"""Semantic graph models produced by the language model.

A GraphModel is the coordinate-free description of a diagram: a list of
typed nodes and a list of edges between them. Instances are only built by
the validator (``flowsketch.validators.graph_validator``) or directly by
trusted code such as the sample diagrams; they are never mutated afterwards.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field


class NodeType(str, Enum):
    """Semantic node categories the model is allowed to emit."""
    START = "start"
    PROCESS = "process"
    DECISION = "decision"
    DATA = "data"
    END = "end"
    DEFAULT = "default"

    @classmethod
    def values(cls) -> List[str]:
        """Return the accepted string values in declaration order."""
        return [member.value for member in cls]


class GraphNode(BaseModel):
    """A single node of the semantic graph.

    Attributes:
        id: Identifier, unique within its GraphModel
        label: Display text
        type: Semantic category, selects the drawn primitive
        metadata: Optional free-form data passed through untouched
    """

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    id: str = Field(..., min_length=1, description="Node identifier")
    label: str = Field(..., min_length=1, description="Display text")
    type: NodeType = Field(..., description="Semantic node category")
    metadata: Optional[Dict[str, Any]] = Field(
        default=None, description="Free-form metadata"
    )


class GraphEdge(BaseModel):
    """A directed edge between two nodes of the same GraphModel.

    Self-loops (``source == target``) and parallel edges are allowed.
    """

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    id: str = Field(..., min_length=1, description="Edge identifier")
    source: str = Field(..., min_length=1, description="Source node id")
    target: str = Field(..., min_length=1, description="Target node id")
    label: Optional[str] = Field(default=None, description="Optional edge label")

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target


class GraphModel(BaseModel):
    """Validated node/edge graph with no geometry.

    Invariant: every edge's source and target is the id of a node in
    ``nodes``. The validator enforces this; constructing a GraphModel
    directly skips the check.
    """

    model_config = ConfigDict(frozen=True)

    nodes: List[GraphNode] = Field(default_factory=list)
    edges: List[GraphEdge] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def node_ids(self) -> Set[str]:
        """Return the set of node ids."""
        return {node.id for node in self.nodes}

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        """Look up a node by id.

        Args:
            node_id: Id to search for

        Returns:
            The matching GraphNode or None
        """
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None


__all__ = [
    "NodeType",
    "GraphNode",
    "GraphEdge",
    "GraphModel",
]
