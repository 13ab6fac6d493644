"""Layout models: configuration in, positioned nodes out.

This module provides schemas for:
- Layout configuration (direction, spacing, uniform node size)
- Positioned nodes (top-left origin boxes with rank/order)
- Layout results consumed by the shape synthesizer

Coordinates are real-valued with a top-left origin; ``x`` grows to the
right and ``y`` grows downwards, matching the drawing surface.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from flowsketch.models.graph_model import GraphEdge, GraphNode


class LayoutDirection(str, Enum):
    """Direction in which ranks advance."""
    TOP_TO_BOTTOM = "TB"
    BOTTOM_TO_TOP = "BT"
    LEFT_TO_RIGHT = "LR"
    RIGHT_TO_LEFT = "RL"

    @property
    def is_vertical(self) -> bool:
        """True when ranks are stacked along the y axis."""
        return self in (LayoutDirection.TOP_TO_BOTTOM, LayoutDirection.BOTTOM_TO_TOP)

    @property
    def is_reversed(self) -> bool:
        """True when rank 0 sits at the far end of the rank axis."""
        return self in (LayoutDirection.BOTTOM_TO_TOP, LayoutDirection.RIGHT_TO_LEFT)


_DIRECTION_ALIASES: Dict[str, LayoutDirection] = {
    "tb": LayoutDirection.TOP_TO_BOTTOM,
    "td": LayoutDirection.TOP_TO_BOTTOM,
    "top-to-bottom": LayoutDirection.TOP_TO_BOTTOM,
    "bt": LayoutDirection.BOTTOM_TO_TOP,
    "bottom-to-top": LayoutDirection.BOTTOM_TO_TOP,
    "lr": LayoutDirection.LEFT_TO_RIGHT,
    "left-to-right": LayoutDirection.LEFT_TO_RIGHT,
    "rl": LayoutDirection.RIGHT_TO_LEFT,
    "right-to-left": LayoutDirection.RIGHT_TO_LEFT,
}


class LayoutOptions(BaseModel):
    """Configuration for the layered layout engine.

    Every field is optional; the defaults give a readable top-to-bottom
    flowchart with 180x80 boxes.

    Attributes:
        direction: Direction in which ranks advance
        node_spacing: Gap between neighbouring nodes of the same rank
        rank_spacing: Gap between consecutive ranks
        node_width: Uniform node box width
        node_height: Uniform node box height
        component_spacing: Gap between disconnected components
            (at least node_spacing)
        ordering_passes: Barycenter sweeps used to reduce crossings
    """

    model_config = ConfigDict(frozen=True)

    direction: LayoutDirection = Field(
        default=LayoutDirection.TOP_TO_BOTTOM, description="Rank direction"
    )
    node_spacing: float = Field(default=50.0, ge=0, description="Gap within a rank")
    rank_spacing: float = Field(default=100.0, ge=0, description="Gap between ranks")
    node_width: float = Field(default=180.0, gt=0, description="Node box width")
    node_height: float = Field(default=80.0, gt=0, description="Node box height")
    component_spacing: Optional[float] = Field(
        default=None, ge=0, description="Gap between disconnected components"
    )
    ordering_passes: int = Field(
        default=4, ge=0, description="Barycenter sweeps for crossing reduction"
    )

    @field_validator("direction", mode="before")
    @classmethod
    def normalize_direction(cls, v: Any) -> Any:
        """Accept short codes and long names in any case."""
        if isinstance(v, str) and not isinstance(v, LayoutDirection):
            alias = _DIRECTION_ALIASES.get(v.strip().lower())
            if alias is not None:
                return alias
        return v

    @property
    def effective_component_spacing(self) -> float:
        """Gap between components, never smaller than node_spacing."""
        if self.component_spacing is None:
            return self.node_spacing
        return max(self.component_spacing, self.node_spacing)

    @property
    def rank_extent(self) -> float:
        """Size of a node box along the rank axis."""
        return self.node_height if self.direction.is_vertical else self.node_width

    @property
    def perpendicular_extent(self) -> float:
        """Size of a node box across the rank axis."""
        return self.node_width if self.direction.is_vertical else self.node_height


class PositionedNode(GraphNode):
    """A GraphNode with a box assigned by the layout engine.

    Attributes:
        x: Left edge of the box
        y: Top edge of the box
        width: Box width
        height: Box height
        rank: Layer index (0 for sources)
        order: Position within the rank, counted from the left/top
    """

    x: float = Field(..., description="Top-left x")
    y: float = Field(..., description="Top-left y")
    width: float = Field(..., gt=0, description="Box width")
    height: float = Field(..., gt=0, description="Box height")
    rank: int = Field(default=0, ge=0, description="Layer index")
    order: int = Field(default=0, ge=0, description="Position within the rank")

    @classmethod
    def from_center(
        cls,
        node: GraphNode,
        center: Tuple[float, float],
        width: float,
        height: float,
        rank: int = 0,
        order: int = 0,
    ) -> "PositionedNode":
        """Build a positioned node from a center point.

        Args:
            node: Source GraphNode
            center: Box center (cx, cy)
            width: Box width
            height: Box height
            rank: Layer index
            order: Position within the rank

        Returns:
            PositionedNode with a top-left origin
        """
        cx, cy = center
        return cls(
            **node.model_dump(),
            x=cx - width / 2,
            y=cy - height / 2,
            width=width,
            height=height,
            rank=rank,
            order=order,
        )

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def to_graph_node(self) -> GraphNode:
        """Drop the geometry and return the plain GraphNode."""
        return GraphNode(id=self.id, label=self.label, type=self.type, metadata=self.metadata)


class BoundingBox(BaseModel):
    """Axis-aligned bounding box.

    Attributes:
        min_x: Minimum x coordinate
        max_x: Maximum x coordinate
        min_y: Minimum y coordinate
        max_y: Maximum y coordinate
    """

    min_x: float = Field(..., description="Minimum x coordinate")
    max_x: float = Field(..., description="Maximum x coordinate")
    min_y: float = Field(..., description="Minimum y coordinate")
    max_y: float = Field(..., description="Maximum y coordinate")

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Tuple[float, float]:
        return (
            (self.min_x + self.max_x) / 2,
            (self.min_y + self.max_y) / 2
        )

    def intersects(self, other: "BoundingBox") -> bool:
        """True if the interiors overlap (touching edges do not count)."""
        return (
            self.min_x < other.max_x
            and other.min_x < self.max_x
            and self.min_y < other.max_y
            and other.min_y < self.max_y
        )

    @classmethod
    def from_nodes(cls, nodes: List[PositionedNode]) -> "BoundingBox":
        """Compute the box enclosing every node box.

        Raises:
            ValueError: If nodes is empty
        """
        if not nodes:
            raise ValueError("Cannot compute bounding box from empty node list")

        return cls(
            min_x=min(n.x for n in nodes),
            max_x=max(n.x + n.width for n in nodes),
            min_y=min(n.y for n in nodes),
            max_y=max(n.y + n.height for n in nodes),
        )


class LayoutResult(BaseModel):
    """Positioned nodes plus the untouched edges of the source model.

    Edges carry no geometry; connectors are resolved from the endpoint
    boxes at synthesis time.
    """

    nodes: List[PositionedNode] = Field(default_factory=list)
    edges: List[GraphEdge] = Field(default_factory=list)
    direction: LayoutDirection = Field(default=LayoutDirection.TOP_TO_BOTTOM)
    rank_count: int = Field(default=0, ge=0, description="Ranks in the deepest component")
    bounding_box: Optional[BoundingBox] = Field(
        default=None, description="Auto-computed when nodes are present"
    )

    def model_post_init(self, __context) -> None:
        """Compute bounding box if not provided."""
        if self.bounding_box is None and self.nodes:
            object.__setattr__(self, "bounding_box", BoundingBox.from_nodes(self.nodes))

    def get_node(self, node_id: str) -> Optional[PositionedNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def nodes_in_rank(self, rank: int) -> List[PositionedNode]:
        """Nodes of one rank sorted by their order within it."""
        return sorted((n for n in self.nodes if n.rank == rank), key=lambda n: (n.order, n.x, n.y))


__all__ = [
    "LayoutDirection",
    "LayoutOptions",
    "PositionedNode",
    "BoundingBox",
    "LayoutResult",
]
