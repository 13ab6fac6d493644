"""Drawing-surface instruction models.

The shape synthesizer emits these; a host hands them to the drawing surface
as one batch. ``model_dump()`` yields plain dicts suitable for JSON.
"""

from enum import Enum
from typing import Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class PrimitiveKind(str, Enum):
    """Drawable shape categories understood by the surface."""
    RECTANGLE = "rectangle"
    DIAMOND = "diamond"
    ELLIPSE = "ellipse"
    TRAPEZOID = "trapezoid"


class Point(BaseModel):
    """Absolute point on the drawing surface."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def to_tuple(self):
        return (self.x, self.y)


class ShapeInstruction(BaseModel):
    """Create one node shape.

    Attributes:
        id: Fresh drawing-surface shape id
        node_id: GraphNode id this shape renders
        kind: Primitive kind selected from the node type
        x, y: Top-left corner
        width, height: Box size
        text: Label text
        fill: Fill style hint
        color: Color hint
    """

    type: Literal["geo"] = "geo"
    id: str
    node_id: str
    kind: PrimitiveKind
    x: float
    y: float
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    text: str = ""
    fill: str = "solid"
    color: str = "blue"


class ConnectorInstruction(BaseModel):
    """Create one arrow between two node shapes."""

    type: Literal["arrow"] = "arrow"
    id: str
    edge_id: str
    source_shape_id: str
    target_shape_id: str
    start: Point
    end: Point
    bend_points: List[Point] = Field(default_factory=list)
    text: str = ""

    def get_all_points(self) -> List[Point]:
        """Get all points in order: start -> bends -> end."""
        return [self.start] + self.bend_points + [self.end]


Instruction = Union[ShapeInstruction, ConnectorInstruction]


class ConnectorOptions(BaseModel):
    """Connector routing knobs for the shape synthesizer.

    Attributes:
        route_self_loops: Draw self-loops as a small loop on the downstream face
        offset_parallel_edges: Spread edges between the same two nodes along
            the anchor faces, whichever way they point
        route_back_edges: Route edges that point against the layout direction
            around the side of the drawing instead of through the boxes
        self_loop_size: Distance a self-loop or back edge extends away from
            its face
        parallel_edge_offset: Spacing between neighbouring parallel edges
    """

    model_config = ConfigDict(frozen=True)

    route_self_loops: bool = True
    offset_parallel_edges: bool = True
    route_back_edges: bool = True
    self_loop_size: float = Field(default=30.0, gt=0)
    parallel_edge_offset: float = Field(default=12.0, ge=0)


class SynthesisResult(BaseModel):
    """Output of the shape synthesizer.

    Attributes:
        create_instructions: Shapes in node order, then connectors in edge order
        id_map: GraphNode id -> shape id
        skipped_edges: Ids of edges dropped because an endpoint had no shape
    """

    create_instructions: List[Instruction] = Field(default_factory=list)
    id_map: Dict[str, str] = Field(default_factory=dict)
    skipped_edges: List[str] = Field(default_factory=list)

    @property
    def shapes(self) -> List[ShapeInstruction]:
        return [i for i in self.create_instructions if isinstance(i, ShapeInstruction)]

    @property
    def connectors(self) -> List[ConnectorInstruction]:
        return [i for i in self.create_instructions if isinstance(i, ConnectorInstruction)]


class DrawingBatch(BaseModel):
    """Everything a host applies to the surface for one turn.

    ``clear_existing`` is set because each generated diagram fully replaces
    the previous one.
    """

    turn: int = Field(default=0, ge=0)
    clear_existing: bool = True
    instructions: List[Instruction] = Field(default_factory=list)
    id_map: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_synthesis(cls, result: SynthesisResult, turn: int = 0) -> "DrawingBatch":
        return cls(
            turn=turn,
            instructions=list(result.create_instructions),
            id_map=dict(result.id_map),
        )

    def __len__(self) -> int:
        return len(self.instructions)


__all__ = [
    "PrimitiveKind",
    "Point",
    "ShapeInstruction",
    "ConnectorInstruction",
    "Instruction",
    "ConnectorOptions",
    "SynthesisResult",
    "DrawingBatch",
]
