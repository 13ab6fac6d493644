"""Data models for the graph-to-drawing pipeline.

- graph_model: semantic graph emitted by the language model
- layout_metadata: layout configuration and positioned results
- shapes: drawing-surface instructions
"""

from .graph_model import (
    NodeType,
    GraphNode,
    GraphEdge,
    GraphModel,
)
from .layout_metadata import (
    LayoutDirection,
    LayoutOptions,
    PositionedNode,
    BoundingBox,
    LayoutResult,
)
from .shapes import (
    PrimitiveKind,
    Point,
    ShapeInstruction,
    ConnectorInstruction,
    ConnectorOptions,
    SynthesisResult,
    DrawingBatch,
)

__all__ = [
    # Semantic graph
    "NodeType",
    "GraphNode",
    "GraphEdge",
    "GraphModel",

    # Layout
    "LayoutDirection",
    "LayoutOptions",
    "PositionedNode",
    "BoundingBox",
    "LayoutResult",

    # Drawing instructions
    "PrimitiveKind",
    "Point",
    "ShapeInstruction",
    "ConnectorInstruction",
    "ConnectorOptions",
    "SynthesisResult",
    "DrawingBatch",
]
