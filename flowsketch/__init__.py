"""flowsketch - turn language-model diagram replies into drawable shapes."""

from flowsketch.core import (
    DiagramRender,
    DiagramSession,
    DrawingSurface,
    generate_drawing,
    render_graph,
)
from flowsketch.layout import get_engine, layout
from flowsketch.models import (
    ConnectorOptions,
    DrawingBatch,
    GraphEdge,
    GraphModel,
    GraphNode,
    LayoutDirection,
    LayoutOptions,
    LayoutResult,
    NodeType,
)
from flowsketch.utils import extract_diagram, strip_diagram_markers
from flowsketch.validators import Rejection, validate_graph
from flowsketch.visualization import synthesize

__version__ = "0.1.0"

__all__ = [
    "GraphModel",
    "GraphNode",
    "GraphEdge",
    "NodeType",
    "LayoutOptions",
    "LayoutDirection",
    "LayoutResult",
    "ConnectorOptions",
    "DrawingBatch",
    "validate_graph",
    "Rejection",
    "layout",
    "get_engine",
    "synthesize",
    "extract_diagram",
    "strip_diagram_markers",
    "render_graph",
    "generate_drawing",
    "DiagramRender",
    "DiagramSession",
    "DrawingSurface",
]
