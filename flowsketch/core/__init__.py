"""Pipeline wiring and the host-side diagram session."""

from .pipeline import DiagramRender, generate_drawing, render_graph
from .diagram_session import DiagramSession, DrawingSurface

__all__ = [
    "DiagramRender",
    "render_graph",
    "generate_drawing",
    "DiagramSession",
    "DrawingSurface",
]
