"""Graph-to-drawing pipeline.

Chains the four stages for one assistant response:

    response text -> extract_diagram -> validate_graph -> layout -> synthesize

Usage:
    from flowsketch.core.pipeline import generate_drawing

    render = generate_drawing(response_text)
    if render is not None:
        surface.apply_batch(render.batch)
"""

import logging
from typing import Optional, Union

from pydantic import BaseModel

from flowsketch.layout.engines import DEFAULT_ENGINE, LayoutEngine, get_engine
from flowsketch.models.graph_model import GraphModel
from flowsketch.models.layout_metadata import LayoutOptions, LayoutResult
from flowsketch.models.shapes import ConnectorOptions, DrawingBatch, SynthesisResult
from flowsketch.utils.diagram_parser import extract_diagram_with_reason
from flowsketch.visualization.shape_synthesizer import ShapeSynthesizer

logger = logging.getLogger(__name__)


class DiagramRender(BaseModel):
    """Every intermediate value produced for one diagram."""

    model: GraphModel
    layout: LayoutResult
    synthesis: SynthesisResult
    batch: DrawingBatch


def _resolve_engine(engine: Union[LayoutEngine, str, None]) -> LayoutEngine:
    if engine is None:
        return get_engine(DEFAULT_ENGINE)
    if isinstance(engine, str):
        return get_engine(engine)
    return engine


def render_graph(
    model: GraphModel,
    options: Optional[LayoutOptions] = None,
    connector_options: Optional[ConnectorOptions] = None,
    engine: Union[LayoutEngine, str, None] = None,
    turn: int = 0,
) -> DiagramRender:
    """Lay out and synthesize an already validated graph.

    Args:
        model: Validated graph
        options: Layout options (defaults when None)
        connector_options: Connector routing options (defaults when None)
        engine: Engine instance or registry name (default engine when None)
        turn: Turn number stamped on the resulting batch

    Returns:
        DiagramRender with layout, instructions and the drawing batch

    Raises:
        ValueError: If ``engine`` names an unknown engine
    """
    layout_engine = _resolve_engine(engine)
    layout_result = layout_engine.layout(model, options or LayoutOptions())
    synthesis = ShapeSynthesizer(connector_options).synthesize(layout_result)
    batch = DrawingBatch.from_synthesis(synthesis, turn=turn)

    logger.debug(
        f"Rendered {len(model.nodes)} nodes / {len(model.edges)} edges with "
        f"{layout_engine.name} into {len(batch)} instructions"
    )
    return DiagramRender(model=model, layout=layout_result, synthesis=synthesis, batch=batch)


def generate_drawing(
    response_text: str,
    options: Optional[LayoutOptions] = None,
    connector_options: Optional[ConnectorOptions] = None,
    engine: Union[LayoutEngine, str, None] = None,
    turn: int = 0,
) -> Optional[DiagramRender]:
    """Run the full pipeline on one assistant response.

    Returns:
        DiagramRender, or None when the response carries no valid diagram
    """
    model, reason = extract_diagram_with_reason(response_text)
    if model is None:
        if reason is not None:
            logger.debug(f"No drawing for turn {turn}: {reason}")
        return None
    return render_graph(model, options, connector_options, engine, turn)


__all__ = [
    "DiagramRender",
    "render_graph",
    "generate_drawing",
]
