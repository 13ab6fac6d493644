"""Turn a LayoutResult into drawing-surface instructions.

One shape per positioned node, then one connector per resolvable edge.
Connectors leave the source box through its downstream face and enter the
target box through its upstream face, as seen along the layout direction:

    TB: bottom -> top      BT: top -> bottom
    LR: right  -> left     RL: left -> right

Self-loops are drawn as a small loop on the node's downstream face. Edges
between the same two nodes, in either direction, are spread along the faces.
Back edges (target ranked before source) run along a lane outside the
drawing instead of through the boxes (see ConnectorOptions).
"""

import logging
import uuid
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

from flowsketch.models.graph_model import GraphEdge
from flowsketch.models.layout_metadata import (
    BoundingBox,
    LayoutDirection,
    LayoutResult,
    PositionedNode,
)
from flowsketch.models.shapes import (
    ConnectorInstruction,
    ConnectorOptions,
    Point,
    ShapeInstruction,
    SynthesisResult,
)
from flowsketch.visualization.shape_mapper import color_for, geometry_for

logger = logging.getLogger(__name__)

DOWNSTREAM_FACE: Dict[LayoutDirection, str] = {
    LayoutDirection.TOP_TO_BOTTOM: "bottom",
    LayoutDirection.BOTTOM_TO_TOP: "top",
    LayoutDirection.LEFT_TO_RIGHT: "right",
    LayoutDirection.RIGHT_TO_LEFT: "left",
}

UPSTREAM_FACE: Dict[LayoutDirection, str] = {
    LayoutDirection.TOP_TO_BOTTOM: "top",
    LayoutDirection.BOTTOM_TO_TOP: "bottom",
    LayoutDirection.LEFT_TO_RIGHT: "left",
    LayoutDirection.RIGHT_TO_LEFT: "right",
}

# Outward unit normal of each face
_NORMALS: Dict[str, Tuple[float, float]] = {
    "top": (0.0, -1.0),
    "bottom": (0.0, 1.0),
    "left": (-1.0, 0.0),
    "right": (1.0, 0.0),
}


def new_shape_id() -> str:
    """Fresh drawing-surface id in ``shape:<hex>`` form."""
    return f"shape:{uuid.uuid4().hex}"


def face_midpoint(node: PositionedNode, face: str, offset: float = 0.0) -> Point:
    """Point on one face of a node box.

    Args:
        node: Positioned node
        face: 'top', 'bottom', 'left' or 'right'
        offset: Shift along the face from its midpoint, clamped to the face

    Returns:
        Absolute point on the face
    """
    if face in ("top", "bottom"):
        half = node.width / 2
        x = node.x + half + max(-half, min(half, offset))
        y = node.y if face == "top" else node.y + node.height
        return Point(x=x, y=y)
    if face in ("left", "right"):
        half = node.height / 2
        y = node.y + half + max(-half, min(half, offset))
        x = node.x if face == "left" else node.x + node.width
        return Point(x=x, y=y)
    raise ValueError(f"Unknown face: {face}")


def _face_length(node: PositionedNode, face: str) -> float:
    return node.width if face in ("top", "bottom") else node.height


class ShapeSynthesizer:
    """Builds the instruction batch for one LayoutResult.

    Example:
        synthesizer = ShapeSynthesizer()
        result = synthesizer.synthesize(layout_result)
        batch = DrawingBatch.from_synthesis(result)
    """

    def __init__(
        self,
        options: Optional[ConnectorOptions] = None,
        id_factory: Callable[[], str] = new_shape_id,
    ):
        """Initialize the synthesizer.

        Args:
            options: Connector routing options (defaults when None)
            id_factory: Callable returning a fresh unique shape id
        """
        self.options = options or ConnectorOptions()
        self._new_id = id_factory

    def synthesize(self, layout: LayoutResult) -> SynthesisResult:
        """Create shape and connector instructions.

        Edges whose source or target has no shape are skipped and reported
        in ``skipped_edges``; node shapes are always emitted.

        Args:
            layout: Result of the layout engine

        Returns:
            SynthesisResult with instructions and the node id -> shape id map
        """
        shapes: List[ShapeInstruction] = []
        id_map: Dict[str, str] = {}
        nodes: Dict[str, PositionedNode] = {}

        for node in layout.nodes:
            shape = self.shape_for(node)
            shapes.append(shape)
            id_map[node.id] = shape.id
            nodes[node.id] = node

        resolvable: List[GraphEdge] = []
        skipped: List[str] = []
        for edge in layout.edges:
            if edge.source not in id_map or edge.target not in id_map:
                logger.warning(
                    f"Skipping edge {edge.id}: endpoint not drawn "
                    f"({edge.source} -> {edge.target})"
                )
                skipped.append(edge.id)
                continue
            resolvable.append(edge)

        offsets = self._parallel_offsets(resolvable)
        loop_counts: Dict[str, int] = {}
        back_edges = 0
        connectors: List[ConnectorInstruction] = []
        for edge in resolvable:
            source = nodes[edge.source]
            target = nodes[edge.target]
            if edge.is_self_loop and self.options.route_self_loops:
                index = loop_counts.get(edge.source, 0)
                loop_counts[edge.source] = index + 1
                start, bends, end = self._self_loop(source, layout.direction, index)
            elif self._is_back_edge(source, target):
                start, bends, end = self._back_edge(
                    source, target, layout, offsets.get(edge.id, 0.0), back_edges
                )
                back_edges += 1
            else:
                offset = offsets.get(edge.id, 0.0)
                start = face_midpoint(source, DOWNSTREAM_FACE[layout.direction], offset)
                end = face_midpoint(target, UPSTREAM_FACE[layout.direction], offset)
                bends = []

            connectors.append(ConnectorInstruction(
                id=self._new_id(),
                edge_id=edge.id,
                source_shape_id=id_map[edge.source],
                target_shape_id=id_map[edge.target],
                start=start,
                end=end,
                bend_points=bends,
                text=edge.label or "",
            ))

        logger.debug(
            f"Synthesized {len(shapes)} shapes and {len(connectors)} connectors "
            f"({len(skipped)} edge(s) skipped)"
        )

        return SynthesisResult(
            create_instructions=[*shapes, *connectors],
            id_map=id_map,
            skipped_edges=skipped,
        )

    def shape_for(self, node: PositionedNode) -> ShapeInstruction:
        """Shape instruction for one positioned node, with a fresh id."""
        return ShapeInstruction(
            id=self._new_id(),
            node_id=node.id,
            kind=geometry_for(node.type),
            x=node.x,
            y=node.y,
            width=node.width,
            height=node.height,
            text=node.label,
            color=color_for(node.type),
        )

    def _parallel_offsets(self, edges: List[GraphEdge]) -> Dict[str, float]:
        """Offsets for edges between the same two nodes, in either direction.

        A reversed edge leaves from the other node, so sharing one offset
        sequence keeps forward and backward connectors on separate lines.
        """
        if not self.options.offset_parallel_edges:
            return {}

        groups: Dict[FrozenSet[str], List[str]] = {}
        for edge in edges:
            if edge.is_self_loop:
                continue
            groups.setdefault(frozenset((edge.source, edge.target)), []).append(edge.id)

        offsets: Dict[str, float] = {}
        spacing = self.options.parallel_edge_offset
        for edge_ids in groups.values():
            if len(edge_ids) < 2:
                continue
            middle = (len(edge_ids) - 1) / 2
            for i, edge_id in enumerate(edge_ids):
                offsets[edge_id] = (i - middle) * spacing
        return offsets

    def _is_back_edge(self, source: PositionedNode, target: PositionedNode) -> bool:
        return self.options.route_back_edges and target.rank < source.rank

    def _back_edge(
        self,
        source: PositionedNode,
        target: PositionedNode,
        layout: LayoutResult,
        offset: float,
        index: int,
    ) -> Tuple[Point, List[Point], Point]:
        """Route an edge pointing against the layout direction.

        The connector leaves the source's downstream face, runs along a lane
        outside the drawing's bounding box and re-enters through the
        target's upstream face. Each further back edge gets its own lane.
        """
        direction = layout.direction
        box = layout.bounding_box or BoundingBox.from_nodes(layout.nodes)
        reach = self.options.self_loop_size
        dx, dy = _NORMALS[DOWNSTREAM_FACE[direction]]

        start = face_midpoint(source, DOWNSTREAM_FACE[direction], offset)
        end = face_midpoint(target, UPSTREAM_FACE[direction], offset)
        leave = Point(x=start.x + dx * reach, y=start.y + dy * reach)
        enter = Point(x=end.x - dx * reach, y=end.y - dy * reach)

        if direction.is_vertical:
            lane = box.max_x + reach * (index + 1)
            bends = [leave, Point(x=lane, y=leave.y), Point(x=lane, y=enter.y), enter]
        else:
            lane = box.max_y + reach * (index + 1)
            bends = [leave, Point(x=leave.x, y=lane), Point(x=enter.x, y=lane), enter]
        return start, bends, end

    def _self_loop(
        self,
        node: PositionedNode,
        direction: LayoutDirection,
        index: int,
    ) -> Tuple[Point, List[Point], Point]:
        face = DOWNSTREAM_FACE[direction]
        quarter = _face_length(node, face) / 4
        dx, dy = _NORMALS[face]
        reach = self.options.self_loop_size * (index + 1)

        start = face_midpoint(node, face, -quarter)
        end = face_midpoint(node, face, quarter)
        bends = [
            Point(x=start.x + dx * reach, y=start.y + dy * reach),
            Point(x=end.x + dx * reach, y=end.y + dy * reach),
        ]
        return start, bends, end


def synthesize(
    layout: LayoutResult,
    options: Optional[ConnectorOptions] = None,
) -> SynthesisResult:
    """Module-level shortcut for ``ShapeSynthesizer(options).synthesize``."""
    return ShapeSynthesizer(options).synthesize(layout)


__all__ = [
    "DOWNSTREAM_FACE",
    "UPSTREAM_FACE",
    "ShapeSynthesizer",
    "face_midpoint",
    "new_shape_id",
    "synthesize",
]
