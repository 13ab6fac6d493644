"""Tests for the graph, layout and instruction models."""

import pytest
from pydantic import ValidationError

from flowsketch.models import (
    BoundingBox,
    ConnectorInstruction,
    ConnectorOptions,
    DrawingBatch,
    GraphEdge,
    GraphModel,
    GraphNode,
    LayoutDirection,
    LayoutOptions,
    LayoutResult,
    NodeType,
    Point,
    PositionedNode,
    PrimitiveKind,
    ShapeInstruction,
    SynthesisResult,
)


def _positioned(node_id: str, x: float, y: float, rank: int = 0, order: int = 0) -> PositionedNode:
    return PositionedNode(
        id=node_id, label=node_id, type="process",
        x=x, y=y, width=180, height=80, rank=rank, order=order,
    )


class TestGraphModel:
    """Test NodeType, GraphNode, GraphEdge and GraphModel."""

    def test_node_type_values(self):
        """Test the accepted node type strings."""
        assert NodeType.values() == ["start", "process", "decision", "data", "end", "default"]

    def test_node_is_frozen(self):
        """Test that nodes cannot be mutated after construction."""
        node = GraphNode(id="1", label="Start", type="start")
        with pytest.raises(ValidationError):
            node.label = "Changed"

    def test_numeric_ids_coerced(self):
        """Test that numeric ids become strings."""
        node = GraphNode(id=1, label="Start", type="start")
        edge = GraphEdge(id=7, source=1, target=2)
        assert node.id == "1"
        assert edge.id == "7"
        assert edge.source == "1"

    def test_empty_label_rejected(self):
        """Test that labels must be non-empty."""
        with pytest.raises(ValidationError):
            GraphNode(id="1", label="", type="start")

    def test_self_loop_flag(self):
        """Test GraphEdge.is_self_loop."""
        assert GraphEdge(id="e", source="a", target="a").is_self_loop
        assert not GraphEdge(id="e", source="a", target="b").is_self_loop

    def test_lookup_helpers(self):
        """Test node_ids, get_node and is_empty."""
        model = GraphModel(
            nodes=[
                GraphNode(id="a", label="A", type="start"),
                GraphNode(id="b", label="B", type="end"),
            ],
            edges=[GraphEdge(id="e1", source="a", target="b")],
        )
        assert model.node_ids() == {"a", "b"}
        assert model.get_node("b").label == "B"
        assert model.get_node("missing") is None
        assert not model.is_empty
        assert GraphModel().is_empty


class TestLayoutOptions:
    """Test LayoutOptions defaults and validation."""

    def test_defaults(self):
        """Test default values."""
        options = LayoutOptions()
        assert options.direction == LayoutDirection.TOP_TO_BOTTOM
        assert options.node_spacing == 50
        assert options.rank_spacing == 100
        assert options.node_width == 180
        assert options.node_height == 80

    @pytest.mark.parametrize("raw,expected", [
        ("LR", LayoutDirection.LEFT_TO_RIGHT),
        ("lr", LayoutDirection.LEFT_TO_RIGHT),
        ("TD", LayoutDirection.TOP_TO_BOTTOM),
        ("bottom-to-top", LayoutDirection.BOTTOM_TO_TOP),
        ("RL", LayoutDirection.RIGHT_TO_LEFT),
    ])
    def test_direction_aliases(self, raw, expected):
        """Test that short codes and long names are accepted."""
        assert LayoutOptions(direction=raw).direction == expected

    def test_unknown_direction_rejected(self):
        """Test that an unknown direction raises."""
        with pytest.raises(ValidationError):
            LayoutOptions(direction="diagonal")

    def test_non_positive_size_rejected(self):
        """Test that node sizes must be positive."""
        with pytest.raises(ValidationError):
            LayoutOptions(node_width=0)
        with pytest.raises(ValidationError):
            LayoutOptions(node_spacing=-1)

    def test_component_spacing_floor(self):
        """Test that component spacing never drops below node spacing."""
        assert LayoutOptions().effective_component_spacing == 50
        assert LayoutOptions(component_spacing=10).effective_component_spacing == 50
        assert LayoutOptions(component_spacing=120).effective_component_spacing == 120

    def test_extents_follow_direction(self):
        """Test rank and perpendicular extents for vertical and horizontal layouts."""
        vertical = LayoutOptions(direction="TB")
        horizontal = LayoutOptions(direction="LR")
        assert (vertical.rank_extent, vertical.perpendicular_extent) == (80, 180)
        assert (horizontal.rank_extent, horizontal.perpendicular_extent) == (180, 80)


class TestPositionedNode:
    """Test PositionedNode geometry helpers."""

    def test_from_center(self):
        """Test conversion from a centre point to a top-left origin."""
        node = GraphNode(id="1", label="Start", type="start")
        positioned = PositionedNode.from_center(node, (90.0, 40.0), 180, 80, rank=2, order=1)
        assert positioned.x == 0.0
        assert positioned.y == 0.0
        assert positioned.center == (90.0, 40.0)
        assert positioned.rank == 2
        assert positioned.order == 1
        assert positioned.type == NodeType.START

    def test_to_graph_node(self):
        """Test dropping geometry."""
        node = GraphNode(id="1", label="Start", type="start")
        positioned = PositionedNode.from_center(node, (0, 0), 10, 10)
        assert positioned.to_graph_node() == node


class TestBoundingBox:
    """Test BoundingBox model."""

    def test_dimensions(self):
        """Test width, height and centre."""
        bbox = BoundingBox(min_x=10, max_x=110, min_y=0, max_y=50)
        assert bbox.width == 100
        assert bbox.height == 50
        assert bbox.center == (60, 25)

    def test_intersects(self):
        """Test overlap detection; touching boxes do not intersect."""
        a = BoundingBox(min_x=0, max_x=100, min_y=0, max_y=100)
        b = BoundingBox(min_x=50, max_x=150, min_y=50, max_y=150)
        c = BoundingBox(min_x=100, max_x=200, min_y=0, max_y=100)
        assert a.intersects(b)
        assert not a.intersects(c)

    def test_from_nodes(self):
        """Test enclosing box of node boxes."""
        bbox = BoundingBox.from_nodes([_positioned("a", 0, 0), _positioned("b", 230, 180)])
        assert (bbox.min_x, bbox.min_y, bbox.max_x, bbox.max_y) == (0, 0, 410, 260)

    def test_from_nodes_empty(self):
        """Test that an empty node list raises."""
        with pytest.raises(ValueError, match="empty node list"):
            BoundingBox.from_nodes([])


class TestLayoutResult:
    """Test LayoutResult helpers."""

    def test_bounding_box_computed(self):
        """Test that the bounding box is filled in automatically."""
        result = LayoutResult(nodes=[_positioned("a", 0, 0), _positioned("b", 0, 180, rank=1)])
        assert result.bounding_box.height == 260

    def test_empty_result_has_no_bounding_box(self):
        """Test an empty result."""
        assert LayoutResult().bounding_box is None

    def test_nodes_in_rank(self):
        """Test nodes of one rank come back in order."""
        result = LayoutResult(nodes=[
            _positioned("b", 230, 180, rank=1, order=1),
            _positioned("a", 0, 180, rank=1, order=0),
            _positioned("c", 115, 0, rank=0),
        ])
        assert [n.id for n in result.nodes_in_rank(1)] == ["a", "b"]
        assert result.get_node("c").x == 115


class TestInstructions:
    """Test instruction models and DrawingBatch."""

    def _synthesis(self) -> SynthesisResult:
        shape = ShapeInstruction(
            id="shape:1", node_id="a", kind=PrimitiveKind.ELLIPSE,
            x=0, y=0, width=180, height=80, text="A", color="green",
        )
        arrow = ConnectorInstruction(
            id="shape:2", edge_id="e1", source_shape_id="shape:1",
            target_shape_id="shape:1", start=Point(x=0, y=0), end=Point(x=1, y=1),
            bend_points=[Point(x=0, y=5)],
        )
        return SynthesisResult(create_instructions=[shape, arrow], id_map={"a": "shape:1"})

    def test_connector_points(self):
        """Test get_all_points ordering."""
        arrow = self._synthesis().connectors[0]
        assert [p.to_tuple() for p in arrow.get_all_points()] == [(0, 0), (0, 5), (1, 1)]

    def test_synthesis_partitions(self):
        """Test shapes/connectors views."""
        result = self._synthesis()
        assert len(result.shapes) == 1
        assert len(result.connectors) == 1

    def test_batch_from_synthesis(self):
        """Test building a drawing batch."""
        batch = DrawingBatch.from_synthesis(self._synthesis(), turn=3)
        assert batch.turn == 3
        assert batch.clear_existing is True
        assert len(batch) == 2
        assert batch.id_map == {"a": "shape:1"}

    def test_batch_dump_is_plain(self):
        """Test that model_dump yields plain dicts with type tags."""
        dumped = DrawingBatch.from_synthesis(self._synthesis()).model_dump(mode="json")
        assert [i["type"] for i in dumped["instructions"]] == ["geo", "arrow"]
        assert dumped["instructions"][0]["kind"] == "ellipse"

    def test_connector_options_defaults(self):
        """Test connector option defaults."""
        options = ConnectorOptions()
        assert options.route_self_loops
        assert options.offset_parallel_edges
        assert options.self_loop_size == 30
        assert options.parallel_edge_offset == 12
