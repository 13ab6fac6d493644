"""Tests for the diagram payload validator."""

import logging

import pytest

from flowsketch.models import GraphModel, NodeType
from flowsketch.templates import COMPLEX_DIAGRAM, FLOWCHART
from flowsketch.validators import (
    IssueCode,
    Rejection,
    is_valid_graph,
    issues_to_dicts,
    validate_graph,
)


def _payload(nodes=None, edges=None):
    return {
        "nodes": nodes if nodes is not None else [
            {"id": "1", "label": "Start", "type": "start"},
            {"id": "2", "label": "End", "type": "end"},
        ],
        "edges": edges if edges is not None else [
            {"id": "e1", "source": "1", "target": "2"},
        ],
    }


class TestValidGraphs:
    """Payloads that must be accepted."""

    def test_minimal_graph(self):
        """Test a two-node graph."""
        result = validate_graph(_payload())
        assert isinstance(result, GraphModel)
        assert [n.type for n in result.nodes] == [NodeType.START, NodeType.END]
        assert result.edges[0].label is None

    def test_empty_graph(self):
        """Test that empty collections are a valid, empty model."""
        result = validate_graph({"nodes": [], "edges": []})
        assert isinstance(result, GraphModel)
        assert result.is_empty

    def test_extra_keys_ignored(self):
        """Test that unknown keys do not cause rejection."""
        payload = _payload()
        payload["title"] = "Flow"
        payload["nodes"][0]["color"] = "red"
        assert is_valid_graph(payload)

    def test_self_loop_and_parallel_edges(self):
        """Test that self-loops and parallel edges are allowed."""
        result = validate_graph(_payload(edges=[
            {"id": "e1", "source": "1", "target": "2"},
            {"id": "e2", "source": "1", "target": "2", "label": "again"},
            {"id": "e3", "source": "2", "target": "2"},
        ]))
        assert isinstance(result, GraphModel)
        assert len(result.edges) == 3

    def test_order_preserved(self):
        """Test that node and edge order follow the input."""
        result = validate_graph(_payload(
            nodes=[{"id": str(i), "label": f"N{i}", "type": "process"} for i in (3, 1, 2)],
            edges=[],
        ))
        assert [n.id for n in result.nodes] == ["3", "1", "2"]

    @pytest.mark.parametrize("model", [FLOWCHART, COMPLEX_DIAGRAM])
    def test_dump_round_trip(self, model):
        """Test that validating a dumped model yields an equal model."""
        assert validate_graph(model.model_dump(mode="json")) == model


class TestRejections:
    """Payloads that must be rejected, with the right issue codes."""

    @pytest.mark.parametrize("raw", [None, 42, "text", [], [{"nodes": []}]])
    def test_not_an_object(self, raw):
        """Test non-object payloads."""
        result = validate_graph(raw)
        assert isinstance(result, Rejection)
        assert result.codes == {IssueCode.NOT_AN_OBJECT}

    @pytest.mark.parametrize("raw", [
        {"nodes": []},
        {"edges": []},
        {"nodes": {}, "edges": []},
        {"nodes": [], "edges": "none"},
    ])
    def test_missing_collection(self, raw):
        """Test missing or non-array collections."""
        result = validate_graph(raw)
        assert isinstance(result, Rejection)
        assert IssueCode.MISSING_COLLECTION in result.codes

    def test_invalid_node_type(self):
        """Test a node type outside the allowed set."""
        result = validate_graph(_payload(
            nodes=[{"id": "1", "label": "Start", "type": "circle"}], edges=[],
        ))
        assert isinstance(result, Rejection)
        assert result.codes == {IssueCode.INVALID_NODE_TYPE}
        assert "circle" in result.reason
        assert result.issues[0].location == "nodes[0].type"

    @pytest.mark.parametrize("node", [
        "not a node",
        {"label": "No id", "type": "process"},
        {"id": "1", "type": "process"},
        {"id": "1", "label": "", "type": "process"},
        {"id": "1", "label": "No type"},
    ])
    def test_invalid_node(self, node):
        """Test malformed node entries."""
        result = validate_graph(_payload(nodes=[node], edges=[]))
        assert isinstance(result, Rejection)
        assert result.codes == {IssueCode.INVALID_NODE}

    def test_invalid_edge(self):
        """Test an edge without a target."""
        result = validate_graph(_payload(edges=[{"id": "e1", "source": "1"}]))
        assert isinstance(result, Rejection)
        assert result.codes == {IssueCode.INVALID_EDGE}

    def test_dangling_edge(self):
        """Test an edge referencing a missing node."""
        result = validate_graph(_payload(edges=[{"id": "e1", "source": "1", "target": "99"}]))
        assert isinstance(result, Rejection)
        assert result.codes == {IssueCode.DANGLING_EDGE}
        assert result.issues[0].location == "edges[0].target"
        assert "99" in result.reason

    def test_duplicate_node_id(self):
        """Test that duplicate node ids are rejected."""
        result = validate_graph(_payload(nodes=[
            {"id": "1", "label": "A", "type": "start"},
            {"id": "1", "label": "B", "type": "end"},
        ], edges=[]))
        assert isinstance(result, Rejection)
        assert result.codes == {IssueCode.DUPLICATE_NODE_ID}

    def test_duplicate_edge_id(self):
        """Test that duplicate edge ids are rejected."""
        result = validate_graph(_payload(edges=[
            {"id": "e1", "source": "1", "target": "2"},
            {"id": "e1", "source": "2", "target": "1"},
        ]))
        assert isinstance(result, Rejection)
        assert result.codes == {IssueCode.DUPLICATE_EDGE_ID}

    def test_all_issues_collected(self):
        """Test that every problem is reported, not just the first."""
        result = validate_graph(_payload(
            nodes=[
                {"id": "1", "label": "A", "type": "start"},
                {"id": "2", "label": "B", "type": "hexagon"},
            ],
            edges=[{"id": "e1", "source": "1", "target": "3"}],
        ))
        assert isinstance(result, Rejection)
        assert result.codes == {IssueCode.INVALID_NODE_TYPE, IssueCode.DANGLING_EDGE}
        assert len(result.issues) == 2

    def test_rejection_logged(self, caplog):
        """Test that rejections log a warning unless disabled."""
        with caplog.at_level(logging.WARNING, logger="flowsketch.validators.graph_validator"):
            validate_graph(None)
        assert "Rejected diagram" in caplog.text

        caplog.clear()
        with caplog.at_level(logging.WARNING, logger="flowsketch.validators.graph_validator"):
            assert not is_valid_graph(None)
        assert caplog.text == ""

    def test_issues_to_dicts(self):
        """Test issue serialization omits empty locations."""
        result = validate_graph("text", log_rejection=False)
        dumped = issues_to_dicts(result.issues)
        assert dumped == [{"code": "not_an_object", "message": "Diagram must be an object, got str"}]


class TestTotality:
    """The validator never raises for arbitrary JSON-like values."""

    @pytest.mark.parametrize("raw", [
        {"nodes": [None, 1, [], {}], "edges": [None, {"id": None}]},
        {"nodes": [{"id": {"nested": 1}, "label": ["x"], "type": 5}], "edges": []},
        {"nodes": [{"id": "1", "label": "A", "type": None}], "edges": [{}]},
        {"nodes": (), "edges": ()},
        {"nodes": [{"id": True, "label": 3.5, "type": "start"}], "edges": []},
    ])
    def test_never_raises(self, raw):
        """Test that odd payloads produce a value, not an exception."""
        result = validate_graph(raw, log_rejection=False)
        assert isinstance(result, (GraphModel, Rejection))
