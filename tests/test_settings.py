"""Tests for environment-driven configuration."""

import pytest
from pydantic import ValidationError

from flowsketch.config import describe_environment, load_connector_options, load_layout_options
from flowsketch.models import LayoutDirection, LayoutOptions


class TestLayoutSettings:
    """Test load_layout_options."""

    def test_defaults_when_unset(self):
        """Test an empty environment gives default options."""
        assert load_layout_options({}) == LayoutOptions()

    def test_overrides(self):
        """Test every layout variable is applied."""
        options = load_layout_options({
            "FLOWSKETCH_LAYOUT_DIRECTION": "lr",
            "FLOWSKETCH_NODE_SPACING": "20",
            "FLOWSKETCH_RANK_SPACING": "60.5",
            "FLOWSKETCH_NODE_WIDTH": "120",
            "FLOWSKETCH_NODE_HEIGHT": "40",
        })
        assert options.direction == LayoutDirection.LEFT_TO_RIGHT
        assert options.node_spacing == 20
        assert options.rank_spacing == 60.5
        assert options.node_width == 120
        assert options.node_height == 40

    def test_blank_values_ignored(self):
        """Test blank variables fall back to defaults."""
        assert load_layout_options({"FLOWSKETCH_NODE_WIDTH": "  "}).node_width == 180

    def test_bad_number(self):
        """Test an unparsable number names the variable."""
        with pytest.raises(ValueError, match="FLOWSKETCH_NODE_WIDTH"):
            load_layout_options({"FLOWSKETCH_NODE_WIDTH": "wide"})

    def test_out_of_range(self):
        """Test range checks still apply."""
        with pytest.raises(ValidationError):
            load_layout_options({"FLOWSKETCH_NODE_HEIGHT": "0"})

    def test_reads_process_environment(self, monkeypatch):
        """Test os.environ is used by default."""
        monkeypatch.setenv("FLOWSKETCH_LAYOUT_DIRECTION", "BT")
        assert load_layout_options().direction == LayoutDirection.BOTTOM_TO_TOP


class TestConnectorSettings:
    """Test load_connector_options."""

    def test_defaults(self):
        """Test routing is on by default."""
        options = load_connector_options({})
        assert options.route_self_loops
        assert options.offset_parallel_edges

    @pytest.mark.parametrize("raw,expected", [
        ("false", False), ("0", False), ("off", False), ("No", False),
        ("true", True), ("1", True), ("YES", True), (" on ", True),
    ])
    def test_boolean_values(self, raw, expected):
        """Test accepted boolean spellings."""
        options = load_connector_options({"FLOWSKETCH_ROUTE_SELF_LOOPS": raw})
        assert options.route_self_loops is expected

    def test_back_edge_flag(self):
        """Test back-edge routing can be switched off."""
        assert load_connector_options({}).route_back_edges
        options = load_connector_options({"FLOWSKETCH_ROUTE_BACK_EDGES": "false"})
        assert options.route_back_edges is False

    def test_bad_boolean(self):
        """Test an unrecognised flag raises."""
        with pytest.raises(ValueError, match="FLOWSKETCH_OFFSET_PARALLEL_EDGES"):
            load_connector_options({"FLOWSKETCH_OFFSET_PARALLEL_EDGES": "maybe"})


class TestDescribeEnvironment:
    """Test describe_environment."""

    def test_only_prefixed_variables(self):
        """Test unrelated variables are left out."""
        env = {"FLOWSKETCH_NODE_WIDTH": "200", "HOME": "/root", "FLOWSKETCH_A": "1"}
        assert describe_environment(env) == {"FLOWSKETCH_A": "1", "FLOWSKETCH_NODE_WIDTH": "200"}
