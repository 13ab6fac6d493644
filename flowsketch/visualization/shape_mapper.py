"""Node type to drawable primitive mapping.

Single source of truth for how each semantic node type is drawn. Both tables
are keyed by NodeType and checked for completeness at import time, so adding
a node type without a primitive fails immediately.
"""

import logging
from typing import Dict, Mapping, Union

from flowsketch.models.graph_model import NodeType
from flowsketch.models.shapes import PrimitiveKind

logger = logging.getLogger(__name__)


GEOMETRY_BY_TYPE: Dict[NodeType, PrimitiveKind] = {
    NodeType.START: PrimitiveKind.ELLIPSE,
    NodeType.PROCESS: PrimitiveKind.RECTANGLE,
    NodeType.DECISION: PrimitiveKind.DIAMOND,
    NodeType.DATA: PrimitiveKind.TRAPEZOID,
    NodeType.END: PrimitiveKind.ELLIPSE,
    NodeType.DEFAULT: PrimitiveKind.RECTANGLE,
}

COLOR_BY_TYPE: Dict[NodeType, str] = {
    NodeType.START: "green",
    NodeType.PROCESS: "blue",
    NodeType.DECISION: "blue",
    NodeType.DATA: "blue",
    NodeType.END: "red",
    NodeType.DEFAULT: "blue",
}


def ensure_exhaustive(table: Mapping[NodeType, object], table_name: str) -> None:
    """Raise if ``table`` lacks an entry for any NodeType.

    Raises:
        RuntimeError: Listing the missing node types
    """
    missing = [t.value for t in NodeType if t not in table]
    if missing:
        raise RuntimeError(
            f"{table_name} has no entry for node type(s): {', '.join(missing)}"
        )


ensure_exhaustive(GEOMETRY_BY_TYPE, "GEOMETRY_BY_TYPE")
ensure_exhaustive(COLOR_BY_TYPE, "COLOR_BY_TYPE")


def _coerce(node_type: Union[NodeType, str]):
    try:
        return NodeType(node_type)
    except ValueError:
        logger.debug(f"Unknown node type {node_type!r}, using default")
        return NodeType.DEFAULT


def geometry_for(node_type: Union[NodeType, str]) -> PrimitiveKind:
    """Primitive kind for a node type.

    decision -> diamond, start/end -> ellipse, data -> trapezoid,
    anything else -> rectangle.
    """
    return GEOMETRY_BY_TYPE[_coerce(node_type)]


def color_for(node_type: Union[NodeType, str]) -> str:
    """Color hint for a node type: start green, end red, others blue."""
    return COLOR_BY_TYPE[_coerce(node_type)]


__all__ = [
    "GEOMETRY_BY_TYPE",
    "COLOR_BY_TYPE",
    "ensure_exhaustive",
    "geometry_for",
    "color_for",
]
