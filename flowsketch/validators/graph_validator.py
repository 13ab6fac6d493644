"""Trust boundary for language-model graph payloads.

``validate_graph`` accepts whatever came out of ``json.loads`` and either
returns a fully typed GraphModel or a Rejection listing every problem found.
Validation is all-or-nothing: nothing is repaired and no partial model is
ever returned.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Set, Union

from pydantic import BaseModel, Field, ValidationError

from flowsketch.models.graph_model import GraphEdge, GraphModel, GraphNode, NodeType

logger = logging.getLogger(__name__)


class IssueCode(str, Enum):
    """Reasons a payload can be rejected."""
    NOT_AN_OBJECT = "not_an_object"
    MISSING_COLLECTION = "missing_collection"
    INVALID_NODE = "invalid_node"
    INVALID_NODE_TYPE = "invalid_node_type"
    INVALID_EDGE = "invalid_edge"
    DUPLICATE_NODE_ID = "duplicate_node_id"
    DUPLICATE_EDGE_ID = "duplicate_edge_id"
    DANGLING_EDGE = "dangling_edge"


class ValidationIssue(BaseModel):
    """A single structural problem in a payload.

    Attributes:
        code: Machine-readable reason
        message: Human-readable description
        location: Where the problem is, e.g. ``nodes[2]`` or ``edges[0].target``
    """

    code: IssueCode
    message: str
    location: Optional[str] = None


class Rejection(BaseModel):
    """Negative validation result."""

    issues: List[ValidationIssue] = Field(default_factory=list)

    @property
    def reason(self) -> str:
        """Message of the first issue, for one-line display."""
        if not self.issues:
            return "Invalid diagram"
        return self.issues[0].message

    @property
    def codes(self) -> Set[IssueCode]:
        return {issue.code for issue in self.issues}


def _summarize_errors(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        field = ".".join(str(p) for p in error.get("loc", ())) or "value"
        parts.append(f"{field}: {error.get('msg', 'invalid')}")
    return "; ".join(parts)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _parse_node(item: Any, location: str, issues: List[ValidationIssue]) -> Optional[GraphNode]:
    if not isinstance(item, Mapping):
        issues.append(ValidationIssue(
            code=IssueCode.INVALID_NODE,
            message=f"Node must be an object, got {type(item).__name__}",
            location=location,
        ))
        return None

    node_type = item.get("type")
    if node_type not in (None, "") and node_type not in NodeType.values():
        issues.append(ValidationIssue(
            code=IssueCode.INVALID_NODE_TYPE,
            message=(
                f"Invalid node type: {node_type!r}. "
                f"Allowed: {', '.join(NodeType.values())}"
            ),
            location=f"{location}.type",
        ))
        return None

    try:
        return GraphNode.model_validate(dict(item))
    except ValidationError as e:
        issues.append(ValidationIssue(
            code=IssueCode.INVALID_NODE,
            message=f"Invalid node structure: {_summarize_errors(e)}",
            location=location,
        ))
        return None


def _parse_edge(item: Any, location: str, issues: List[ValidationIssue]) -> Optional[GraphEdge]:
    if not isinstance(item, Mapping):
        issues.append(ValidationIssue(
            code=IssueCode.INVALID_EDGE,
            message=f"Edge must be an object, got {type(item).__name__}",
            location=location,
        ))
        return None

    try:
        return GraphEdge.model_validate(dict(item))
    except ValidationError as e:
        issues.append(ValidationIssue(
            code=IssueCode.INVALID_EDGE,
            message=f"Invalid edge structure: {_summarize_errors(e)}",
            location=location,
        ))
        return None


def validate_graph(raw: Any, log_rejection: bool = True) -> Union[GraphModel, Rejection]:
    """Validate an untrusted payload and build a GraphModel.

    Args:
        raw: Parsed JSON (or any other value)
        log_rejection: Log a warning when the payload is rejected

    Returns:
        GraphModel if every check passes, otherwise a Rejection carrying all
        issues found. Never raises for bad input.
    """
    issues: List[ValidationIssue] = []

    if not isinstance(raw, Mapping):
        issues.append(ValidationIssue(
            code=IssueCode.NOT_AN_OBJECT,
            message=f"Diagram must be an object, got {type(raw).__name__}",
        ))
        return _reject(issues, log_rejection)

    raw_nodes = raw.get("nodes")
    raw_edges = raw.get("edges")
    for key, value in (("nodes", raw_nodes), ("edges", raw_edges)):
        if not _is_sequence(value):
            issues.append(ValidationIssue(
                code=IssueCode.MISSING_COLLECTION,
                message=f"'{key}' must be an array",
                location=key,
            ))
    if issues:
        return _reject(issues, log_rejection)

    nodes: List[GraphNode] = []
    node_ids: Set[str] = set()
    for index, item in enumerate(raw_nodes):
        location = f"nodes[{index}]"
        node = _parse_node(item, location, issues)
        if node is None:
            continue
        if node.id in node_ids:
            issues.append(ValidationIssue(
                code=IssueCode.DUPLICATE_NODE_ID,
                message=f"Duplicate node id: {node.id}",
                location=f"{location}.id",
            ))
            continue
        node_ids.add(node.id)
        nodes.append(node)

    edges: List[GraphEdge] = []
    edge_ids: Set[str] = set()
    for index, item in enumerate(raw_edges):
        location = f"edges[{index}]"
        edge = _parse_edge(item, location, issues)
        if edge is None:
            continue
        if edge.id in edge_ids:
            issues.append(ValidationIssue(
                code=IssueCode.DUPLICATE_EDGE_ID,
                message=f"Duplicate edge id: {edge.id}",
                location=f"{location}.id",
            ))
            continue
        edge_ids.add(edge.id)

        dangling = False
        for end in ("source", "target"):
            ref = getattr(edge, end)
            if ref not in node_ids:
                dangling = True
                issues.append(ValidationIssue(
                    code=IssueCode.DANGLING_EDGE,
                    message=f"Edge {edge.id} references non-existent node: {ref}",
                    location=f"{location}.{end}",
                ))
        if not dangling:
            edges.append(edge)

    if issues:
        return _reject(issues, log_rejection)

    logger.debug(f"Validated diagram: {len(nodes)} nodes, {len(edges)} edges")
    return GraphModel(nodes=nodes, edges=edges)


def is_valid_graph(raw: Any) -> bool:
    """True if ``raw`` would validate into a GraphModel."""
    return isinstance(validate_graph(raw, log_rejection=False), GraphModel)


def _reject(issues: List[ValidationIssue], log_rejection: bool) -> Rejection:
    if log_rejection:
        logger.warning(
            f"Rejected diagram with {len(issues)} issue(s): "
            f"{'; '.join(issue.message for issue in issues[:3])}"
        )
    return Rejection(issues=issues)


def issues_to_dicts(issues: List[ValidationIssue]) -> List[Dict[str, Any]]:
    """Serialize issues, omitting empty locations."""
    return [issue.model_dump(mode="json", exclude_none=True) for issue in issues]


__all__ = [
    "IssueCode",
    "ValidationIssue",
    "Rejection",
    "validate_graph",
    "is_valid_graph",
    "issues_to_dicts",
]
