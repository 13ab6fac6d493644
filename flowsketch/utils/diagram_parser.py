"""Extraction of diagram JSON from assistant responses.

The assistant wraps a diagram in two literal markers::

    Here is your flowchart.
    [DIAGRAM_START]
    {"nodes": [...], "edges": [...]}
    [DIAGRAM_END]

Parsing (JSON) and validation (structure) are separate steps; a failure in
either means "no diagram in this turn" and is returned as None, never raised.
"""

import json
import logging
import re
from typing import Any, List, Optional, Tuple

from flowsketch.models.graph_model import GraphModel
from flowsketch.validators.graph_validator import Rejection, ValidationIssue, validate_graph

logger = logging.getLogger(__name__)

DIAGRAM_START_MARKER = "[DIAGRAM_START]"
DIAGRAM_END_MARKER = "[DIAGRAM_END]"
DIAGRAM_PLACEHOLDER = "[Diagram generated]"

_BLOCK_PATTERN = re.compile(
    re.escape(DIAGRAM_START_MARKER) + r".*?" + re.escape(DIAGRAM_END_MARKER),
    re.DOTALL,
)
_FENCE_PATTERN = re.compile(r"^```[A-Za-z0-9_-]*\s*\n?(.*?)\n?```$", re.DOTALL)

def has_diagram_markers(response_text: str) -> bool:
    """True if a start marker is followed by an end marker."""
    return find_diagram_block(response_text) is not None

def find_diagram_block(response_text: str) -> Optional[str]:
    """Return the trimmed text between the first start marker and the next end marker.

    Args:
        response_text: Raw assistant text

    Returns:
        Block contents, or None if either marker is missing
    """
    if not response_text or not isinstance(response_text, str):
        return None

    start = response_text.find(DIAGRAM_START_MARKER)
    if start == -1:
        return None
    body_start = start + len(DIAGRAM_START_MARKER)
    end = response_text.find(DIAGRAM_END_MARKER, body_start)
    if end == -1:
        return None

    block = response_text[body_start:end].strip()
    fenced = _FENCE_PATTERN.match(block)
    if fenced:
        block = fenced.group(1).strip()
    return block

def parse_diagram_block(block: str) -> Tuple[Optional[Any], Optional[str]]:
    """Parse block text as JSON.

    Returns:
        (data, None) on success, (None, error message) on failure
    """
    try:
        return json.loads(block), None
    except (ValueError, RecursionError) as e:
        return None, f"Diagram block is not valid JSON: {e}"

def extract_diagram_with_issues(
    response_text: str,
) -> Tuple[Optional[GraphModel], Optional[str], List[ValidationIssue]]:
    """Extract a diagram, keeping the validator's issues on rejection.

    Returns:
        (model, reason, issues). ``model`` is None when there is no valid
        diagram; ``reason`` is None when the text simply has no markers;
        ``issues`` is only non-empty for a structural rejection.
    """
    block = find_diagram_block(response_text)
    if block is None:
        logger.debug("No diagram markers found in response")
        return None, None, []

    data, error = parse_diagram_block(block)
    if error is not None:
        logger.warning(f"Failed to extract diagram from response: {error}")
        return None, error, []

    result = validate_graph(data)
    if isinstance(result, Rejection):
        return None, result.reason, list(result.issues)

    return result, None, []

def extract_diagram_with_reason(response_text: str) -> Tuple[Optional[GraphModel], Optional[str]]:
    """Extract a diagram and explain why when there is none.

    Returns:
        (GraphModel, None) when a valid diagram is present, otherwise
        (None, reason). The reason is None when the text simply has no
        markers.
    """
    model, reason, _ = extract_diagram_with_issues(response_text)
    return model, reason

def extract_diagram(response_text: str) -> Optional[GraphModel]:
    """Extract and validate the diagram embedded in ``response_text``.

    Args:
        response_text: Raw assistant text

    Returns:
        GraphModel, or None when markers are missing, the block is not JSON,
        or validation rejects it
    """
    model, _ = extract_diagram_with_reason(response_text)
    return model

def strip_diagram_markers(response_text: str, placeholder: str = DIAGRAM_PLACEHOLDER) -> str:
    """Replace every delimited block with a short placeholder for display.

    Text without markers is returned unchanged apart from trimming.
    """
    if not response_text:
        return ""
    return _BLOCK_PATTERN.sub(placeholder, response_text).strip()

__all__ = [
    "DIAGRAM_START_MARKER",
    "DIAGRAM_END_MARKER",
    "DIAGRAM_PLACEHOLDER",
    "has_diagram_markers",
    "find_diagram_block",
    "parse_diagram_block",
    "extract_diagram",
    "extract_diagram_with_reason",
    "extract_diagram_with_issues",
    "strip_diagram_markers",
]
