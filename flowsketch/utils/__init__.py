"""Helpers for handling assistant responses."""

from .diagram_parser import (
    DIAGRAM_END_MARKER,
    DIAGRAM_PLACEHOLDER,
    DIAGRAM_START_MARKER,
    extract_diagram,
    extract_diagram_with_issues,
    extract_diagram_with_reason,
    has_diagram_markers,
    strip_diagram_markers,
)

__all__ = [
    "DIAGRAM_START_MARKER",
    "DIAGRAM_END_MARKER",
    "DIAGRAM_PLACEHOLDER",
    "extract_diagram",
    "extract_diagram_with_reason",
    "extract_diagram_with_issues",
    "has_diagram_markers",
    "strip_diagram_markers",
]
