"""Validation of untrusted diagram payloads."""

from .graph_validator import (
    IssueCode,
    ValidationIssue,
    Rejection,
    validate_graph,
    is_valid_graph,
    issues_to_dicts,
)

__all__ = [
    "IssueCode",
    "ValidationIssue",
    "Rejection",
    "validate_graph",
    "is_valid_graph",
    "issues_to_dicts",
]
