"""Prompt text and sample diagrams."""

from .prompts import DIAGRAM_GENERATION_SYSTEM_PROMPT, EXAMPLE_PROMPTS
from .sample_diagrams import (
    COMPLEX_DIAGRAM,
    FLOWCHART,
    LINEAR_PROCESS,
    SAMPLE_DIAGRAMS,
    get_sample_diagram,
)

__all__ = [
    "DIAGRAM_GENERATION_SYSTEM_PROMPT",
    "EXAMPLE_PROMPTS",
    "FLOWCHART",
    "LINEAR_PROCESS",
    "COMPLEX_DIAGRAM",
    "SAMPLE_DIAGRAMS",
    "get_sample_diagram",
]
