"""Layout module for automatic graph positioning.

This module provides:
- Layout engine abstraction (LayoutEngine)
- Layered layout (cycle breaking, ranking, crossing reduction)
- ``layout(model, options)`` convenience entry point
"""

from flowsketch.layout.engines import (
    DEFAULT_ENGINE,
    ENGINES,
    LayeredLayoutEngine,
    LayoutEngine,
    get_engine,
    layout,
)

__all__ = [
    "LayoutEngine",
    "LayeredLayoutEngine",
    "ENGINES",
    "DEFAULT_ENGINE",
    "get_engine",
    "layout",
]
