"""Layout engines registry.

Available engines:
- layered: Sugiyama-style layered layout (default)
"""

from flowsketch.layout.engines.base import LayoutEngine
from flowsketch.layout.engines.layered import LayeredLayoutEngine, layout

# Engine registry
ENGINES = {
    "layered": LayeredLayoutEngine,
}

DEFAULT_ENGINE = "layered"


def get_engine(name: str = DEFAULT_ENGINE) -> LayoutEngine:
    """Instantiate a layout engine by name.

    Args:
        name: Engine name ('layered')

    Returns:
        Layout engine instance

    Raises:
        ValueError: If engine not found
    """
    if name not in ENGINES:
        raise ValueError(f"Unknown layout engine: {name}. Available: {list(ENGINES.keys())}")
    return ENGINES[name]()


__all__ = [
    "LayoutEngine",
    "LayeredLayoutEngine",
    "ENGINES",
    "DEFAULT_ENGINE",
    "get_engine",
    "layout",
]
