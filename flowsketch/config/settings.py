"""
Configuration loaded from environment variables.

Layout and connector settings are returned as option values that callers
pass explicitly into the pipeline; nothing here is cached or mutated.

Usage:
    from flowsketch.config.settings import load_layout_options

    options = load_layout_options()
    result = layout(model, options)

Environment Variables:
    FLOWSKETCH_LAYOUT_DIRECTION=TB|BT|LR|RL   - Rank direction
    FLOWSKETCH_NODE_SPACING=<number>          - Gap between nodes in a rank
    FLOWSKETCH_RANK_SPACING=<number>          - Gap between ranks
    FLOWSKETCH_NODE_WIDTH=<number>            - Node box width
    FLOWSKETCH_NODE_HEIGHT=<number>           - Node box height
    FLOWSKETCH_ROUTE_SELF_LOOPS=true/false    - Loop-shaped self edges
    FLOWSKETCH_OFFSET_PARALLEL_EDGES=true/false - Spread parallel edges
    FLOWSKETCH_ROUTE_BACK_EDGES=true/false     - Route back edges around the drawing

Unset variables fall back to the model defaults.
"""

import os
from typing import Any, Dict, Mapping, Optional

from flowsketch.models.layout_metadata import LayoutOptions
from flowsketch.models.shapes import ConnectorOptions

ENV_PREFIX = "FLOWSKETCH_"

# option field -> environment variable
LAYOUT_ENV_VARS: Dict[str, str] = {
    "direction": "FLOWSKETCH_LAYOUT_DIRECTION",
    "node_spacing": "FLOWSKETCH_NODE_SPACING",
    "rank_spacing": "FLOWSKETCH_RANK_SPACING",
    "node_width": "FLOWSKETCH_NODE_WIDTH",
    "node_height": "FLOWSKETCH_NODE_HEIGHT",
}

CONNECTOR_ENV_VARS: Dict[str, str] = {
    "route_self_loops": "FLOWSKETCH_ROUTE_SELF_LOOPS",
    "offset_parallel_edges": "FLOWSKETCH_OFFSET_PARALLEL_EDGES",
    "route_back_edges": "FLOWSKETCH_ROUTE_BACK_EDGES",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_float(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got '{raw}'") from None


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be true or false, got '{raw}'")


def load_layout_options(environ: Optional[Mapping[str, str]] = None) -> LayoutOptions:
    """
    Build LayoutOptions from environment variables.

    Args:
        environ: Mapping to read instead of os.environ (for testing)

    Returns:
        LayoutOptions with environment overrides applied

    Raises:
        ValueError: If a numeric variable cannot be parsed
        pydantic.ValidationError: If a value is out of range or the
            direction is unknown

    Example:
        >>> load_layout_options({'FLOWSKETCH_LAYOUT_DIRECTION': 'LR'}).direction
        <LayoutDirection.LEFT_TO_RIGHT: 'LR'>
    """
    env = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}

    for field_name, var in LAYOUT_ENV_VARS.items():
        raw = env.get(var)
        if raw is None or raw.strip() == "":
            continue
        if field_name == "direction":
            overrides[field_name] = raw.strip()
        else:
            overrides[field_name] = _parse_float(var, raw)

    return LayoutOptions(**overrides)


def load_connector_options(environ: Optional[Mapping[str, str]] = None) -> ConnectorOptions:
    """
    Build ConnectorOptions from environment variables.

    Args:
        environ: Mapping to read instead of os.environ (for testing)

    Returns:
        ConnectorOptions with environment overrides applied

    Raises:
        ValueError: If a flag is not a recognised boolean
    """
    env = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}

    for field_name, var in CONNECTOR_ENV_VARS.items():
        raw = env.get(var)
        if raw is None or raw.strip() == "":
            continue
        overrides[field_name] = _parse_bool(var, raw)

    return ConnectorOptions(**overrides)


def describe_environment(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """
    Return the FLOWSKETCH_* variables currently set.

    Example:
        >>> describe_environment({'FLOWSKETCH_NODE_WIDTH': '200', 'HOME': '/root'})
        {'FLOWSKETCH_NODE_WIDTH': '200'}
    """
    env = os.environ if environ is None else environ
    return {k: v for k, v in sorted(env.items()) if k.startswith(ENV_PREFIX)}
