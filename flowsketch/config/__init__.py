"""Environment-driven configuration."""

from .settings import (
    describe_environment,
    load_connector_options,
    load_layout_options,
)

__all__ = [
    "load_layout_options",
    "load_connector_options",
    "describe_environment",
]
