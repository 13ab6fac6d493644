"""Graph format converters."""

from .graph_converter import GraphModelConverter, to_networkx

__all__ = [
    "GraphModelConverter",
    "to_networkx",
]
