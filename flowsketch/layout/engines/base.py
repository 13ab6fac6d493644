"""Base layout engine protocol.

Defines the interface that all layout engines must implement.
"""

from abc import ABC, abstractmethod
from typing import Optional

from flowsketch.models.graph_model import GraphModel
from flowsketch.models.layout_metadata import LayoutOptions, LayoutResult


class LayoutEngine(ABC):
    """Abstract base class for layout engines.

    Layout engines convert a coordinate-free GraphModel into positioned
    nodes. Engines are synchronous and keep no state between calls, so the
    same instance may be reused for every diagram.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Engine name (e.g., 'layered')."""
        ...

    @property
    @abstractmethod
    def handles_cycles(self) -> bool:
        """Whether cyclic graphs are laid out without error."""
        ...

    @abstractmethod
    def layout(
        self,
        model: GraphModel,
        options: Optional[LayoutOptions] = None,
    ) -> LayoutResult:
        """Compute layout for a graph.

        Args:
            model: Validated graph model
            options: Layout options (defaults used when None)

        Returns:
            LayoutResult with one positioned node per model node
        """
        ...
