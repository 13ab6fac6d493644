"""Host-side session that applies generated drawings to a surface.

Each user message opens a turn; the assistant's reply for that turn is
completed later, possibly on another thread and possibly out of order. Only
the newest turn that actually produced a diagram reaches the surface, so a
slow reply can never overwrite a newer drawing.

Usage:
    session = DiagramSession(surface)
    turn = session.begin_turn()
    ...
    session.complete_turn(turn, response_text)
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from flowsketch.core.pipeline import DiagramRender, render_graph
from flowsketch.layout.engines import LayoutEngine
from flowsketch.models.layout_metadata import LayoutOptions
from flowsketch.models.shapes import ConnectorOptions, DrawingBatch
from flowsketch.utils.diagram_parser import extract_diagram_with_issues, strip_diagram_markers
from flowsketch.validators.graph_validator import issues_to_dicts

logger = logging.getLogger(__name__)


class DrawingSurface(ABC):
    """Anything that can draw a DrawingBatch (canvas, exporter, test double)."""

    @abstractmethod
    def apply_batch(self, batch: DrawingBatch) -> None:
        """Apply the batch, clearing existing shapes when ``batch.clear_existing``."""
        pass


class DiagramSession:
    """Turn bookkeeping with last-write-wins application.

    Example:
        session = DiagramSession(surface, layout_options=LayoutOptions(direction="LR"))
        turn = session.begin_turn()
        applied = session.complete_turn(turn, reply)
    """

    def __init__(
        self,
        surface: DrawingSurface,
        layout_options: Optional[LayoutOptions] = None,
        connector_options: Optional[ConnectorOptions] = None,
        engine: Optional[LayoutEngine] = None,
    ):
        self.surface = surface
        self.layout_options = layout_options or LayoutOptions()
        self.connector_options = connector_options or ConnectorOptions()
        self.engine = engine

        self._lock = threading.Lock()
        self._next_turn = 1
        self._last_completed_turn = 0
        self._last_applied_turn = 0
        self._last_render: Optional[DiagramRender] = None
        self._last_rejection: Optional[str] = None
        self._last_issues: List[Dict[str, Any]] = []

    @property
    def last_applied_turn(self) -> int:
        """Newest turn whose drawing is on the surface (0 before any)."""
        with self._lock:
            return self._last_applied_turn

    @property
    def last_render(self) -> Optional[DiagramRender]:
        with self._lock:
            return self._last_render

    @property
    def last_rejection(self) -> Optional[str]:
        """Why the newest completed turn produced no drawing, if it had a block."""
        with self._lock:
            return self._last_rejection

    @property
    def last_issues(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._last_issues)

    def begin_turn(self) -> int:
        """Open a new turn and return its number."""
        with self._lock:
            turn = self._next_turn
            self._next_turn += 1
        logger.debug(f"Began turn {turn}")
        return turn

    def complete_turn(self, turn: int, response_text: str) -> bool:
        """Finish a turn with the assistant's reply.

        The pipeline runs outside the lock; the staleness checks and surface
        update run under it. Rejection status follows the newest completed
        turn, so a late reply for an older turn never overwrites it.

        Args:
            turn: Number returned by begin_turn
            response_text: Raw assistant text

        Returns:
            True if a drawing was applied to the surface
        """
        render, reason, issues = self._render(turn, response_text)

        with self._lock:
            if turn > self._last_completed_turn:
                self._last_completed_turn = turn
                self._last_rejection = reason
                self._last_issues = issues
            if render is None:
                return False
            if turn <= self._last_applied_turn:
                logger.info(
                    f"Discarding drawing for turn {turn}: turn "
                    f"{self._last_applied_turn} already applied"
                )
                return False

            self.surface.apply_batch(render.batch)
            self._last_applied_turn = turn
            self._last_render = render

        logger.info(f"Applied drawing for turn {turn} ({len(render.batch)} instructions)")
        return True

    def display_text(self, response_text: str) -> str:
        """Reply text with diagram blocks replaced by the placeholder."""
        return strip_diagram_markers(response_text)

    def _render(self, turn: int, response_text: str):
        """Returns (render, rejection reason, issue dicts)."""
        model, reason, issues = extract_diagram_with_issues(response_text)
        if model is None:
            return None, reason, issues_to_dicts(issues)

        render = render_graph(
            model,
            self.layout_options,
            self.connector_options,
            self.engine,
            turn=turn,
        )
        return render, None, []


__all__ = [
    "DrawingSurface",
    "DiagramSession",
]
