"""Plot Session - Holds the in-memory point list for one plotting session.

Points are not persisted. Transitions are delegated to core.plot.
"""

import logging
from typing import Callable, Optional

from ..core.models import AveragePoint, PlotState, Point, Quadrant
from ..core import plot
from .ids import TimestampIds


logger = logging.getLogger(__name__)


class PlotSession:
    """Current plot state plus the id source for new points."""

    def __init__(self, ids: Callable[[], int] | None = None) -> None:
        self._next_id = ids or TimestampIds()
        self.state = PlotState()

    @property
    def points(self) -> tuple[Point, ...]:
        return self.state.points

    @property
    def selected(self) -> Optional[Point]:
        return plot.find_point(self.state, self.state.selected_id)

    def add_point(self, frac_x: float, frac_y: float) -> Optional[Point]:
        """Add a point where the plot area was clicked.

        Returns:
            The new point, or None while another point is being edited
        """
        if self.state.is_editing:
            logger.debug("Ignoring click while editing point %s", self.state.selected_id)
            return None
        self.state = plot.add_point(self.state, frac_x, frac_y, self._next_id())
        return self.selected

    def select_point(self, point_id: int) -> PlotState:
        self.state = plot.select_point(self.state, point_id)
        return self.state

    def start_editing(self) -> PlotState:
        self.state = plot.start_editing(self.state)
        return self.state

    def save_description(self, point_id: int, text: str) -> Optional[Point]:
        """Set a point's description and leave edit mode."""
        self.state = plot.save_description(self.state, point_id, text)
        return plot.find_point(self.state, point_id)

    def delete_point(self, point_id: int) -> bool:
        """Remove a point; returns False if there was no such point."""
        found = plot.find_point(self.state, point_id) is not None
        self.state = plot.delete_point(self.state, point_id)
        if found:
            logger.info("Deleted point %s", point_id)
        return found

    def average(self) -> Optional[AveragePoint]:
        return plot.calculate_average(self.state.points)

    def quadrant_of(self, point: Point) -> Optional[Quadrant]:
        return plot.classify(point.x, point.y)
