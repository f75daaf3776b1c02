"""Plot Logic - Coordinate mapping, quadrants and point state transitions.

All functions are pure: transitions take a PlotState and return a new one.
The plot area is a square of logical coordinates from -5 to 5 on both axes,
with y growing upwards while pointer fractions grow downwards.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from .models import AveragePoint, PlotState, Point, Quadrant


PLOT_MIN = -5.0
PLOT_MAX = 5.0
PLOT_SPAN = PLOT_MAX - PLOT_MIN

# Checked in this order; points on a shared edge go to the first match.
QUADRANTS: tuple[Quadrant, ...] = (
    Quadrant(id=1, name="Radical Results", color="#4ade80", x_range=(0, 5), y_range=(0, 5)),
    Quadrant(id=2, name="Good Vibes, Not Effective", color="#60a5fa", x_range=(-5, 0), y_range=(0, 5)),
    Quadrant(id=3, name="Bad Vibes, Ineffective", color="#f87171", x_range=(-5, 0), y_range=(-5, 0)),
    Quadrant(id=4, name="Effective with Bad Vibes", color="#fb923c", x_range=(0, 5), y_range=(-5, 0)),
)


def round_tenth(value: float) -> float:
    """Round to one decimal, halves away from zero."""
    rounded = Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return float(rounded) + 0.0


def pointer_to_logical(frac_x: float, frac_y: float) -> tuple[float, float]:
    """Map a pointer position inside the plot area to logical coordinates.

    Args:
        frac_x: Horizontal position as a fraction of the width, 0 at the left
        frac_y: Vertical position as a fraction of the height, 0 at the top

    Returns:
        (x, y) each rounded to one decimal; fractions outside [0, 1] are
        clamped to the plot edge
    """
    frac_x = min(max(frac_x, 0.0), 1.0)
    frac_y = min(max(frac_y, 0.0), 1.0)
    x = frac_x * PLOT_SPAN + PLOT_MIN
    y = -(frac_y * PLOT_SPAN + PLOT_MIN)
    return round_tenth(x), round_tenth(y)


def logical_to_pointer(x: float, y: float) -> tuple[float, float]:
    """Map logical coordinates to fractions of the plot area."""
    return (x - PLOT_MIN) / PLOT_SPAN, (PLOT_MAX - y) / PLOT_SPAN


def classify(x: float, y: float) -> Optional[Quadrant]:
    """Find the quadrant containing a point, edges included."""
    for quadrant in QUADRANTS:
        x_min, x_max = quadrant.x_range
        y_min, y_max = quadrant.y_range
        if x_min <= x <= x_max and y_min <= y <= y_max:
            return quadrant
    return None


def calculate_average(points: tuple[Point, ...] | list[Point]) -> Optional[AveragePoint]:
    """Mean position of all points, or None with fewer than two."""
    if len(points) < 2:
        return None
    sum_x = sum(p.x for p in points)
    sum_y = sum(p.y for p in points)
    return AveragePoint(
        x=round_tenth(sum_x / len(points)),
        y=round_tenth(sum_y / len(points)),
    )


def find_point(state: PlotState, point_id: Optional[int]) -> Optional[Point]:
    """Look up a point by id."""
    return next((p for p in state.points if p.id == point_id), None)


def add_point(state: PlotState, frac_x: float, frac_y: float, point_id: int) -> PlotState:
    """Place a new point and start editing its description.

    Ignored while another point is being edited.
    """
    if state.is_editing:
        return state

    x, y = pointer_to_logical(frac_x, frac_y)
    point = Point(id=point_id, x=x, y=y)
    return PlotState(
        points=(*state.points, point),
        selected_id=point.id,
        is_editing=True,
        current_description="",
    )


def select_point(state: PlotState, point_id: int) -> PlotState:
    """Select a point; selecting the selected point again starts editing."""
    point = find_point(state, point_id)
    if point is None:
        return state

    if state.selected_id == point_id:
        return state.model_copy(
            update={"is_editing": True, "current_description": point.description}
        )
    return state.model_copy(update={"selected_id": point_id, "is_editing": False})


def start_editing(state: PlotState) -> PlotState:
    """Edit the selected point's description."""
    point = find_point(state, state.selected_id)
    if point is None:
        return state
    return state.model_copy(
        update={"is_editing": True, "current_description": point.description}
    )


def save_description(state: PlotState, point_id: int, text: str) -> PlotState:
    """Overwrite a point's description and stop editing."""
    if find_point(state, point_id) is None:
        return state
    points = tuple(
        p.model_copy(update={"description": text}) if p.id == point_id else p
        for p in state.points
    )
    return state.model_copy(
        update={"points": points, "is_editing": False, "current_description": text}
    )


def delete_point(state: PlotState, point_id: int) -> PlotState:
    """Remove a point and clear the selection."""
    return PlotState(
        points=tuple(p for p in state.points if p.id != point_id),
        selected_id=None,
        is_editing=False,
        current_description="",
    )
