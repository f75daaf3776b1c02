"""MCP Server - Tool definitions for assistant integration.

Exposes the food journal and the radical results plotter as MCP tools.
Both sessions are created lazily and shared with the HTTP routes.
"""

import logging
from datetime import date

from mcp.server.fastmcp import FastMCP

from ..core.journal import parse_day_key
from ..core.macros import build_draft
from ..core.models import FoodEntry
from ..core.plot import logical_to_pointer
from .journal import FoodJournal
from .plotter import PlotSession
from .storage import StorageConfig, create_storage


logger = logging.getLogger(__name__)

mcp = FastMCP(
    "ejcx-apps",
    instructions="""Food journal and radical results plotter.

Use the journal tools to log what the user ate on a given day (YYYY-MM-DD,
default today) and to report daily totals. Calories are derived from fat,
carbs and protein when all three are given.

Use the plot tools to place points on the vibes/effectiveness grid, where
x runs from ineffective (-5) to effective (5) and y from bad vibes (-5) to
good vibes (5).""",
)

# Lazy-initialized sessions
_journal: FoodJournal | None = None
_plot_session: PlotSession | None = None


def get_journal() -> FoodJournal:
    """Get or create the journal session."""
    global _journal
    if _journal is None:
        _journal = FoodJournal(create_storage(StorageConfig.from_env()))
    return _journal


def get_plot_session() -> PlotSession:
    """Get or create the plot session."""
    global _plot_session
    if _plot_session is None:
        _plot_session = PlotSession()
    return _plot_session


def _parse_day(date_str: str | None) -> date:
    if not date_str:
        return date.today()
    return parse_day_key(date_str)


def entry_to_dict(entry: FoodEntry) -> dict:
    return entry.model_dump()


def day_to_dict(journal: FoodJournal, day: date) -> dict:
    """Entries and totals for one day."""
    return {
        "date": day.isoformat(),
        "entries": [entry_to_dict(e) for e in journal.load_day(day)],
        "totals": journal.daily_totals(day).model_dump(),
    }


def plot_to_dict(session: PlotSession) -> dict:
    """Points with their quadrant and position, plus selection and average."""
    points = []
    for point in session.points:
        quadrant = session.quadrant_of(point)
        left, top = logical_to_pointer(point.x, point.y)
        points.append({
            **point.model_dump(),
            "quadrant": quadrant.name if quadrant else None,
            "color": quadrant.color if quadrant else None,
            "position": {"left": left, "top": top},
        })

    average = session.average()
    return {
        "points": points,
        "selected_id": session.state.selected_id,
        "is_editing": session.state.is_editing,
        "current_description": session.state.current_description,
        "average": average.model_dump() if average else None,
    }


def _banner_error(journal: FoodJournal, fallback: str) -> dict:
    notification = journal.notifier.current()
    return {"error": notification.message if notification else fallback}


# ==================== Journal Tools ====================


@mcp.tool()
def log_food(
    food: str,
    calories: float | None = None,
    fat: float | None = None,
    carbs: float | None = None,
    protein: float | None = None,
    date_str: str | None = None,
) -> dict:
    """Add a food entry to a day's journal.

    Args:
        food: Name of the food (e.g., "Oatmeal")
        calories: Calories, used when the macros are not all given
        fat: Fat in grams
        carbs: Carbohydrates in grams
        protein: Protein in grams
        date_str: Day in YYYY-MM-DD format (defaults to today)

    Returns:
        The created entry and the day's updated totals
    """
    journal = get_journal()
    try:
        day = _parse_day(date_str)
    except ValueError as e:
        return {"error": str(e)}

    draft = build_draft(food=food, calories=calories, fat=fat, carbs=carbs, protein=protein)
    entry = journal.add_entry(day, draft)
    if entry is None:
        return _banner_error(journal, "Failed to log food.")

    return {
        "entry": entry_to_dict(entry),
        "totals": journal.daily_totals(day).model_dump(),
    }


@mcp.tool()
def delete_food(entry_id: int, date_str: str | None = None) -> dict:
    """Delete a food entry from a day's journal.

    Args:
        entry_id: The ID of the entry to delete
        date_str: Day in YYYY-MM-DD format (defaults to today)

    Returns:
        Confirmation and the day's updated totals
    """
    journal = get_journal()
    try:
        day = _parse_day(date_str)
    except ValueError as e:
        return {"error": str(e)}

    if not journal.delete_entry(entry_id, day):
        return {"error": "Entry not found."}

    return {"success": True, "totals": journal.daily_totals(day).model_dump()}


@mcp.tool()
def get_day(date_str: str | None = None) -> dict:
    """Get a day's entries and totals.

    Args:
        date_str: Day in YYYY-MM-DD format (defaults to today)
    """
    try:
        day = _parse_day(date_str)
    except ValueError as e:
        return {"error": str(e)}
    return day_to_dict(get_journal(), day)


@mcp.tool()
def get_daily_totals(date_str: str | None = None) -> dict:
    """Get summed calories, fat, carbs and protein for a day.

    Args:
        date_str: Day in YYYY-MM-DD format (defaults to today)
    """
    try:
        day = _parse_day(date_str)
    except ValueError as e:
        return {"error": str(e)}
    return get_journal().daily_totals(day).model_dump()


@mcp.tool()
def export_journal() -> dict:
    """Export every logged day as CSV (date,food,calories,fat,carbs,protein)."""
    journal = get_journal()
    csv_text = journal.export_all()
    if csv_text is None:
        return _banner_error(journal, "No entries to export")
    return {"csv": csv_text}


@mcp.tool()
def clear_journal(confirm: bool = False) -> dict:
    """Delete every logged day. Irreversible.

    Args:
        confirm: Must be true; ask the user before setting it
    """
    if not get_journal().clear_all(lambda prompt: confirm):
        return {"error": "Confirmation required to clear all entries."}
    return {"success": True}


# ==================== Plot Tools ====================


@mcp.tool()
def plot_point(x_fraction: float, y_fraction: float, description: str = "") -> dict:
    """Place a point on the plot.

    Args:
        x_fraction: Horizontal position from 0 (left, ineffective) to 1 (right)
        y_fraction: Vertical position from 0 (top, good vibes) to 1 (bottom)
        description: What the point stands for

    Returns:
        The plot after adding the point
    """
    session = get_plot_session()
    point = session.add_point(x_fraction, y_fraction)
    if point is None:
        return {"error": "Finish editing the selected point first."}
    session.save_description(point.id, description)
    return plot_to_dict(session)


@mcp.tool()
def describe_point(point_id: int, description: str) -> dict:
    """Replace a point's description."""
    session = get_plot_session()
    if session.save_description(point_id, description) is None:
        return {"error": "Point not found."}
    return plot_to_dict(session)


@mcp.tool()
def remove_point(point_id: int) -> dict:
    """Delete a point from the plot."""
    session = get_plot_session()
    if not session.delete_point(point_id):
        return {"error": "Point not found."}
    return plot_to_dict(session)


@mcp.tool()
def get_plot() -> dict:
    """Get all points with their quadrants and the average position."""
    return plot_to_dict(get_plot_session())
