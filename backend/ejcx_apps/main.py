"""ejcx apps - Entry point.

Serves the food journal and the radical results plotter as a local JSON API,
with the MCP tools mounted on the same Starlette app.
"""

import logging
import os

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route, Mount

from .core.export import EXPORT_FILENAME, EXPORT_MEDIA_TYPE
from .core.journal import parse_day_key
from .core.macros import DRAFT_FIELDS, build_draft
from .core.plot import QUADRANTS
from .shell.mcp_server import (
    mcp,
    get_journal,
    get_plot_session,
    day_to_dict,
    entry_to_dict,
    plot_to_dict,
)


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _error(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _banner_message(fallback: str) -> str:
    notification = get_journal().notifier.current()
    return notification.message if notification else fallback


async def _json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _int_param(request: Request, name: str) -> int:
    """Read an integer path parameter.

    Raises:
        ValueError: If it is not an integer
    """
    return int(request.path_params[name])


# ==================== Route Handlers ====================


async def health_check(request: Request) -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse({"status": "healthy", "service": "ejcx-apps"})


async def notifications(request: Request) -> JSONResponse:
    """The banner currently on screen, or null."""
    notification = get_journal().notifier.current()
    if notification is None:
        return JSONResponse(None)
    return JSONResponse(notification.model_dump(mode="json"))


async def dismiss_notification(request: Request) -> JSONResponse:
    """Close the banner before it times out."""
    get_journal().notifier.dismiss()
    return JSONResponse({"success": True})


# ==================== Journal Routes ====================


async def get_day(request: Request) -> JSONResponse:
    """Entries and totals for a day."""
    try:
        day = parse_day_key(request.path_params["day"])
    except ValueError as e:
        return _error(str(e))

    journal = get_journal()
    journal.select_date(day)
    return JSONResponse(day_to_dict(journal, day))


async def add_entry(request: Request) -> JSONResponse:
    """Add an entry from a JSON body of form fields."""
    try:
        day = parse_day_key(request.path_params["day"])
    except ValueError as e:
        return _error(str(e))

    body = await _json_body(request)
    try:
        draft = build_draft(**{k: body[k] for k in DRAFT_FIELDS if k in body})
    except ValueError as e:
        logger.info("Invalid entry fields: %s", str(e))
        return _error("Invalid entry fields.")

    journal = get_journal()
    entry = journal.add_entry(day, draft)
    if entry is None:
        return _error(_banner_message("Failed to add entry."))

    return JSONResponse(
        {"entry": entry_to_dict(entry), "totals": journal.daily_totals(day).model_dump()},
        status_code=201,
    )


async def delete_entry(request: Request) -> JSONResponse:
    """Delete an entry by id."""
    try:
        day = parse_day_key(request.path_params["day"])
        entry_id = _int_param(request, "entry_id")
    except ValueError as e:
        return _error(str(e))

    journal = get_journal()
    if not journal.delete_entry(entry_id, day):
        return _error("Entry not found.", status_code=404)
    return JSONResponse({"success": True, "totals": journal.daily_totals(day).model_dump()})


async def get_totals(request: Request) -> JSONResponse:
    """Summed calories and macros for a day."""
    try:
        day = parse_day_key(request.path_params["day"])
    except ValueError as e:
        return _error(str(e))
    return JSONResponse(get_journal().daily_totals(day).model_dump())


async def export_csv(request: Request) -> Response:
    """Download every day's entries as CSV."""
    csv_text = get_journal().export_all()
    if csv_text is None:
        return _error(_banner_message("No entries to export"), status_code=404)

    return Response(
        csv_text,
        media_type=EXPORT_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


async def clear_all(request: Request) -> JSONResponse:
    """Delete every day; the body must carry {"confirm": true}."""
    body = await _json_body(request)
    confirmed = body.get("confirm") is True

    if not get_journal().clear_all(lambda prompt: confirmed):
        return _error("Confirmation required to clear all entries.")
    return JSONResponse({"success": True})


# ==================== Plot Routes ====================


async def get_plot(request: Request) -> JSONResponse:
    return JSONResponse(plot_to_dict(get_plot_session()))


async def list_quadrants(request: Request) -> JSONResponse:
    return JSONResponse([q.model_dump() for q in QUADRANTS])


async def add_point(request: Request) -> JSONResponse:
    """Add a point from pointer fractions {"x": 0..1, "y": 0..1}."""
    body = await _json_body(request)
    try:
        frac_x = float(body["x"])
        frac_y = float(body["y"])
    except (KeyError, TypeError, ValueError):
        return _error("Pointer fractions x and y are required.")

    session = get_plot_session()
    if session.add_point(frac_x, frac_y) is None:
        return _error("Finish editing the selected point first.", status_code=409)
    return JSONResponse(plot_to_dict(session), status_code=201)


async def select_point(request: Request) -> JSONResponse:
    try:
        point_id = _int_param(request, "point_id")
    except ValueError as e:
        return _error(str(e))

    session = get_plot_session()
    session.select_point(point_id)
    return JSONResponse(plot_to_dict(session))


async def edit_point(request: Request) -> JSONResponse:
    """Start editing the selected point."""
    try:
        point_id = _int_param(request, "point_id")
    except ValueError as e:
        return _error(str(e))

    session = get_plot_session()
    if session.state.selected_id != point_id:
        return _error("Select the point before editing it.", status_code=409)
    session.start_editing()
    return JSONResponse(plot_to_dict(session))


async def save_description(request: Request) -> JSONResponse:
    try:
        point_id = _int_param(request, "point_id")
    except ValueError as e:
        return _error(str(e))

    body = await _json_body(request)
    session = get_plot_session()
    if session.save_description(point_id, str(body.get("description", ""))) is None:
        return _error("Point not found.", status_code=404)
    return JSONResponse(plot_to_dict(session))


async def delete_point(request: Request) -> JSONResponse:
    try:
        point_id = _int_param(request, "point_id")
    except ValueError as e:
        return _error(str(e))

    session = get_plot_session()
    if not session.delete_point(point_id):
        return _error("Point not found.", status_code=404)
    return JSONResponse(plot_to_dict(session))


# ==================== Create ASGI App ====================


def create_app() -> Starlette:
    """Create the Starlette application with MCP at root.

    The MCP streamable_http_app() handles /mcp/ internally when mounted at root.
    Its lifespan context is reused so the session manager starts with the app.
    """
    mcp_app = mcp.streamable_http_app()

    # Custom routes first, then MCP app at root
    routes = [
        Route("/health", health_check, methods=["GET"]),
        Route("/notifications", notifications, methods=["GET"]),
        Route("/notifications", dismiss_notification, methods=["DELETE"]),
        Route("/journal/export", export_csv, methods=["GET"]),
        Route("/journal/clear", clear_all, methods=["POST"]),
        Route("/journal/{day}", get_day, methods=["GET"]),
        Route("/journal/{day}/entries", add_entry, methods=["POST"]),
        Route("/journal/{day}/entries/{entry_id}", delete_entry, methods=["DELETE"]),
        Route("/journal/{day}/totals", get_totals, methods=["GET"]),
        Route("/plot", get_plot, methods=["GET"]),
        Route("/plot/quadrants", list_quadrants, methods=["GET"]),
        Route("/plot/points", add_point, methods=["POST"]),
        Route("/plot/points/{point_id}/select", select_point, methods=["POST"]),
        Route("/plot/points/{point_id}/edit", edit_point, methods=["POST"]),
        Route("/plot/points/{point_id}/description", save_description, methods=["PUT"]),
        Route("/plot/points/{point_id}", delete_point, methods=["DELETE"]),
        Mount("/", app=mcp_app),
    ]

    app = Starlette(
        routes=routes,
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
                allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
                allow_headers=["*"],
            ),
        ],
        lifespan=mcp_app.router.lifespan_context,
    )

    return app


app = create_app()


def main() -> None:
    """Run the server."""
    port = int(os.environ.get("PORT", 8080))
    host = os.environ.get("HOST", "127.0.0.1")

    logger.info("Starting ejcx apps on %s:%d", host, port)

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
