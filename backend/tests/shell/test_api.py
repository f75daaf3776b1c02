"""Integration tests for API endpoints using Starlette TestClient."""

import pytest
from unittest.mock import patch
from starlette.testclient import TestClient

from ejcx_apps.main import create_app
from ejcx_apps.shell.ids import TimestampIds
from ejcx_apps.shell.journal import FoodJournal
from ejcx_apps.shell.plotter import PlotSession
from ejcx_apps.shell.storage import InMemoryStorage


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def client(storage):
    """Create test client with in-memory sessions."""
    journal = FoodJournal(storage, ids=TimestampIds(clock=lambda: 1000))
    plot_session = PlotSession(ids=TimestampIds(clock=lambda: 1))
    with patch("ejcx_apps.shell.mcp_server._journal", journal), \
            patch("ejcx_apps.shell.mcp_server._plot_session", plot_session):
        yield TestClient(create_app())


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_returns_json(self, client):
        """Health endpoint returns 200 with status."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "ejcx-apps"}


class TestJournalEndpoints:
    """Tests for /journal routes."""

    def test_add_and_get_day(self, client):
        """Added entries appear in the day with totals."""
        response = client.post(
            "/journal/2024-01-01/entries",
            json={"food": "Eggs", "fat": 10, "carbs": 1, "protein": 12},
        )
        assert response.status_code == 201
        assert response.json()["entry"]["calories"] == 142

        day = client.get("/journal/2024-01-01").json()
        assert [e["food"] for e in day["entries"]] == ["Eggs"]
        assert day["totals"]["protein"] == 12

    def test_add_without_food(self, client, storage):
        """Missing food name returns 400 and writes nothing."""
        response = client.post("/journal/2024-01-01/entries", json={"calories": 100})
        assert response.status_code == 400
        assert response.json() == {"error": "Please enter a food name"}
        assert storage.list_keys() == []

    def test_add_with_invalid_fields(self, client):
        """Fields of the wrong type return 400."""
        response = client.post("/journal/2024-01-01/entries", json={"food": ["Eggs"]})
        assert response.status_code == 400

    def test_invalid_day(self, client):
        """Malformed days return 400."""
        response = client.get("/journal/2024-13-01")
        assert response.status_code == 400
        assert "error" in response.json()

    def test_delete_entry(self, client):
        """Deleting removes the entry; a second delete is 404."""
        entry_id = client.post(
            "/journal/2024-01-01/entries", json={"food": "Tea", "calories": 5}
        ).json()["entry"]["id"]

        response = client.delete(f"/journal/2024-01-01/entries/{entry_id}")
        assert response.status_code == 200
        assert response.json()["totals"]["calories"] == 0

        assert client.delete(f"/journal/2024-01-01/entries/{entry_id}").status_code == 404

    def test_delete_bad_id(self, client):
        """Non-numeric ids return 400."""
        assert client.delete("/journal/2024-01-01/entries/abc").status_code == 400

    def test_totals(self, client):
        """Totals sum the day's entries."""
        client.post("/journal/2024-01-01/entries", json={"food": "A", "calories": 100})
        client.post("/journal/2024-01-01/entries", json={"food": "B", "calories": 200})
        assert client.get("/journal/2024-01-01/totals").json()["calories"] == 300

    def test_notification_after_add(self, client):
        """The banner from the last action is available."""
        client.post("/journal/2024-01-01/entries", json={"food": "A"})
        banner = client.get("/notifications").json()
        assert banner["message"] == "Entry added successfully"
        assert banner["severity"] == "default"

    def test_dismiss_notification(self, client):
        """Deleting the banner clears it."""
        client.post("/journal/2024-01-01/entries", json={"food": "A"})
        assert client.delete("/notifications").json() == {"success": True}
        assert client.get("/notifications").json() is None


class TestExportEndpoint:
    """Tests for /journal/export."""

    def test_export_download(self, client):
        """Export returns a CSV attachment in day order."""
        client.post("/journal/2024-01-02/entries", json={"food": "Lunch"})
        client.post("/journal/2024-01-01/entries", json={"food": "Breakfast"})

        response = client.get("/journal/export")

        assert response.status_code == 200
        assert response.headers["content-type"] == "text/csv;charset=utf-8"
        assert response.headers["content-disposition"] == (
            'attachment; filename="food-journal-export.csv"'
        )
        assert response.text.split("\n")[1:] == [
            "2024-01-01,Breakfast,,,,",
            "2024-01-02,Lunch,,,,",
        ]

    def test_export_empty(self, client):
        """An empty journal returns 404 with the banner message."""
        response = client.get("/journal/export")
        assert response.status_code == 404
        assert response.json() == {"error": "No entries to export"}


class TestClearEndpoint:
    """Tests for /journal/clear."""

    def test_requires_confirmation(self, client, storage):
        """Without confirm nothing is deleted."""
        client.post("/journal/2024-01-01/entries", json={"food": "A"})
        assert client.post("/journal/clear", json={}).status_code == 400
        assert storage.list_keys() == ["2024-01-01"]

    def test_confirmed(self, client, storage):
        """With confirm every day is deleted."""
        client.post("/journal/2024-01-01/entries", json={"food": "A"})
        response = client.post("/journal/clear", json={"confirm": True})
        assert response.json() == {"success": True}
        assert storage.list_keys() == []


class TestPlotEndpoints:
    """Tests for /plot routes."""

    def test_quadrants(self, client):
        """The four quadrants are listed in check order."""
        names = [q["name"] for q in client.get("/plot/quadrants").json()]
        assert names == [
            "Radical Results",
            "Good Vibes, Not Effective",
            "Bad Vibes, Ineffective",
            "Effective with Bad Vibes",
        ]

    def test_add_point_then_describe(self, client):
        """A click adds a point in edit mode; saving the description ends it."""
        response = client.post("/plot/points", json={"x": 0.3, "y": 0.7})
        assert response.status_code == 201
        plot = response.json()
        point = plot["points"][0]
        assert (point["x"], point["y"]) == (-2.0, -2.0)
        assert point["quadrant"] == "Bad Vibes, Ineffective"
        assert plot["is_editing"] is True

        assert client.post("/plot/points", json={"x": 0.1, "y": 0.1}).status_code == 409

        plot = client.put(
            f"/plot/points/{point['id']}/description", json={"description": "Long meetings"}
        ).json()
        assert plot["points"][0]["description"] == "Long meetings"
        assert plot["is_editing"] is False

    def test_missing_fractions(self, client):
        """Pointer fractions are required."""
        assert client.post("/plot/points", json={"x": 0.5}).status_code == 400

    def test_select_edit_delete(self, client):
        """Reselecting or the edit action enters edit mode; delete clears selection."""
        point_id = client.post("/plot/points", json={"x": 0.5, "y": 0.5}).json()["points"][0]["id"]
        client.put(f"/plot/points/{point_id}/description", json={"description": "Origin"})

        plot = client.post(f"/plot/points/{point_id}/select").json()
        assert plot["is_editing"] is True
        assert plot["current_description"] == "Origin"

        client.put(f"/plot/points/{point_id}/description", json={"description": "Origin"})
        plot = client.post(f"/plot/points/{point_id}/edit").json()
        assert plot["is_editing"] is True

        plot = client.delete(f"/plot/points/{point_id}").json()
        assert plot["points"] == []
        assert plot["selected_id"] is None
        assert client.delete(f"/plot/points/{point_id}").status_code == 404

    def test_edit_requires_selection(self, client):
        """Editing an unselected point is refused."""
        assert client.post("/plot/points/123/edit").status_code == 409

    def test_average(self, client):
        """The average shows up with two points."""
        first = client.post("/plot/points", json={"x": 0.5, "y": 0.5}).json()["points"][0]["id"]
        client.put(f"/plot/points/{first}/description", json={"description": ""})
        assert client.get("/plot").json()["average"] is None
        client.post("/plot/points", json={"x": 0.7, "y": 0.3})
        assert client.get("/plot").json()["average"] == {"x": 1.0, "y": 1.0}
