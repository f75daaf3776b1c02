"""Unit tests for CSV export - pure functions, no mocks needed."""

import pytest

from ejcx_apps.core.errors import NothingToExportError
from ejcx_apps.core.export import (
    build_export_rows,
    format_csv_value,
    render_csv,
)
from ejcx_apps.core.models import FoodEntry


class TestFormatCsvValue:
    """Tests for format_csv_value."""

    def test_plain_text(self):
        """Text without commas is written as is."""
        assert format_csv_value("Oatmeal") == "Oatmeal"

    def test_comma_is_quoted(self):
        """Text with a comma is wrapped in quotes."""
        assert format_csv_value("Eggs, scrambled") == '"Eggs, scrambled"'

    def test_quotes_doubled_when_quoted(self):
        """Inner quotes are doubled inside a quoted value."""
        assert format_csv_value('Pie, "apple"') == '"Pie, ""apple"""'

    def test_quotes_alone_not_escaped(self):
        """Quotes without a comma are left alone."""
        assert format_csv_value('"Big" Mac') == '"Big" Mac'

    def test_unset_is_empty(self):
        """Unset numbers become empty cells."""
        assert format_csv_value(None) == ""

    def test_whole_number(self):
        """Whole numbers have no decimal part."""
        assert format_csv_value(250.0) == "250"

    def test_fraction(self):
        """Fractions keep their decimals."""
        assert format_csv_value(12.5) == "12.5"


class TestBuildExportRows:
    """Tests for build_export_rows."""

    def test_days_sorted_chronologically(self):
        """Rows come out in day order regardless of input order."""
        records = {
            "2024-01-02": [FoodEntry(id=2, food="Lunch")],
            "2024-01-01": [FoodEntry(id=1, food="Breakfast")],
        }
        rows = build_export_rows(records)
        assert [r.date for r in rows] == ["2024-01-01", "2024-01-02"]

    def test_entry_order_within_day_kept(self):
        """Entries keep their stored order within a day."""
        records = {"2024-01-01": [FoodEntry(id=9, food="B"), FoodEntry(id=1, food="A")]}
        assert [r.food for r in build_export_rows(records)] == ["B", "A"]

    def test_other_keys_skipped(self):
        """Keys that are not days are ignored."""
        records = {"settings": [FoodEntry(id=1, food="X")], "2024-01-01": []}
        assert build_export_rows(records) == []


class TestRenderCsv:
    """Tests for render_csv."""

    def test_header_and_rows(self):
        """Header comes first, then one line per entry."""
        rows = build_export_rows({
            "2024-01-01": [
                FoodEntry(id=1, food="Toast, buttered", calories=180, fat=8, carbs=22, protein=4),
                FoodEntry(id=2, food="Tea"),
            ],
        })
        assert render_csv(rows) == (
            "date,food,calories,fat,carbs,protein\n"
            '2024-01-01,"Toast, buttered",180,8,22,4\n'
            "2024-01-01,Tea,,,,"
        )

    def test_empty_raises(self):
        """No rows means nothing to export."""
        with pytest.raises(NothingToExportError, match="No entries to export"):
            render_csv([])
