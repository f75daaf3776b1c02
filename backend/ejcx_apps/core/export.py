"""CSV Export - Pure functions that flatten the journal into CSV text.

Quoting follows the browser export: a value is quoted only when it contains
a comma, with inner quotes doubled. Nothing else is escaped.
"""

from .errors import NothingToExportError
from .journal import is_day_key
from .models import ExportRow, FoodEntry


CSV_HEADERS = ("date", "food", "calories", "fat", "carbs", "protein")
EXPORT_FILENAME = "food-journal-export.csv"
EXPORT_MEDIA_TYPE = "text/csv;charset=utf-8"


def format_csv_value(value: object) -> str:
    """Render one cell.

    Unset numbers are empty and whole numbers drop the decimal part.
    """
    if value is None:
        text = ""
    elif isinstance(value, float) and value.is_integer():
        text = str(int(value))
    else:
        text = str(value)

    if "," in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def build_export_rows(records: dict[str, list[FoodEntry]]) -> list[ExportRow]:
    """Flatten day records into rows, ordered by day key.

    Keys that are not day keys are skipped.

    Args:
        records: Mapping of storage key to that day's entries

    Returns:
        Rows in day order, entries in their stored order within a day
    """
    rows: list[ExportRow] = []
    for key in sorted(k for k in records if is_day_key(k)):
        for entry in records[key]:
            rows.append(
                ExportRow(
                    date=key,
                    food=entry.food,
                    calories=entry.calories,
                    fat=entry.fat,
                    carbs=entry.carbs,
                    protein=entry.protein,
                )
            )
    return rows


def render_csv(rows: list[ExportRow]) -> str:
    """Serialize rows with a header line.

    Raises:
        NothingToExportError: If there are no rows
    """
    if not rows:
        raise NothingToExportError()

    lines = [",".join(CSV_HEADERS)]
    for row in rows:
        data = row.model_dump()
        lines.append(",".join(format_csv_value(data[h]) for h in CSV_HEADERS))
    return "\n".join(lines)
