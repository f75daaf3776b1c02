"""Journal Records - Pure functions over day keys and entry lists.

All functions are pure: same input always produces same output, no side effects.
Persistence of the encoded records lives in the shell.
"""

import json
import re
from datetime import date, datetime, timezone

from pydantic import TypeAdapter

from .errors import MissingFoodNameError
from .models import EntryDraft, FoodEntry


DAY_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_entry_list = TypeAdapter(list[FoodEntry])


def format_day_key(day: date | datetime) -> str:
    """Format a day as its storage key (YYYY-MM-DD).

    Aware datetimes are converted to UTC first; naive ones are taken as is.
    """
    if isinstance(day, datetime):
        if day.tzinfo is not None:
            day = day.astimezone(timezone.utc)
        day = day.date()
    return day.isoformat()


def is_day_key(key: str) -> bool:
    """Check whether a storage key names a day's record."""
    return DAY_KEY_PATTERN.match(key) is not None


def parse_day_key(key: str) -> date:
    """Parse a day key back to a date.

    Raises:
        ValueError: If the key is not a valid calendar day
    """
    if not is_day_key(key):
        raise ValueError(f"Invalid day key: {key!r}. Use YYYY-MM-DD.")
    return date.fromisoformat(key)


def decode_entries(raw: str) -> list[FoodEntry]:
    """Decode a persisted record into entries.

    Raises:
        ValueError: If the record is not JSON or not a list of entries
            (pydantic's ValidationError is a ValueError)
    """
    return _entry_list.validate_python(json.loads(raw))


def encode_entries(entries: list[FoodEntry]) -> str:
    """Encode entries as the JSON array stored under a day key."""
    return _entry_list.dump_json(entries).decode()


def create_entry(draft: EntryDraft, entry_id: int) -> FoodEntry:
    """Turn a draft into an entry.

    Raises:
        MissingFoodNameError: If the draft has no food name
    """
    if not draft.food:
        raise MissingFoodNameError()
    return FoodEntry(id=entry_id, **draft.model_dump())


def append_entry(entries: list[FoodEntry], entry: FoodEntry) -> list[FoodEntry]:
    """Return a new list with the entry at the end."""
    return [*entries, entry]


def remove_entry(entries: list[FoodEntry], entry_id: int) -> list[FoodEntry]:
    """Return a new list without the entry with this id."""
    return [e for e in entries if e.id != entry_id]
