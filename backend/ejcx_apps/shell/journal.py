"""Food Journal Session - Day-keyed entry lists backed by key-value storage.

Each operation reads the day's record, applies a core function and writes
the whole list back. User-facing failures become destructive notifications;
they are logged and never propagate past the operation.
"""

import logging
from datetime import date, datetime
from typing import Callable, Optional

from ..core.errors import JournalError
from ..core.export import build_export_rows, render_csv
from ..core.journal import (
    append_entry,
    create_entry,
    decode_entries,
    encode_entries,
    format_day_key,
    is_day_key,
    parse_day_key,
    remove_entry,
)
from ..core.macros import apply_draft_change, calculate_daily_totals
from ..core.models import DailyTotals, EntryDraft, FoodEntry
from .ids import TimestampIds
from .notifications import Notifier
from .storage import KeyValueStorage


logger = logging.getLogger(__name__)

CLEAR_ALL_PROMPT = "Are you sure you want to clear all entries? This cannot be undone."

Day = date | datetime


class FoodJournal:
    """A user's journal session: selected day, its entries and the form draft.

    Args:
        storage: Where day records are persisted
        notifier: Receives the banner for each user action
        ids: Source of entry ids
        today: The initially selected day (defaults to today)
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        notifier: Notifier | None = None,
        ids: Callable[[], int] | None = None,
        today: Day | None = None,
    ) -> None:
        self.storage = storage
        self.notifier = notifier or Notifier()
        self._next_id = ids or TimestampIds()
        self.draft = EntryDraft()
        self.selected_date: date = date.today()
        self.entries: list[FoodEntry] = []
        self.select_date(today or date.today())

    # ==================== Day Records ====================

    def select_date(self, day: Day) -> list[FoodEntry]:
        """Switch the session to another day and load its entries.

        The selected date is the day the record is keyed by, so an aware
        datetime selects its UTC date.
        """
        self.selected_date = parse_day_key(format_day_key(day))
        self.entries = self.load_day(day)
        return self.entries

    def load_day(self, day: Day) -> list[FoodEntry]:
        """Read one day's entries.

        A missing record is an empty day. A record that fails to parse is
        also treated as empty, with a warning.
        """
        return self._load_key(format_day_key(day))

    def _load_key(self, key: str) -> list[FoodEntry]:
        raw = self.storage.get(key)
        if raw is None:
            return []
        try:
            return decode_entries(raw)
        except ValueError as e:
            logger.warning("Ignoring unreadable record %s: %s", key, str(e))
            return []

    def _save_day(self, day: Day, entries: list[FoodEntry]) -> None:
        key = format_day_key(day)
        logger.info("Saving %d entries for %s", len(entries), key)
        self.storage.set(key, encode_entries(entries))
        if key == format_day_key(self.selected_date):
            self.entries = entries

    def _resolve(self, day: Optional[Day]) -> Day:
        return self.selected_date if day is None else day

    # ==================== Draft ====================

    def update_draft(self, field: str, value: object) -> EntryDraft:
        """Change one form field, deriving calories from macros.

        Only Python callers drive the form field by field; the HTTP and MCP
        surfaces build a whole draft with core.macros.build_draft.
        """
        self.draft = apply_draft_change(self.draft, field, value)
        return self.draft

    def reset_draft(self) -> None:
        """Clear the form; called after the session draft is added."""
        self.draft = EntryDraft()

    # ==================== Entry Operations ====================

    def add_entry(
        self, day: Optional[Day] = None, draft: Optional[EntryDraft] = None
    ) -> FoodEntry | None:
        """Add the draft (or the session draft) to a day.

        Args:
            day: Day to add to (defaults to the selected day)
            draft: Entry contents (defaults to the session draft, which is
                cleared after a successful add)

        Returns:
            The new entry, or None if the draft was rejected
        """
        day = self._resolve(day)
        uses_session_draft = draft is None
        draft = self.draft if draft is None else draft

        try:
            entry = create_entry(draft, self._next_id())
        except JournalError as e:
            logger.info("Rejected entry for %s: %s", format_day_key(day), str(e))
            self.notifier.show(str(e), "destructive")
            return None

        self._save_day(day, append_entry(self.load_day(day), entry))
        if uses_session_draft:
            self.reset_draft()
        self.notifier.show("Entry added successfully")
        return entry

    def delete_entry(self, entry_id: int, day: Optional[Day] = None) -> bool:
        """Delete an entry from a day.

        Returns:
            True if an entry was removed
        """
        day = self._resolve(day)
        entries = self.load_day(day)
        remaining = remove_entry(entries, entry_id)

        if len(remaining) == len(entries):
            logger.warning("Entry not found: %s", entry_id)
            return False

        self._save_day(day, remaining)
        self.notifier.show("Entry deleted")
        return True

    def daily_totals(self, day: Optional[Day] = None) -> DailyTotals:
        """Sum a day's calories and macros."""
        return calculate_daily_totals(self.load_day(self._resolve(day)))

    # ==================== Whole Store ====================

    def _day_keys(self) -> list[str]:
        return sorted(k for k in self.storage.list_keys() if is_day_key(k))

    def export_all(self) -> str | None:
        """Export every day's entries as CSV text.

        Returns:
            The CSV text, or None when there is nothing to export
        """
        records = {key: self._load_key(key) for key in self._day_keys()}
        try:
            csv_text = render_csv(build_export_rows(records))
        except JournalError as e:
            logger.info("Export skipped: %s", str(e))
            self.notifier.show(str(e), "destructive")
            return None

        logger.info("Exported %d days", len(records))
        self.notifier.show("Export complete")
        return csv_text

    def clear_all(self, confirm: Callable[[str], bool]) -> bool:
        """Delete every day record after the user confirms.

        Args:
            confirm: Asked with the warning prompt; must return True to proceed

        Returns:
            True if the store was cleared
        """
        if not confirm(CLEAR_ALL_PROMPT):
            logger.info("Clear all cancelled")
            return False

        keys = self._day_keys()
        for key in keys:
            self.storage.delete(key)
        self.entries = []
        logger.warning("Cleared %d day records", len(keys))
        self.notifier.show("Database cleared", "destructive")
        return True
