"""
Calendar state and actions, independent of Streamlit.
The app keeps one controller per session and renders from it.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional

import calc
from db import StoreError, seed_public_holidays
from grid import DayCell, build_grid
from models import CalendarCursor, Holiday, InvalidRecordError, LeaveRecord, SelectionState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusMessage:
    level: str  # 'success' or 'error'
    text: str


class CalendarController:
    """
    Owns the month cursor, the fetched records and the day selection.

    Every write is followed by a full re-fetch of both tables; nothing is
    patched locally and nothing is retried.
    """

    def __init__(self, store, today: Optional[date] = None):
        self.store = store
        self.cursor = CalendarCursor.today(today)
        self.records: List[LeaveRecord] = []
        self.holidays: List[Holiday] = []
        self.selection: Optional[SelectionState] = None
        self.status: Optional[StatusMessage] = None

    # --- fetching -------------------------------------------------------

    def refresh(self) -> bool:
        """Reload both tables. On failure the previous lists are kept."""
        try:
            records = self.store.fetch_leave_records()
            holidays = self.store.fetch_holidays()
        except StoreError as e:
            self._fail(f"Could not load calendar: {e}")
            return False
        self.records = records
        self.holidays = holidays
        return True

    def previous_month(self) -> None:
        self.cursor = self.cursor.shift(-1)
        self.refresh()

    def next_month(self) -> None:
        self.cursor = self.cursor.shift(1)
        self.refresh()

    # --- selection ------------------------------------------------------

    @property
    def is_selecting(self) -> bool:
        return self.selection is not None

    def select_date(self, day: Any) -> None:
        """Open the selection for a date or "YYYY-MM-DD" string."""
        try:
            self.selection = SelectionState(day)
        except InvalidRecordError as e:
            self._fail(str(e))

    def choose_leave_type(self, leave_type: Any) -> None:
        if self.selection is None:
            return
        try:
            self.selection = self.selection.with_type(leave_type)
        except InvalidRecordError as e:
            self._fail(str(e))

    def dismiss(self) -> None:
        self.selection = None

    # --- writes ---------------------------------------------------------

    def save(self) -> bool:
        """
        Store a leave record for the selected date and type.

        The selection is cleared only when the insert succeeds. The calendar
        is re-fetched either way.
        """
        if self.selection is None:
            return False

        selection = self.selection
        saved = False
        try:
            self.store.insert_leave_record(selection.selected_date, selection.leave_type)
        except StoreError as e:
            self._fail(f"Could not save {selection.leave_type} on {selection.date_key}: {e}")
        else:
            self.selection = None
            self.status = StatusMessage('success', f"Saved {selection.leave_type} on {selection.date_key}")
            saved = True

        self.refresh()
        return saved

    def delete(self, record_id: Any) -> bool:
        deleted = False
        try:
            self.store.delete_leave_record(record_id)
        except StoreError as e:
            self._fail(f"Could not delete leave record: {e}")
        else:
            deleted = True

        self.refresh()
        return deleted

    def seed_public_holidays(self, country: str, subdivision: Optional[str] = None) -> int:
        """Add the cursor year's public holidays for a country, then re-fetch."""
        year = self.cursor.year
        try:
            inserted = seed_public_holidays(self.store, self.holidays, country, year, subdivision)
        except StoreError as e:
            self._fail(f"Could not add holidays: {e}")
            inserted = 0
        except NotImplementedError as e:
            # raised by the holidays package for unsupported countries
            self._fail(f"Unknown holiday country {country!r}: {e}")
            return 0
        else:
            self.status = StatusMessage('success', f"Added {inserted} {country} holidays for {year}")

        self.refresh()
        return inserted

    # --- derived views --------------------------------------------------

    def grid(self) -> List[Optional[DayCell]]:
        return build_grid(self.cursor.year, self.cursor.month, self.records, self.holidays)

    def month_summary(self) -> Dict[str, Any]:
        return calc.month_summary(self.records, self.holidays, self.cursor.year, self.cursor.month)

    def year_summary(self) -> Dict[str, Any]:
        return calc.year_summary(self.records, self.holidays, self.cursor.year)

    def export_month(self) -> str:
        return calc.serialize_month(self.cursor, self.records, self.holidays, self.month_summary())

    def clear_status(self) -> None:
        self.status = None

    def _fail(self, text: str) -> None:
        logger.warning(text)
        self.status = StatusMessage('error', text)
