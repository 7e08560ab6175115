"""
Record types for the leave calendar.
Rows coming back from Supabase are parsed here so the rest of the app only
sees known leave types and real date values.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional
import calendar


class InvalidRecordError(ValueError):
    """Raised when a store row or user choice does not fit the data model."""


class LeaveType(str, Enum):
    AL = "AL"
    AL_AM = "AL AM"
    AL_PM = "AL PM"
    EL = "EL"
    EL_AM = "EL AM"
    EL_PM = "EL PM"
    MC = "MC"
    MC_AM = "MC AM"
    MC_PM = "MC PM"
    TO = "TO"
    CL = "CL"
    HFM = "HFM"
    UL = "UL"
    HL = "HL"
    OTHERS = "Others"

    @classmethod
    def parse(cls, value: Any) -> "LeaveType":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidRecordError(f"Unknown leave type: {value!r}")

    def __str__(self) -> str:
        return self.value


# Root labels before an AM/PM suffix; also the display order of the summaries
BASE_CATEGORIES = ("AL", "EL", "MC", "TO", "CL", "HFM", "UL", "HL", "Others")

# Order of the buttons in the "Log Leave" panel
LEAVE_OPTIONS = [t for t in LeaveType]


def parse_date(raw: Any) -> date:
    """
    Normalize a store date value to a datetime.date.

    PostgREST returns `date` columns as "YYYY-MM-DD" but timestamp columns
    carry a time part, so only the first 10 characters are used.
    """
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str):
        try:
            return date.fromisoformat(raw[:10])
        except ValueError:
            pass
    raise InvalidRecordError(f"Invalid date value: {raw!r}")


@dataclass(frozen=True)
class LeaveRecord:
    id: Any
    leave_date: date
    leave_type: LeaveType

    @property
    def date_key(self) -> str:
        return self.leave_date.isoformat()

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "LeaveRecord":
        """Build a record from a `leave_records` row."""
        try:
            record_id = row["id"]
        except KeyError:
            raise InvalidRecordError(f"Leave row without id: {row!r}")
        return cls(
            id=record_id,
            leave_date=parse_date(row.get("leave_date")),
            leave_type=LeaveType.parse(row.get("leave_type")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'leave_date': self.date_key,
            'leave_type': self.leave_type.value,
        }


@dataclass(frozen=True)
class Holiday:
    id: Any
    holiday_date: date
    holiday_name: str = ""

    @property
    def date_key(self) -> str:
        return self.holiday_date.isoformat()

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Holiday":
        """Build a holiday from a `holidays` row."""
        try:
            holiday_id = row["id"]
        except KeyError:
            raise InvalidRecordError(f"Holiday row without id: {row!r}")
        return cls(
            id=holiday_id,
            holiday_date=parse_date(row.get("holiday_date")),
            holiday_name=row.get("holiday_name") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'holiday_date': self.date_key,
            'holiday_name': self.holiday_name,
        }


@dataclass(frozen=True)
class CalendarCursor:
    """
    The year and month on display. Month is zero-based (0 = January).
    Navigation returns a new cursor instead of changing this one.
    """
    year: int
    month: int

    def __post_init__(self):
        if not 0 <= self.month <= 11:
            raise ValueError(f"month must be 0..11, got {self.month}")

    @classmethod
    def today(cls, today: Optional[date] = None) -> "CalendarCursor":
        if today is None:
            today = date.today()
        return cls(today.year, today.month - 1)

    def shift(self, months: int) -> "CalendarCursor":
        year, month = divmod(self.year * 12 + self.month + months, 12)
        return CalendarCursor(year, month)

    @property
    def label(self) -> str:
        return f"{calendar.month_name[self.month + 1]} {self.year}"

    @property
    def key(self) -> str:
        return f"{self.year}-{self.month + 1:02d}"


@dataclass(frozen=True)
class SelectionState:
    selected_date: date
    leave_type: LeaveType = field(default=LeaveType.AL)

    def __post_init__(self):
        object.__setattr__(self, 'selected_date', parse_date(self.selected_date))

    @property
    def date_key(self) -> str:
        return self.selected_date.isoformat()

    def with_type(self, leave_type: Any) -> "SelectionState":
        return SelectionState(self.selected_date, LeaveType.parse(leave_type))
