"""
Month grid for the calendar view.
Maps each day of the month to its leave records and holiday by date string.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from calc import days_in_month, first_weekday_of_month, format_date
from models import Holiday, LeaveRecord


@dataclass
class DayCell:
    day: int
    date_key: str
    records: List[LeaveRecord] = field(default_factory=list)
    holiday: Optional[Holiday] = None


def build_grid(year: int, month: int, records: Sequence[LeaveRecord],
               holidays: Sequence[Holiday]) -> List[Optional[DayCell]]:
    """
    Build the cells for one month, Sunday-first.

    Args:
        year: Year
        month: Month (0-11)
        records: Leave records (any range; matched by date string)
        holidays: Holidays (any range; matched by date string)

    Returns:
        One None placeholder per day before the 1st, then a DayCell for each
        day 1..N. Records keep their input order; only the first holiday on
        a date is used.
    """
    cells: List[Optional[DayCell]] = [None] * first_weekday_of_month(year, month)

    for day in range(1, days_in_month(year, month) + 1):
        date_key = format_date(year, month, day)
        day_records = [r for r in records if r.date_key == date_key]
        day_holiday = next((h for h in holidays if h.date_key == date_key), None)
        cells.append(DayCell(day, date_key, day_records, day_holiday))

    return cells


def grid_weeks(cells: Sequence[Optional[DayCell]]) -> List[List[Optional[DayCell]]]:
    """Split a flat grid into rows of 7, padding the last row with None."""
    weeks = []
    for start in range(0, len(cells), 7):
        week = list(cells[start:start + 7])
        week.extend([None] * (7 - len(week)))
        weeks.append(week)
    return weeks
