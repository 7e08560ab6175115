"""
Calendar utilities and leave aggregation.
Pure functions for date math and summary calculations.

Months are zero-based throughout (0 = January) so cursor arithmetic can wrap
with divmod; formatted date strings are 1-indexed like the store's columns.
"""

import calendar
import json
from datetime import date
from typing import Any, Dict, Iterable, List, Sequence, Set

from models import BASE_CATEGORIES, CalendarCursor, Holiday, LeaveRecord, parse_date


EXPORT_VERSION = '1.0'


# --- Date utilities --------------------------------------------------------

def first_weekday_of_month(year: int, month: int) -> int:
    """
    Day of week of the 1st of the month.

    Args:
        year: Year (e.g., 2026)
        month: Month (0-11)

    Returns:
        0 (Sunday) to 6 (Saturday)
    """
    monday_based = calendar.monthrange(year, month + 1)[0]
    return (monday_based + 1) % 7


def days_in_month(year: int, month: int) -> int:
    """Number of days in the month (0-11), leap years included."""
    return calendar.monthrange(year, month + 1)[1]


def format_date(year: int, month: int, day: int) -> str:
    """
    Format a date the way the store's date columns hold it.

    Args:
        year: Year
        month: Month (0-11)
        day: Day of month (1-31)

    Returns:
        "YYYY-MM-DD" with month and day zero-padded
    """
    return f"{year}-{month + 1:02d}-{day:02d}"


def is_weekend(day_date: date) -> bool:
    """Check if date is a weekend (Saturday or Sunday)."""
    return day_date.weekday() >= 5


# --- Aggregation -----------------------------------------------------------

def _date_of(item: Any, date_field: str) -> date:
    if isinstance(item, dict):
        return parse_date(item[date_field])
    return parse_date(getattr(item, date_field))


def scope_to_month(items: Iterable[Any], date_field: str, year: int, month: int) -> List[Any]:
    """
    Keep the items whose date falls in the given month.

    Args:
        items: Leave records or holidays (objects or row dicts)
        date_field: Name of the date attribute, e.g. 'leave_date'
        year: Year
        month: Month (0-11)

    Returns:
        Matching items in input order
    """
    scoped = []
    for item in items:
        d = _date_of(item, date_field)
        if d.year == year and d.month == month + 1:
            scoped.append(item)
    return scoped


def scope_to_year(items: Iterable[Any], date_field: str, year: int) -> List[Any]:
    """Keep the items whose date falls in the given year."""
    return [item for item in items if _date_of(item, date_field).year == year]


def _type_of(record: Any) -> str:
    raw = record['leave_type'] if isinstance(record, dict) else record.leave_type
    return getattr(raw, 'value', raw)


def calc_leave(records: Iterable[Any], base_category: str) -> float:
    """
    Total days of one leave category.

    A bare category counts 1, its " AM"/" PM" half-day variant counts 0.5,
    anything else counts 0. Categories without half-day variants only ever
    match exactly.
    """
    total = 0.0
    half_days = (f"{base_category} AM", f"{base_category} PM")
    for record in records:
        leave_type = _type_of(record)
        if leave_type == base_category:
            total += 1
        elif leave_type in half_days:
            total += 0.5
    return total


def total_leave_days(records: Iterable[Any]) -> float:
    """
    Total days of leave across all categories.

    Any type containing "AM" or "PM" counts as half a day. This is looser
    than calc_leave and only feeds the days-worked figure.
    """
    total = 0.0
    for record in records:
        leave_type = _type_of(record)
        if "AM" in leave_type or "PM" in leave_type:
            total += 0.5
        else:
            total += 1
    return total


def category_totals(records: Sequence[Any]) -> Dict[str, float]:
    """Get calc_leave for every base category, in display order."""
    return {category: calc_leave(records, category) for category in BASE_CATEGORIES}


def weekday_count(year: int, month: int) -> int:
    """Count the Monday-Friday days in the month (0-11)."""
    first = first_weekday_of_month(year, month)
    count = 0
    for offset in range(days_in_month(year, month)):
        if (first + offset) % 7 not in (0, 6):
            count += 1
    return count


def holiday_dates(holidays: Iterable[Any]) -> Set[date]:
    """Distinct holiday dates; a date counts once however many rows share it."""
    return {_date_of(h, 'holiday_date') for h in holidays}


def weekday_holiday_count(holidays_in_month: Iterable[Any]) -> int:
    """Count holiday dates that fall on a Monday-Friday."""
    return sum(1 for d in holiday_dates(holidays_in_month) if not is_weekend(d))


def days_worked(year: int, month: int, records_in_month: Sequence[Any],
                holidays_in_month: Sequence[Any]) -> float:
    """
    Weekdays minus weekday holidays minus leave days.

    No clamping: a short month with many holidays and leave days can go
    negative, and half days make it fractional.
    """
    return (
        weekday_count(year, month)
        - weekday_holiday_count(holidays_in_month)
        - total_leave_days(records_in_month)
    )


# --- Summaries -------------------------------------------------------------

def month_summary(records: Sequence[LeaveRecord], holidays: Sequence[Holiday],
                  year: int, month: int) -> Dict[str, Any]:
    """
    Compute the monthly summary statistics.

    Args:
        records: All leave records (scoped here)
        holidays: All holidays (scoped here)
        year: Year
        month: Month (0-11)

    Returns:
        Dictionary with category_totals, total_leave_days, weekdays,
        weekday_holidays, holidays and days_worked
    """
    records_in_month = scope_to_month(records, 'leave_date', year, month)
    holidays_in_month = scope_to_month(holidays, 'holiday_date', year, month)

    return {
        'category_totals': category_totals(records_in_month),
        'total_leave_days': total_leave_days(records_in_month),
        'weekdays': weekday_count(year, month),
        'weekday_holidays': weekday_holiday_count(holidays_in_month),
        'holidays': len(holiday_dates(holidays_in_month)),
        'days_worked': days_worked(year, month, records_in_month, holidays_in_month),
    }


def year_summary(records: Sequence[LeaveRecord], holidays: Sequence[Holiday],
                 year: int) -> Dict[str, Any]:
    """Compute the year-to-date style totals for a whole year."""
    records_in_year = scope_to_year(records, 'leave_date', year)
    holidays_in_year = scope_to_year(holidays, 'holiday_date', year)

    return {
        'year': year,
        'category_totals': category_totals(records_in_year),
        'total_leave_days': total_leave_days(records_in_year),
        'holidays': len(holiday_dates(holidays_in_year)),
        'weekday_holidays': weekday_holiday_count(holidays_in_year),
    }


def serialize_month(cursor: CalendarCursor, records: Sequence[LeaveRecord],
                    holidays: Sequence[Holiday], summary: Dict[str, Any]) -> str:
    """
    Serialize the displayed month to JSON for export.

    Args:
        cursor: Month on display
        records: All leave records (scoped here)
        holidays: All holidays (scoped here)
        summary: Output of month_summary for the same cursor

    Returns:
        JSON string with stable schema
    """
    records_in_month = scope_to_month(records, 'leave_date', cursor.year, cursor.month)
    holidays_in_month = scope_to_month(holidays, 'holiday_date', cursor.year, cursor.month)

    export_data = {
        'version': EXPORT_VERSION,
        'month': {
            'year': cursor.year,
            'month': cursor.month + 1,
        },
        'summary': summary,
        'leave_records': [r.to_dict() for r in sorted(records_in_month, key=lambda r: r.leave_date)],
        'holidays': [h.to_dict() for h in sorted(holidays_in_month, key=lambda h: h.holiday_date)],
    }

    return json.dumps(export_data, indent=2, default=str)
