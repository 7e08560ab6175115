"""Tests for the month grid builder."""
from datetime import date

from calc import days_in_month, first_weekday_of_month
from grid import build_grid, grid_weeks
from models import Holiday, LeaveRecord, LeaveType


def test_grid_shape_for_every_month():
    for year in (2023, 2024, 2025, 2026):
        for month in range(12):
            cells = build_grid(year, month, [], [])
            lead = first_weekday_of_month(year, month)
            assert len(cells) == lead + days_in_month(year, month)
            assert cells[:lead] == [None] * lead
            assert [c.day for c in cells[lead:]] == list(range(1, days_in_month(year, month) + 1))


def test_cells_carry_formatted_dates():
    cells = build_grid(2026, 2, [], [])
    days = [c for c in cells if c is not None]
    assert days[0].date_key == "2026-03-01"
    assert days[4].date_key == "2026-03-05"
    assert days[-1].date_key == "2026-03-31"


def test_records_are_matched_by_date_in_input_order():
    records = [
        LeaveRecord("2", date(2026, 3, 5), LeaveType.MC_PM),
        LeaveRecord("1", date(2026, 3, 5), LeaveType.AL),
        LeaveRecord("3", date(2026, 4, 5), LeaveType.EL),
    ]
    cells = build_grid(2026, 2, records, [])
    by_key = {c.date_key: c for c in cells if c is not None}

    assert [r.id for r in by_key["2026-03-05"].records] == ["2", "1"]
    assert by_key["2026-03-06"].records == []
    assert all(r.id != "3" for c in by_key.values() for r in c.records)


def test_first_holiday_wins_on_shared_date():
    holidays = [
        Holiday("a", date(2026, 3, 2), "Founders Day"),
        Holiday("b", date(2026, 3, 2), "Duplicate"),
    ]
    cells = build_grid(2026, 2, [], holidays)
    with_holiday = [c for c in cells if c is not None and c.holiday is not None]

    assert len(with_holiday) == 1
    assert with_holiday[0].holiday.holiday_name == "Founders Day"


def test_grid_weeks_pads_last_row():
    cells = build_grid(2026, 7, [], [])  # August 2026 starts on Saturday
    weeks = grid_weeks(cells)

    assert all(len(week) == 7 for week in weeks)
    assert len(weeks) == 6
    assert weeks[0][:6] == [None] * 6
    assert weeks[0][6].day == 1
    assert weeks[-1][1].day == 31
    assert weeks[-1][2:] == [None] * 5
