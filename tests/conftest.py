"""Test fixtures: an in-memory stand-in for the Supabase client."""
import itertools
from datetime import date
from types import SimpleNamespace

import pytest

from controller import CalendarController
from db import LeaveStore


class FakeQuery:
    """Mimics the PostgREST builder chain used by LeaveStore."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.action = None
        self.payload = None
        self.filters = []

    def select(self, columns="*"):
        self.action = "select"
        return self

    def insert(self, rows):
        self.action = "insert"
        self.payload = rows
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        self.client.calls.append((self.table, self.action, self.payload, list(self.filters)))
        failure = self.client.failures.get((self.table, self.action))
        if failure is not None:
            raise failure

        rows = self.client.tables.setdefault(self.table, [])
        if self.action == "select":
            return SimpleNamespace(data=[dict(r) for r in rows if self._matches(r)])
        if self.action == "insert":
            inserted = []
            for row in self.payload:
                stored = dict(row, id=f"{self.table}-{next(self.client.ids)}")
                rows.append(stored)
                inserted.append(dict(stored))
            return SimpleNamespace(data=inserted)
        if self.action == "delete":
            removed = [r for r in rows if self._matches(r)]
            self.client.tables[self.table] = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=removed)
        raise AssertionError(f"unexpected action {self.action}")


class FakeSupabase:
    def __init__(self, leave_records=None, holidays=None):
        self.tables = {
            "leave_records": list(leave_records or []),
            "holidays": list(holidays or []),
        }
        self.ids = itertools.count(1)
        self.calls = []
        # (table, action) -> exception raised on execute()
        self.failures = {}

    def table(self, name):
        return FakeQuery(self, name)

    def count(self, table, action):
        return sum(1 for call in self.calls if call[0] == table and call[1] == action)


@pytest.fixture
def supabase():
    return FakeSupabase(
        leave_records=[
            {"id": "r1", "leave_date": "2026-03-05", "leave_type": "AL"},
            {"id": "r2", "leave_date": "2026-03-05", "leave_type": "MC PM"},
            {"id": "r3", "leave_date": "2026-03-10", "leave_type": "EL"},
            {"id": "r4", "leave_date": "2026-07-01", "leave_type": "AL AM"},
        ],
        holidays=[
            {"id": "h1", "holiday_date": "2026-03-02", "holiday_name": "Founders Day"},
            {"id": "h2", "holiday_date": "2026-03-07", "holiday_name": "Weekend Fair"},
        ],
    )


@pytest.fixture
def store(supabase):
    return LeaveStore(supabase)


@pytest.fixture
def controller(store):
    controller = CalendarController(store, today=date(2026, 3, 18))
    controller.refresh()
    return controller
