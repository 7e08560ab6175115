"""
Database helpers for Supabase integration.
Handles configuration, the data-access layer and holiday seeding.
"""

import logging
import os
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

import holidays
import httpx
import streamlit as st
from postgrest.exceptions import APIError
from supabase import Client, SupabaseException, create_client

from models import Holiday, InvalidRecordError, LeaveRecord, LeaveType, parse_date

logger = logging.getLogger(__name__)

LEAVE_TABLE = 'leave_records'
HOLIDAY_TABLE = 'holidays'


class StoreError(Exception):
    """A call to the store did not complete."""


class NetworkFailure(StoreError):
    """The request could not reach the store."""


class StoreFailure(StoreError):
    """The store rejected the request."""


class ConfigError(RuntimeError):
    """Connection settings for the store are missing or invalid."""


def get_secret(name: str, default=None):
    # prefer Streamlit secrets, fallback to env vars
    try:
        return st.secrets[name]
    except Exception:
        return os.getenv(name, default)


def get_log_level(default: int = logging.INFO) -> int:
    """LOG_LEVEL setting as a logging level; unknown names give the default."""
    level = logging.getLevelName(str(get_secret("LOG_LEVEL", "INFO")).upper())
    return level if isinstance(level, int) else default


def get_supabase_client() -> Client:
    """Initialize and return Supabase client from secrets or environment."""
    url = get_secret("SUPABASE_URL")
    key = get_secret("SUPABASE_ANON_KEY") or get_secret("SUPABASE_SERVICE_KEY")
    if not url or not key:
        raise ConfigError("Missing SUPABASE_URL / SUPABASE_ANON_KEY.")
    try:
        return create_client(url, key)
    except SupabaseException as e:
        raise ConfigError(f"Invalid Supabase settings ({e}). Check SUPABASE_URL / SUPABASE_ANON_KEY.") from e


def _execute(query, action: str):
    """Run a PostgREST query, mapping client errors onto StoreError."""
    try:
        return query.execute()
    except APIError as e:
        message = getattr(e, 'message', None) or str(e)
        logger.error("%s rejected by store: %s", action, message)
        raise StoreFailure(f"{action} failed: {message}") from e
    except httpx.HTTPError as e:
        logger.error("%s could not reach store: %s", action, e)
        raise NetworkFailure(f"{action} failed: could not reach the store ({e})") from e


class LeaveStore:
    """
    Data access for the `leave_records` and `holidays` tables.

    The Supabase client is passed in so tests can hand over a fake one.
    """

    def __init__(self, client: Client):
        self.client = client

    @classmethod
    def from_config(cls) -> "LeaveStore":
        return cls(get_supabase_client())

    def fetch_leave_records(self) -> List[LeaveRecord]:
        """
        Get every leave record.

        Rows with an unknown leave type or date are skipped and logged.

        Returns:
            Parsed records in store order
        """
        result = _execute(self.client.table(LEAVE_TABLE).select('*'), "Loading leave records")
        records = []
        for row in result.data or []:
            try:
                records.append(LeaveRecord.from_row(row))
            except InvalidRecordError as e:
                logger.warning("Skipping leave row %r: %s", row.get('id'), e)
        return records

    def fetch_holidays(self) -> List[Holiday]:
        """Get every holiday, skipping rows with an invalid date."""
        result = _execute(self.client.table(HOLIDAY_TABLE).select('*'), "Loading holidays")
        rows = []
        for row in result.data or []:
            try:
                rows.append(Holiday.from_row(row))
            except InvalidRecordError as e:
                logger.warning("Skipping holiday row %r: %s", row.get('id'), e)
        return rows

    def insert_leave_record(self, leave_date: Any, leave_type: Any) -> None:
        """
        Insert one leave record.

        Both values are checked before anything is sent; the stored row is
        picked up by the next fetch.

        Args:
            leave_date: A date or "YYYY-MM-DD"
            leave_type: A LeaveType or its string value
        """
        leave_date = parse_date(leave_date)
        leave_type = LeaveType.parse(leave_type)
        row = {'leave_date': leave_date.isoformat(), 'leave_type': leave_type.value}
        _execute(self.client.table(LEAVE_TABLE).insert([row]), "Saving leave")
        logger.info("Saved %s on %s", leave_type.value, row['leave_date'])

    def delete_leave_record(self, record_id: Any) -> None:
        """Delete a leave record by id."""
        _execute(self.client.table(LEAVE_TABLE).delete().eq('id', record_id), "Deleting leave")
        logger.info("Deleted leave record %s", record_id)

    def insert_holidays(self, rows: List[Dict[str, Any]]) -> int:
        """Insert holiday rows; returns number of rows the store reports back."""
        if not rows:
            return 0
        result = _execute(self.client.table(HOLIDAY_TABLE).insert(rows), "Saving holidays")
        return len(result.data) if getattr(result, "data", None) else 0


def public_holidays(country: str, year: int, subdivision: Optional[str] = None) -> Dict[date, str]:
    """
    Get the public holidays of a country for one year.

    Args:
        country: ISO country code understood by the `holidays` package (e.g. 'SG')
        year: Year
        subdivision: Optional state/province code

    Returns:
        Mapping of date to holiday name
    """
    country_holidays = holidays.country_holidays(country, subdiv=subdivision or None, years=year)
    return {d: name for d, name in sorted(country_holidays.items()) if d.year == year}


def seed_public_holidays(store: LeaveStore, existing: Iterable[Holiday], country: str,
                         year: int, subdivision: Optional[str] = None) -> int:
    """
    Add a year's public holidays to the holidays table.

    Dates that already carry a holiday are left alone.

    Returns:
        Number of rows inserted
    """
    taken = {h.holiday_date for h in existing}
    rows = [
        {'holiday_date': d.isoformat(), 'holiday_name': name}
        for d, name in public_holidays(country, year, subdivision).items()
        if d not in taken
    ]
    if not rows:
        logger.info("No new %s holidays to seed for %s", country, year)
        return 0

    inserted = store.insert_holidays(rows)
    logger.info("Seeded %d %s holidays for %s", inserted, country, year)
    return inserted
