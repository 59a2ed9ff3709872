from __future__ import annotations

from datetime import date, datetime, time


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp (no timezone) into datetime."""
    return datetime.fromisoformat(value)


def parse_time_of_day(value: str) -> time:
    """Parse HH:MM or HH:MM:SS into time."""
    fmt = "%H:%M:%S" if value.count(":") == 2 else "%H:%M"
    return datetime.strptime(value, fmt).time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def minutes_of_day(value: time) -> float:
    return value.hour * 60 + value.minute + value.second / 60


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600
