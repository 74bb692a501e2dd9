"""
Occurrence resolution.

Turns "every Sunday at 8:00 AM" into the first concrete date-time of the
recurrence, relative to a reference date passed in by the caller.

Rule: the first occurrence is always strictly after the reference date.
If the reference date already falls on the weekday, the next week is used.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from routinecal.config import UTC_OFFSET
from routinecal.model import WEEKDAYS, ClockTime


def weekday_index(name: str) -> int:
    """
    Sunday=0 ... Saturday=6. Raises ValueError for anything else.
    """
    lowered = name.strip().lower()
    for i, day in enumerate(WEEKDAYS):
        if day.lower() == lowered:
            return i
    raise ValueError(f"Unknown weekday: {name!r}")


def _reference_index(reference: date) -> int:
    # date.weekday() is Monday=0; shift to Sunday=0
    return (reference.weekday() + 1) % 7


def next_occurrence(reference: date, weekday: str) -> date:
    """
    First date strictly after `reference` that falls on `weekday`.
    """
    if isinstance(reference, datetime):
        reference = reference.date()

    days_ahead = (weekday_index(weekday) - _reference_index(reference) + 7) % 7
    if days_ahead == 0:
        days_ahead = 7
    return reference + timedelta(days=days_ahead)


def combine(day: date, time: ClockTime) -> datetime:
    """
    Naive local date-time (fixed campus time zone) for a date and a 12h clock time.
    """
    hour, minute = time.to_24h()
    return datetime(day.year, day.month, day.day, hour, minute, 0, 0)


def to_utc(local: datetime) -> datetime:
    """
    Interprets a naive local date-time in the campus time zone and converts it to UTC.
    """
    return local.replace(tzinfo=UTC_OFFSET).astimezone(timezone.utc)
