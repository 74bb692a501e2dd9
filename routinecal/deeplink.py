"""
Google Calendar "create event" links.

One URL per compiled event. Opening a link pre-fills the event form with the
title, UTC start/end, details and the weekly recurrence; the user still has
to press save, and reminders have to be set by hand (hence the hint text).
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Sequence
from urllib.parse import quote, urlencode

from routinecal.config import CAMPUS_NAME, DEFAULT_REMINDER_MINUTES, RECURRENCE_COUNT
from routinecal.model import CompiledEvent
from routinecal.occurrence import to_utc


GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render"
RECUR = f"RRULE:FREQ=WEEKLY;COUNT={RECURRENCE_COUNT}"


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'s' if n > 1 else ''}"


def reminder_text(minutes: int) -> str:
    """
    "10 minutes", "1 hour", "2 days", ...
    """
    if minutes <= 0:
        return "at event time"
    if minutes < 60:
        return _plural(minutes, "minute")
    if minutes < 1440:
        return _plural(minutes // 60, "hour")
    return _plural(minutes // 1440, "day")


def _google_stamp(ev_time: datetime) -> str:
    return to_utc(ev_time).strftime("%Y%m%dT%H%M%SZ")


def build_event_url(ev: CompiledEvent, reminder_minutes: int = DEFAULT_REMINDER_MINUTES) -> str:
    details = ev.description
    if reminder_minutes > 0:
        details += f"\n\nReminder: Set {reminder_text(reminder_minutes)} reminder in Google Calendar"

    params = [
        ("action", "TEMPLATE"),
        ("text", ev.title),
        ("dates", f"{_google_stamp(ev.start)}/{_google_stamp(ev.end)}"),
        ("details", details),
        ("location", CAMPUS_NAME),
        ("recur", RECUR),
    ]
    return f"{GOOGLE_CALENDAR_URL}?{urlencode(params, quote_via=quote)}"


def serialize_links(
    events: Sequence[CompiledEvent], reminder_minutes: int = DEFAULT_REMINDER_MINUTES
) -> List[str]:
    """
    One "create event" URL per event, in event order.
    """
    if reminder_minutes < 0:
        raise ValueError(f"reminder_minutes must be >= 0, got {reminder_minutes}")
    return [build_event_url(ev, reminder_minutes) for ev in events]
