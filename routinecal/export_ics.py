"""
iCalendar (.ics) export.

We convert compiled events into a calendar file that can be imported into:
- Google Calendar
- Outlook
- Apple Calendar

Each event repeats weekly for one semester (RRULE COUNT). Times are local to
the campus time zone, declared once in a static VTIMEZONE block.

The output contains no wall-clock data (no DTSTAMP), so exporting the same
events twice gives identical bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from routinecal.config import (
    DEFAULT_REMINDER_MINUTES,
    RECURRENCE_COUNT,
    TIMEZONE_ID,
    TIMEZONE_NAME,
)
from routinecal.model import CompiledEvent


CRLF = "\r\n"
MAX_LINE_OCTETS = 75

RRULE = f"FREQ=WEEKLY;COUNT={RECURRENCE_COUNT}"


# ---------------------------------------------------------------------------
# Content lines
# ---------------------------------------------------------------------------


def _ics_escape(text: str) -> str:
    """
    Escape a TEXT value (RFC 5545 section 3.3.11).
    """
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\r", "\\n")
        .replace("\n", "\\n")
    )


def fold_line(line: str, limit: int = MAX_LINE_OCTETS) -> List[str]:
    """
    Split a logical line into physical lines of at most `limit` octets.

    Continuation lines start with a single space. Multi-byte characters are
    never split.
    """
    out: List[str] = []
    current = ""
    size = 0
    for ch in line:
        n = len(ch.encode("utf-8"))
        if size + n > limit:
            out.append(current)
            current = " " + ch
            size = 1 + n
        else:
            current += ch
            size += n
    out.append(current)
    return out


@dataclass(frozen=True)
class ContentLine:
    """
    One "NAME;PARAM=VALUE:value" line. `value` is stored already encoded.
    """

    name: str
    value: str
    params: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def text(cls, name: str, value: str) -> "ContentLine":
        return cls(name, _ics_escape(value))

    def render(self) -> List[str]:
        head = self.name + "".join(f";{key}={val}" for key, val in self.params)
        return fold_line(f"{head}:{self.value}")


def _dt_local(dt: datetime) -> str:
    """
    Local datetime string 'YYYYMMDDTHHMMSS' (no Z, paired with TZID).
    """
    return dt.strftime("%Y%m%dT%H%M%S")


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------


def _calendar_header() -> List[ContentLine]:
    return [
        ContentLine("BEGIN", "VCALENDAR"),
        ContentLine("VERSION", "2.0"),
        ContentLine("PRODID", "-//Routine2Calendar//BRACU Schedule//EN"),
        ContentLine("CALSCALE", "GREGORIAN"),
        ContentLine("METHOD", "PUBLISH"),
        ContentLine.text("X-WR-CALNAME", "BRACU Schedule"),
        ContentLine("X-WR-TIMEZONE", TIMEZONE_ID),
        ContentLine.text("X-WR-CALDESC", "BRAC University Class Schedule"),
    ]


def _timezone_block() -> List[ContentLine]:
    return [
        ContentLine("BEGIN", "VTIMEZONE"),
        ContentLine("TZID", TIMEZONE_ID),
        ContentLine("BEGIN", "STANDARD"),
        ContentLine("DTSTART", "20230101T000000"),
        ContentLine("TZOFFSETFROM", "+0600"),
        ContentLine("TZOFFSETTO", "+0600"),
        ContentLine("TZNAME", TIMEZONE_NAME),
        ContentLine("END", "STANDARD"),
        ContentLine("END", "VTIMEZONE"),
    ]


def _event_block(ev: CompiledEvent, reminder_minutes: int) -> List[ContentLine]:
    tzid = (("TZID", TIMEZONE_ID),)
    lines = [
        ContentLine("BEGIN", "VEVENT"),
        ContentLine.text("UID", ev.uid),
        ContentLine("DTSTART", _dt_local(ev.start), tzid),
        ContentLine("DTEND", _dt_local(ev.end), tzid),
        ContentLine("RRULE", RRULE),
        ContentLine.text("SUMMARY", ev.title),
        ContentLine.text("DESCRIPTION", ev.description),
        ContentLine.text("LOCATION", ev.location),
        ContentLine.text("CATEGORIES", ev.category.upper()),
        ContentLine("STATUS", "CONFIRMED"),
        ContentLine("TRANSP", "OPAQUE"),
    ]

    if reminder_minutes > 0:
        lines += [
            ContentLine("BEGIN", "VALARM"),
            ContentLine("ACTION", "DISPLAY"),
            ContentLine.text("DESCRIPTION", f"Reminder: {ev.title}"),
            ContentLine("TRIGGER", f"-PT{reminder_minutes}M"),
            ContentLine("END", "VALARM"),
        ]

    lines.append(ContentLine("END", "VEVENT"))
    return lines


def _render(lines: Iterable[ContentLine]) -> str:
    physical: List[str] = []
    for line in lines:
        physical.extend(line.render())
    # ICS standard uses CRLF after every line, including the last
    return CRLF.join(physical) + CRLF


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def serialize_ics(events: Sequence[CompiledEvent], reminder_minutes: int = DEFAULT_REMINDER_MINUTES) -> str:
    """
    Render events as one VCALENDAR document.

    reminder_minutes > 0 adds a display alarm to every event; 0 disables it.
    """
    if reminder_minutes < 0:
        raise ValueError(f"reminder_minutes must be >= 0, got {reminder_minutes}")

    lines = _calendar_header() + _timezone_block()
    for ev in events:
        lines.extend(_event_block(ev, reminder_minutes))
    lines.append(ContentLine("END", "VCALENDAR"))
    return _render(lines)


def export_events_to_ics(
    events: Sequence[CompiledEvent],
    out_path: str | Path,
    reminder_minutes: int = DEFAULT_REMINDER_MINUTES,
) -> int:
    """
    Export events to an .ics file. Returns number of exported events.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    # write bytes so CRLF survives on every platform
    out.write_bytes(serialize_ics(events, reminder_minutes).encode("utf-8"))
    return len(events)
