"""
Parsing (schedule string -> weekly meeting tokens).

The catalog feed has shipped two conventions for the same information:

- newline format: "SUNDAY(8:00 AM-9:20 AM-10B-18C)\\nTUESDAY(8:00 AM-9:20 AM-10B-18C)"
- comma format:   "Sunday(08:00 AM-09:20 AM-UB0000),Tuesday(08:00 AM-09:20 AM-UB0000)"

The format is detected per string (a newline anywhere means newline format).

Important rules:
- 1 segment = at most 1 token
- segments that don't look like "<weekday>(<time range>...)" are dropped, never raised
- room codes after the time range are not part of the token
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Dict, List, Optional, Tuple

from routinecal.model import WEEKDAYS, ClockTime, ScheduleToken


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

SEGMENT_RE = re.compile(r"(\w+)\(([^)]*)\)")

TIME_RANGE_RE = re.compile(
    r"(\d{1,2}):(\d{2})\s*([AaPp][Mm])\s*-\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])"
)

FORMAT_NEWLINE = "newline"
FORMAT_COMMA = "comma"

_WEEKDAY_BY_LOWER = {day.lower(): day for day in WEEKDAYS}


# ---------------------------------------------------------------------------
# Segment parsing
# ---------------------------------------------------------------------------


def _clock(hour: str, minute: str, meridiem: str) -> Optional[ClockTime]:
    h = int(hour)
    m = int(minute)
    if not (1 <= h <= 12 and 0 <= m <= 59):
        return None
    return ClockTime(hour12=h, minute=m, meridiem=meridiem.upper())


def _parse_segment(segment: str) -> Optional[Tuple[ScheduleToken, str]]:
    """
    Parses one "<weekday>(<contents>)" segment.

    Returns the token and whatever trails the time range (usually the room),
    or None if the segment has to be skipped.
    """
    match = SEGMENT_RE.search(segment)
    if not match:
        return None

    day_word, contents = match.groups()
    weekday = _WEEKDAY_BY_LOWER.get(day_word.lower())
    if weekday is None:
        return None

    time_match = TIME_RANGE_RE.search(contents)
    if not time_match:
        return None

    sh, sm, smer, eh, em, emer = time_match.groups()
    start = _clock(sh, sm, smer)
    end = _clock(eh, em, emer)
    if start is None or end is None:
        return None

    trailing = contents[time_match.end():].strip().lstrip("-").strip()
    return ScheduleToken(weekday=weekday, start=start, end=end), trailing


def _split_segments(raw: str, separator: str) -> List[str]:
    return [s.strip() for s in raw.split(separator) if s.strip()]


def _parse_segments(segments: List[str]) -> List[ScheduleToken]:
    tokens: List[ScheduleToken] = []
    for segment in segments:
        parsed = _parse_segment(segment)
        if parsed is None:
            logger.debug("Skipping unparseable schedule segment %r", segment)
            continue
        tokens.append(parsed[0])
    return tokens


# ---------------------------------------------------------------------------
# Format strategies
# ---------------------------------------------------------------------------


def parse_newline_schedule(raw: str) -> List[ScheduleToken]:
    """
    Parses the newline-joined format used by the current feed.
    """
    return _parse_segments(_split_segments(raw, "\n"))


def parse_comma_schedule(raw: str) -> List[ScheduleToken]:
    """
    Parses the older comma-joined single-line format.
    """
    return _parse_segments(_split_segments(raw, ","))


SCHEDULE_PARSERS: Dict[str, Callable[[str], List[ScheduleToken]]] = {
    FORMAT_NEWLINE: parse_newline_schedule,
    FORMAT_COMMA: parse_comma_schedule,
}

SEPARATORS = {FORMAT_NEWLINE: "\n", FORMAT_COMMA: ","}


def detect_format(raw: str) -> str:
    return FORMAT_NEWLINE if "\n" in raw else FORMAT_COMMA


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_schedule(raw: Optional[str]) -> List[ScheduleToken]:
    """
    Parses a raw schedule string into tokens, in the order they appear.

    Never raises for malformed input: unusable segments are dropped and an
    empty or missing string gives an empty list.
    """
    if not raw:
        return []
    return SCHEDULE_PARSERS[detect_format(raw)](raw)


def extract_room(raw: Optional[str]) -> Optional[str]:
    """
    Returns the room code trailing the time range of the first usable segment.

    Example: "SUNDAY(8:00 AM-9:20 AM-10B-18C)" -> "10B-18C"
    """
    if not raw:
        return None
    for segment in _split_segments(raw, SEPARATORS[detect_format(raw)]):
        parsed = _parse_segment(segment)
        if parsed is None:
            continue
        room = parsed[1]
        if room:
            return room
    return None


def schedule_weekdays(raw: Optional[str]) -> List[str]:
    """
    Weekdays a schedule meets on, without duplicates, in schedule order.
    """
    days: List[str] = []
    for token in parse_schedule(raw):
        if token.weekday not in days:
            days.append(token.weekday)
    return days


def format_schedule(raw: Optional[str]) -> str:
    """
    Human readable schedule, e.g. "Sunday 8:00 AM-9:20 AM, Tuesday 8:00 AM-9:20 AM".

    Segments that don't parse are shown as they are.
    """
    if not raw:
        return "Schedule TBA"

    parts: List[str] = []
    for segment in _split_segments(raw, SEPARATORS[detect_format(raw)]):
        parsed = _parse_segment(segment)
        if parsed is None:
            parts.append(segment)
            continue
        token = parsed[0]
        parts.append(f"{token.weekday} {token.start}-{token.end}")

    return ", ".join(parts) if parts else "Schedule TBA"
