"""
Calendar event compilation.

Given the selected sessions and a reference date, produce one CompiledEvent
per weekday each session meets on. The event carries the first occurrence;
the serializers add the weekly recurrence.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from routinecal.config import CAMPUS_NAME, UID_DOMAIN
from routinecal.errors import EmptySelection
from routinecal.model import CATEGORY_EXAM, CATEGORY_LAB, CompiledEvent, ScheduleToken, SelectedSession
from routinecal.occurrence import combine, next_occurrence, to_utc
from routinecal.parse import parse_schedule


logger = logging.getLogger(__name__)

CATEGORY_SUFFIX = {CATEGORY_LAB: " Lab", CATEGORY_EXAM: " Exam"}


def event_title(selection: SelectedSession) -> str:
    suffix = CATEGORY_SUFFIX.get(selection.category, "")
    return f"{selection.name}{suffix} ({selection.room_number})"


def event_description(selection: SelectedSession) -> str:
    lines = [
        f"Course: {selection.title}",
        f"Instructor: {selection.faculty_name}",
        f"Email: {selection.instructor_email}",
        f"Room: {selection.room_number}",
        f"Section: {selection.session.section_name}",
    ]
    return "\n".join(lines)


def _event_for_token(selection: SelectedSession, token: ScheduleToken, reference: date) -> CompiledEvent:
    day = next_occurrence(reference, token.weekday)
    start = combine(day, token.start)
    end = combine(day, token.end)

    # Epoch milliseconds of the first occurrence keep the UID stable across runs
    stamp = int(to_utc(start).timestamp() * 1000)
    uid = f"{selection.session_id}-{selection.kind}-{token.weekday}-{stamp}@{UID_DOMAIN}"

    return CompiledEvent(
        source_session_id=selection.session_id,
        weekday=token.weekday,
        start=start,
        end=end,
        title=event_title(selection),
        description=event_description(selection),
        location=f"{selection.room_number}, {CAMPUS_NAME}",
        category=selection.category,
        uid=uid,
    )


def compile_events(selections: Sequence[SelectedSession], reference: date) -> list[CompiledEvent]:
    """
    Compiles selections into events, in selection order then schedule order.

    Raises EmptySelection if nothing is selected. A selection whose schedule
    is empty or unparseable contributes no events.
    """
    if not selections:
        raise EmptySelection("Please select at least one course to export.")

    events: list[CompiledEvent] = []
    for selection in selections:
        tokens = parse_schedule(selection.schedule_source)
        if not tokens:
            logger.warning(
                "No usable schedule for %s (%s); it will not appear in the export",
                selection.name,
                selection.kind,
            )
            continue
        for token in tokens:
            events.append(_event_for_token(selection, token, reference))

    return events
