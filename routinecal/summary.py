"""
Plain-text schedule summary (for pasting into chats, notes, e-mails).
"""

from __future__ import annotations

from typing import Sequence

from routinecal.errors import EmptySelection
from routinecal.model import SelectedSession
from routinecal.parse import format_schedule


def schedule_summary(selections: Sequence[SelectedSession]) -> str:
    if not selections:
        raise EmptySelection("No courses selected to copy.")

    lines = ["BRACU Class Schedule", ""]
    for i, sel in enumerate(selections, start=1):
        lines.append(f"{i}. {sel.name}")
        lines.append(f"   Title: {sel.title}")
        lines.append(f"   Instructor: {sel.faculty_name}")
        lines.append(f"   Room: {sel.room_number}")
        lines.append(f"   Schedule: {format_schedule(sel.schedule_source)}")
        lines.append(f"   Type: {sel.category.capitalize()}")
        lines.append("")

    return "\n".join(lines)
