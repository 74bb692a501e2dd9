"""
Central data model definitions used across the project.

This module defines the canonical structure of the objects that flow through
the schedule compiler so that:
- the catalog, the selection store and the serializers share the same field names
- catalog records stay immutable snapshots of the feed
- user overrides live on the selection, never on the catalog record
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Tuple


WEEKDAYS: Tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

KIND_LECTURE = "lecture"
KIND_LAB = "lab"
KINDS = (KIND_LECTURE, KIND_LAB)

CATEGORY_NORMAL = "normal"
CATEGORY_LAB = "lab"
CATEGORY_EXAM = "exam"
CATEGORIES = (CATEGORY_NORMAL, CATEGORY_LAB, CATEGORY_EXAM)


def _optional_text(data: dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None or isinstance(value, str):
        return value
    raise ValueError(f"Invalid {key}: {value!r}")


@dataclass(frozen=True)
class ClockTime:
    """
    A 12-hour wall clock time as written in the schedule strings.
    """

    hour12: int
    minute: int
    meridiem: str

    def to_24h(self) -> Tuple[int, int]:
        hour = self.hour12 % 12
        if self.meridiem == "PM":
            hour += 12
        return hour, self.minute

    def __str__(self) -> str:
        return f"{self.hour12}:{self.minute:02d} {self.meridiem}"


@dataclass(frozen=True)
class ScheduleToken:
    """
    One weekly meeting: weekday plus start and end time.
    """

    weekday: str
    start: ClockTime
    end: ClockTime


@dataclass(frozen=True)
class CatalogSession:
    """
    Represents one course section as published by the catalog feed.
    """

    session_id: str
    course_code: str
    course_title: str
    instructor: str
    room_name: str
    credits: float
    schedule: str
    lab_schedule: Optional[str] = None
    lab_name: Optional[str] = None
    lab_room: Optional[str] = None
    section_name: str = ""
    capacity: int = 0
    consumed_seats: int = 0
    prerequisites: str = ""

    @property
    def available_seats(self) -> int:
        return self.capacity - self.consumed_seats

    @property
    def department(self) -> str:
        prefix = "".join(ch for ch in self.course_code if not ch.isdigit())
        return prefix or "Unknown"

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "course_code": self.course_code,
            "course_title": self.course_title,
            "instructor": self.instructor,
            "room_name": self.room_name,
            "credits": self.credits,
            "schedule": self.schedule,
            "lab_schedule": self.lab_schedule,
            "lab_name": self.lab_name,
            "lab_room": self.lab_room,
            "section_name": self.section_name,
            "capacity": self.capacity,
            "consumed_seats": self.consumed_seats,
            "prerequisites": self.prerequisites,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CatalogSession":
        return cls(
            session_id=str(data["session_id"]),
            course_code=str(data.get("course_code") or ""),
            course_title=str(data.get("course_title") or ""),
            instructor=str(data.get("instructor") or "TBA"),
            room_name=str(data.get("room_name") or ""),
            credits=data.get("credits") or 0,
            schedule=str(data.get("schedule") or ""),
            lab_schedule=_optional_text(data, "lab_schedule"),
            lab_name=_optional_text(data, "lab_name"),
            lab_room=_optional_text(data, "lab_room"),
            section_name=str(data.get("section_name") or ""),
            capacity=int(data.get("capacity") or 0),
            consumed_seats=int(data.get("consumed_seats") or 0),
            prerequisites=str(data.get("prerequisites") or ""),
        )


@dataclass
class SelectedSession:
    """
    A catalog session the user picked, plus the fields the user may edit.

    The override fields are seeded from the catalog record when the session is
    added (see SelectionStore.add) and are independent from then on.
    """

    session: CatalogSession
    kind: str
    category: str
    name: str
    title: str
    faculty_name: str
    room_number: str
    instructor_email: str

    @property
    def session_id(self) -> str:
        return self.session.session_id

    @property
    def schedule_source(self) -> str:
        if self.kind == KIND_LAB:
            return self.session.lab_schedule or ""
        return self.session.schedule or ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "session": self.session.to_dict(),
            "kind": self.kind,
            "category": self.category,
            "name": self.name,
            "title": self.title,
            "faculty_name": self.faculty_name,
            "room_number": self.room_number,
            "instructor_email": self.instructor_email,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SelectedSession":
        kind = data.get("kind")
        category = data.get("category")
        if kind not in KINDS:
            raise ValueError(f"Invalid kind: {kind!r}")
        if category not in CATEGORIES:
            raise ValueError(f"Invalid category: {category!r}")
        return cls(
            session=CatalogSession.from_dict(data["session"]),
            kind=kind,
            category=category,
            name=str(data.get("name", "")),
            title=str(data.get("title", "")),
            faculty_name=str(data.get("faculty_name", "")),
            room_number=str(data.get("room_number", "")),
            instructor_email=str(data.get("instructor_email", "")),
        )


@dataclass(frozen=True)
class CompiledEvent:
    """
    Represents one weekly recurring calendar event (first occurrence).

    Each CompiledEvent corresponds to exactly one weekday of one selection.
    """

    source_session_id: str
    weekday: str
    start: datetime
    end: datetime
    title: str
    description: str
    location: str
    category: str
    uid: str = ""
