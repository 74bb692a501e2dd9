"""
The user's course selection.

A SelectionStore is a plain object owned by whoever drives the application
(the CLI loads one from disk per command; tests build their own). It holds
SelectedSession entries in insertion order, which is also the export order.

Rules:
- a session can be selected once as lecture and once as lab, not more
- override fields are copied from the catalog record on add and edited
  independently afterwards
- indexes are 0-based; negative indexes are rejected, not counted from the end
"""

from __future__ import annotations

import dataclasses
from typing import Any, Iterable, Iterator, Optional

from routinecal.config import FALLBACK_EMAIL, EMAIL_DOMAIN, ROOM_PLACEHOLDER
from routinecal.errors import DuplicateSelection, IndexOutOfRange
from routinecal.model import (
    CATEGORIES,
    CATEGORY_LAB,
    CATEGORY_NORMAL,
    KIND_LAB,
    KIND_LECTURE,
    KINDS,
    CatalogSession,
    SelectedSession,
)
from routinecal.parse import extract_room


EDITABLE_FIELDS = ("name", "title", "faculty_name", "room_number", "instructor_email", "category")


def instructor_email(instructor: Optional[str]) -> str:
    """
    Synthesizes the university address from the instructor's short name.
    """
    short = (instructor or "").strip()
    if not short or short.upper() == ROOM_PLACEHOLDER:
        return FALLBACK_EMAIL
    return f"{short.lower()}@{EMAIL_DOMAIN}"


def _seed_room(session: CatalogSession, kind: str) -> str:
    if kind == KIND_LAB:
        explicit = session.lab_room
        schedule = session.lab_schedule
    else:
        explicit = session.room_name
        schedule = session.schedule

    if explicit and explicit.strip():
        return explicit.strip()
    return extract_room(schedule) or ROOM_PLACEHOLDER


def new_selection(session: CatalogSession, kind: str = KIND_LECTURE) -> SelectedSession:
    """
    Builds a selection entry with overrides seeded from the catalog record.
    """
    if kind not in KINDS:
        raise ValueError(f"Invalid kind: {kind!r}")

    if kind == KIND_LAB:
        title = session.lab_name or f"{session.course_title} Lab"
        category = CATEGORY_LAB
    else:
        title = session.course_title
        category = CATEGORY_NORMAL

    return SelectedSession(
        session=session,
        kind=kind,
        category=category,
        name=session.course_code,
        title=title,
        faculty_name=session.instructor,
        room_number=_seed_room(session, kind),
        instructor_email=instructor_email(session.instructor),
    )


class SelectionStore:
    """
    Ordered collection of selected sessions.
    """

    def __init__(self, selections: Optional[Iterable[SelectedSession]] = None) -> None:
        self._items: list[SelectedSession] = []
        for item in selections or []:
            if self._find(item.session_id, item.kind) is not None:
                raise DuplicateSelection(item.session_id, item.kind)
            self._items.append(item)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[SelectedSession]:
        return iter(list(self._items))

    def _find(self, session_id: str, kind: str) -> Optional[int]:
        for i, item in enumerate(self._items):
            if item.session_id == session_id and item.kind == kind:
                return i
        return None

    def _check_index(self, index: int) -> None:
        if not (0 <= index < len(self._items)):
            raise IndexOutOfRange(index, len(self._items))

    def add(self, session: CatalogSession, kind: str = KIND_LECTURE) -> SelectedSession:
        """
        Selects a session as lecture or lab. Raises DuplicateSelection if that
        (session, kind) pair is already selected.
        """
        if self._find(session.session_id, kind) is not None:
            raise DuplicateSelection(session.session_id, kind)
        item = new_selection(session, kind)
        self._items.append(item)
        return item

    def edit(self, index: int, **fields: Any) -> SelectedSession:
        """
        Replaces override fields and/or the category of one entry.
        """
        self._check_index(index)

        unknown = sorted(set(fields) - set(EDITABLE_FIELDS))
        if unknown:
            raise ValueError(f"Not editable: {', '.join(unknown)}")
        if "category" in fields and fields["category"] not in CATEGORIES:
            raise ValueError(f"Invalid category: {fields['category']!r}")

        updated = dataclasses.replace(self._items[index], **fields)
        self._items[index] = updated
        return updated

    def remove(self, index: int) -> SelectedSession:
        self._check_index(index)
        return self._items.pop(index)

    def reset(self) -> None:
        self._items.clear()

    def list(self) -> list[SelectedSession]:
        return list(self._items)

    def to_payload(self) -> dict[str, Any]:
        return {"selected_sessions": [item.to_dict() for item in self._items]}

    @classmethod
    def from_payload(cls, payload: Any) -> "SelectionStore":
        """
        Rebuilds a store from persisted data, skipping entries that are
        malformed or duplicated.
        """
        store = cls()
        if not isinstance(payload, dict):
            return store
        entries = payload.get("selected_sessions", [])
        if not isinstance(entries, list):
            return store

        for entry in entries:
            if not isinstance(entry, dict):
                continue
            try:
                item = SelectedSession.from_dict(entry)
            except (KeyError, TypeError, ValueError, AttributeError):
                continue
            if store._find(item.session_id, item.kind) is None:
                store._items.append(item)
        return store
