"""
Course catalog (USIS feed -> CatalogSession list).

- Downloads the section feed and the course title feed
- Maps every section record to one immutable CatalogSession
- Caches the result as JSON so later commands work offline
- Offers the search/filter used by the CLI
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import requests

from routinecal.config import ROOM_PLACEHOLDER, connect_url, data_dir, titles_url
from routinecal.errors import CatalogError
from routinecal.model import CatalogSession
from routinecal.parse import schedule_weekdays


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Feed mapping
# ---------------------------------------------------------------------------


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def build_title_map(titles: Iterable[Dict[str, Any]]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for item in titles:
        if not isinstance(item, dict):
            continue
        code = item.get("courseCode")
        title = item.get("courseTitle")
        if code and title:
            out[str(code)] = str(title)
    return out


def session_from_record(record: Dict[str, Any], title_map: Dict[str, str]) -> Optional[CatalogSession]:
    """
    Maps one feed record. Returns None for records without a section id.

    Raises ValueError when the seat counts are not numbers.
    """
    section_id = record.get("sectionId")
    if section_id is None or str(section_id).strip() == "":
        return None

    code = str(record.get("courseCode") or "").strip()
    capacity = record.get("capacity") or 0
    consumed = record.get("consumedSeat") or 0

    return CatalogSession(
        session_id=str(section_id).strip(),
        course_code=code,
        course_title=title_map.get(code) or code,
        instructor=_opt_str(record.get("faculties")) or ROOM_PLACEHOLDER,
        room_name=_opt_str(record.get("roomName")) or "",
        credits=record.get("courseCredit") or 0,
        schedule=str(record.get("preRegSchedule") or ""),
        lab_schedule=_opt_str(record.get("preRegLabSchedule")),
        lab_name=_opt_str(record.get("labName")),
        lab_room=_opt_str(record.get("labRoomName")),
        section_name=str(record.get("sectionName") or ""),
        capacity=int(capacity),
        consumed_seats=int(consumed),
        prerequisites=str(record.get("prerequisiteCourses") or ""),
    )


def build_catalog(records: Iterable[Dict[str, Any]], titles: Iterable[Dict[str, Any]] = ()) -> List[CatalogSession]:
    title_map = build_title_map(titles)
    sessions: List[CatalogSession] = []
    for record in records:
        if not isinstance(record, dict):
            continue
        try:
            session = session_from_record(record, title_map)
        except (TypeError, ValueError) as exc:
            logger.debug("Skipping feed record %r: %s", record.get("sectionId"), exc)
            continue
        if session is None:
            logger.debug("Skipping feed record without sectionId: %r", record)
            continue
        sessions.append(session)
    return sessions


# ---------------------------------------------------------------------------
# Network
# ---------------------------------------------------------------------------


def _get_json_list(url: str, timeout: float, http: Any) -> List[Any]:
    try:
        resp = http.get(url, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as exc:
        raise CatalogError(f"Failed to download {url}: {exc}") from exc
    except ValueError as exc:
        raise CatalogError(f"Invalid JSON from {url}") from exc

    if not isinstance(data, list):
        raise CatalogError(f"Unexpected payload from {url}: expected a list")
    return data


def fetch_catalog(
    connect: Optional[str] = None,
    titles: Optional[str] = None,
    timeout: float = 30,
    http: Any = requests,
) -> List[CatalogSession]:
    """
    Download both feeds and build the catalog.

    `http` is anything with a requests-style get(); tests pass a mock.
    """
    connect = connect or connect_url()
    titles = titles or titles_url()

    logger.info("Fetching sections from %s", connect)
    records = _get_json_list(connect, timeout, http)
    logger.info("Fetching course titles from %s", titles)
    title_records = _get_json_list(titles, timeout, http)

    sessions = build_catalog(records, title_records)
    logger.info("Catalog has %d sections", len(sessions))
    return sessions


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


def _default_catalog_path() -> Path:
    return data_dir() / "catalog.json"


def save_catalog(sessions: Iterable[CatalogSession], path: str | Path | None = None) -> Path:
    catalog_path = Path(path) if path is not None else _default_catalog_path()
    catalog_path.parent.mkdir(parents=True, exist_ok=True)

    payload = [s.to_dict() for s in sessions]
    catalog_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    return catalog_path


def load_catalog(path: str | Path | None = None) -> List[CatalogSession]:
    """
    Load the cached catalog. Raises CatalogError if it was never fetched or is broken.
    """
    catalog_path = Path(path) if path is not None else _default_catalog_path()
    if not catalog_path.exists():
        raise CatalogError(f"No catalog cached at {catalog_path}; run 'routinecal fetch' first")

    try:
        data = json.loads(catalog_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise CatalogError(f"Cannot read catalog cache {catalog_path}: {exc}") from exc

    if not isinstance(data, list):
        raise CatalogError(f"Catalog cache {catalog_path} is not a list")

    sessions: List[CatalogSession] = []
    for item in data:
        try:
            sessions.append(CatalogSession.from_dict(item))
        except (KeyError, TypeError, ValueError, AttributeError):
            logger.warning("Skipping broken catalog entry: %r", item)
    return sessions


# ---------------------------------------------------------------------------
# Lookup & search
# ---------------------------------------------------------------------------


def find_session(sessions: Iterable[CatalogSession], session_id: str) -> Optional[CatalogSession]:
    wanted = str(session_id).strip()
    for s in sessions:
        if s.session_id == wanted:
            return s
    return None


def search_sessions(
    sessions: Iterable[CatalogSession],
    text: str = "",
    section: Optional[str] = None,
    day: Optional[str] = None,
) -> List[CatalogSession]:
    """
    Filter by course code/title substring, exact section name and meeting weekday.
    """
    query = (text or "").strip().lower()
    wanted_day = (day or "").strip().capitalize()

    out: List[CatalogSession] = []
    for s in sessions:
        if query and query not in s.course_code.lower() and query not in s.course_title.lower():
            continue
        if section and s.section_name != section:
            continue
        if wanted_day and wanted_day not in schedule_weekdays(s.schedule):
            continue
        out.append(s)
    return out
