"""
Project-wide settings.

Constants describe the university and the calendar output. Paths and feed
URLs can be overridden through environment variables; they are read on every
call so tests can point the application at a temporary directory.
"""

from __future__ import annotations

import os
from datetime import timedelta, timezone
from pathlib import Path


PACKAGE_DIR = Path(__file__).resolve().parent

DEFAULT_CONNECT_URL = "https://usis-cdn.eniamza.com/connect.json"
DEFAULT_TITLES_URL = "https://usis-cdn.eniamza.com/usisdump.json"

TIMEZONE_ID = "Asia/Dhaka"
TIMEZONE_NAME = "BST"
UTC_OFFSET = timezone(timedelta(hours=6), TIMEZONE_NAME)

RECURRENCE_COUNT = 15
DEFAULT_REMINDER_MINUTES = 10

EMAIL_DOMAIN = "bracu.ac.bd"
FALLBACK_EMAIL = f"instructor@{EMAIL_DOMAIN}"
CAMPUS_NAME = "BRAC University"
UID_DOMAIN = "routine2calendar.com"
ROOM_PLACEHOLDER = "TBA"

ICS_FILENAME = "BRACU_Schedule.ics"


def data_dir() -> Path:
    """
    Directory holding the cached catalog and the user's selection.
    """
    override = os.environ.get("ROUTINECAL_DATA_DIR", "").strip()
    if override:
        return Path(override)
    return PACKAGE_DIR / "data"


def connect_url() -> str:
    return os.environ.get("ROUTINECAL_CONNECT_URL", "").strip() or DEFAULT_CONNECT_URL


def titles_url() -> str:
    return os.environ.get("ROUTINECAL_TITLES_URL", "").strip() or DEFAULT_TITLES_URL
