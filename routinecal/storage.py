"""
Persistent storage for the user's session selection.

This module manages the file:

    <data dir>/selected_sessions.json

The catalog cache (catalog.json) is replaced on every fetch; the selection
file stores the user's choices including their edited fields, so it survives
catalog refreshes.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from routinecal.config import data_dir
from routinecal.selection import SelectionStore


logger = logging.getLogger(__name__)


def _default_selected_path() -> Path:
    """
    Return the default path of selected_sessions.json.

    Using a function instead of a constant makes testing easier,
    because the data directory can be overridden per test.
    """
    return data_dir() / "selected_sessions.json"


def load_selection(path: str | Path | None = None) -> SelectionStore:
    """
    Load the selection from selected_sessions.json.

    Returns an empty store if the file does not exist or is invalid;
    broken entries inside a valid file are skipped.
    """
    selected_path = Path(path) if path is not None else _default_selected_path()

    # First run: nothing selected yet
    if not selected_path.exists():
        return SelectionStore()

    try:
        data = json.loads(selected_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.warning("Ignoring unreadable selection file %s: %s", selected_path, exc)
        return SelectionStore()

    return SelectionStore.from_payload(data)


def save_selection(store: SelectionStore, path: str | Path | None = None) -> None:
    """
    Save the selection to selected_sessions.json, creating parent directories if needed.
    """
    selected_path = Path(path) if path is not None else _default_selected_path()
    selected_path.parent.mkdir(parents=True, exist_ok=True)

    payload = store.to_payload()
    selected_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
