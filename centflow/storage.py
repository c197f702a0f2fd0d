"""
Persistent storage for the parsed (and possibly edited) event list.

This module manages the file:

    data/processed/events.json

Every parse run replaces the whole list; edits rewrite the whole list.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List

from centflow.model import Event, event_from_dict, event_to_dict


def _default_events_path() -> Path:
    """
    Return the default path of events.json inside the package.

    Using a function instead of a constant makes testing easier,
    because tests can override the path.
    """
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data" / "processed" / "events.json"


def load_events(path: str | Path | None = None) -> List[Event]:
    """
    Load the stored events.

    Returns an empty list if the file does not exist or is invalid;
    single malformed records are skipped.
    """
    events_path = Path(path) if path is not None else _default_events_path()

    # First run: nothing parsed yet
    if not events_path.exists():
        return []

    try:
        data = json.loads(events_path.read_text(encoding="utf-8"))
        records = data.get("events", [])
    except (OSError, json.JSONDecodeError, UnicodeDecodeError, AttributeError):
        return []

    if not isinstance(records, list):
        return []

    out: List[Event] = []
    for rec in records:
        try:
            out.append(event_from_dict(rec))
        except (KeyError, ValueError, TypeError):
            continue
    return out


def save_events(events: Iterable[Event], path: str | Path | None = None) -> None:
    """
    Save events to events.json, creating parent directories if needed.
    """
    events_path = Path(path) if path is not None else _default_events_path()
    events_path.parent.mkdir(parents=True, exist_ok=True)

    payload = {"events": [event_to_dict(ev) for ev in events]}
    events_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
