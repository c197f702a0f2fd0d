"""Centflow: turn a pasted course timetable into recurring calendar events."""

from pathlib import Path

__version__ = (Path(__file__).resolve().parent / "VERSION").read_text(encoding="utf-8").strip()
