"""
Field editing for parsed events.

Edits never change an Event in place: every change builds a new Event
(and a new MeetingTime / DateRange where a nested field changes), so the
caller can simply keep the old value when an edit is rejected.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import List, Sequence

from centflow.model import Event
from centflow.parse import DAY_CODES, parse_date
from centflow.recurrence import WEEKDAYS, parse_clock


class EditError(ValueError):
    """Raised when an edited value is rejected; the prior event stays valid."""


TOP_LEVEL_FIELDS = ("course_name", "course_code", "crn")
MEETING_FIELDS = ("type", "start_time", "end_time", "days", "location", "instructor")
DATE_FIELDS = ("start_date", "end_date")

EDITABLE_FIELDS = TOP_LEVEL_FIELDS + MEETING_FIELDS + DATE_FIELDS

OPTIONAL_FIELDS = ("crn", "location", "instructor")


def _parse_days_text(value: str) -> tuple[str, ...]:
    """
    Accept 'Monday, Wednesday' (any case) or day codes like 'MW'.
    """
    if "," in value or value.strip().lower().capitalize() in WEEKDAYS:
        days = []
        for part in value.split(","):
            name = part.strip().capitalize()
            if not name:
                continue
            if name not in WEEKDAYS:
                raise EditError(f"Unknown weekday: {part.strip()!r}")
            days.append(name)
        return tuple(days)

    code = value.strip().upper()
    unknown = [ch for ch in code if ch not in DAY_CODES]
    if unknown:
        raise EditError(f"Unknown day code(s): {''.join(unknown)!r}")
    return tuple(DAY_CODES[ch] for ch in code)


def _parse_date_text(value: str) -> date:
    """
    Accept ISO 'YYYY-MM-DD' or the portal form 'Jan 08,2025'.
    """
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        pass
    parsed = parse_date(value)
    if parsed is None:
        raise EditError(f"Invalid date: {value!r}")
    return parsed


def _check_times(start: str, end: str, field: str) -> None:
    """
    The edited clock must parse and stay before the other end. An other end
    that is still unparseable (e.g. "TBA") is left for its own edit.
    """
    edited = end if field == "end_time" else start
    try:
        parse_clock(edited)
    except ValueError:
        raise EditError(f"Invalid time: {edited!r} (expected e.g. 09:00 am)") from None

    try:
        start_t, end_t = parse_clock(start), parse_clock(end)
    except ValueError:
        return
    if start_t >= end_t:
        raise EditError("start_time must be before end_time")


def display_value(event: Event, field: str) -> str:
    """
    Current value of a field as editable text.
    """
    mt = event.meeting_time
    if field in TOP_LEVEL_FIELDS:
        return getattr(event, field)
    if field == "days":
        return ", ".join(mt.days)
    if field in MEETING_FIELDS:
        return getattr(mt, field)
    if field == "start_date":
        return mt.date_range.start.isoformat()
    if field == "end_date":
        return mt.date_range.end.isoformat()
    raise EditError(f"Unknown field: {field!r}")


def update_event(event: Event, field: str, value: str) -> Event:
    """
    Return a copy of event with one field replaced.

    Raises EditError for unknown fields, empty required fields and values
    that cannot be decoded.
    """
    if field not in EDITABLE_FIELDS:
        raise EditError(f"Unknown field: {field!r} (choose from {', '.join(EDITABLE_FIELDS)})")

    text = (value or "").strip()
    if not text and field not in OPTIONAL_FIELDS:
        raise EditError(f"{field} must not be empty")

    if field in TOP_LEVEL_FIELDS:
        return replace(event, **{field: text})

    mt = event.meeting_time

    if field == "days":
        days = _parse_days_text(text)
        if not days:
            raise EditError("days must not be empty")
        return replace(event, meeting_time=replace(mt, days=days))

    if field == "start_time":
        _check_times(text, mt.end_time, field)
    elif field == "end_time":
        _check_times(mt.start_time, text, field)

    if field in MEETING_FIELDS:
        return replace(event, meeting_time=replace(mt, **{field: text}))

    new_date = _parse_date_text(text)
    if field == "start_date":
        date_range = replace(mt.date_range, start=new_date)
    else:
        date_range = replace(mt.date_range, end=new_date)
    if date_range.start > date_range.end:
        raise EditError("start_date must not be after end_date")
    return replace(event, meeting_time=replace(mt, date_range=date_range))


def replace_event(events: Sequence[Event], index: int, event: Event) -> List[Event]:
    """
    New list with events[index] swapped for event.
    """
    if not (0 <= index < len(events)):
        raise IndexError(f"No event #{index + 1}")
    out = list(events)
    out[index] = event
    return out
