"""
Central data model definitions used across the project.

Every parsed meeting slot is an Event. Events are frozen dataclasses so that
edits always produce a new value instead of changing one in place:
- the parser creates them
- edit.py replaces them (never mutates)
- the exporters only read them
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class DateRange:
    """
    Semester window over which a weekly pattern recurs (both ends inclusive).
    """

    start: date
    end: date


@dataclass(frozen=True)
class MeetingTime:
    """
    One weekly schedule pattern, e.g. "Lecture, 09:00 am - 10:20 am, MW".
    """

    type: str
    start_time: str
    end_time: str
    days: Tuple[str, ...]
    location: str
    date_range: DateRange
    instructor: str


@dataclass(frozen=True)
class Event:
    """
    Represents one weekly recurring meeting slot of one course section.

    Each Event corresponds to exactly one meeting row of the pasted schedule.
    """

    course_code: str
    course_name: str
    meeting_time: MeetingTime
    raw_text: str
    crn: str = ""


def event_to_dict(event: Event) -> Dict[str, Any]:
    """
    Convert an Event into a JSON-safe dict (dates as ISO strings).
    """
    mt = event.meeting_time
    return {
        "course_code": event.course_code,
        "course_name": event.course_name,
        "crn": event.crn,
        "meeting_time": {
            "type": mt.type,
            "start_time": mt.start_time,
            "end_time": mt.end_time,
            "days": list(mt.days),
            "location": mt.location,
            "date_range": {
                "start": mt.date_range.start.isoformat(),
                "end": mt.date_range.end.isoformat(),
            },
            "instructor": mt.instructor,
        },
        "raw_text": event.raw_text,
    }


def event_from_dict(data: Dict[str, Any]) -> Event:
    """
    Build an Event from the dict produced by event_to_dict().

    Raises KeyError / ValueError / TypeError for malformed input.
    """
    mt = data["meeting_time"]
    dr = mt["date_range"]
    return Event(
        course_code=str(data["course_code"]),
        course_name=str(data["course_name"]),
        crn=str(data.get("crn") or ""),
        meeting_time=MeetingTime(
            type=str(mt["type"]),
            start_time=str(mt["start_time"]),
            end_time=str(mt["end_time"]),
            days=tuple(str(d) for d in mt["days"]),
            location=str(mt.get("location") or ""),
            date_range=DateRange(
                start=date.fromisoformat(dr["start"]),
                end=date.fromisoformat(dr["end"]),
            ),
            instructor=str(mt.get("instructor") or ""),
        ),
        raw_text=str(data.get("raw_text") or ""),
    )
