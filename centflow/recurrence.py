"""
Helpers shared by the calendar exporters.

- parse the portal's "hh:mm am/pm" clock strings
- find the first date of a weekly pattern inside its date range
- assign one calendar colour per course (first-seen order, cycling)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, time, timedelta
from typing import Dict, Iterable, Iterator, List, Tuple

from centflow.model import Event


WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

_CLOCK_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([ap])\.?m\.?\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class CalendarColor:
    color_id: str
    name: str
    css: str


# Google Calendar event colours (colorId 1..11) with the closest CSS colour name
CALENDAR_COLORS: List[CalendarColor] = [
    CalendarColor("1", "Lavender", "lavender"),
    CalendarColor("2", "Sage", "darkseagreen"),
    CalendarColor("3", "Grape", "mediumorchid"),
    CalendarColor("4", "Flamingo", "lightcoral"),
    CalendarColor("5", "Banana", "gold"),
    CalendarColor("6", "Tangerine", "orangered"),
    CalendarColor("7", "Peacock", "deepskyblue"),
    CalendarColor("8", "Graphite", "dimgray"),
    CalendarColor("9", "Blueberry", "royalblue"),
    CalendarColor("10", "Basil", "seagreen"),
    CalendarColor("11", "Tomato", "crimson"),
]


def parse_clock(text: str) -> time:
    """
    Convert '09:00 am' / '1:30PM' to a datetime.time.
    Raises ValueError for invalid formats.
    """
    m = _CLOCK_RE.match(text or "")
    if not m:
        raise ValueError(f"Invalid time format: {text!r}")

    hours = int(m.group(1))
    minutes = int(m.group(2))
    if not (1 <= hours <= 12 and 0 <= minutes <= 59):
        raise ValueError(f"Invalid time value: {text!r}")

    # 12 am is midnight, 12 pm is noon
    hours = hours % 12
    if m.group(3).lower() == "p":
        hours += 12
    return time(hours, minutes)


def first_occurrence(start: date, day_name: str) -> date:
    """
    First date on/after start that falls on day_name (e.g. 'Wednesday').
    """
    if day_name not in WEEKDAYS:
        raise ValueError(f"Unknown weekday: {day_name!r}")
    delta = (WEEKDAYS.index(day_name) - start.weekday()) % 7
    return start + timedelta(days=delta)


def iter_occurrences(events: Iterable[Event]) -> Iterator[Tuple[Event, str, date]]:
    """
    Yield (event, day_name, first_date) for every weekday of every event.

    Days that never occur inside the date range (or are not weekday names)
    are skipped.
    """
    for ev in events:
        dr = ev.meeting_time.date_range
        for day in ev.meeting_time.days:
            try:
                first = first_occurrence(dr.start, day)
            except ValueError:
                continue
            if first > dr.end:
                continue
            yield ev, day, first


def assign_colors(
    events: Iterable[Event], palette: List[CalendarColor] = CALENDAR_COLORS
) -> Dict[str, CalendarColor]:
    """
    Map every distinct course_code to a colour, in first-seen order.
    """
    colors: Dict[str, CalendarColor] = {}
    for ev in events:
        if ev.course_code not in colors:
            colors[ev.course_code] = palette[len(colors) % len(palette)]
    return colors
