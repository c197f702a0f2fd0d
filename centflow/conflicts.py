"""
Conflict detection.

Given weekly meeting slots, detect overlaps on the same weekday.
Overlap rule:
    start < other_end AND end > other_start
and the two semester date ranges must overlap as well.
"""

from __future__ import annotations

from datetime import time
from typing import List, Tuple

from centflow.model import DateRange, Event
from centflow.recurrence import parse_clock


def _overlaps(a_start: time, a_end: time, b_start: time, b_end: time) -> bool:
    # touching endpoints are not a conflict
    return a_start < b_end and a_end > b_start


def _ranges_overlap(a: DateRange, b: DateRange) -> bool:
    return a.start <= b.end and b.start <= a.end


def find_conflicts(events: List[Event]) -> List[Tuple[Event, Event, str]]:
    """
    Find overlapping slot pairs (A, B, weekday), each pair once per weekday (i<j).
    """
    conflicts: List[Tuple[Event, Event, str]] = []

    # Pre-parse times; unparseable slots are skipped
    parsed: List[Tuple[time, time, Event]] = []
    for ev in events:
        try:
            start = parse_clock(ev.meeting_time.start_time)
            end = parse_clock(ev.meeting_time.end_time)
        except ValueError:
            continue
        if end <= start:
            continue
        parsed.append((start, end, ev))

    for i in range(len(parsed)):
        s1, e1, ev1 = parsed[i]
        for j in range(i + 1, len(parsed)):
            s2, e2, ev2 = parsed[j]
            if not _overlaps(s1, e1, s2, e2):
                continue
            if not _ranges_overlap(ev1.meeting_time.date_range, ev2.meeting_time.date_range):
                continue
            shared = [d for d in dict.fromkeys(ev1.meeting_time.days) if d in ev2.meeting_time.days]
            for day in shared:
                conflicts.append((ev1, ev2, day))

    return conflicts
