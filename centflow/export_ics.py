"""
iCalendar (.ics) export.

Every (event, weekday) pair becomes one weekly-recurring VEVENT that starts
on the first matching date of the semester window and stops after its last
day. The file can be imported into:
- Google Calendar
- Outlook
- Apple Calendar
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path
from typing import Iterable

from centflow.model import Event
from centflow.recurrence import assign_colors, iter_occurrences, parse_clock


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _dt_local(day: date, clock: str) -> str:
    """
    Convert date + '09:00 am' to ICS local datetime string 'YYYYMMDDTHHMM00'.
    """
    dt = datetime.combine(day, parse_clock(clock))
    return dt.strftime("%Y%m%dT%H%M00")


def export_events_to_ics(events: Iterable[Event], out_path: str | Path) -> int:
    """
    Export events to an .ics file. Returns number of exported VEVENTs.
    """
    events = list(events)
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    colors = assign_colors(events)

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//Centflow//EN")
    lines.append("CALSCALE:GREGORIAN")
    lines.append("X-WR-CALNAME:Centflow")

    count = 0
    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    for ev, day, first in iter_occurrences(events):
        mt = ev.meeting_time
        try:
            dtstart = _dt_local(first, mt.start_time)
            dtend = _dt_local(first, mt.end_time)
        except ValueError:
            continue

        # UNTIL is inclusive: any start time on the last day still counts
        until = mt.date_range.end.strftime("%Y%m%dT235959")
        uid = f"{ev.course_code.replace(' ', '')}-{ev.crn or 'x'}-{day[:3].lower()}-{dtstart}@centflow"
        summary = f"{ev.course_name} ({ev.course_code})"
        description = f"Type: {mt.type}\nInstructor: {mt.instructor}"

        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:{_ics_escape(uid)}")
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART:{dtstart}")
        lines.append(f"DTEND:{dtend}")
        lines.append(f"RRULE:FREQ=WEEKLY;UNTIL={until}")
        lines.append(f"SUMMARY:{_ics_escape(summary)}")
        if mt.location:
            lines.append(f"LOCATION:{_ics_escape(mt.location)}")
        lines.append(f"DESCRIPTION:{_ics_escape(description)}")
        lines.append(f"COLOR:{colors[ev.course_code].css}")
        lines.append("END:VEVENT")
        count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return count
