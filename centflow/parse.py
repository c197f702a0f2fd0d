"""
Parsing (pasted schedule text -> Event list).

- Finds every course header ("Intro Programming - COMP 101 - 001")
- Cuts the text into one block per course
- Reads the "Scheduled Meeting Times" table of each block
- Turns EACH usable meeting row into exactly ONE event

Important rules (DO NOT CHANGE):
- 1 meeting row = 1 Event
- "Lab" / "...mail..." headers are page layout noise, never courses
- Never raise on bad input: broken rows are dropped and counted
"""

from __future__ import annotations

import argparse
import re
import sys
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from bs4 import BeautifulSoup

from centflow.model import DateRange, Event, MeetingTime
from centflow.recurrence import parse_clock
from centflow.storage import save_events


# ---------------------------------------------------------------------------
# Patterns & lookup tables
# ---------------------------------------------------------------------------

# <course name> - <SUBJECT NUMBER> - <section>, anchored at line start
HEADER_RE = re.compile(
    r"^(?P<name>[A-Za-z][^\n-]*?)(?=[^\S\n]*-)[^\S\n]*-[^\S\n]*"
    r"(?P<code>[A-Z]+[^\S\n]+\d+)[^\S\n]*-[^\S\n]*(?P<section>\d+)",
    re.MULTILINE,
)

CRN_RE = re.compile(r"CRN:\s*(\d+)")

# Column header of the meeting table, followed by the row data
TABLE_RE = re.compile(
    r"Type\s+Time\s+Days\s+Where\s+Date\s+Range\s+Schedule\s+Type\s+Instructors[^\S\n]*\n"
    r"(?P<rows>[\s\S]+?)(?=\n\n|\Z)"
)

DATE_RE = re.compile(r"^\s*([A-Za-z]{3})[A-Za-z]*\.?\s+(\d{1,2}),\s*(\d{4})\s*$")

DAY_CODES: Dict[str, str] = {
    "M": "Monday",
    "T": "Tuesday",
    "W": "Wednesday",
    "R": "Thursday",
    "F": "Friday",
    "S": "Saturday",
}

MONTHS: Dict[str, int] = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

ROW_FIELDS = 7


# ---------------------------------------------------------------------------
# Intermediate structures
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CourseBlock:
    course_name: str
    course_code: str
    section: str
    crn: str
    text: str


@dataclass(frozen=True)
class MeetingRow:
    type: str
    time: str
    days: str
    location: str
    date_range: str
    schedule_type: str
    instructor: str
    raw: str


@dataclass
class ParseReport:
    """
    Result of one parse run: the events plus what was thrown away.
    """

    events: List[Event] = field(default_factory=list)
    dropped_rows: int = 0
    skipped_headers: int = 0


# ---------------------------------------------------------------------------
# Field decoding
# ---------------------------------------------------------------------------


def parse_days(days_str: str) -> Tuple[str, ...]:
    """
    'MWF' -> ('Monday', 'Wednesday', 'Friday'). Unknown codes pass through.
    """
    return tuple(DAY_CODES.get(ch, ch) for ch in days_str)


def parse_time_range(time_str: str) -> Optional[Tuple[str, str]]:
    """
    '09:00 am - 10:20 am' -> ('09:00 am', '10:20 am'), kept as text.
    """
    if " - " not in time_str:
        return None
    start, end = time_str.split(" - ", 1)
    return start.strip(), end.strip()


def parse_date(date_str: str) -> Optional[date]:
    """
    'Jan 08,2025' -> date(2025, 1, 8). Month names come from a fixed table,
    so the result never depends on the machine's locale.
    """
    m = DATE_RE.match(date_str)
    if not m:
        return None

    month = MONTHS.get(m.group(1).lower())
    if month is None:
        return None

    try:
        return date.fromisoformat(f"{m.group(3)}-{month:02d}-{int(m.group(2)):02d}")
    except ValueError:
        return None


def parse_date_range(date_str: str) -> Optional[DateRange]:
    if " - " not in date_str:
        return None
    start_s, end_s = date_str.split(" - ", 1)
    start = parse_date(start_s)
    end = parse_date(end_s)
    if start is None or end is None or start > end:
        return None
    return DateRange(start=start, end=end)


def clean_instructor(raw: str) -> str:
    """
    'Jane Doe (P)E-mail' -> 'Jane Doe'
    """
    name = re.sub(r"\s*\(P\)", "", raw.strip(), count=1)
    name = re.sub(r"E-mail\s*$", "", name)
    return name.strip()


# ---------------------------------------------------------------------------
# Segmentation & row extraction
# ---------------------------------------------------------------------------


def normalize_text(text: str) -> str:
    # only line endings: row lines must stay verbatim for raw_text
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _is_noise_header(name: str) -> bool:
    lowered = name.strip().lower()
    return lowered == "lab" or "mail" in lowered


def segment_courses(text: str) -> Tuple[List[CourseBlock], int]:
    """
    Cut the text into one block per real course header.

    A block runs from its header to the next blank line after the header,
    but never past the next header. Returns (blocks, skipped_header_count).
    """
    headers = list(HEADER_RE.finditer(text))
    blocks: List[CourseBlock] = []
    skipped = 0

    for i, match in enumerate(headers):
        # collapse non-breaking and repeated spaces
        name = " ".join(match.group("name").split())
        if _is_noise_header(name):
            skipped += 1
            continue

        end = text.find("\n\n", match.end())
        if end == -1:
            end = len(text)
        if i + 1 < len(headers):
            end = min(end, headers[i + 1].start())

        section_text = text[match.start():end]
        crn_match = CRN_RE.search(section_text)

        blocks.append(
            CourseBlock(
                course_name=name,
                course_code=" ".join(match.group("code").split()),
                section=match.group("section"),
                crn=crn_match.group(1) if crn_match else "",
                text=section_text,
            )
        )

    return blocks, skipped


def split_row(line: str) -> MeetingRow:
    """
    Split one table line into its seven cells.

    Single tabs keep empty cells in place; lines that do not have exactly
    seven cells that way fall back to treating runs of tabs as one separator.
    """
    text = line.replace("\u00a0", " ")
    parts = text.split("\t")
    if len(parts) != ROW_FIELDS:
        parts = re.split(r"\t+", text)
    parts = [p.strip() for p in parts]
    parts += [""] * (ROW_FIELDS - len(parts))
    return MeetingRow(*parts[:ROW_FIELDS], raw=line)


def extract_rows(block_text: str) -> Tuple[List[MeetingRow], int]:
    """
    Return the usable meeting rows of one course block and the number of
    table lines that were dropped (no time or no days).
    """
    rows: List[MeetingRow] = []
    dropped = 0

    for table in TABLE_RE.finditer(block_text):
        for line in table.group("rows").split("\n"):
            if not line.strip():
                continue
            row = split_row(line)
            if not row.time or not row.days:
                dropped += 1
                continue
            rows.append(row)

    return rows, dropped


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------


def _times_in_order(start: str, end: str) -> bool:
    try:
        return parse_clock(start) < parse_clock(end)
    except ValueError:
        # Unknown clock format: keep the row, the text is shown for editing
        return True


def build_event(block: CourseBlock, row: MeetingRow) -> Optional[Event]:
    """
    Combine one course block and one of its rows into an Event.
    Returns None when the row cannot be decoded.
    """
    times = parse_time_range(row.time)
    if times is None:
        return None
    start_time, end_time = times
    if not _times_in_order(start_time, end_time):
        return None

    date_range = parse_date_range(row.date_range)
    if date_range is None:
        return None

    return Event(
        course_code=block.course_code,
        course_name=block.course_name,
        crn=block.crn,
        meeting_time=MeetingTime(
            type=row.type,
            start_time=start_time,
            end_time=end_time,
            days=parse_days(row.days),
            location=row.location,
            date_range=date_range,
            instructor=clean_instructor(row.instructor),
        ),
        raw_text=row.raw,
    )


def parse_text(text: str) -> ParseReport:
    """
    Run the whole pipeline. Always returns a report, never raises.
    """
    report = ParseReport()
    blocks, report.skipped_headers = segment_courses(normalize_text(text or ""))

    for block in blocks:
        rows, dropped = extract_rows(block.text)
        report.dropped_rows += dropped
        for row in rows:
            event = build_event(block, row)
            if event is None:
                report.dropped_rows += 1
                continue
            report.events.append(event)

    return report


def extract_events(text: str) -> List[Event]:
    return parse_text(text).events


# ---------------------------------------------------------------------------
# Saved HTML pages
# ---------------------------------------------------------------------------


def _cell_text(tag) -> str:
    # inline markup like "(<abbr>P</abbr>)<a>E-mail</a>" must stay glued together
    return " ".join(tag.get_text().split())


def html_to_text(html: str) -> str:
    """
    Flatten a saved "detailed schedule" page into the pasted-text shape:
    table captions and rows become lines, cells are tab separated and
    every course header starts after a blank line.
    """
    soup = BeautifulSoup(html, "html.parser")
    lines: List[str] = []

    for table in soup.find_all("table"):
        caption = table.find("caption")
        if caption:
            title = _cell_text(caption)
            if HEADER_RE.match(title) and lines:
                lines.append("")
            lines.append(title)

        for row in table.find_all("tr"):
            cells = row.find_all(["th", "td"])
            if not cells:
                continue
            # empty cells keep their column as a single space
            values = [_cell_text(c) or " " for c in cells]
            lines.append("\t".join(values))

    return "\n".join(lines)


def read_schedule(path: Path) -> str:
    """
    Read a pasted-text or saved-HTML schedule file ('-' = stdin).
    """
    if str(path) == "-":
        return sys.stdin.read()
    content = path.read_text(encoding="utf-8", errors="replace")
    if path.suffix.lower() in (".html", ".htm"):
        return html_to_text(content)
    return content


# ---------------------------------------------------------------------------
# CLI connection
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="centflow.parse",
        description="Parse a pasted course schedule into JSON events",
    )
    p.add_argument("input", type=Path, help="Text or .html file ('-' reads stdin)")
    p.add_argument("--out", type=Path, default=None, help="Output events.json (default: package data dir)")
    return p


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    try:
        text = read_schedule(args.input)
    except OSError as e:
        print(f"Cannot read {args.input}: {e}")
        raise SystemExit(1)

    report = parse_text(text)
    save_events(report.events, args.out)

    print(f"Parsed {len(report.events)} events ({report.dropped_rows} rows dropped)")


if __name__ == "__main__":
    main()
