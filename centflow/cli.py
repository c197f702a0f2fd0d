"""
CLI (Command Line Interface).

This module provides quick terminal commands, e.g.:

    centflow parse schedule.txt
    centflow list
    centflow edit 2 location "Room 204"
    centflow conflicts
    centflow export <file.ics>
    centflow gcal --token <access token>
    centflow interactive

Note:
- The interactive UI lives in centflow/interactive.py
- This CLI is intentionally simple and prints plain text (no rich formatting)
"""

from __future__ import annotations

import argparse
import os
from pathlib import Path

from centflow.conflicts import find_conflicts
from centflow.edit import EDITABLE_FIELDS, EditError, display_value, replace_event, update_event
from centflow.export_ics import export_events_to_ics
from centflow.gcal import DEFAULT_TIME_ZONE, TOKEN_ENV, CalendarExportError, export_events_to_google
from centflow.model import Event
from centflow.parse import parse_text, read_schedule
from centflow.storage import load_events, save_events


def event_line(ev: Event) -> str:
    """
    One-line summary of an event, used by `list` and `conflicts`.
    """
    mt = ev.meeting_time
    days = "/".join(d[:3] for d in mt.days)
    bits = [
        f"{ev.course_code} {ev.course_name}",
        mt.type,
        f"{days} {mt.start_time}-{mt.end_time}",
        f"{mt.date_range.start.isoformat()}..{mt.date_range.end.isoformat()}",
    ]
    if mt.location:
        bits.append(f"@ {mt.location}")
    if mt.instructor:
        bits.append(mt.instructor)
    return " | ".join(b for b in bits if b)


def _cmd_parse(args: argparse.Namespace) -> int:
    """
    Parse a schedule file and replace the stored event list.
    """
    try:
        text = read_schedule(args.input)
    except OSError as e:
        print(f"Cannot read {args.input}: {e}")
        return 1

    report = parse_text(text)
    save_events(report.events, args.events)

    print(f"Parsed {len(report.events)} events ({report.dropped_rows} rows dropped)")
    if not report.events:
        print("No events found. Did you paste the 'Detailed Schedule' page?")
    return 0


def _cmd_list(args: argparse.Namespace, events: list[Event]) -> int:
    if not events:
        print("No events stored. Run: centflow parse <file>")
        return 0
    for i, ev in enumerate(events, start=1):
        print(f"{i:>3}) {event_line(ev)}")
    return 0


def _cmd_edit(args: argparse.Namespace, events: list[Event]) -> int:
    """
    Replace one field of one stored event. Invalid input leaves the file untouched.
    """
    index = args.index - 1
    if not (0 <= index < len(events)):
        print(f"No event #{args.index} (stored: {len(events)})")
        return 1

    old = events[index]
    try:
        new = update_event(old, args.field, args.value)
    except EditError as e:
        print(f"Edit rejected: {e}")
        if args.field in EDITABLE_FIELDS:
            print(f"Kept: {args.field} = {display_value(old, args.field)}")
        return 1

    save_events(replace_event(events, index, new), args.events)
    print(f"Updated #{args.index}: {event_line(new)}")
    return 0


def _cmd_conflicts(args: argparse.Namespace, events: list[Event]) -> int:
    confs = find_conflicts(events)
    if not confs:
        print("No conflicts found.")
        return 0

    print(f"Conflicts found: {len(confs)}")
    for a, b, day in confs:
        print(f"- {day}: {event_line(a)}  <->  {event_line(b)}")
    return 0


def _cmd_export(args: argparse.Namespace, events: list[Event]) -> int:
    """
    Export stored events into an iCalendar (.ics) file.
    """
    if not events:
        print("No events to export.")
        return 0

    out_path = (args.out or "").strip()
    if not out_path:
        print("Please provide output .ics path.")
        return 1

    n = export_events_to_ics(events, out_path)
    print(f"Exported {n} weekly series to: {out_path}")
    return 0


def _cmd_gcal(args: argparse.Namespace, events: list[Event]) -> int:
    """
    Push stored events into a new Google calendar.
    """
    if not events:
        print("No events to export.")
        return 0

    token = (args.token or os.environ.get(TOKEN_ENV, "")).strip()
    if not token:
        print(f"Please provide --token or set {TOKEN_ENV}.")
        return 1

    try:
        n = export_events_to_google(events, token, time_zone=args.time_zone)
    except CalendarExportError as e:
        print(f"Failed to add events to Google Calendar: {e} ({e.added} added before the failure)")
        return 1

    print(f"Successfully added {n} course sessions to your Centflow calendar!")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="centflow", description="Centflow CLI")
    parser.add_argument("--events", type=Path, default=None, help="events.json to use (default: package data dir)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_parse = sub.add_parser("parse", help="Parse a pasted schedule (text or .html)")
    p_parse.add_argument("input", type=Path, help="Schedule file ('-' reads stdin)")

    sub.add_parser("list", help="List parsed events")

    p_edit = sub.add_parser("edit", help="Change one field of one event")
    p_edit.add_argument("index", type=int, help="Event number as shown by `list`")
    p_edit.add_argument("field", type=str, help=f"One of: {', '.join(EDITABLE_FIELDS)}")
    p_edit.add_argument("value", type=str, help="New value")

    sub.add_parser("conflicts", help="Show overlapping weekly slots")

    p_export = sub.add_parser("export", help="Export events to .ics")
    p_export.add_argument("out", type=str, help="Output file path (e.g. out.ics)")

    p_gcal = sub.add_parser("gcal", help="Add events to Google Calendar")
    p_gcal.add_argument("--token", type=str, default=None, help=f"OAuth access token (default: ${TOKEN_ENV})")
    p_gcal.add_argument("--time-zone", type=str, default=DEFAULT_TIME_ZONE, help="IANA time zone of the times")

    sub.add_parser("interactive", help="Interactive menu mode")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "parse":
        raise SystemExit(_cmd_parse(args))

    events = load_events(args.events)

    if args.command == "list":
        raise SystemExit(_cmd_list(args, events))
    if args.command == "edit":
        raise SystemExit(_cmd_edit(args, events))
    if args.command == "conflicts":
        raise SystemExit(_cmd_conflicts(args, events))
    if args.command == "export":
        raise SystemExit(_cmd_export(args, events))
    if args.command == "gcal":
        raise SystemExit(_cmd_gcal(args, events))

    if args.command == "interactive":
        from centflow.interactive import run_interactive

        run_interactive(events_path=args.events)
        raise SystemExit(0)

    raise SystemExit(2)
