from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from centflow.conflicts import find_conflicts
from centflow.edit import EDITABLE_FIELDS, EditError, display_value, replace_event, update_event
from centflow.export_ics import export_events_to_ics
from centflow.gcal import DEFAULT_TIME_ZONE, TOKEN_ENV, CalendarExportError, export_events_to_google
from centflow.model import Event
from centflow.parse import parse_text
from centflow.storage import load_events, save_events


console = Console()

END_MARKER = "END"


def _println(msg: str = "") -> None:
    console.print(msg)


def _prompt(msg: str) -> str:
    return console.input(msg)


def run_interactive(events_path: Optional[Path] = None) -> None:
    """
    Interactive menu loop: paste, review, edit and export.
    """
    events = load_events(events_path)

    while True:
        _println("\n=== Centflow (interactive) ===")
        _println(f"Parsed events: {len(events)}")

        choice = _prompt(
            "\n[1] Paste schedule text\n"
            "[2] View events\n"
            "[3] Edit an event\n"
            "[4] Show conflicts\n"
            "[5] Export .ics\n"
            "[6] Add to Google Calendar\n"
            "[0] Exit\n"
            "Select: "
        ).strip()

        if choice == "0":
            _println("Bye.")
            return

        if choice == "1":
            parsed = _flow_paste()
            if parsed is not None:
                # a new parse replaces the previous list
                events = parsed
                save_events(events, events_path)
                _flow_view(events)
        elif choice == "2":
            _flow_view(events)
        elif choice == "3":
            events = _flow_edit(events)
            save_events(events, events_path)
        elif choice == "4":
            _flow_conflicts(events)
        elif choice == "5":
            _flow_export(events)
        elif choice == "6":
            _flow_gcal(events)
        else:
            _println("Invalid choice.")


def _read_pasted_text() -> str:
    lines: list[str] = []
    while True:
        try:
            line = input()
        except EOFError:
            break
        if line.strip() == END_MARKER:
            break
        lines.append(line)
    return "\n".join(lines)


def _flow_paste() -> Optional[list[Event]]:
    _println(f"Paste your course schedule, then type [bold]{END_MARKER}[/] on its own line (or Ctrl-D):")
    text = _read_pasted_text()
    if not text.strip():
        _println("Nothing pasted.")
        return None

    report = parse_text(text)
    _println(f"Parsed [yellow]{len(report.events)}[/] events ({report.dropped_rows} rows dropped)")
    return report.events


def _flow_view(events: list[Event]) -> None:
    if not events:
        _println("No events. Paste a schedule first.")
        return

    table = Table(title="Parsed events", box=box.SIMPLE)
    for col in ("#", "Course", "Type", "Days", "Time", "Where", "Dates", "Instructor"):
        table.add_column(col, justify="right" if col == "#" else "left")

    for i, ev in enumerate(events, start=1):
        mt = ev.meeting_time
        table.add_row(
            str(i),
            f"[bold cyan]{escape(ev.course_code)}[/] {escape(ev.course_name)}",
            escape(mt.type),
            ", ".join(d[:3] for d in mt.days),
            f"{mt.start_time} - {mt.end_time}",
            escape(mt.location),
            f"{mt.date_range.start.isoformat()} → {mt.date_range.end.isoformat()}",
            f"[magenta]{escape(mt.instructor)}[/]" if mt.instructor else "",
        )
    console.print(table)


def _flow_edit(events: list[Event]) -> list[Event]:
    """
    Edit fields of one event until the user leaves the field prompt blank.
    """
    if not events:
        _println("No events. Paste a schedule first.")
        return events

    pick = _prompt(f"Event number (1-{len(events)}) [blank = back]: ").strip()
    if not pick:
        return events
    if not pick.isdigit() or not (1 <= int(pick) <= len(events)):
        _println("Out of range.")
        return events

    index = int(pick) - 1
    while True:
        current = events[index]
        for i, name in enumerate(EDITABLE_FIELDS, start=1):
            _println(f"{i:>2}) {name}: {escape(display_value(current, name))}")

        choice = _prompt("Field number [blank = done]: ").strip()
        if not choice:
            return events
        if not choice.isdigit() or not (1 <= int(choice) <= len(EDITABLE_FIELDS)):
            _println("Invalid field.")
            continue

        name = EDITABLE_FIELDS[int(choice) - 1]
        value = _prompt(escape(f"New {name} [{display_value(current, name)}]: "))
        try:
            updated = update_event(current, name, value)
        except EditError as e:
            _println(f"[red]{escape(str(e))}[/] – kept {escape(repr(display_value(current, name)))}")
            continue

        events = replace_event(events, index, updated)


def _flow_conflicts(events: list[Event]) -> None:
    confs = find_conflicts(events)
    if not confs:
        _println("No conflicts found.")
        return

    table = Table(title=f"Conflicts ({len(confs)})", box=box.SIMPLE)
    table.add_column("Day")
    table.add_column("A")
    table.add_column("B")
    for a, b, day in confs:
        table.add_row(
            day,
            escape(f"{a.course_code} {a.meeting_time.type} {a.meeting_time.start_time}-{a.meeting_time.end_time}"),
            escape(f"{b.course_code} {b.meeting_time.type} {b.meeting_time.start_time}-{b.meeting_time.end_time}"),
        )
    console.print(table)


def _flow_export(events: list[Event]) -> None:
    if not events:
        _println("No events. Paste a schedule first.")
        return

    # Default to user's Downloads folder (works on Windows/macOS/Linux)
    downloads = Path.home() / "Downloads"
    default_name = "centflow.ics"

    out_in = _prompt(f"Please enter desired file name, default is [{default_name}]: ").strip()
    out_path = downloads / (out_in or default_name)

    if out_path.suffix.lower() != ".ics":
        out_path = out_path.with_suffix(".ics")

    n = export_events_to_ics(events, out_path)
    _println(f"\nExported {n} weekly series.")
    _println(f"Saved to: {escape(str(out_path.resolve()))}")
    _println(
        "\nNext steps:\n"
        "- Google Calendar (desktop): Settings → Import & export → Import → choose this .ics file\n"
        "- Outlook / Apple Calendar: open the .ics file\n"
    )


def _flow_gcal(events: list[Event]) -> None:
    if not events:
        _println("No events. Paste a schedule first.")
        return

    token = os.environ.get(TOKEN_ENV, "").strip()
    if not token:
        token = _prompt("Google access token (calendar scope): ").strip()
    if not token:
        _println("No token given.")
        return

    tz = _prompt(f"Time zone [{DEFAULT_TIME_ZONE}]: ").strip() or DEFAULT_TIME_ZONE

    with console.status("Adding events to Google Calendar..."):
        try:
            n = export_events_to_google(events, token, time_zone=tz)
        except CalendarExportError as e:
            _println(f"[red]Failed to add events to calendar.[/] {escape(str(e))}")
            if e.added:
                _println(f"{e.added} events were added before the failure.")
            return

    _println(f"[green]Successfully added {n} course sessions to your Centflow calendar![/]")
