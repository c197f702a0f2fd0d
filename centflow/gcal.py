"""
Google Calendar export.

Creates a dedicated "Centflow" calendar and adds one weekly-recurring event
per (event, weekday) pair through the Calendar REST API. Calls are made one
after another with a short pause, so large schedules stay below the API's
rate limits.

Authentication is out of scope here: the caller passes an OAuth access token
with the https://www.googleapis.com/auth/calendar scope.
"""

from __future__ import annotations

import time
from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional

import requests

from centflow.model import Event
from centflow.recurrence import CalendarColor, assign_colors, iter_occurrences, parse_clock


API_URL = "https://www.googleapis.com/calendar/v3"
DEFAULT_TIME_ZONE = "America/Toronto"
TOKEN_ENV = "CENTFLOW_GOOGLE_TOKEN"
CALENDAR_SUMMARY = "Centflow"
CALENDAR_DESCRIPTION = "Courses imported via Centflow"


class CalendarExportError(Exception):
    """Export failed. `added` events were already created and stay in place."""

    def __init__(self, message: str, added: int = 0) -> None:
        super().__init__(message)
        self.added = added


class AuthenticationError(CalendarExportError):
    """The access token was missing, expired or lacks the calendar scope."""


class GoogleCalendarClient:
    def __init__(
        self,
        access_token: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
        sleep_seconds: float = 0.2,
    ) -> None:
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            }
        )
        self.timeout = timeout
        self.sleep_seconds = sleep_seconds

    def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            resp = self.session.post(f"{API_URL}{path}", json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise CalendarExportError(f"Network error: {e}") from e

        if resp.status_code in (401, 403):
            raise AuthenticationError(f"Google rejected the access token (HTTP {resp.status_code})")
        try:
            resp.raise_for_status()
        except requests.HTTPError as e:
            raise CalendarExportError(f"Google Calendar API error: {e}") from e

        try:
            return resp.json()
        except ValueError as e:
            raise CalendarExportError(f"Unexpected reply from Google Calendar API: {e}") from e

    def create_calendar(self, summary: str, description: str = "") -> str:
        data = self._post("/calendars", {"summary": summary, "description": description})
        if not isinstance(data, dict) or not data.get("id"):
            raise CalendarExportError("Google Calendar API did not return a calendar id")
        return data["id"]

    def insert_event(self, calendar_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        data = self._post(f"/calendars/{calendar_id}/events", body)
        time.sleep(self.sleep_seconds)
        return data


def _local_iso(day: date, clock: str) -> str:
    return datetime.combine(day, parse_clock(clock)).isoformat(timespec="seconds")


def build_calendar_event(
    event: Event,
    first: date,
    color: CalendarColor,
    time_zone: str = DEFAULT_TIME_ZONE,
) -> Dict[str, Any]:
    """
    Request body for one weekly-recurring event starting on `first`.
    Raises ValueError if the start/end times cannot be parsed.
    """
    mt = event.meeting_time
    until = mt.date_range.end.strftime("%Y%m%d")
    return {
        "summary": f"{event.course_name} ({event.course_code})",
        "location": mt.location,
        "description": f"Type: {mt.type}\nInstructor: {mt.instructor}",
        "start": {"dateTime": _local_iso(first, mt.start_time), "timeZone": time_zone},
        "end": {"dateTime": _local_iso(first, mt.end_time), "timeZone": time_zone},
        "recurrence": [f"RRULE:FREQ=WEEKLY;UNTIL={until}"],
        "colorId": color.color_id,
    }


def export_events_to_google(
    events: Iterable[Event],
    access_token: str = "",
    time_zone: str = DEFAULT_TIME_ZONE,
    client: Optional[GoogleCalendarClient] = None,
) -> int:
    """
    Export events into a new Google calendar. Returns number of created events.

    Events whose times cannot be parsed are skipped. On failure a
    CalendarExportError carries how many events were already added.
    """
    events = list(events)
    if client is None:
        if not access_token:
            raise AuthenticationError("No Google access token given")
        client = GoogleCalendarClient(access_token)

    colors = assign_colors(events)
    calendar_id = client.create_calendar(CALENDAR_SUMMARY, CALENDAR_DESCRIPTION)

    added = 0
    for ev, _day, first in iter_occurrences(events):
        try:
            body = build_calendar_event(ev, first, colors[ev.course_code], time_zone)
        except ValueError:
            continue
        try:
            client.insert_event(calendar_id, body)
        except CalendarExportError as e:
            e.added = added
            raise
        added += 1

    return added
