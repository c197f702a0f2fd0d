import tempfile
import unittest
from datetime import date
from pathlib import Path

from centflow.export_ics import export_events_to_ics
from centflow.model import DateRange
from centflow.parse import extract_events
from tests.test_edit import make_event


SAMPLE = (Path(__file__).resolve().parent / "sample_schedule.txt").read_text(encoding="utf-8")


class TestExportICS(unittest.TestCase):
    def test_export_creates_weekly_series(self) -> None:
        events = extract_events(SAMPLE)

        with tempfile.TemporaryDirectory() as d:
            out = Path(d) / "out.ics"
            n = export_events_to_ics(events, out)
            # MW lecture + F lab + TR lecture
            self.assertEqual(n, 5)

            text = out.read_text(encoding="utf-8")
            self.assertIn("BEGIN:VCALENDAR", text)
            self.assertEqual(text.count("BEGIN:VEVENT"), 5)
            self.assertIn("SUMMARY:Intro Programming (COMP 101)", text)
            self.assertIn("DTSTART:20250113T090000", text)
            self.assertIn("DTEND:20250113T102000", text)
            self.assertIn("DTSTART:20250110T130000", text)
            self.assertIn("RRULE:FREQ=WEEKLY;UNTIL=20250425T235959", text)
            self.assertIn("LOCATION:Room 1", text)
            self.assertIn("DESCRIPTION:Type: Lecture\\nInstructor: J. Smith", text)
            self.assertIn("COLOR:lavender", text)
            self.assertIn("COLOR:darkseagreen", text)

    def test_day_never_in_range_not_exported(self) -> None:
        ev = make_event(days=("Friday",), date_range=DateRange(date(2025, 1, 8), date(2025, 1, 9)))
        with tempfile.TemporaryDirectory() as d:
            out = Path(d) / "out.ics"
            self.assertEqual(export_events_to_ics([ev], out), 0)
            self.assertNotIn("BEGIN:VEVENT", out.read_text(encoding="utf-8"))

    def test_unparseable_time_skipped(self) -> None:
        ev = make_event(start_time="TBA", end_time="TBA")
        with tempfile.TemporaryDirectory() as d:
            self.assertEqual(export_events_to_ics([ev], Path(d) / "out.ics"), 0)


if __name__ == "__main__":
    unittest.main()
