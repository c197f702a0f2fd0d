"""
Unit tests for local storage of the parsed event list.

Storage contract:
- Missing/invalid file -> empty list
- Malformed single records are skipped
- JSON schema: {"events": [ ... ]}, dates as ISO strings
"""

import json
import tempfile
import unittest
from pathlib import Path

from centflow.storage import load_events, save_events
from tests.test_edit import make_event


class TestStorage(unittest.TestCase):
    def test_load_missing_file_returns_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            self.assertEqual(load_events(Path(d) / "missing.json"), [])

    def test_save_and_load_roundtrip(self) -> None:
        events = [make_event(), make_event(type="Lab", days=("Friday",))]
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "nested" / "events.json"
            save_events(events, p)
            self.assertEqual(load_events(p), events)

            data = json.loads(p.read_text(encoding="utf-8"))
            self.assertEqual(data["events"][0]["meeting_time"]["date_range"], {"start": "2025-01-08", "end": "2025-04-25"})

    def test_corrupt_file_returns_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "events.json"
            p.write_text("{not json", encoding="utf-8")
            self.assertEqual(load_events(p), [])

    def test_malformed_record_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "events.json"
            save_events([make_event()], p)
            data = json.loads(p.read_text(encoding="utf-8"))
            data["events"].append({"course_code": "X 1"})
            p.write_text(json.dumps(data), encoding="utf-8")

            self.assertEqual(len(load_events(p)), 1)


if __name__ == "__main__":
    unittest.main()
