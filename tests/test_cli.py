"""
Tests for CLI entry points.

Every test points --events at a temporary file so that the real
events.json inside the package is never touched.
"""

import contextlib
import io
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from centflow.cli import main
from centflow.storage import load_events


SAMPLE_PATH = Path(__file__).resolve().parent / "sample_schedule.txt"


def run(*argv: str) -> tuple[int, str]:
    buf = io.StringIO()
    with contextlib.redirect_stdout(buf):
        try:
            main(list(argv))
        except SystemExit as e:
            return e.code, buf.getvalue()
    return 0, buf.getvalue()


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.events_path = str(Path(self._tmp.name) / "events.json")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_parse_and_list(self) -> None:
        code, out = run("--events", self.events_path, "parse", str(SAMPLE_PATH))
        self.assertEqual(code, 0)
        self.assertIn("Parsed 3 events (1 rows dropped)", out)
        self.assertEqual(len(load_events(self.events_path)), 3)

        code, out = run("--events", self.events_path, "list")
        self.assertEqual(code, 0)
        self.assertIn("COMP 230 Database Design", out)

    def test_parse_missing_file(self) -> None:
        code, _ = run("--events", self.events_path, "parse", str(Path(self._tmp.name) / "nope.txt"))
        self.assertEqual(code, 1)

    def test_edit_success_and_rejection(self) -> None:
        run("--events", self.events_path, "parse", str(SAMPLE_PATH))

        code, _ = run("--events", self.events_path, "edit", "1", "location", "Room 9")
        self.assertEqual(code, 0)
        self.assertEqual(load_events(self.events_path)[0].meeting_time.location, "Room 9")

        code, out = run("--events", self.events_path, "edit", "1", "course_name", " ")
        self.assertNotEqual(code, 0)
        self.assertIn("Kept: course_name = Intro Programming", out)
        self.assertEqual(load_events(self.events_path)[0].course_name, "Intro Programming")

    def test_edit_out_of_range(self) -> None:
        run("--events", self.events_path, "parse", str(SAMPLE_PATH))
        code, _ = run("--events", self.events_path, "edit", "99", "location", "x")
        self.assertEqual(code, 1)

    def test_export(self) -> None:
        run("--events", self.events_path, "parse", str(SAMPLE_PATH))
        out_file = Path(self._tmp.name) / "out.ics"

        code, out = run("--events", self.events_path, "export", str(out_file))
        self.assertEqual(code, 0)
        self.assertIn("Exported 5 weekly series", out)
        self.assertTrue(out_file.exists())

    def test_gcal_requires_token(self) -> None:
        run("--events", self.events_path, "parse", str(SAMPLE_PATH))
        with mock.patch.dict("os.environ", {"CENTFLOW_GOOGLE_TOKEN": ""}):
            code, out = run("--events", self.events_path, "gcal")
        self.assertEqual(code, 1)
        self.assertIn("--token", out)

    def test_conflicts_none(self) -> None:
        run("--events", self.events_path, "parse", str(SAMPLE_PATH))
        code, out = run("--events", self.events_path, "conflicts")
        self.assertEqual(code, 0)
        self.assertIn("No conflicts found.", out)


if __name__ == "__main__":
    unittest.main()
