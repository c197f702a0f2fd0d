"""
Tests for the interactive table view.

Pasted names go through rich, so brackets in them must be printed literally.
"""

import io
import unittest
from dataclasses import replace
from unittest import mock

from rich.console import Console

import centflow.interactive as interactive
from tests.test_edit import make_event


class TestFlowView(unittest.TestCase):
    def test_brackets_in_pasted_values_are_literal(self) -> None:
        ev = replace(make_event(instructor="J. Smith [bold]"), course_name="Intro [lab] Programming")
        buf = io.StringIO()
        console = Console(file=buf, width=300, color_system=None)

        with mock.patch.object(interactive, "console", console):
            interactive._flow_view([ev])

        out = buf.getvalue()
        self.assertIn("Intro [lab] Programming", out)
        self.assertIn("J. Smith [bold]", out)


if __name__ == "__main__":
    unittest.main()
