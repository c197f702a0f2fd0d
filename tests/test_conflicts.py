"""
Unit tests for conflict detection.

Definition used here:
- A conflict exists if two weekly slots share a weekday, overlap in time
  and run in overlapping semester windows.
- Touching endpoints (end == start) is NOT a conflict.
"""

import unittest
from datetime import date

from centflow.conflicts import find_conflicts
from centflow.model import DateRange
from tests.test_edit import make_event


class TestConflicts(unittest.TestCase):
    def test_overlap_same_day(self) -> None:
        a = make_event(start_time="09:00 am", end_time="10:20 am", days=("Monday", "Wednesday"))
        b = make_event(start_time="10:00 am", end_time="11:00 am", days=("Wednesday",))
        confs = find_conflicts([a, b])
        self.assertEqual(confs, [(a, b, "Wednesday")])

    def test_no_overlap_touching_end(self) -> None:
        a = make_event(start_time="09:00 am", end_time="10:00 am")
        b = make_event(start_time="10:00 am", end_time="11:00 am")
        self.assertEqual(find_conflicts([a, b]), [])

    def test_different_day_no_conflict(self) -> None:
        a = make_event(days=("Monday",))
        b = make_event(days=("Tuesday",))
        self.assertEqual(find_conflicts([a, b]), [])

    def test_disjoint_date_ranges_no_conflict(self) -> None:
        a = make_event(date_range=DateRange(date(2025, 1, 8), date(2025, 2, 28)))
        b = make_event(date_range=DateRange(date(2025, 3, 1), date(2025, 4, 25)))
        self.assertEqual(find_conflicts([a, b]), [])

    def test_unparseable_times_skipped(self) -> None:
        a = make_event(start_time="TBA", end_time="TBA")
        b = make_event()
        self.assertEqual(find_conflicts([a, b]), [])


if __name__ == "__main__":
    unittest.main()
