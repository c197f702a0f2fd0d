import unittest
from dataclasses import replace
from datetime import date, time

from centflow.model import DateRange
from centflow.recurrence import CALENDAR_COLORS, assign_colors, first_occurrence, iter_occurrences, parse_clock
from tests.test_edit import make_event


class TestParseClock(unittest.TestCase):
    def test_am_pm(self) -> None:
        self.assertEqual(parse_clock("09:00 am"), time(9, 0))
        self.assertEqual(parse_clock("01:30 pm"), time(13, 30))
        self.assertEqual(parse_clock("1:30PM"), time(13, 30))

    def test_twelve_oclock(self) -> None:
        self.assertEqual(parse_clock("12:00 am"), time(0, 0))
        self.assertEqual(parse_clock("12:15 pm"), time(12, 15))

    def test_invalid(self) -> None:
        for bad in ("", "9 am", "13:00 pm", "10:20", "TBA"):
            with self.subTest(bad=bad):
                with self.assertRaises(ValueError):
                    parse_clock(bad)


class TestFirstOccurrence(unittest.TestCase):
    def test_same_day(self) -> None:
        # 2025-01-08 is a Wednesday
        self.assertEqual(first_occurrence(date(2025, 1, 8), "Wednesday"), date(2025, 1, 8))

    def test_later_in_week(self) -> None:
        self.assertEqual(first_occurrence(date(2025, 1, 8), "Friday"), date(2025, 1, 10))
        self.assertEqual(first_occurrence(date(2025, 1, 8), "Monday"), date(2025, 1, 13))

    def test_unknown_day(self) -> None:
        with self.assertRaises(ValueError):
            first_occurrence(date(2025, 1, 8), "x")


class TestOccurrences(unittest.TestCase):
    def test_one_per_day(self) -> None:
        occ = list(iter_occurrences([make_event()]))
        self.assertEqual([(d, f) for _, d, f in occ], [("Monday", date(2025, 1, 13)), ("Wednesday", date(2025, 1, 8))])

    def test_day_after_range_end_skipped(self) -> None:
        ev = make_event(days=("Friday", "Wednesday"), date_range=DateRange(date(2025, 1, 8), date(2025, 1, 9)))
        self.assertEqual([d for _, d, _ in iter_occurrences([ev])], ["Wednesday"])


class TestColors(unittest.TestCase):
    def test_palette_size(self) -> None:
        self.assertGreaterEqual(len(CALENDAR_COLORS), 11)

    def test_first_seen_order_and_cycling(self) -> None:
        base = make_event()
        codes = ["B 1", "A 1", "B 1"] + [f"X {i}" for i in range(11)]
        events = [replace(base, course_code=c) for c in codes]
        colors = assign_colors(events)

        self.assertEqual(colors["B 1"], CALENDAR_COLORS[0])
        self.assertEqual(colors["A 1"], CALENDAR_COLORS[1])
        # 13 distinct codes: the 12th wraps around to the first colour
        self.assertEqual(colors["X 9"], CALENDAR_COLORS[0])


if __name__ == "__main__":
    unittest.main()
