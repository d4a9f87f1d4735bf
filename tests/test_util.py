"""Tests for time formatting and duration input parsing.

Covers: mt.util
"""

import unittest

from mt.core.units import UnitKind
from mt.util import (
    duration_from_inputs,
    format_countdown,
    format_stopwatch,
    format_unit_time,
    parse_duration_input,
)


class TestFormatting(unittest.TestCase):

    def test_stopwatch_format(self):
        self.assertEqual(format_stopwatch(0), "00:00:00")
        self.assertEqual(format_stopwatch(59), "00:00:59")
        self.assertEqual(format_stopwatch(3661), "01:01:01")

    def test_stopwatch_hours_unbounded(self):
        self.assertEqual(format_stopwatch(100 * 3600 + 5), "100:00:05")

    def test_countdown_format(self):
        self.assertEqual(format_countdown(0), "00:00")
        self.assertEqual(format_countdown(65), "01:05")

    def test_countdown_minutes_past_an_hour(self):
        self.assertEqual(format_countdown(75 * 60), "75:00")

    def test_negative_clamps(self):
        self.assertEqual(format_stopwatch(-4), "00:00:00")
        self.assertEqual(format_countdown(-4), "00:00")

    def test_format_by_kind(self):
        self.assertEqual(format_unit_time(UnitKind.STOPWATCH, 61), "00:01:01")
        self.assertEqual(format_unit_time(UnitKind.COUNTDOWN, 61), "01:01")
        self.assertEqual(format_unit_time("countdown", 61), "01:01")


class TestDurationInput(unittest.TestCase):

    def test_valid_numbers(self):
        self.assertEqual(parse_duration_input("12"), 12)
        self.assertEqual(parse_duration_input(" 7 "), 7)
        self.assertEqual(parse_duration_input(3), 3)

    def test_invalid_input_is_zero(self):
        for bad in ("", "   ", "abc", "1.5", "-3", None):
            with self.subTest(text=bad):
                self.assertEqual(parse_duration_input(bad), 0)

    def test_combined_fields(self):
        self.assertEqual(duration_from_inputs("2", "30"), 150)
        self.assertEqual(duration_from_inputs("x", "30"), 30)
        self.assertEqual(duration_from_inputs("1", "90"), 150)


if __name__ == "__main__":
    unittest.main()
