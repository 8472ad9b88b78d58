from __future__ import annotations

import unittest

from makepdf.pipeline.dates import Date, Weekday, iso_weeks_in_year, start_end_week


class DateTests(unittest.TestCase):
    def test_tomorrow_crosses_year(self) -> None:
        tomorrow = Date.parse("2024-12-31").tomorrow()
        self.assertEqual(str(tomorrow), "2025-01-01")

    def test_add_months_clamps_day(self) -> None:
        self.assertEqual(str(Date.parse("2024-01-31").next_month()), "2024-02-29")
        self.assertEqual(str(Date.parse("2024-03-31").last_month()), "2024-02-29")

    def test_week_boundaries(self) -> None:
        date = Date.parse("2024-05-15")  # Wednesday
        self.assertEqual(date.weekday, Weekday.WEDNESDAY)
        self.assertEqual(str(date.beginning_of_week_monday()), "2024-05-13")
        self.assertEqual(str(date.beginning_of_week_sunday()), "2024-05-12")
        self.assertEqual(str(date.end_of_week_sunday()), "2024-05-18")

    def test_weeks_in_month(self) -> None:
        # June 2024 starts on a Saturday and has 30 days.
        june = Date.parse("2024-06-10")
        self.assertEqual(june.weeks_in_month_sunday(), 6)
        self.assertEqual(june.weeks_in_month_monday(), 5)
        self.assertEqual(Date.parse("2026-02-01").weeks_in_month_sunday(), 4)

    def test_start_end_week_clips_to_year(self) -> None:
        start, end = start_end_week(Date.parse("2024-12-31"))
        self.assertEqual(str(start), "2024-12-30")
        self.assertEqual(str(end), "2024-12-31")

    def test_iso_weeks(self) -> None:
        self.assertEqual(iso_weeks_in_year(2024), 52)
        self.assertEqual(iso_weeks_in_year(2020), 53)

    def test_parse_rejects_garbage(self) -> None:
        with self.assertRaises(ValueError):
            Date.parse("31/12/2024")


if __name__ == "__main__":
    unittest.main()
