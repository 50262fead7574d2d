from __future__ import annotations

import unittest
from datetime import date

from fixtures import initial_tasks
from services import TaskFilter, WeekRangeCalculator, resolve_date_range, summarize


class TestTaskFilter(unittest.TestCase):
    def test_inactive_filter_keeps_all(self) -> None:
        entries = initial_tasks()
        f = TaskFilter()
        self.assertFalse(f.is_active)
        self.assertEqual(len(f.apply(entries)), len(entries))

    def test_combined_criteria(self) -> None:
        f = TaskFilter(project_id=1, employee_id=2, exact_date="2025-12-16")
        self.assertTrue(f.is_active)
        self.assertEqual([e.task_id for e in f.apply(initial_tasks())], [2])

    def test_employee_filter(self) -> None:
        got = TaskFilter(employee_id=4).apply(initial_tasks())
        self.assertEqual(sorted(e.task_id for e in got), [4, 8, 9, 13])


class TestDateRange(unittest.TestCase):
    def setUp(self) -> None:
        self.today = date(2025, 12, 17)
        self.window = WeekRangeCalculator().week_window_for(date(2025, 12, 3))

    def test_presets(self) -> None:
        self.assertEqual(resolve_date_range("today", self.today, self.window), ("2025-12-17", "2025-12-17"))
        self.assertEqual(resolve_date_range("this_month", self.today, self.window), ("2025-12-01", "2025-12-31"))
        self.assertEqual(resolve_date_range("this_week", self.today, self.window), ("2025-12-01", "2025-12-07"))
        self.assertEqual(
            resolve_date_range("custom", self.today, self.window, "2025-11-01", "2025-11-15"),
            ("2025-11-01", "2025-11-15"),
        )

    def test_custom_without_bounds_falls_back_to_week(self) -> None:
        self.assertEqual(resolve_date_range("custom", self.today, self.window, "2025-11-01", None),
                         ("2025-12-01", "2025-12-07"))

    def test_february_month_end(self) -> None:
        self.assertEqual(resolve_date_range("this_month", date(2024, 2, 10), self.window),
                         ("2024-02-01", "2024-02-29"))


class TestSummary(unittest.TestCase):
    def test_summary_of_fixture_week(self) -> None:
        s = summarize(initial_tasks(), date(2025, 12, 16))
        self.assertEqual(s.entry_count, 18)
        self.assertAlmostEqual(s.range_hours, 39.75)
        self.assertAlmostEqual(s.today_hours, 3 + 2.5 + 3.25 + 1.5)
        self.assertAlmostEqual(s.billable_hours + s.non_billable_hours, s.range_hours)
        self.assertAlmostEqual(s.non_billable_hours, 1.5 + 1 + 1.5 + 2 + 2 + 2)

    def test_empty(self) -> None:
        s = summarize([], date(2025, 12, 16))
        self.assertEqual((s.entry_count, s.range_hours, s.today_hours), (0, 0.0, 0.0))


if __name__ == "__main__":
    unittest.main()
