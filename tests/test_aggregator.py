from __future__ import annotations

import unittest
from datetime import date

from domain import BillingType, TaskEntry
from fixtures import initial_tasks
from services import TimesheetAggregator, WeekRangeCalculator


def _e(task_id, day, hours, name="", billing=BillingType.BILLABLE):
    return TaskEntry(task_id=task_id, work_date=day, worked_hours=hours, name=name or f"Task {task_id}",
                     billing_type=billing)


class TestAggregate(unittest.TestCase):
    def setUp(self) -> None:
        self.window = WeekRangeCalculator().week_window_for(date(2025, 12, 17))
        self.agg = TimesheetAggregator()

    def test_empty_input(self) -> None:
        res = self.agg.aggregate([], self.window)
        self.assertTrue(res.is_empty)
        self.assertEqual(res.rows, [])
        self.assertEqual(res.grand_total, 0)
        self.assertEqual(list(res.column_totals), list(self.window.day_isos))
        self.assertTrue(all(v == 0 for v in res.column_totals.values()))

    def test_groups_by_task_and_date(self) -> None:
        entries = [
            _e(1, "2025-12-15", 2),
            _e(1, "2025-12-15", 1.5),
            _e(1, "2025-12-16", 3),
            _e(2, "2025-12-15", 4),
        ]
        res = self.agg.aggregate(entries, self.window)
        self.assertEqual([r.task_id for r in res.rows], [1, 2])
        cell = res.cell(1, "2025-12-15")
        self.assertEqual(cell.hours, 3.5)
        self.assertEqual(len(cell.entries), 2)
        self.assertEqual(res.row(1).total, 6.5)
        self.assertEqual(res.row(2).total, 4.0)
        self.assertEqual(res.column_totals["2025-12-15"], 7.5)
        self.assertEqual(res.column_totals["2025-12-16"], 3.0)
        self.assertEqual(res.column_totals["2025-12-21"], 0.0)
        self.assertEqual(res.grand_total, 10.5)
        self.assertIsNone(res.cell(2, "2025-12-16"))
        self.assertEqual(res.row(2).hours_on("2025-12-16"), 0.0)

    def test_entries_outside_window_ignored(self) -> None:
        entries = [
            _e(1, "2025-12-14", 5),
            _e(1, "2025-12-15", 1),
            _e(2, "2025-12-22", 8),
            _e(3, "2025-12-21", 2),
        ]
        res = self.agg.aggregate(entries, self.window)
        self.assertEqual([r.task_id for r in res.rows], [1, 3])
        self.assertEqual(res.grand_total, 3.0)

    def test_zero_hour_entry_still_shows_row(self) -> None:
        res = self.agg.aggregate([_e(9, "2025-12-18", 0)], self.window)
        self.assertEqual(len(res.rows), 1)
        self.assertEqual(res.rows[0].total, 0.0)
        self.assertEqual(res.grand_total, 0.0)

    def test_row_metadata_from_first_entry(self) -> None:
        res = self.agg.aggregate([
            _e(4, "2025-12-19", 1, name="QA", billing=BillingType.NON_BILLABLE),
            _e(4, "2025-12-20", 1, name="QA again"),
        ], self.window)
        self.assertEqual(res.rows[0].name, "QA")
        self.assertEqual(res.rows[0].billing_type, BillingType.NON_BILLABLE)

    def test_grand_total_matches_in_window_sum(self) -> None:
        entries = initial_tasks()
        res = self.agg.aggregate(entries, self.window)
        expected = sum(e.worked_hours for e in entries if self.window.contains(e.work_date))
        self.assertAlmostEqual(res.grand_total, expected)
        self.assertAlmostEqual(res.grand_total, 39.75)
        self.assertAlmostEqual(sum(res.column_totals.values()), expected)
        self.assertAlmostEqual(sum(r.total for r in res.rows), expected)
        self.assertEqual(len(res.rows), 16)
        self.assertEqual(res.cell(6, "2025-12-16").hours, 4.0)

    def test_deterministic(self) -> None:
        entries = initial_tasks()
        a = self.agg.aggregate(entries, self.window)
        b = self.agg.aggregate(entries, self.window)
        self.assertEqual([r.task_id for r in a.rows], [r.task_id for r in b.rows])
        self.assertEqual(a.column_totals, b.column_totals)


if __name__ == "__main__":
    unittest.main()
