from __future__ import annotations

import unittest
from datetime import date, datetime

from domain import BillingType, InvalidEntryError, Role, SessionContext, TaskEntry, TaskStatus, WeekWindow


class TestTaskEntry(unittest.TestCase):
    def test_normalizes_fields(self) -> None:
        e = TaskEntry(task_id=1, work_date=date(2025, 1, 5), worked_hours="2.5",
                      status="Completed", billing_type="non-billable", assignee_ids=("2",))
        self.assertEqual(e.work_date, "2025-01-05")
        self.assertEqual(e.worked_hours, 2.5)
        self.assertEqual(e.status, TaskStatus.COMPLETED)
        self.assertEqual(e.billing_type, BillingType.NON_BILLABLE)
        self.assertFalse(e.is_billable)
        self.assertEqual(e.assignee_ids, [2])
        self.assertEqual(e.day, date(2025, 1, 5))

    def test_datetime_date_drops_time(self) -> None:
        e = TaskEntry(task_id=1, work_date=datetime(2025, 1, 5, 23, 30), worked_hours=1)
        self.assertEqual(e.work_date, "2025-01-05")

    def test_rejects_invalid_hours(self) -> None:
        for bad in (-0.5, float("nan"), float("inf"), "x", None):
            with self.assertRaises(InvalidEntryError):
                TaskEntry(task_id=1, work_date="2025-01-05", worked_hours=bad)

    def test_rejects_invalid_date(self) -> None:
        for bad in ("2025-13-01", "05/01/2025", "", None):
            with self.assertRaises(InvalidEntryError):
                TaskEntry(task_id=1, work_date=bad, worked_hours=1)

    def test_invalid_entry_error_is_value_error(self) -> None:
        self.assertTrue(issubclass(InvalidEntryError, ValueError))


class TestWeekWindowType(unittest.TestCase):
    def test_rejects_wrong_length(self) -> None:
        d = date(2025, 12, 15)
        with self.assertRaises(ValueError):
            WeekWindow(anchor=d, start_date=d, end_date=d, days=(d,))

    def test_session_context_roles(self) -> None:
        self.assertTrue(SessionContext(1, "A", Role.ADMIN).is_admin)
        self.assertFalse(SessionContext(2, "B", Role.EMPLOYEE).is_admin)


if __name__ == "__main__":
    unittest.main()
