from __future__ import annotations

import io
import unittest
from datetime import date

import pandas as pd

from fixtures import PEOPLE_BY_ID, initial_tasks
from reports import NothingToExportError, export, export_csv, export_filename, export_pdf, export_xlsx
from services import TimesheetAggregator, WeekRangeCalculator
from utils import (
    EXPORT_COLUMNS,
    day_label,
    entries_to_dataframe,
    format_hours,
    grid_to_dataframe,
    hours_by_day,
    hours_by_project,
)


class TestFrames(unittest.TestCase):
    def setUp(self) -> None:
        self.entries = initial_tasks()
        window = WeekRangeCalculator().week_window_for(date(2025, 12, 17))
        self.result = TimesheetAggregator().aggregate(self.entries, window)

    def test_export_rows(self) -> None:
        df = entries_to_dataframe(self.entries, PEOPLE_BY_ID)
        self.assertEqual(list(df.columns), EXPORT_COLUMNS)
        self.assertEqual(len(df), 18)
        first = df.iloc[0]
        self.assertEqual(first["Date"], "2025-12-15")
        self.assertEqual(first["WorkedHours"], "2.00")
        self.assertEqual(first["Assignees"], "Employee One")
        two = df[df["Task"] == "Implement responsive styles"].iloc[0]
        self.assertEqual(two["Assignees"], "Employee One, Employee Two")

    def test_empty_export_rows_keep_columns(self) -> None:
        df = entries_to_dataframe([], PEOPLE_BY_ID)
        self.assertTrue(df.empty)
        self.assertEqual(list(df.columns), EXPORT_COLUMNS)

    def test_grid_frame_has_totals(self) -> None:
        df = grid_to_dataframe(self.result)
        self.assertEqual(list(df.columns)[-1], "Total")
        self.assertEqual(len(df.columns), 8)
        self.assertEqual(len(df), 17)
        self.assertAlmostEqual(df.loc["Total", "Total"], 39.75)
        self.assertAlmostEqual(df["Total"].iloc[:-1].sum(), 39.75)

    def test_chart_series(self) -> None:
        by_day = hours_by_day(self.result)
        self.assertEqual(len(by_day), 7)
        self.assertAlmostEqual(by_day.sum(), 39.75)
        by_project = hours_by_project(self.entries)
        self.assertAlmostEqual(by_project["Website Redesign"], 2 + 3 + 1.5 + 2.75 + 1.25 + 2)
        self.assertTrue(hours_by_project([]).empty)

    def test_labels(self) -> None:
        self.assertEqual(format_hours(2.5), "2 h 30 min")
        self.assertEqual(format_hours(0.25), "15 min")
        self.assertEqual(format_hours(3), "3 h")
        self.assertTrue(day_label("2025-12-15").endswith("15 Dec"))


class TestReports(unittest.TestCase):
    def setUp(self) -> None:
        self.df = entries_to_dataframe(initial_tasks(), PEOPLE_BY_ID)
        self.empty = entries_to_dataframe([], PEOPLE_BY_ID)

    def test_csv(self) -> None:
        data = export_csv(self.df)
        back = pd.read_csv(io.BytesIO(data))
        self.assertEqual(list(back.columns), EXPORT_COLUMNS)
        self.assertEqual(len(back), 18)

    def test_xlsx(self) -> None:
        data = export_xlsx(self.df)
        self.assertTrue(data.startswith(b"PK"))

    def test_pdf(self) -> None:
        data = export_pdf(self.df, "Timesheet 2025-12-15 to 2025-12-21", "Total: 39 h 45 min")
        self.assertTrue(data.startswith(b"%PDF"))

    def test_nothing_to_export(self) -> None:
        for fmt in ("csv", "xlsx", "pdf"):
            with self.assertRaises(NothingToExportError):
                export(self.empty, fmt)

    def test_unknown_format(self) -> None:
        with self.assertRaises(ValueError):
            export(self.df, "odt")

    def test_filename(self) -> None:
        self.assertEqual(export_filename("csv", "2025-12-15", "2025-12-21"), "timesheet_2025-12-15_2025-12-21.csv")


if __name__ == "__main__":
    unittest.main()
