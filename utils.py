# utils.py
from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping

import pandas as pd

from domain import AggregationResult, Person, TaskEntry

EXPORT_COLUMNS = ["Date", "Project", "Task", "Status", "Assignees", "WorkedHours", "BillingType", "Description"]


def hours_to_minutes(hours: float) -> int:
    return int(round(float(hours) * 60))


def format_hours(hours: float) -> str:
    """2.5 -> '2 h 30 min'."""
    minutes = max(0, hours_to_minutes(hours))
    h, m = divmod(minutes, 60)
    if h == 0:
        return f"{m} min"
    if m == 0:
        return f"{h} h"
    return f"{h} h {m} min"


def day_label(d: date | str) -> str:
    """'MON 15 Dec'"""
    if isinstance(d, str):
        d = date.fromisoformat(d)
    return f"{d.strftime('%a').upper()} {d.day:02d} {d.strftime('%b')}"


def week_label(start: date, end: date) -> str:
    return f"{start.strftime('%d %b %Y')} – {end.strftime('%d %b %Y')}"


def assignee_names(ids: Iterable[int], people: Mapping[int, Person]) -> str:
    return ", ".join(people[i].name for i in ids if i in people)


def entries_to_dataframe(entries: Iterable[TaskEntry], people: Mapping[int, Person]) -> pd.DataFrame:
    rows = []
    for e in entries:
        rows.append({
            "Date": e.work_date,
            "Project": e.project_name,
            "Task": e.name,
            "Status": e.status.value,
            "Assignees": assignee_names(e.assignee_ids, people),
            "WorkedHours": f"{e.worked_hours:.2f}",
            "BillingType": e.billing_type.value,
            "Description": e.description or "",
        })
    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    if not df.empty:
        df = df.sort_values(["Date"], kind="stable").reset_index(drop=True)
    return df


def grid_to_dataframe(result: AggregationResult) -> pd.DataFrame:
    """One row per task, one column per day, plus totals."""
    days = list(result.window.day_isos)
    labels = [day_label(d) for d in days]
    data = []
    index = []
    for row in result.rows:
        data.append([row.hours_on(d) for d in days] + [row.total])
        index.append(f"{row.name} ({row.project_name})" if row.project_name else row.name)
    data.append([result.column_totals.get(d, 0.0) for d in days] + [result.grand_total])
    index.append("Total")
    return pd.DataFrame(data, index=pd.Index(index, name="Task"), columns=labels + ["Total"])


def hours_by_project(entries: Iterable[TaskEntry]) -> pd.Series:
    df = pd.DataFrame(
        [{"Project": e.project_name or "(none)", "Hours": e.worked_hours} for e in entries],
        columns=["Project", "Hours"],
    )
    if df.empty:
        return pd.Series(dtype=float, name="Hours")
    return df.groupby("Project")["Hours"].sum().sort_values(ascending=False)


def hours_by_day(result: AggregationResult) -> pd.Series:
    return pd.Series(
        [result.column_totals.get(d, 0.0) for d in result.window.day_isos],
        index=[day_label(d) for d in result.window.day_isos],
        name="Hours",
    )
