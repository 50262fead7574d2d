# services.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, List, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

from domain import (
    AggregationResult,
    BillingType,
    HourCell,
    SessionContext,
    TaskEntry,
    TaskStatus,
    TimesheetRow,
    TimesheetSummary,
    WeekWindow,
    parse_iso_date,
)
from repository import TaskRepository

logger = logging.getLogger("timesheet.services")


def today_in(tz_name: str = "UTC") -> date:
    return datetime.now(ZoneInfo(tz_name)).date()


class WeekRangeCalculator:
    """Monday-start week windows and whole-week navigation."""

    def week_window_for(self, anchor: date | datetime | str) -> WeekWindow:
        """Returns the Monday..Sunday window containing anchor. Time of day is ignored."""
        anchor = parse_iso_date(anchor)
        day_index = anchor.isoweekday() % 7  # Sunday = 0 ... Saturday = 6
        diff_to_monday = (day_index + 6) % 7
        monday = anchor - timedelta(days=diff_to_monday)
        days = tuple(monday + timedelta(days=i) for i in range(7))
        return WeekWindow(anchor=anchor, start_date=days[0], end_date=days[6], days=days)

    def shift(self, window: WeekWindow, weeks: int) -> WeekWindow:
        """Moves the anchor by whole weeks (negative goes back)."""
        return self.week_window_for(window.anchor + timedelta(days=7 * int(weeks)))


class TimesheetAggregator:
    """Builds the (task, date) hour matrix of one week with row, column and grand totals."""

    def aggregate(self, entries: Iterable[TaskEntry], window: WeekWindow) -> AggregationResult:
        result = AggregationResult(
            window=window,
            column_totals={d: 0.0 for d in window.day_isos},
        )
        rows: dict[int, TimesheetRow] = {}
        for e in entries:
            if not window.contains(e.work_date):
                continue
            row = rows.get(e.task_id)
            if row is None:
                row = TimesheetRow(
                    task_id=e.task_id,
                    name=e.name,
                    project_name=e.project_name,
                    billing_type=e.billing_type,
                )
                rows[e.task_id] = row
                result.rows.append(row)
            cell = row.cells.get(e.work_date)
            if cell is None:
                cell = HourCell(task_id=e.task_id, work_date=e.work_date)
                row.cells[e.work_date] = cell
            cell.hours += e.worked_hours
            cell.entries.append(e)

        for row in result.rows:
            row.total = sum(c.hours for c in row.cells.values())
            for d, cell in row.cells.items():
                result.column_totals[d] += cell.hours
        result.grand_total = sum(r.total for r in result.rows)
        return result


def coerce_hours(value) -> float:
    """Cell input to hours. Anything that is not a finite non-negative number becomes 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
        if not value:
            return 0.0
    try:
        hours = float(value)
    except (TypeError, ValueError):
        logger.info("Non-numeric hours %r treated as 0", value)
        return 0.0
    if not math.isfinite(hours) or hours < 0:
        logger.info("Invalid hours %r treated as 0", value)
        return 0.0
    return hours


class HourRedistributor:
    """Spreads an edited cell total over the entries backing that cell."""

    def redistribute(
        self,
        backing_entries: Sequence[TaskEntry],
        new_total,
        new_description: Optional[str] = None,
    ) -> List[TaskEntry]:
        """
        Returns new entries whose hours sum to new_total.

        - one entry: it takes the whole total
        - several entries with hours: each is scaled by new_total / prior_total,
          so their relative shares stay the same
        - several entries all at zero: the total is split evenly

        new_description, when given, replaces the description of every entry.
        The input entries are not modified.
        """
        if not backing_entries:
            raise ValueError("redistribute needs at least one backing entry")
        total = coerce_hours(new_total)
        prior_total = sum(e.worked_hours for e in backing_entries)
        n = len(backing_entries)

        if n == 1:
            hours = [total]
            logger.debug("Single entry set to %.4f h", total)
        elif prior_total > 0:
            # share first: no intermediate value exceeds total
            hours = [e.worked_hours / prior_total * total for e in backing_entries]
            logger.debug("Scaled %d entries from %.4f h to %.4f h", n, prior_total, total)
        else:
            hours = [total / n] * n
            logger.debug("Split %.4f h evenly over %d empty entries", total, n)

        out = []
        for e, h in zip(backing_entries, hours):
            changes = {"worked_hours": h, "assignee_ids": list(e.assignee_ids)}
            if new_description is not None:
                changes["description"] = new_description
            out.append(replace(e, **changes))
        return out


# =========================
# Filters and summaries
# =========================
DATE_RANGE_PRESETS = ("today", "this_week", "this_month", "custom")


@dataclass(frozen=True)
class TaskFilter:
    project_id: Optional[int] = None
    employee_id: Optional[int] = None
    exact_date: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return any(v is not None for v in (self.project_id, self.employee_id, self.exact_date))

    def matches(self, e: TaskEntry) -> bool:
        if self.project_id is not None and e.project_id != self.project_id:
            return False
        if self.employee_id is not None and self.employee_id not in e.assignee_ids:
            return False
        if self.exact_date is not None and e.work_date != self.exact_date:
            return False
        return True

    def apply(self, entries: Iterable[TaskEntry]) -> List[TaskEntry]:
        return [e for e in entries if self.matches(e)]


def resolve_date_range(
    preset: str,
    today: date,
    window: WeekWindow,
    custom_start: Optional[str] = None,
    custom_end: Optional[str] = None,
) -> Tuple[str, str]:
    """(start_iso, end_iso) for a date-range preset. Unknown presets use the week."""
    if preset == "today":
        iso = today.isoformat()
        return iso, iso
    if preset == "this_month":
        first = today.replace(day=1)
        nxt = date(today.year + 1, 1, 1) if today.month == 12 else date(today.year, today.month + 1, 1)
        return first.isoformat(), (nxt - timedelta(days=1)).isoformat()
    if preset == "custom" and custom_start and custom_end:
        return parse_iso_date(custom_start).isoformat(), parse_iso_date(custom_end).isoformat()
    return window.start_iso, window.end_iso


def summarize(entries: Iterable[TaskEntry], today: date) -> TimesheetSummary:
    s = TimesheetSummary()
    today_iso = today.isoformat()
    for e in entries:
        s.entry_count += 1
        s.range_hours += e.worked_hours
        if e.work_date == today_iso:
            s.today_hours += e.worked_hours
        if e.billing_type == BillingType.BILLABLE:
            s.billable_hours += e.worked_hours
        else:
            s.non_billable_hours += e.worked_hours
    return s


# =========================
# Session-facing service
# =========================
class TimesheetService:
    """Week grid, cell edits and entry logging over one session's store."""

    def __init__(
        self,
        repository: TaskRepository,
        calculator: Optional[WeekRangeCalculator] = None,
        aggregator: Optional[TimesheetAggregator] = None,
        redistributor: Optional[HourRedistributor] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self.repository = repository
        self.calculator = calculator or WeekRangeCalculator()
        self.aggregator = aggregator or TimesheetAggregator()
        self.redistributor = redistributor or HourRedistributor()
        self.today = today or date.today

    def window(self, offset: int = 0, anchor: date | str | None = None) -> WeekWindow:
        base = self.calculator.week_window_for(anchor if anchor is not None else self.today())
        return self.calculator.shift(base, offset) if offset else base

    @staticmethod
    def _visible(ctx: SessionContext, entries: Iterable[TaskEntry]) -> List[TaskEntry]:
        if ctx.is_admin:
            return list(entries)
        return [e for e in entries if ctx.user_id in e.assignee_ids]

    def visible_entries(self, ctx: SessionContext) -> List[TaskEntry]:
        return self._visible(ctx, self.repository.list_all())

    def range_entries(
        self,
        ctx: SessionContext,
        start_iso: str,
        end_iso: str,
        task_filter: Optional[TaskFilter] = None,
    ) -> List[TaskEntry]:
        entries = self._visible(ctx, self.repository.list_between(start_iso, end_iso))
        return task_filter.apply(entries) if task_filter else entries

    def grid(
        self,
        ctx: SessionContext,
        window: WeekWindow,
        task_filter: Optional[TaskFilter] = None,
        start_iso: Optional[str] = None,
        end_iso: Optional[str] = None,
    ) -> AggregationResult:
        """Week grid. start_iso/end_iso further narrow the week to a selected date range."""
        start = max(window.start_iso, start_iso) if start_iso else window.start_iso
        end = min(window.end_iso, end_iso) if end_iso else window.end_iso
        entries = self.range_entries(ctx, start, end, task_filter) if start <= end else []
        return self.aggregator.aggregate(entries, window)

    def edit_cell(
        self,
        ctx: SessionContext,
        task_id: int,
        work_date: str | date,
        hours_input,
        description: Optional[str] = None,
    ) -> List[TaskEntry]:
        """Sets the visible total of one (task, date) cell. Returns the rewritten entries."""
        work_date = parse_iso_date(work_date).isoformat()
        backing = self._visible(ctx, self.repository.find_cell(task_id, work_date))
        if not backing:
            logger.warning("Edit of task %s on %s discarded: no entries back this cell", task_id, work_date)
            return []
        desc = description.strip() if description else ""
        updated = self.redistributor.redistribute(backing, hours_input, desc or None)
        self.repository.replace(updated)
        logger.info(
            "%s set task %s on %s to %.2f h over %d entries",
            ctx.name, task_id, work_date, sum(e.worked_hours for e in updated), len(updated),
        )
        return updated

    def log_hours(
        self,
        ctx: SessionContext,
        task_id: int,
        work_date: str | date,
        hours: float,
        name: str = "",
        project_id: Optional[int] = None,
        project_name: str = "",
        assignee_ids: Optional[Iterable[int]] = None,
        description: Optional[str] = None,
        status: TaskStatus = TaskStatus.IN_PROGRESS,
        billing_type: BillingType = BillingType.BILLABLE,
    ) -> TaskEntry:
        """Creates a new entry. Raises InvalidEntryError on negative hours or a bad date."""
        assignees = list(assignee_ids) if assignee_ids is not None else [ctx.user_id]
        entry = TaskEntry(
            task_id=task_id,
            work_date=work_date,
            worked_hours=hours,
            assignee_ids=assignees,
            description=(description or "").strip() or None,
            name=name,
            project_id=project_id,
            project_name=project_name,
            status=status,
            billing_type=billing_type,
        )
        stored = self.repository.add(entry)
        logger.info("%s logged %.2f h on task %s (%s)", ctx.name, stored.worked_hours, task_id, stored.work_date)
        return stored
