# domain.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional, Tuple


class InvalidEntryError(ValueError):
    """A task entry was created with hours or a date the store cannot hold."""


class EntryNotFoundError(LookupError):
    """The store does not hold an entry with the given entry_id."""


class Role(str, Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"


class TaskStatus(str, Enum):
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class BillingType(str, Enum):
    BILLABLE = "billable"
    NON_BILLABLE = "non-billable"


def parse_iso_date(value: str | date) -> date:
    """Accepts a date or a zero-padded YYYY-MM-DD string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise InvalidEntryError(f"Not an ISO date (YYYY-MM-DD): {value!r}")


@dataclass
class TaskEntry:
    """One logged record of hours on a task for a single day.

    task_id is the logical task and is shared by every entry logged against
    that task; entry_id is the row key assigned by the store.
    """
    task_id: int
    work_date: str
    worked_hours: float
    assignee_ids: List[int] = field(default_factory=list)
    description: Optional[str] = None
    name: str = ""
    project_id: Optional[int] = None
    project_name: str = ""
    status: TaskStatus = TaskStatus.NOT_STARTED
    billing_type: BillingType = BillingType.BILLABLE
    entry_id: Optional[int] = None

    def __post_init__(self) -> None:
        self.work_date = parse_iso_date(self.work_date).isoformat()
        try:
            hours = float(self.worked_hours)
        except (TypeError, ValueError):
            raise InvalidEntryError(f"worked_hours must be a number, got {self.worked_hours!r}")
        if not math.isfinite(hours) or hours < 0:
            raise InvalidEntryError(f"worked_hours must be a non-negative number, got {hours}")
        self.worked_hours = hours
        self.assignee_ids = [int(a) for a in self.assignee_ids]
        self.status = TaskStatus(self.status)
        self.billing_type = BillingType(self.billing_type)

    @property
    def day(self) -> date:
        return date.fromisoformat(self.work_date)

    @property
    def is_billable(self) -> bool:
        return self.billing_type == BillingType.BILLABLE


@dataclass(frozen=True)
class WeekWindow:
    """Monday-to-Sunday span containing `anchor`."""
    anchor: date
    start_date: date
    end_date: date
    days: Tuple[date, ...]

    @property
    def start_iso(self) -> str:
        return self.start_date.isoformat()

    @property
    def end_iso(self) -> str:
        return self.end_date.isoformat()

    @property
    def day_isos(self) -> Tuple[str, ...]:
        return tuple(d.isoformat() for d in self.days)

    def contains(self, work_date: str | date) -> bool:
        iso = work_date.isoformat() if isinstance(work_date, date) else work_date
        return self.start_iso <= iso <= self.end_iso

    def __post_init__(self) -> None:
        if len(self.days) != 7 or self.end_date - self.start_date != timedelta(days=6):
            raise ValueError("A week window spans exactly seven days")


@dataclass
class HourCell:
    task_id: int
    work_date: str
    hours: float = 0.0
    entries: List[TaskEntry] = field(default_factory=list)


@dataclass
class TimesheetRow:
    """All cells of one task within a week."""
    task_id: int
    name: str
    project_name: str
    billing_type: BillingType
    cells: Dict[str, HourCell] = field(default_factory=dict)
    total: float = 0.0

    def hours_on(self, work_date: str) -> float:
        cell = self.cells.get(work_date)
        return cell.hours if cell else 0.0


@dataclass
class AggregationResult:
    window: WeekWindow
    rows: List[TimesheetRow] = field(default_factory=list)
    column_totals: Dict[str, float] = field(default_factory=dict)
    grand_total: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def row(self, task_id: int) -> Optional[TimesheetRow]:
        for r in self.rows:
            if r.task_id == task_id:
                return r
        return None

    def cell(self, task_id: int, work_date: str) -> Optional[HourCell]:
        r = self.row(task_id)
        return r.cells.get(work_date) if r else None


@dataclass(frozen=True)
class SessionContext:
    """Who is using the session. Passed into every service call."""
    user_id: int
    name: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class Person:
    id: int
    name: str
    email: str
    role: Role


@dataclass(frozen=True)
class Project:
    id: int
    name: str
    code: str
    client_id: int
    client_name: str
    team_member_ids: Tuple[int, ...] = ()
    status: str = "Active"


@dataclass
class TimesheetSummary:
    today_hours: float = 0.0
    range_hours: float = 0.0
    billable_hours: float = 0.0
    non_billable_hours: float = 0.0
    entry_count: int = 0
