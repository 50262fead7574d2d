# repository.py
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from sqlalchemy import Column, JSON
from sqlalchemy.pool import NullPool, StaticPool
from sqlmodel import SQLModel, Field, Session, create_engine, select

from domain import EntryNotFoundError, TaskEntry

logger = logging.getLogger("timesheet.repository")


class TaskEntryDB(SQLModel, table=True):
    entry_id: int | None = Field(default=None, primary_key=True)
    task_id: int = Field(index=True)
    work_date: str = Field(index=True)
    worked_hours: float
    assignee_ids: List[int] = Field(default_factory=list, sa_column=Column(JSON))
    description: str | None = None
    name: str = ""
    project_id: int | None = Field(default=None, index=True)
    project_name: str = ""
    status: str
    billing_type: str


def build_engine(db_url: str, echo: bool = False):
    is_sqlite = db_url.startswith("sqlite")
    kwargs = {
        "echo": echo,
        "pool_pre_ping": True,
        "connect_args": {},
    }
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
        # In-memory: one shared connection, otherwise every session sees an empty DB
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["poolclass"] = NullPool
        kwargs["connect_args"] = {"connect_timeout": 10}
    return create_engine(db_url, **kwargs)


def _to_domain(r: TaskEntryDB) -> TaskEntry:
    return TaskEntry(
        entry_id=r.entry_id,
        task_id=r.task_id,
        work_date=r.work_date,
        worked_hours=r.worked_hours,
        assignee_ids=list(r.assignee_ids or []),
        description=r.description,
        name=r.name,
        project_id=r.project_id,
        project_name=r.project_name,
        status=r.status,
        billing_type=r.billing_type,
    )


def _copy_into(row: TaskEntryDB, e: TaskEntry) -> None:
    row.task_id = e.task_id
    row.work_date = e.work_date
    row.worked_hours = e.worked_hours
    row.assignee_ids = list(e.assignee_ids)
    row.description = e.description
    row.name = e.name
    row.project_id = e.project_id
    row.project_name = e.project_name
    row.status = e.status.value
    row.billing_type = e.billing_type.value


class TaskRepository:
    """Task entry store owned by one session.

    The default URL is a private in-memory SQLite database, so the store
    lives exactly as long as this object.
    """
    def __init__(self, url: str = "sqlite://", echo: bool = False):
        self.url = url
        self.engine = build_engine(url, echo=echo)
        SQLModel.metadata.create_all(self.engine)
        logger.info("Task store ready (%s)", url.split("@")[-1])

    def add(self, e: TaskEntry) -> TaskEntry:
        return self.add_many([e])[0]

    def add_many(self, entries: Iterable[TaskEntry]) -> List[TaskEntry]:
        with Session(self.engine) as session:
            rows = []
            for e in entries:
                row = TaskEntryDB(status=e.status.value, billing_type=e.billing_type.value)
                _copy_into(row, e)
                session.add(row)
                rows.append(row)
            session.commit()
            for row in rows:
                session.refresh(row)
            return [_to_domain(r) for r in rows]

    def seed(self, entries: Iterable[TaskEntry]) -> int:
        added = self.add_many(entries)
        logger.info("Seeded %d task entries", len(added))
        return len(added)

    def get(self, entry_id: int) -> Optional[TaskEntry]:
        with Session(self.engine) as session:
            row = session.get(TaskEntryDB, entry_id)
            return _to_domain(row) if row else None

    def list_all(self) -> List[TaskEntry]:
        with Session(self.engine) as session:
            rows = session.exec(
                select(TaskEntryDB).order_by(TaskEntryDB.work_date, TaskEntryDB.entry_id)
            ).all()
            return [_to_domain(r) for r in rows]

    def list_between(self, start_iso: str, end_iso: str) -> List[TaskEntry]:
        with Session(self.engine) as session:
            rows = session.exec(
                select(TaskEntryDB)
                .where(TaskEntryDB.work_date >= start_iso, TaskEntryDB.work_date <= end_iso)
                .order_by(TaskEntryDB.work_date, TaskEntryDB.entry_id)
            ).all()
            return [_to_domain(r) for r in rows]

    def find_cell(self, task_id: int, work_date: str) -> List[TaskEntry]:
        """Every entry backing the (task, date) cell."""
        with Session(self.engine) as session:
            rows = session.exec(
                select(TaskEntryDB)
                .where(TaskEntryDB.task_id == task_id, TaskEntryDB.work_date == work_date)
                .order_by(TaskEntryDB.entry_id)
            ).all()
            return [_to_domain(r) for r in rows]

    def replace(self, entries: Iterable[TaskEntry]) -> None:
        """Writes updated entries back in a single transaction."""
        entries = list(entries)
        with Session(self.engine) as session:
            for e in entries:
                row = session.get(TaskEntryDB, e.entry_id) if e.entry_id is not None else None
                if row is None:
                    session.rollback()
                    raise EntryNotFoundError(f"No task entry with entry_id={e.entry_id}")
                _copy_into(row, e)
                session.add(row)
            session.commit()


__all__ = ["TaskEntryDB", "TaskRepository", "build_engine"]
