# TaskTime - Query/Filter Engine
# Compiles an EntryFilter into one parameterized SELECT

from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional, TYPE_CHECKING

from sqlalchemy import Select, select
from sqlalchemy.orm import joinedload

from tasktime.models.project import Task
from tasktime.models.time_entry import TimeEntry
from tasktime.schemas import EntryFilter
from tasktime.services.transaction import read

if TYPE_CHECKING:
    from tasktime.services.entry_store import EntryStore


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min)


def with_display_joins(stmt: Select) -> Select:
    """Eagerly load employee, task and the task's project with each entry."""
    return stmt.options(
        joinedload(TimeEntry.employee),
        joinedload(TimeEntry.task).joinedload(Task.project),
    )


def build_entry_query(filters: Optional[EntryFilter] = None) -> Select:
    """
    Build the SELECT for entries matching every set field of filters.

    Date bounds are inclusive calendar days on start_time, expressed as a
    half-open datetime range so the start_time index is usable. Results
    are ordered most recent start first.
    """
    filters = filters or EntryFilter()
    stmt = select(TimeEntry)

    if filters.start_date is not None:
        stmt = stmt.where(TimeEntry.start_time >= _day_start(filters.start_date))

    if filters.end_date is not None:
        next_day = filters.end_date + timedelta(days=1)
        stmt = stmt.where(TimeEntry.start_time < _day_start(next_day))

    if filters.employee_id is not None:
        stmt = stmt.where(TimeEntry.employee_id == filters.employee_id)

    if filters.task_id is not None:
        stmt = stmt.where(TimeEntry.task_id == filters.task_id)

    if filters.project_id is not None:
        stmt = stmt.where(
            TimeEntry.task_id.in_(
                select(Task.task_id).where(Task.project_id == filters.project_id)
            )
        )

    if filters.is_active is not None:
        if filters.is_active:
            stmt = stmt.where(TimeEntry.end_time.is_(None))
        else:
            stmt = stmt.where(TimeEntry.end_time.is_not(None))

    return stmt.order_by(TimeEntry.start_time.desc(), TimeEntry.entry_id)


class EntryQuery:
    """
    Lazy, restartable sequence of entries matching a filter.

    Nothing runs until iteration; each new iteration re-executes the query
    against current data. Storage failures while iterating surface as
    InternalError.

    Usage:
        entries = EntryQuery(EntryStore(db), EntryFilter(employee_id="E1"))
        for entry in entries:
            ...
    """

    def __init__(self, store: "EntryStore", filters: Optional[EntryFilter] = None):
        self.store = store
        self.filters = filters or EntryFilter()

    @property
    def statement(self) -> Select:
        return with_display_joins(build_entry_query(self.filters))

    def __iter__(self) -> Iterator[TimeEntry]:
        with read(self.store.db, "fetch time entries"):
            yield from self.store.query(self.statement)

    def all(self) -> list[TimeEntry]:
        return list(self)
