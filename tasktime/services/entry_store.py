# TaskTime - Entry Store
# Data access for time entries; no business rules live here

from typing import Iterator, Optional
import uuid

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from tasktime.models.time_entry import TimeEntry
from tasktime.services.query import with_display_joins


# Fields callers may change through update(); ids and references are immutable
UPDATABLE_FIELDS = {"start_time", "end_time", "duration_minutes"}


class EntryStore:
    """
    CRUD for TimeEntry rows plus joined reads for display fields.

    Lookups that miss return None; turning that into an error is the
    validator's job. Writes are flushed, never committed: the command
    executor owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def insert(self, entry: TimeEntry) -> TimeEntry:
        """Add a new entry, assigning an id if it has none, and flush it."""
        if not entry.entry_id:
            entry.entry_id = str(uuid.uuid4())
        self.db.add(entry)
        self.db.flush()
        return entry

    def get_by_id(self, entry_id: str) -> Optional[TimeEntry]:
        """Fetch one entry with its employee/task/project, refreshed from the database."""
        stmt = (
            with_display_joins(select(TimeEntry))
            .where(TimeEntry.entry_id == entry_id)
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).unique().scalar_one_or_none()

    def update(self, entry: TimeEntry, **fields) -> TimeEntry:
        """Apply a partial update and flush it."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise TypeError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        for name, value in fields.items():
            setattr(entry, name, value)
        self.db.flush()
        return entry

    def delete(self, entry: TimeEntry) -> bool:
        """Hard-delete an entry."""
        self.db.delete(entry)
        self.db.flush()
        return True

    def list_open_for_employee(self, employee_id: str, limit: Optional[int] = 1) -> list[TimeEntry]:
        """
        Open entries for an employee, most recent start first.

        The default limit of 1 is the active session; pass a larger limit to
        detect a store holding more than one.
        """
        stmt = (
            with_display_joins(select(TimeEntry))
            .where(
                TimeEntry.employee_id == employee_id,
                TimeEntry.end_time.is_(None),
            )
            .order_by(TimeEntry.start_time.desc())
            .execution_options(populate_existing=True)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).unique().scalars())

    def query(self, stmt: Select) -> Iterator[TimeEntry]:
        """Run a SELECT built by the query engine, yielding entries."""
        result = self.db.execute(stmt.execution_options(populate_existing=True))
        yield from result.unique().scalars()
