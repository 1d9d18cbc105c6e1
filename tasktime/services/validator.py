# TaskTime - Entry Validator
# Referential and range checks that run before a write

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from tasktime.errors import InvalidInputError, NotFoundError
from tasktime.models.employee import Employee
from tasktime.models.project import Task
from tasktime.models.time_entry import TimeEntry
from tasktime.services.entry_store import EntryStore


class EntryValidator:
    """
    Checks run inside the command transaction, before the write.

    Foreign keys on time_entries remain the authoritative backstop; these
    checks give callers a precise NotFound instead of a constraint error.
    """

    def __init__(self, db: Session, store: Optional[EntryStore] = None):
        self.db = db
        self.store = store or EntryStore(db)

    def employee_exists(self, employee_id: str) -> None:
        """Verify the employee exists."""
        if not employee_id:
            raise InvalidInputError("Employee ID is required")

        exists = self.db.execute(
            select(Employee.employee_id).where(Employee.employee_id == employee_id)
        ).scalar_one_or_none()

        if not exists:
            raise NotFoundError("employee", employee_id)

    def task_exists(self, task_id: str) -> None:
        """Verify the task exists."""
        if not task_id:
            raise InvalidInputError("Task ID is required")

        exists = self.db.execute(
            select(Task.task_id).where(Task.task_id == task_id)
        ).scalar_one_or_none()

        if not exists:
            raise NotFoundError("task", task_id)

    def entry_exists(self, entry_id: str) -> TimeEntry:
        """Fetch the target entry or raise NotFound."""
        entry = self.store.get_by_id(entry_id)
        if entry is None:
            raise NotFoundError("time entry", entry_id)
        return entry

    def times(self, start_time: datetime, end_time: Optional[datetime]) -> None:
        """An end time, when present, must be strictly after the start."""
        if end_time is not None and end_time <= start_time:
            raise InvalidInputError("End time must be after start time")

    def start_not_in_future(self, start_time: datetime, now: datetime) -> None:
        """An open entry cannot begin after the current time."""
        if start_time > now:
            raise InvalidInputError("Start time cannot be in the future")

    def duration_override(self, duration_minutes: int, end_time: Optional[datetime]) -> None:
        """A duration may only be set on a closed entry and never below zero."""
        if duration_minutes < 0:
            raise InvalidInputError("Duration cannot be negative")
        if end_time is None:
            raise InvalidInputError("Duration can only be set on an entry with an end time")
