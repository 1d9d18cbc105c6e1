# TaskTime - Active-Session Guard
# Keeps at most one open time entry per employee

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError

from tasktime.errors import ConflictError
from tasktime.models.time_entry import OPEN_ENTRY_INDEX, TimeEntry
from tasktime.services.duration import compute_minutes
from tasktime.services.entry_store import EntryStore
from tasktime.utils.time import utcnow


logger = logging.getLogger(__name__)


@dataclass
class StopOutcome:
    """Result of stopping an employee's active session."""

    stopped: bool
    entry: Optional[TimeEntry] = None


def is_open_entry_violation(exc: IntegrityError) -> bool:
    """
    True if the integrity error came from the one-open-entry index.

    SQL Server and PostgreSQL name the index in the message; SQLite only
    reports a UNIQUE failure, and time_entries has no other unique
    constraint besides its generated primary key.
    """
    message = str(exc.orig).lower()
    if OPEN_ENTRY_INDEX in message:
        return True
    return "unique" in message and "time_entries" in message and "entry_id" not in message


class ActiveSessionGuard:
    """
    Finds, opens and closes an employee's active session.

    The database's partial unique index on (employee_id) WHERE end_time IS
    NULL is what actually prevents two open entries; the lookup in start()
    only produces a friendlier error in the common, non-racing case. A
    concurrent start that slips past the lookup fails on flush and is
    reported as ConflictError.
    """

    def __init__(
        self,
        store: EntryStore,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.clock = clock

    def get_active(self, employee_id: str) -> Optional[TimeEntry]:
        """The employee's open entry with task/project context, or None."""
        open_entries = self.store.list_open_for_employee(employee_id)
        return open_entries[0] if open_entries else None

    def start(
        self,
        employee_id: str,
        task_id: str,
        start_time: Optional[datetime] = None,
    ) -> TimeEntry:
        """
        Open a new entry for the employee.

        Raises:
            ConflictError: If the employee already has an open entry
        """
        active = self.get_active(employee_id)
        if active is not None:
            raise ConflictError(
                f"Employee {employee_id} already has an active time entry ({active.entry_id})"
            )

        entry = TimeEntry(
            employee_id=employee_id,
            task_id=task_id,
            start_time=start_time or self.clock(),
            end_time=None,
            duration_minutes=None,
        )

        try:
            self.store.insert(entry)
        except IntegrityError as exc:
            if is_open_entry_violation(exc):
                logger.warning(
                    "Concurrent start rejected for employee %s", employee_id
                )
                raise ConflictError(
                    f"Employee {employee_id} already has an active time entry"
                ) from exc
            raise

        logger.info(
            "Started time entry %s for employee %s on task %s",
            entry.entry_id, employee_id, task_id,
        )
        return entry

    def stop(self, employee_id: str) -> StopOutcome:
        """
        Close the employee's open entry at the current time.

        Having nothing to stop is a normal outcome, not an error. Finding
        more than one open entry means the uniqueness guarantee was lost on
        this store, and is raised as ConflictError instead of silently
        closing one of them.
        """
        open_entries = self.store.list_open_for_employee(employee_id, limit=2)
        if not open_entries:
            return StopOutcome(stopped=False)

        if len(open_entries) > 1:
            logger.error(
                "Employee %s has %d open time entries", employee_id, len(open_entries)
            )
            raise ConflictError(
                f"Employee {employee_id} has more than one active time entry"
            )

        entry = open_entries[0]
        end_time = self.clock()
        if end_time <= entry.start_time:
            # end_time must be strictly after start_time
            raise ConflictError(
                f"Active time entry {entry.entry_id} does not start before the current time"
            )

        self.store.update(
            entry,
            end_time=end_time,
            duration_minutes=compute_minutes(entry.start_time, end_time),
        )

        logger.info(
            "Stopped time entry %s for employee %s after %s minutes",
            entry.entry_id, employee_id, entry.duration_minutes,
        )
        return StopOutcome(stopped=True, entry=entry)
