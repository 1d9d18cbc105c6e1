# TaskTime - Time Entry Service
# The operations exposed to the API layer

import logging
from datetime import datetime
from typing import Callable, Optional, Union

from sqlalchemy.orm import Session

from tasktime.errors import InternalError
from tasktime.models.time_entry import TimeEntry
from tasktime.schemas import EntryFilter, GroupBy
from tasktime.services.duration import compute_minutes
from tasktime.services.entry_store import EntryStore
from tasktime.services.query import EntryQuery
from tasktime.services.session_guard import ActiveSessionGuard, StopOutcome
from tasktime.services.stats import StatsEngine, StatsResult, parse_group_by
from tasktime.services.transaction import command, read
from tasktime.services.validator import EntryValidator
from tasktime.utils.time import InstantLike, parse_instant, utcnow


logger = logging.getLogger(__name__)


class TimeEntryService:
    """
    Service for time tracking: start/stop sessions, edit entries, report.

    Every mutating call runs as one transaction: validate, write, re-read
    the row with its employee/task/project joins, commit. It either fully
    succeeds with that snapshot or fully fails leaving no trace.

    Usage:
        service = TimeEntryService(db)

        entry = service.start_entry(employee_id="E1", task_id="T1")
        outcome = service.stop_active("E1")
        if outcome.stopped:
            print(outcome.entry.duration_minutes)

        stats = service.get_stats(EntryFilter(employee_id="E1"), "task")
    """

    def __init__(
        self,
        db: Session,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.clock = clock
        self.store = EntryStore(db)
        self.validator = EntryValidator(db, self.store)
        self.guard = ActiveSessionGuard(self.store, clock)
        self.stats = StatsEngine(self.store)

    def _reread(self, entry_id: str, operation: str) -> TimeEntry:
        entry = self.store.get_by_id(entry_id)
        if entry is None:
            # The row was written in this transaction; losing it is a storage fault
            raise InternalError(operation)
        return entry

    # Commands

    def start_entry(
        self,
        employee_id: str,
        task_id: str,
        start_time: Optional[InstantLike] = None,
    ) -> TimeEntry:
        """
        Start a new time entry for an employee.

        Args:
            employee_id: Whose time this is
            task_id: What they are working on
            start_time: When work started (defaults to now)

        Returns:
            The created, open TimeEntry

        Raises:
            InvalidInputError: If start_time cannot be parsed or is in the future
            NotFoundError: If the employee or task does not exist
            ConflictError: If the employee already has an active entry
        """
        operation = "create time entry"
        parsed_start = parse_instant(start_time, "start time") if start_time is not None else None

        with command(self.db, operation):
            self.validator.employee_exists(employee_id)
            self.validator.task_exists(task_id)
            if parsed_start is not None:
                self.validator.start_not_in_future(parsed_start, self.clock())
            entry = self.guard.start(employee_id, task_id, parsed_start)
            return self._reread(entry.entry_id, operation)

    def stop_active(self, employee_id: str) -> StopOutcome:
        """
        Stop the employee's active entry, if there is one.

        Returns StopOutcome(stopped=False) when nothing is running, so
        calling it twice is harmless.
        """
        operation = "stop active time entry"

        with command(self.db, operation):
            outcome = self.guard.stop(employee_id)
            if outcome.stopped:
                outcome.entry = self._reread(outcome.entry.entry_id, operation)
            return outcome

    def update_entry(
        self,
        entry_id: str,
        start_time: Optional[InstantLike] = None,
        end_time: Optional[InstantLike] = None,
        duration_minutes: Optional[int] = None,
    ) -> TimeEntry:
        """
        Update an entry's times and/or duration.

        Only provided fields change. When either timestamp changes the
        duration is recomputed from the resulting times, unless an explicit
        duration_minutes is supplied, which then takes precedence.

        Raises:
            NotFoundError: If the entry does not exist
            InvalidInputError: If a time cannot be parsed, the end is not
                after the start, a duration is set without an end time, or
                the start of an open entry is moved into the future
        """
        operation = "update time entry"
        parsed_start = parse_instant(start_time, "start time") if start_time is not None else None
        parsed_end = parse_instant(end_time, "end time") if end_time is not None else None

        with command(self.db, operation):
            entry = self.validator.entry_exists(entry_id)

            new_start = parsed_start if parsed_start is not None else entry.start_time
            new_end = parsed_end if parsed_end is not None else entry.end_time
            self.validator.times(new_start, new_end)
            if new_end is None:
                self.validator.start_not_in_future(new_start, self.clock())

            changes = {}
            if parsed_start is not None:
                changes["start_time"] = new_start
            if parsed_end is not None:
                changes["end_time"] = new_end

            if duration_minutes is not None:
                self.validator.duration_override(duration_minutes, new_end)
                changes["duration_minutes"] = duration_minutes
            elif changes and new_end is not None:
                changes["duration_minutes"] = compute_minutes(new_start, new_end)

            if changes:
                self.store.update(entry, **changes)
                logger.info(
                    "Updated time entry %s (%s)", entry_id, ", ".join(sorted(changes))
                )

            return self._reread(entry_id, operation)

    def delete_entry(self, entry_id: str) -> bool:
        """
        Permanently delete an entry.

        Raises:
            NotFoundError: If the entry does not exist
        """
        with command(self.db, "delete time entry"):
            entry = self.validator.entry_exists(entry_id)
            deleted = self.store.delete(entry)
            logger.info("Deleted time entry %s", entry_id)
            return deleted

    # Queries

    def get_entry(self, entry_id: str) -> TimeEntry:
        """Fetch one entry; raises NotFoundError if missing."""
        with read(self.db, "fetch time entry"):
            return self.validator.entry_exists(entry_id)

    def get_active_entry(self, employee_id: str) -> Optional[TimeEntry]:
        """The employee's running entry, or None."""
        with read(self.db, "fetch active time entry"):
            return self.guard.get_active(employee_id)

    def iter_entries(self, filters: Optional[EntryFilter] = None) -> EntryQuery:
        """Lazy, restartable sequence of matching entries, newest first."""
        return EntryQuery(self.store, filters)

    def list_entries(self, filters: Optional[EntryFilter] = None) -> list[TimeEntry]:
        """All matching entries, newest first."""
        with read(self.db, "fetch time entries"):
            return self.iter_entries(filters).all()

    def get_stats(
        self,
        filters: Optional[EntryFilter],
        group_by: Union[GroupBy, str],
    ) -> StatsResult:
        """
        Hours per group for the entries matching filters.

        Raises:
            InvalidInputError: If group_by is not a known dimension
        """
        # Rejected before any query runs
        dimension = parse_group_by(group_by)
        with read(self.db, "compute time statistics"):
            return self.stats.compute(filters, dimension)

