# TaskTime - API Schemas
# Pydantic request/response models for time entries

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_serializer, field_validator

from tasktime.models.time_entry import TimeEntry
from tasktime.utils.time import as_utc, parse_instant, to_utc_naive


# Display name used when an entry's task has no project
NO_PROJECT_NAME = "N/A"


class GroupBy(str, Enum):
    """Aggregation dimensions for time statistics."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    EMPLOYEE = "employee"
    PROJECT = "project"
    TASK = "task"

    @property
    def is_period(self) -> bool:
        return self in (GroupBy.DAY, GroupBy.WEEK, GroupBy.MONTH)


class EntryFilter(BaseModel):
    """
    Optional filters for listing and aggregating entries.

    Every field that is set adds one AND-ed condition. Date bounds compare
    against the calendar date of start_time and are inclusive.
    """

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    employee_id: Optional[str] = None
    task_id: Optional[str] = None
    project_id: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _truncate_to_date(cls, value):
        # Full timestamps are accepted and compared by their UTC date
        if isinstance(value, datetime):
            return to_utc_naive(value).date()
        if isinstance(value, str) and "T" in value:
            return parse_instant(value, "date").date()
        return value


class StartEntryRequest(BaseModel):
    """Request body for starting a time entry."""

    task_id: str
    employee_id: Optional[str] = None  # defaults to the acting employee
    start_time: Optional[datetime] = None  # defaults to now


class StopEntryRequest(BaseModel):
    """Request body for stopping the active entry."""

    employee_id: Optional[str] = None  # defaults to the acting employee


class UpdateEntryRequest(BaseModel):
    """Update model - all fields optional, None leaves a field unchanged."""

    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None


class TimeEntryRead(BaseModel):
    """A time entry with denormalized employee/task/project display fields."""

    id: str
    employee_id: str
    task_id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    is_active: bool
    employee_name: Optional[str] = None
    employee_email: Optional[str] = None
    task_title: Optional[str] = None
    task_status: Optional[str] = None
    project_id: Optional[str] = None
    project_name: str = NO_PROJECT_NAME

    @field_serializer("start_time", "end_time")
    def _serialize_instant(self, value: Optional[datetime]) -> Optional[str]:
        if value is None:
            return None
        return as_utc(value).isoformat().replace("+00:00", "Z")

    @classmethod
    def from_entry(cls, entry: TimeEntry) -> "TimeEntryRead":
        """Build the response model from a joined TimeEntry row."""
        employee = entry.employee
        task = entry.task
        project = entry.project
        return cls(
            id=entry.entry_id,
            employee_id=entry.employee_id,
            task_id=entry.task_id,
            start_time=entry.start_time,
            end_time=entry.end_time,
            duration_minutes=entry.duration_minutes,
            is_active=entry.is_open,
            employee_name=employee.display_name if employee else None,
            employee_email=employee.email if employee else None,
            task_title=task.title if task else None,
            task_status=task.status if task else None,
            project_id=project.project_id if project else None,
            project_name=project.name if project else NO_PROJECT_NAME,
        )


class StopEntryResponse(BaseModel):
    """Result of stopping the active entry; stopped=False means nothing was open."""

    stopped: bool
    message: str
    entry: Optional[TimeEntryRead] = None


class DeleteEntryResponse(BaseModel):
    deleted: bool


class StatsEntry(BaseModel):
    """One group in a statistics response."""

    id: str
    name: str
    hours: float
    percentage: float


class StatsResponse(BaseModel):
    group: GroupBy
    total_hours: float
    entries: list[StatsEntry]
