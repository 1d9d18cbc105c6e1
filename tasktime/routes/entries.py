# TaskTime - Time Entry Routes
# JSON endpoints for starting, stopping, editing and reporting time

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import ValidationError

from tasktime.dependencies import get_current_employee, get_time_entry_service
from tasktime.errors import InvalidInputError
from tasktime.models.employee import Employee
from tasktime.schemas import (
    DeleteEntryResponse,
    EntryFilter,
    StartEntryRequest,
    StatsEntry,
    StatsResponse,
    StopEntryRequest,
    StopEntryResponse,
    TimeEntryRead,
    UpdateEntryRequest,
)
from tasktime.services.time_entry import TimeEntryService


router = APIRouter(prefix="/entries", tags=["entries"])


# Helper functions

def build_filter(
    start_date: Optional[str] = Query(None, description="Earliest start date (YYYY-MM-DD), inclusive"),
    end_date: Optional[str] = Query(None, description="Latest start date (YYYY-MM-DD), inclusive"),
    employee_id: Optional[str] = Query(None),
    task_id: Optional[str] = Query(None),
    project_id: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None, description="True for running entries, False for stopped"),
) -> EntryFilter:
    """Collect the optional filter query parameters into an EntryFilter."""
    try:
        return EntryFilter(
            start_date=start_date,
            end_date=end_date,
            employee_id=employee_id,
            task_id=task_id,
            project_id=project_id,
            is_active=is_active,
        )
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors())
        raise InvalidInputError(f"Invalid filter value for: {fields}")


# Routes

@router.post("/start", response_model=TimeEntryRead, status_code=status.HTTP_201_CREATED)
def start_entry(
    body: StartEntryRequest,
    employee: Employee = Depends(get_current_employee),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """
    Start a time entry.

    - Defaults to the acting employee and to the current time
    - Employee and task must exist
    - Only one entry per employee can be running (409 otherwise)
    """
    entry = service.start_entry(
        employee_id=body.employee_id or employee.employee_id,
        task_id=body.task_id,
        start_time=body.start_time,
    )
    return TimeEntryRead.from_entry(entry)


@router.post("/stop", response_model=StopEntryResponse)
def stop_active_entry(
    body: Optional[StopEntryRequest] = None,
    employee: Employee = Depends(get_current_employee),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """
    Stop the running entry.

    Having nothing to stop is not an error: the response has stopped=false.
    """
    employee_id = (body.employee_id if body else None) or employee.employee_id
    outcome = service.stop_active(employee_id)

    if not outcome.stopped:
        return StopEntryResponse(
            stopped=False,
            message="No active time entry found",
            entry=None,
        )

    return StopEntryResponse(
        stopped=True,
        message="Time entry stopped successfully",
        entry=TimeEntryRead.from_entry(outcome.entry),
    )


@router.get("/active", response_model=Optional[TimeEntryRead])
def get_active_entry(
    employee_id: Optional[str] = Query(None, description="Defaults to the acting employee"),
    employee: Employee = Depends(get_current_employee),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """Get the running entry, or null if none."""
    entry = service.get_active_entry(employee_id or employee.employee_id)
    return TimeEntryRead.from_entry(entry) if entry else None


@router.get("", response_model=list[TimeEntryRead])
def list_entries(
    filters: EntryFilter = Depends(build_filter),
    employee: Employee = Depends(get_current_employee),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """
    List time entries.

    - Optional filters: start_date, end_date, employee_id, task_id,
      project_id, is_active
    - Results sorted by start_time descending (most recent first)
    """
    return [TimeEntryRead.from_entry(entry) for entry in service.list_entries(filters)]


@router.get("/stats", response_model=StatsResponse)
def get_stats(
    group_by: str = Query(..., description="day, week, month, employee, project or task"),
    filters: EntryFilter = Depends(build_filter),
    employee: Employee = Depends(get_current_employee),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """Total hours per group, with each group's share of the total."""
    result = service.get_stats(filters, group_by)
    return StatsResponse(
        group=result.group,
        total_hours=result.total_hours,
        entries=[
            StatsEntry(id=g.id, name=g.name, hours=g.hours, percentage=g.percentage)
            for g in result.entries
        ],
    )


@router.get("/{entry_id}", response_model=TimeEntryRead)
def get_entry(
    entry_id: str,
    employee: Employee = Depends(get_current_employee),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """Get a single time entry."""
    return TimeEntryRead.from_entry(service.get_entry(entry_id))


@router.patch("/{entry_id}", response_model=TimeEntryRead)
def update_entry(
    entry_id: str,
    body: UpdateEntryRequest,
    employee: Employee = Depends(get_current_employee),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """
    Update a time entry's start, end or duration.

    Changing a time recomputes the duration unless duration_minutes is
    also given.
    """
    entry = service.update_entry(
        entry_id,
        start_time=body.start_time,
        end_time=body.end_time,
        duration_minutes=body.duration_minutes,
    )
    return TimeEntryRead.from_entry(entry)


@router.delete("/{entry_id}", response_model=DeleteEntryResponse)
def delete_entry(
    entry_id: str,
    employee: Employee = Depends(get_current_employee),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """Permanently delete a time entry."""
    return DeleteEntryResponse(deleted=service.delete_entry(entry_id))
