# TaskTime - Request Dependencies
# Acting-employee identity and service wiring for routes

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from tasktime.config import get_settings
from tasktime.database import get_db
from tasktime.models.employee import Employee
from tasktime.services.time_entry import TimeEntryService


settings = get_settings()


def get_identity(request: Request) -> Optional[str]:
    """
    Read the acting employee's id from the identity header.

    The upstream authentication layer sets this header; it is absent for
    anonymous requests.
    """
    value = request.headers.get(settings.identity_header)
    return value.strip() if value and value.strip() else None


def get_current_employee_optional(
    request: Request,
    db: Session = Depends(get_db),
) -> Optional[Employee]:
    """Get the acting employee if identified, None otherwise."""
    employee_id = get_identity(request)
    if not employee_id:
        return None

    return db.execute(
        select(Employee).where(Employee.employee_id == employee_id)
    ).scalar_one_or_none()


def get_current_employee(
    employee: Optional[Employee] = Depends(get_current_employee_optional),
) -> Employee:
    """
    Get the acting employee or raise 401.

    Usage:
        @router.post("/entries/stop")
        def stop(employee: Employee = Depends(get_current_employee)):
            ...
    """
    if employee is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return employee


def get_time_entry_service(db: Session = Depends(get_db)) -> TimeEntryService:
    """TimeEntryService bound to the request's session."""
    return TimeEntryService(db)
