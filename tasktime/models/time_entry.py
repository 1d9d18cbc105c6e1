# TaskTime - Time Entry Model

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import (
    String, Integer, DateTime, ForeignKey, Index, text
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .employee import Employee
    from .project import Project, Task


# Name of the partial unique index guarding one open entry per employee
OPEN_ENTRY_INDEX = "uq_time_entries_open_per_employee"

_OPEN_PREDICATE = text("end_time IS NULL")


class TimeEntry(TimestampMixin, Base):
    """
    One work session of an employee on a task.

    An entry with no end_time is "open": the employee is still working on
    it. At most one open entry may exist per employee; the partial unique
    index below enforces that in the database, so two concurrent starts for
    the same employee cannot both commit.

    duration_minutes is set exactly when end_time is set, as the floor of
    the elapsed whole minutes, unless explicitly overridden on update.
    """

    __tablename__ = "time_entries"

    __table_args__ = (
        Index("ix_time_entries_employee_start", "employee_id", "start_time"),
        Index("ix_time_entries_start_time", "start_time"),
        Index(
            OPEN_ENTRY_INDEX,
            "employee_id",
            unique=True,
            sqlite_where=_OPEN_PREDICATE,
            postgresql_where=_OPEN_PREDICATE,
            mssql_where=_OPEN_PREDICATE,
        ),
    )

    entry_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True
    )

    # Whose time is this?
    employee_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("employees.employee_id"),
        nullable=False,
        index=True
    )

    # What were they working on?
    task_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tasks.task_id"),
        nullable=False,
        index=True
    )

    # When? (naive UTC)
    start_time: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False
    )

    end_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        nullable=True
    )

    duration_minutes: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True
    )

    # Relationships
    employee: Mapped["Employee"] = relationship(
        "Employee",
        back_populates="time_entries"
    )

    task: Mapped["Task"] = relationship(
        "Task",
        back_populates="time_entries"
    )

    def __repr__(self) -> str:
        status = " [OPEN]" if self.is_open else f" {self.duration_minutes}m"
        return f"<TimeEntry {self.entry_id} {self.employee_id}/{self.task_id} {self.start_time:%Y-%m-%d %H:%M}{status}>"

    @property
    def is_open(self) -> bool:
        """True while the session is still running."""
        return self.end_time is None

    @property
    def project(self) -> Optional["Project"]:
        """The project of the entry's task, if any."""
        return self.task.project if self.task is not None else None
