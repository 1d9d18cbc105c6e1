# TaskTime - Employee Model
# Owned by the employee CRUD subsystem; read-only here.

from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .time_entry import TimeEntry


class Employee(Base):
    """
    An employee who records time against tasks.

    The time-tracking core only reads this table: to check an employee
    exists before an entry is created and to show the name and email next
    to each entry.
    """

    __tablename__ = "employees"

    employee_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True
    )

    display_name: Mapped[str] = mapped_column(
        String(150),
        nullable=False
    )

    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False
    )

    time_entries: Mapped[List["TimeEntry"]] = relationship(
        "TimeEntry",
        back_populates="employee",
        passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Employee {self.employee_id} {self.display_name}>"
