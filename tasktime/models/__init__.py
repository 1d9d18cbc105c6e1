# TaskTime - SQLAlchemy Models
# Importing this package registers every table on Base.metadata

from .base import Base, TimestampMixin
from .employee import Employee
from .project import Project, Task
from .time_entry import TimeEntry, OPEN_ENTRY_INDEX

__all__ = [
    "Base",
    "TimestampMixin",
    "Employee",
    "Project",
    "Task",
    "TimeEntry",
    "OPEN_ENTRY_INDEX",
]
