# TaskTime - Project and Task Models
# Owned by the project/task CRUD subsystems; read-only here.

from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .time_entry import TimeEntry


class Project(Base):
    """A project grouping tasks. Used for display and stats grouping."""

    __tablename__ = "projects"

    project_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True
    )

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False
    )

    status: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True
    )

    tasks: Mapped[List["Task"]] = relationship(
        "Task",
        back_populates="project"
    )

    def __repr__(self) -> str:
        return f"<Project {self.project_id} {self.name}>"


class Task(Base):
    """
    A unit of work that time is recorded against.

    A task may belong to a project; entries on a task without a project
    are reported under "N/A".
    """

    __tablename__ = "tasks"

    task_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True
    )

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False
    )

    status: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True
    )

    project_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("projects.project_id"),
        nullable=True,
        index=True
    )

    project: Mapped[Optional["Project"]] = relationship(
        "Project",
        back_populates="tasks"
    )

    time_entries: Mapped[List["TimeEntry"]] = relationship(
        "TimeEntry",
        back_populates="task",
        passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Task {self.task_id} {self.title}>"
