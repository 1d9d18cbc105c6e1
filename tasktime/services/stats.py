# TaskTime - Aggregation Engine
# Total tracked hours grouped by period or by employee/project/task

from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from tasktime.errors import InvalidInputError
from tasktime.models.time_entry import TimeEntry
from tasktime.schemas import EntryFilter, GroupBy, NO_PROJECT_NAME
from tasktime.services.entry_store import EntryStore
from tasktime.services.query import build_entry_query, with_display_joins


@dataclass
class StatsGroup:
    id: str
    name: str
    minutes: int = 0
    percentage: float = 0.0

    @property
    def hours(self) -> float:
        return round(self.minutes / 60, 2)


@dataclass
class StatsResult:
    group: GroupBy
    total_hours: float
    entries: list[StatsGroup] = field(default_factory=list)


# (group id, display name) for an entry, per dimension

def _day_key(entry: TimeEntry) -> tuple[str, str]:
    key = entry.start_time.date().isoformat()
    return key, key


def _week_key(entry: TimeEntry) -> tuple[str, str]:
    year, week, _ = entry.start_time.isocalendar()
    key = f"{year}-W{week:02d}"
    return key, key


def _month_key(entry: TimeEntry) -> tuple[str, str]:
    key = entry.start_time.strftime("%Y-%m")
    return key, key


def _employee_key(entry: TimeEntry) -> tuple[str, str]:
    name = entry.employee.display_name if entry.employee else entry.employee_id
    return entry.employee_id, name


def _project_key(entry: TimeEntry) -> tuple[str, str]:
    project = entry.project
    if project is None:
        return "", NO_PROJECT_NAME
    return project.project_id, project.name


def _task_key(entry: TimeEntry) -> tuple[str, str]:
    name = entry.task.title if entry.task else entry.task_id
    return entry.task_id, name


GROUP_KEYS: dict[GroupBy, Callable[[TimeEntry], tuple[str, str]]] = {
    GroupBy.DAY: _day_key,
    GroupBy.WEEK: _week_key,
    GroupBy.MONTH: _month_key,
    GroupBy.EMPLOYEE: _employee_key,
    GroupBy.PROJECT: _project_key,
    GroupBy.TASK: _task_key,
}


def parse_group_by(value: Union[GroupBy, str]) -> GroupBy:
    """Resolve a groupBy value, rejecting anything unrecognised."""
    if isinstance(value, GroupBy):
        return value
    try:
        return GroupBy(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(g.value for g in GroupBy)
        raise InvalidInputError(f"Invalid groupBy '{value}'. Expected one of: {allowed}")


class StatsEngine:
    """
    Groups closed entries by a dimension and totals their hours.

    Open entries have no duration and are left out. Percentages are of the
    grand total across all groups in the result.

    Usage:
        stats = StatsEngine(store).compute(EntryFilter(employee_id="E1"), "task")
        for group in stats.entries:
            print(group.name, group.hours, group.percentage)
    """

    def __init__(self, store: EntryStore):
        self.store = store

    def compute(
        self,
        filters: Optional[EntryFilter],
        group_by: Union[GroupBy, str],
    ) -> StatsResult:
        dimension = parse_group_by(group_by)
        key_for = GROUP_KEYS[dimension]

        stmt = with_display_joins(
            build_entry_query(filters).where(TimeEntry.duration_minutes.is_not(None))
        )

        groups: dict[str, StatsGroup] = {}
        for entry in self.store.query(stmt):
            group_id, name = key_for(entry)
            if group_id not in groups:
                groups[group_id] = StatsGroup(id=group_id, name=name)
            groups[group_id].minutes += entry.duration_minutes

        total_minutes = sum(g.minutes for g in groups.values())

        if dimension.is_period:
            ordered = sorted(groups.values(), key=lambda g: g.id)
        else:
            ordered = sorted(groups.values(), key=lambda g: (-g.minutes, g.name))

        if total_minutes > 0:
            for group in ordered:
                group.percentage = round(group.minutes / total_minutes * 100, 2)

        return StatsResult(
            group=dimension,
            total_hours=round(total_minutes / 60, 2),
            entries=ordered,
        )
