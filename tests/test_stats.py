"""Tests for the aggregation engine."""
from datetime import date, datetime, timedelta

import pytest

from tasktime.errors import InvalidInputError
from tasktime.models import TimeEntry
from tasktime.schemas import EntryFilter, GroupBy
from tasktime.services.stats import StatsEngine, parse_group_by


def add_entry(db, entry_id, employee_id, task_id, start, minutes=None):
    end = start + timedelta(minutes=minutes) if minutes is not None else None
    db.add(TimeEntry(
        entry_id=entry_id,
        employee_id=employee_id,
        task_id=task_id,
        start_time=start,
        end_time=end,
        duration_minutes=minutes,
    ))


@pytest.fixture
def entries(db):
    """
    a: E1/T1  Fri 2024-03-01  60 min
    b: E1/T2  Fri 2024-03-01  30 min
    c: E2/T1  Mon 2024-03-04  90 min
    d: E2/T2  Mon 2024-04-01  60 min
    e: E1/T1  open (never counted)
    """
    add_entry(db, "a", "E1", "T1", datetime(2024, 3, 1, 9, 0), 60)
    add_entry(db, "b", "E1", "T2", datetime(2024, 3, 1, 13, 0), 30)
    add_entry(db, "c", "E2", "T1", datetime(2024, 3, 4, 8, 0), 90)
    add_entry(db, "d", "E2", "T2", datetime(2024, 4, 1, 8, 0), 60)
    add_entry(db, "e", "E1", "T1", datetime(2024, 4, 2, 8, 0))
    db.commit()


def as_rows(result):
    return [(g.id, g.name, g.hours, g.percentage) for g in result.entries]


@pytest.mark.usefixtures("entries")
class TestStatsEngine:
    """Tests for grouping and totals."""

    def test_by_day(self, store):
        result = StatsEngine(store).compute(None, "day")

        assert result.group is GroupBy.DAY
        assert result.total_hours == 4.0
        assert as_rows(result) == [
            ("2024-03-01", "2024-03-01", 1.5, 37.5),
            ("2024-03-04", "2024-03-04", 1.5, 37.5),
            ("2024-04-01", "2024-04-01", 1.0, 25.0),
        ]

    def test_by_week(self, store):
        """Test ISO week keys: Friday 1 March and Monday 4 March are different weeks."""
        result = StatsEngine(store).compute(None, GroupBy.WEEK)

        assert [g.id for g in result.entries] == ["2024-W09", "2024-W10", "2024-W14"]

    def test_by_month(self, store):
        result = StatsEngine(store).compute(None, "month")

        assert as_rows(result) == [
            ("2024-03", "2024-03", 3.0, 75.0),
            ("2024-04", "2024-04", 1.0, 25.0),
        ]

    def test_by_employee(self, store):
        """Test that entity groups are ordered by hours, largest first."""
        result = StatsEngine(store).compute(None, "employee")

        assert as_rows(result) == [
            ("E2", "Grace Hopper", 2.5, 62.5),
            ("E1", "Ada Lovelace", 1.5, 37.5),
        ]

    def test_by_project_includes_unassigned(self, store):
        """Test that tasks without a project are grouped under N/A."""
        result = StatsEngine(store).compute(None, "project")

        assert as_rows(result) == [
            ("P1", "Apollo", 2.5, 62.5),
            ("", "N/A", 1.5, 37.5),
        ]

    def test_by_task(self, store):
        result = StatsEngine(store).compute(None, "task")

        assert as_rows(result) == [
            ("T1", "Design", 2.5, 62.5),
            ("T2", "Admin", 1.5, 37.5),
        ]

    def test_filters_apply(self, store):
        filters = EntryFilter(employee_id="E1", end_date=date(2024, 3, 31))
        result = StatsEngine(store).compute(filters, "task")

        assert result.total_hours == 1.5
        assert as_rows(result) == [
            ("T1", "Design", 1.0, 66.67),
            ("T2", "Admin", 0.5, 33.33),
        ]

    def test_percentages_sum_to_100(self, store):
        for dimension in GroupBy:
            result = StatsEngine(store).compute(None, dimension)
            assert sum(g.percentage for g in result.entries) == pytest.approx(100, abs=0.05)

    def test_no_matching_entries(self, store):
        """Test that an empty selection gives zero totals, not a division error."""
        result = StatsEngine(store).compute(EntryFilter(employee_id="nobody"), "task")

        assert result.total_hours == 0
        assert result.entries == []


class TestParseGroupBy:
    """Tests for resolving groupBy values."""

    @pytest.mark.parametrize("value,expected", [
        ("day", GroupBy.DAY),
        ("WEEK", GroupBy.WEEK),
        (" project ", GroupBy.PROJECT),
        (GroupBy.TASK, GroupBy.TASK),
    ])
    def test_known_values(self, value, expected):
        assert parse_group_by(value) is expected

    @pytest.mark.parametrize("value", ["quarter", "", "employees"])
    def test_unknown_values(self, value):
        with pytest.raises(InvalidInputError):
            parse_group_by(value)
