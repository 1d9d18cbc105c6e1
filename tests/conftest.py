"""Pytest configuration and fixtures."""
import os

# Point the app at an in-memory database before anything imports its settings
os.environ.setdefault("TASKTIME_DB_URL", "sqlite://")

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from tasktime.database import create_db_engine, drop_db, get_db, init_db
from tasktime.dependencies import get_time_entry_service
from tasktime.main import app
from tasktime.models import Employee, Project, Task
from tasktime.services.entry_store import EntryStore
from tasktime.services.time_entry import TimeEntryService


class FakeClock:
    """Callable clock returning a settable naive UTC instant."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def engine():
    """Fresh in-memory SQLite engine with all tables created."""
    db_engine = create_db_engine("sqlite://")
    init_db(bind=db_engine)
    yield db_engine
    drop_db(bind=db_engine)
    db_engine.dispose()


@pytest.fixture
def db(engine):
    """
    Session seeded with reference data:

    - employees E1 (Ada Lovelace) and E2 (Grace Hopper)
    - project P1 (Apollo)
    - task T1 (Design) in P1, task T2 (Admin) with no project
    """
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    session = Session()

    project = Project(project_id="P1", name="Apollo", status="active")
    session.add_all([
        Employee(employee_id="E1", display_name="Ada Lovelace", email="ada@example.com"),
        Employee(employee_id="E2", display_name="Grace Hopper", email="grace@example.com"),
        project,
        Task(task_id="T1", title="Design", status="in_progress", project=project),
        Task(task_id="T2", title="Admin", status="todo"),
    ])
    session.commit()

    yield session

    session.close()


@pytest.fixture
def clock():
    """Clock fixed at 2024-03-01 09:00 UTC until a test advances it."""
    return FakeClock(datetime(2024, 3, 1, 9, 0, 0))


@pytest.fixture
def store(db):
    return EntryStore(db)


@pytest.fixture
def service(db, clock):
    return TimeEntryService(db, clock=clock)


@pytest.fixture
def client(db, clock):
    """
    HTTP client acting as employee E1.

    Routes share the test session and clock.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_time_entry_service] = lambda: TimeEntryService(db, clock=clock)

    with TestClient(app, headers={"X-Employee-Id": "E1"}) as test_client:
        yield test_client

    app.dependency_overrides.clear()
