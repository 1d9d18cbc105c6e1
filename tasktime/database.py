# TaskTime - Database Setup
# SQLAlchemy engine, session factory, and FastAPI dependencies

import logging
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from tasktime.config import get_settings
from tasktime.models.base import Base


logger = logging.getLogger(__name__)

settings = get_settings()


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL with dialect-appropriate pooling.

    SQL Server gets a sized QueuePool. SQLite in-memory databases share a
    single connection (StaticPool) so every session sees the same data.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        db_engine = create_engine(url, echo=echo, **kwargs)
    else:
        db_engine = create_engine(
            url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=True,  # Verify connections before using
            echo=echo,
        )

    event.listen(db_engine, "connect", _set_connection_options)
    return db_engine


def _set_connection_options(dbapi_connection, connection_record):
    """
    Set connection-level options once per new DBAPI connection.

    SQLite needs foreign keys switched on explicitly; SQL Server gets a
    fixed date format.
    """
    module = type(dbapi_connection).__module__
    cursor = dbapi_connection.cursor()
    if module.startswith("sqlite3"):
        cursor.execute("PRAGMA foreign_keys=ON")
    elif module.startswith("pyodbc"):
        cursor.execute("SET DATEFORMAT ymd")
    cursor.close()


# Create engine with connection pooling
engine = create_db_engine(settings.database_url, echo=settings.debug)


# Session factory
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,  # Prevent lazy-load issues after commit
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a database session.

    Usage in route handlers:

        @router.get("/entries")
        def list_entries(db: Session = Depends(get_db)):
            return TimeEntryService(db).list_entries(EntryFilter())

    The session is automatically closed after the request completes,
    even if an exception occurs.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = engine) -> None:
    """
    Create all tables defined in the models.

    For development and tests only; use Alembic migrations in production.
    """
    Base.metadata.create_all(bind=bind)


def drop_db(bind: Engine = engine) -> None:
    """
    Drop all tables.

    WARNING: Destroys all data. Only for development/testing.
    """
    Base.metadata.drop_all(bind=bind)


def check_connection(bind: Engine = engine) -> bool:
    """
    Test the database connection.

    Returns True if connection succeeds, raises exception otherwise.
    """
    with bind.connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.debug("Database connection check passed")
    return True
