# TaskTime - Configuration
# Settings for the time-tracking service, read from TASKTIME_* variables

from functools import lru_cache
from typing import Optional
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime settings for TaskTime.

    Every field maps to a TASKTIME_-prefixed environment variable, and a
    local .env file is read when present. The entry store normally lives in
    the SQL Server database the employee and task tables belong to:

        TASKTIME_DB_SERVER=sql01.internal
        TASKTIME_DB_NAME=time_tracking
        TASKTIME_DB_SCHEMA=tracking

    TASKTIME_DB_URL takes any SQLAlchemy URL instead, which is how local
    development and the test suite run on SQLite:

        TASKTIME_DB_URL=sqlite:///./tasktime.db
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKTIME_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = "TaskTime"
    debug: bool = False
    log_level: str = "INFO"

    # Carries the acting employee's id, set by the gateway in front of us
    identity_header: str = "X-Employee-Id"

    # Overrides every db_* connection field below
    db_url: Optional[str] = None

    # SQL Server connection
    db_server: str = "localhost"
    db_port: int = 1433
    db_name: str = "time_tracking"
    db_user: str = "tasktime_app"
    db_password: str = "tasktime_password"
    db_driver: str = "ODBC Driver 18 for SQL Server"
    db_trusted_connection: bool = False

    # Schema holding employees, projects, tasks and time_entries; None is the default schema
    db_schema: Optional[str] = None

    # QueuePool sizing (ignored for SQLite)
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 1800

    def odbc_connection_string(self) -> str:
        """ODBC connection string for the configured SQL Server."""
        parts = [
            f"DRIVER={{{self.db_driver}}}",
            f"SERVER={self.db_server},{self.db_port}",
            f"DATABASE={self.db_name}",
        ]
        if self.db_trusted_connection:
            parts.append("Trusted_Connection=yes")
        else:
            parts.append(f"UID={self.db_user}")
            parts.append(f"PWD={self.db_password}")
        parts.append("TrustServerCertificate=yes")
        return ";".join(parts) + ";"

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL for the entry store."""
        if self.db_url:
            return self.db_url
        return f"mssql+pyodbc:///?odbc_connect={quote_plus(self.odbc_connection_string())}"


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()
