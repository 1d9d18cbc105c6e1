# TaskTime - Base Model and Mixins

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from tasktime.config import get_settings
from tasktime.utils.time import utcnow


settings = get_settings()
SCHEMA = settings.db_schema

# Use a metadata instance with a default schema so models and Alembic agree
_metadata = MetaData(schema=SCHEMA) if SCHEMA else MetaData()


class Base(DeclarativeBase):
    """Base class for all models."""
    metadata = _metadata


class TimestampMixin:
    """Mixin that adds created_at / modified_at bookkeeping columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        nullable=False
    )

    modified_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        nullable=True,
        onupdate=utcnow
    )
