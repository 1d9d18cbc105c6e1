# TaskTime - Transactional Command Executor
# Atomic unit of work around every mutating operation

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tasktime.errors import InternalError, TimeTrackingError


logger = logging.getLogger(__name__)


def _rollback(db: Session, operation: str) -> None:
    """Roll back, logging (never raising) if the rollback itself fails."""
    try:
        db.rollback()
    except SQLAlchemyError:
        logger.exception("Rollback failed during %s", operation)


@contextmanager
def command(db: Session, operation: str) -> Generator[Session, None, None]:
    """
    Run the enclosed block as one transaction.

    Usage:

        with command(db, "start time entry"):
            validator.employee_exists(employee_id)
            entry = guard.start(employee_id, task_id, start_time)
            entry = store.get_by_id(entry.entry_id)

    Commits when the block finishes. On any exception the transaction is
    rolled back first; time-tracking errors propagate unchanged and storage
    errors are logged and re-raised as InternalError(operation).
    """
    try:
        yield db
        db.commit()
    except TimeTrackingError:
        _rollback(db, operation)
        raise
    except SQLAlchemyError as exc:
        logger.error("Database error during %s: %s", operation, exc)
        _rollback(db, operation)
        raise InternalError(operation) from exc
    except BaseException:
        _rollback(db, operation)
        raise


@contextmanager
def read(db: Session, operation: str) -> Generator[Session, None, None]:
    """Surface storage errors from a read-only operation as InternalError."""
    try:
        yield db
    except SQLAlchemyError as exc:
        logger.error("Database error during %s: %s", operation, exc)
        _rollback(db, operation)
        raise InternalError(operation) from exc
