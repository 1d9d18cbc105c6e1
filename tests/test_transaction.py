"""Tests for the transactional command executor."""
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from tasktime.errors import ConflictError, InternalError
from tasktime.services.transaction import command, read


def _db_error():
    return OperationalError("UPDATE time_entries", {}, Exception("disk I/O error"))


class TestCommand:
    """Tests for the command() unit of work."""

    def test_commits_on_success(self):
        db = MagicMock()

        with command(db, "update time entry"):
            pass

        db.commit.assert_called_once()
        db.rollback.assert_not_called()

    def test_domain_error_rolls_back_and_propagates(self):
        db = MagicMock()

        with pytest.raises(ConflictError):
            with command(db, "create time entry"):
                raise ConflictError("already active")

        db.rollback.assert_called_once()
        db.commit.assert_not_called()

    def test_storage_error_becomes_internal(self):
        db = MagicMock()

        with pytest.raises(InternalError) as exc_info:
            with command(db, "delete time entry"):
                raise _db_error()

        assert exc_info.value.message == "Failed to delete time entry"
        assert isinstance(exc_info.value.__cause__, OperationalError)
        db.rollback.assert_called_once()

    def test_commit_failure_rolls_back(self):
        db = MagicMock()
        db.commit.side_effect = _db_error()

        with pytest.raises(InternalError):
            with command(db, "stop active time entry"):
                pass

        db.rollback.assert_called_once()

    def test_rollback_failure_does_not_mask_error(self, caplog):
        """Test that the original error still reaches the caller."""
        db = MagicMock()
        db.rollback.side_effect = _db_error()

        with pytest.raises(ConflictError):
            with command(db, "create time entry"):
                raise ConflictError("already active")

        assert "Rollback failed during create time entry" in caplog.text

    def test_unexpected_error_rolls_back(self):
        db = MagicMock()

        with pytest.raises(KeyError):
            with command(db, "update time entry"):
                raise KeyError("boom")

        db.rollback.assert_called_once()


class TestRead:
    """Tests for the read() wrapper."""

    def test_storage_error_becomes_internal(self):
        db = MagicMock()

        with pytest.raises(InternalError, match="Failed to fetch time entries"):
            with read(db, "fetch time entries"):
                raise _db_error()

    def test_does_not_commit(self):
        db = MagicMock()

        with read(db, "fetch time entries"):
            pass

        db.commit.assert_not_called()
