"""Tests for the database management CLI."""
from unittest.mock import patch

from scripts import db_manage


class TestDbManage:
    """Tests for command dispatch."""

    def test_no_command_shows_help(self, capsys):
        assert db_manage.main([]) == 1
        assert "Database Management CLI" in capsys.readouterr().out

    def test_unknown_command(self, capsys):
        assert db_manage.main(["bogus"]) == 1
        assert "Unknown command: bogus" in capsys.readouterr().out

    def test_check(self, capsys):
        assert db_manage.main(["check"]) == 0
        assert "Connection successful!" in capsys.readouterr().out

    def test_init_requires_debug(self, capsys):
        with patch.object(db_manage.settings, "debug", False):
            assert db_manage.main(["init"]) == 1
        assert "TASKTIME_DEBUG=true" in capsys.readouterr().out

    def test_init_creates_tables(self, capsys):
        with patch.object(db_manage.settings, "debug", True), \
                patch.object(db_manage, "init_db") as init_db:
            assert db_manage.main(["INIT"]) == 0
        init_db.assert_called_once_with()

    def test_migrate_upgrades_to_head(self):
        with patch.object(db_manage, "_alembic") as alembic:
            assert db_manage.main(["migrate"]) == 0
        alembic.assert_called_once_with("upgrade", "head")

    def test_reset_aborts_without_confirmation(self):
        with patch.object(db_manage.settings, "debug", True), \
                patch("builtins.input", return_value="no"), \
                patch.object(db_manage, "_alembic") as alembic:
            assert db_manage.main(["reset"]) == 1
        alembic.assert_not_called()
