#!/usr/bin/env python
"""
TaskTime - Database Management CLI

Maintains the time_entries schema and its reference tables.

Usage:
    python -m scripts.db_manage check       # Connect and run SELECT 1
    python -m scripts.db_manage init        # create_all from the models, no migrations (debug only)
    python -m scripts.db_manage migrate     # Upgrade to the latest revision
    python -m scripts.db_manage rollback    # Downgrade one revision (debug only)
    python -m scripts.db_manage current     # Print the applied revision
    python -m scripts.db_manage history     # Print all revisions
    python -m scripts.db_manage reset       # Downgrade to base, then upgrade to head (debug only)
"""

import sys

from tasktime.config import get_settings
from tasktime.database import check_connection, init_db


settings = get_settings()

ALEMBIC_INI = "alembic.ini"


def _alembic(action: str, *args) -> None:
    """Run an alembic.command function against alembic.ini."""
    from alembic import command
    from alembic.config import Config

    getattr(command, action)(Config(ALEMBIC_INI), *args)


def _require_debug(name: str) -> bool:
    if not settings.debug:
        print(f"ERROR: '{name}' destroys or bypasses migrations; set TASKTIME_DEBUG=true to use it")
        return False
    return True


def _target() -> str:
    if settings.db_url:
        return settings.db_url
    return f"{settings.db_server}/{settings.db_name}"


def cmd_check():
    """Check that the entry store is reachable."""
    print(f"Connecting to: {_target()}")
    try:
        check_connection()
    except Exception as e:
        print(f"Connection failed: {e}")
        return False
    print("Connection successful!")
    return True


def cmd_init():
    """Create the tables straight from the models."""
    if not _require_debug("init"):
        return False

    init_db()
    print("Tables created (employees, projects, tasks, time_entries)")
    return True


def cmd_migrate():
    """Apply pending migrations."""
    print("Upgrading to head...")
    _alembic("upgrade", "head")
    print("Migrations complete!")
    return True


def cmd_rollback():
    """Undo the latest migration."""
    if not _require_debug("rollback"):
        return False

    print("Downgrading one revision...")
    _alembic("downgrade", "-1")
    print("Rollback complete!")
    return True


def cmd_current():
    """Show the applied revision."""
    _alembic("current")
    return True


def cmd_history():
    """List all revisions."""
    _alembic("history")
    return True


def cmd_reset():
    """Rebuild the schema from scratch; every time entry is lost."""
    if not _require_debug("reset"):
        return False

    confirm = input("All time entries will be DELETED. Type 'yes' to confirm: ")
    if confirm.lower() != "yes":
        print("Aborted")
        return False

    try:
        _alembic("downgrade", "base")
    except Exception as e:
        print(f"Downgrade skipped (no schema yet?): {e}")

    _alembic("upgrade", "head")
    print("Reset complete!")
    return True


def cmd_help():
    """Print usage."""
    print(__doc__)
    return True


COMMANDS = {
    "check": cmd_check,
    "init": cmd_init,
    "migrate": cmd_migrate,
    "rollback": cmd_rollback,
    "current": cmd_current,
    "history": cmd_history,
    "reset": cmd_reset,
    "help": cmd_help,
}


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        cmd_help()
        return 1

    name = argv[0].lower()
    handler = COMMANDS.get(name)
    if handler is None:
        print(f"Unknown command: {name}")
        cmd_help()
        return 1

    return 0 if handler() else 1


if __name__ == "__main__":
    sys.exit(main())
