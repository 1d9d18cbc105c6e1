"""Initial schema - time tracking tables

Revision ID: 001
Revises:
Create Date: 2025-01-01 00:00:00.000000

This migration creates all initial tables for TaskTime:
- employees: People who record time (maintained elsewhere)
- projects: Groupings of tasks (maintained elsewhere)
- tasks: Units of work time is recorded against
- time_entries: The recorded work sessions
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from tasktime.config import get_settings

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Get schema from config
settings = get_settings()
SCHEMA = settings.db_schema  # None for the default schema

OPEN_PREDICATE = sa.text('end_time IS NULL')


def _ref(table: str, column: str) -> str:
    return f'{SCHEMA}.{table}.{column}' if SCHEMA else f'{table}.{column}'


def upgrade() -> None:
    # Create schema if specified and doesn't exist (SQL Server only)
    if SCHEMA and op.get_bind().dialect.name == 'mssql':
        op.execute(f"IF NOT EXISTS (SELECT * FROM sys.schemas WHERE name = '{SCHEMA}') EXEC('CREATE SCHEMA {SCHEMA}')")

    # Employees table
    op.create_table(
        'employees',
        sa.Column('employee_id', sa.String(length=36), nullable=False),
        sa.Column('display_name', sa.String(length=150), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint('employee_id'),
        schema=SCHEMA,
    )

    # Projects table
    op.create_table(
        'projects',
        sa.Column('project_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('status', sa.String(length=50), nullable=True),
        sa.PrimaryKeyConstraint('project_id'),
        schema=SCHEMA,
    )

    # Tasks table
    op.create_table(
        'tasks',
        sa.Column('task_id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('status', sa.String(length=50), nullable=True),
        sa.Column('project_id', sa.String(length=36), nullable=True),
        sa.ForeignKeyConstraint(['project_id'], [_ref('projects', 'project_id')], name='fk_tasks_project'),
        sa.PrimaryKeyConstraint('task_id'),
        schema=SCHEMA,
    )
    op.create_index('ix_tasks_project_id', 'tasks', ['project_id'], schema=SCHEMA)

    # Time entries table
    op.create_table(
        'time_entries',
        sa.Column('entry_id', sa.String(length=36), nullable=False),
        sa.Column('employee_id', sa.String(length=36), nullable=False),
        sa.Column('task_id', sa.String(length=36), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('modified_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['employee_id'], [_ref('employees', 'employee_id')], name='fk_time_entries_employee'),
        sa.ForeignKeyConstraint(['task_id'], [_ref('tasks', 'task_id')], name='fk_time_entries_task'),
        sa.PrimaryKeyConstraint('entry_id'),
        schema=SCHEMA,
    )
    op.create_index('ix_time_entries_employee_id', 'time_entries', ['employee_id'], schema=SCHEMA)
    op.create_index('ix_time_entries_task_id', 'time_entries', ['task_id'], schema=SCHEMA)
    op.create_index('ix_time_entries_employee_start', 'time_entries', ['employee_id', 'start_time'], schema=SCHEMA)
    op.create_index('ix_time_entries_start_time', 'time_entries', ['start_time'], schema=SCHEMA)

    # At most one open entry per employee
    op.create_index(
        'uq_time_entries_open_per_employee',
        'time_entries',
        ['employee_id'],
        unique=True,
        schema=SCHEMA,
        sqlite_where=OPEN_PREDICATE,
        postgresql_where=OPEN_PREDICATE,
        mssql_where=OPEN_PREDICATE,
    )


def downgrade() -> None:
    op.drop_index('uq_time_entries_open_per_employee', table_name='time_entries', schema=SCHEMA)
    op.drop_table('time_entries', schema=SCHEMA)
    op.drop_table('tasks', schema=SCHEMA)
    op.drop_table('projects', schema=SCHEMA)
    op.drop_table('employees', schema=SCHEMA)
