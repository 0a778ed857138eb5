"""Shared fixtures and helpers for RowQL tests."""

import pytest

from rowql import ColumnDef, RowQLConfig, RowSchema, TableDef


class RecordingClient:
    """Database client double: records statements and replays canned rows."""

    def __init__(self, rows=None, error=None):
        self.rows = list(rows or [])
        self.error = error
        self.calls = []

    async def execute(self, text, params):
        self.calls.append((text, list(params)))
        if self.error is not None:
            raise self.error
        return list(self.rows)


def users_table(**kwargs):
    """``users``: id (default), name, email; primary key id."""
    return TableDef(
        'users',
        [
            ColumnDef('id', int, nullable=False, has_default=True, description='Primary key'),
            ColumnDef('name', str, nullable=False, description='Display name'),
            ColumnDef('email', str, nullable=False),
            ColumnDef('created_at', str, nullable=True, has_default=True),
        ],
        primary_keys=['id'],
        type_name='User',
        **kwargs,
    )


def events_table():
    """Composite key declared out of column order: (day, seq)."""
    return TableDef(
        'events',
        [
            ColumnDef('seq', int, nullable=False),
            ColumnDef('day', str, nullable=False),
            ColumnDef('label', str),
        ],
        primary_keys=['day', 'seq'],
        sql_schema='app',
        type_name='Event',
    )


@pytest.fixture
def row_schema():
    schema = RowSchema(RowQLConfig(dialect='postgresql'))
    schema.register(users_table())
    schema.register(events_table())
    return schema


@pytest.fixture
def strawberry_schema(row_schema):
    return row_schema.to_strawberry()
