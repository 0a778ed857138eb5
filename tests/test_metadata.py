from datetime import datetime
from typing import Optional

import pytest
from sqlalchemy import Column as SACol, DateTime, Integer, MetaData, Numeric, String, Table as SATableObj, func

from rowql import ColumnDef, RowQLConfig, RowSchema, SATable, TableDef
from rowql.metadata import as_table, sa_python_type, tables_from_metadata
from rowql.types import column_annotation
from tests.fixtures import events_table, users_table
from tests.models import Membership, User


def test_table_def_names_are_derived_from_sql_name():
    t = TableDef('order_items', [ColumnDef('id', int)], primary_keys=['id'])
    assert t.get_type_name() == 'OrderItems'
    assert t.get_field_name() == 'orderItems'
    assert t.get_markdown_type_name() == '`OrderItems`'


def test_table_def_overrides_and_identifier():
    t = users_table()
    assert t.get_type_name() == 'User'
    assert t.get_identifier() == '"users"'
    assert events_table().get_identifier() == '"app"."events"'


def test_table_def_field_name_follows_type_name():
    t = TableDef('users', [ColumnDef('id', int)], ['id'], type_name='User')
    assert t.get_field_name() == 'user'
    assert users_table().get_field_name() == 'user'
    assert events_table().get_field_name() == 'event'
    explicit = TableDef('users', [ColumnDef('id', int)], ['id'], type_name='User', field_name='member')
    assert explicit.get_field_name() == 'member'


def test_table_def_and_sa_table_agree_on_field_name():
    sa = SATable.from_model(User)
    td = TableDef('users', [ColumnDef('id', int)], ['id'], type_name='User')
    assert sa.get_field_name() == td.get_field_name() == 'user'
    assert SATable(User.__table__).get_field_name() == 'users'


def test_table_def_rejects_unknown_primary_key():
    with pytest.raises(ValueError):
        TableDef('t', [ColumnDef('a')], primary_keys=['b'])


def test_primary_keys_keep_declared_order():
    assert [c.name for c in events_table().get_primary_keys()] == ['day', 'seq']


def test_column_field_names():
    t = users_table()
    assert [c.field_name for c in t.get_columns()] == ['id', 'name', 'email', 'createdAt']
    assert t.get_column('createdAt').name == 'created_at'
    assert t.get_column('missing') is None


def test_identifier_follows_schema_dialect():
    schema = RowSchema(RowQLConfig(dialect='mssql'))
    t = schema.register(events_table())
    assert t.get_identifier() == '[app].[events]'


def test_sa_table_from_model():
    t = SATable.from_model(User)
    assert t.get_type_name() == 'User'
    assert t.get_field_name() == 'user'
    assert t.description == 'Application users'
    cols = {c.name: c for c in t.get_columns()}
    assert list(cols) == ['id', 'name', 'email', 'nickname', 'is_admin', 'score', 'bio']
    assert [c.name for c in t.get_primary_keys()] == ['id']
    assert cols['is_admin'].field_name == 'isAdmin'
    assert cols['name'].description == 'Public display name'


def test_sa_column_defaults():
    cols = {c.name: c for c in SATable.from_model(User).get_columns()}
    # autoincrement integer primary key
    assert cols['id'].has_default is True
    # server defaults
    assert cols['is_admin'].has_default is True
    assert cols['score'].has_default is True
    # Python-side default only
    assert cols['bio'].has_default is False
    assert cols['name'].has_default is False


def test_sa_composite_key_has_no_autoincrement():
    t = SATable.from_model(Membership)
    cols = {c.name: c for c in t.get_columns()}
    assert [c.name for c in t.get_primary_keys()] == ['group_name', 'user_id']
    assert cols['user_id'].has_default is False
    assert cols['role'].has_default is True


def test_sa_types_and_nullability():
    cols = {c.name: c for c in SATable.from_model(User).get_columns()}
    assert cols['id'].python_type is int
    assert cols['is_admin'].python_type is bool
    assert cols['name'].python_type is str
    assert column_annotation(cols['name']) is str
    assert column_annotation(cols['nickname']) == Optional[str]


def test_sa_python_type_fallbacks():
    assert sa_python_type(DateTime()) is datetime
    assert sa_python_type(Numeric(10, 2)) is float


def test_reflected_style_metadata():
    md = MetaData()
    SATableObj(
        'audit_log', md,
        SACol('id', Integer, primary_key=True),
        SACol('created_at', DateTime, server_default=func.now()),
        SACol('message', String, nullable=False),
        schema='ops',
    )
    (t,) = tables_from_metadata(md)
    assert t.get_type_name() == 'AuditLog'
    assert t.get_identifier() == '"ops"."audit_log"'
    assert [c.has_default for c in t.get_columns()] == [True, True, False]


def test_as_table_coercion():
    t = users_table()
    assert as_table(t) is t
    assert isinstance(as_table(User), SATable)
    assert isinstance(as_table(User.__table__), SATable)
    with pytest.raises(TypeError):
        as_table(object())
