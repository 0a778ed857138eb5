import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from rowql import DatabaseClient, RowQLConfig, SQLAlchemyClient
from rowql.clients import get_db_client, get_db_session, to_named_binds
from tests.fixtures import RecordingClient


def test_to_named_binds():
    text, binds = to_named_binds('insert into t ("a", "b") values ($1, $2)', ['x', 0])
    assert text == 'insert into t ("a", "b") values (:p1, :p2)'
    assert binds == {'p1': 'x', 'p2': 0}


def test_to_named_binds_handles_two_digit_positions():
    text, binds = to_named_binds(' '.join(f'${i}' for i in range(1, 12)), list(range(11)))
    assert text.endswith(':p10 :p11')
    assert binds['p11'] == 10


def test_to_named_binds_leaves_quoted_spans_alone():
    text, binds = to_named_binds('insert into "a$1" ("x:y") values ($1)', [3])
    assert text == 'insert into "a$1" ("x\\:y") values (:p1)'
    assert binds == {'p1': 3}


def test_explicit_client_wins_over_session():
    client = RecordingClient()
    assert get_db_client({'db_client': client, 'db_session': object()}) is client
    assert isinstance(client, DatabaseClient)


def test_session_is_wrapped():
    session = object()
    client = get_db_client({'session': session}, commit=False)
    assert isinstance(client, SQLAlchemyClient)
    assert client.session is session
    assert client.commit is False


def test_context_object_attributes():
    class Ctx:
        db = 'the-session'

    class Info:
        context = Ctx()

    assert get_db_session(Info()) == 'the-session'


def test_missing_client_raises():
    with pytest.raises(ValueError):
        get_db_client({'unrelated': 1})


async def test_sqlalchemy_client_returns_dict_rows(db_session: AsyncSession):
    client = SQLAlchemyClient(db_session, commit=False)
    rows = await client.execute(
        'insert into users ("name", "email") values ($1, $2) returning *',
        ['Eve', 'eve@example.com'],
    )
    assert len(rows) == 1
    assert rows[0]['name'] == 'Eve'
    assert isinstance(rows[0], dict)
    await db_session.rollback()


def test_config_defaults():
    cfg = RowQLConfig()
    assert (cfg.dialect, cfg.value_filter, cfg.commit) == ('postgresql', 'present', True)
    assert cfg.payload_interface_name == 'MutationPayload'


def test_config_rejects_unknown_value_filter():
    with pytest.raises(ValueError):
        RowQLConfig(value_filter='never')


def test_config_from_env():
    cfg = RowQLConfig.from_env({
        'ROWQL_DIALECT': 'mssql',
        'ROWQL_VALUE_FILTER': ' Truthy ',
        'ROWQL_COMMIT': 'no',
    })
    assert cfg == RowQLConfig(dialect='mssql', value_filter='truthy', commit=False)


def test_config_from_env_keeps_defaults():
    assert RowQLConfig.from_env({}) == RowQLConfig()
