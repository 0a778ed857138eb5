"""Database clients used by the insert resolver.

A client is anything with ``async execute(text, params) -> rows`` where
``text`` uses ``$1..$n`` placeholders and rows are mappings keyed by SQL
column name. :class:`SQLAlchemyClient` adapts an SQLAlchemy async session or
connection to that shape.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable

from sqlalchemy import text as _text
from sqlalchemy.ext.asyncio import AsyncSession

from .sql.builder import QUOTED_SPAN

__all__ = [
    'DatabaseClient',
    'SQLAlchemyClient',
    'to_named_binds',
    'get_db_session',
    'get_db_client',
]

_logger = logging.getLogger("rowql")

_NUMBERED = re.compile(QUOTED_SPAN + r"|\$(\d+)")


def _named_bind(m: 're.Match[str]') -> str:
    if m.group(1):
        return f":p{m.group(1)}"
    # text() would read ':word' inside a quoted span as a bind
    return m.group(0).replace(':', '\\:')


@runtime_checkable
class DatabaseClient(Protocol):
    async def execute(self, text: str, params: Sequence[Any]) -> Sequence[Mapping[str, Any]]: ...


def to_named_binds(text: str, params: Sequence[Any]) -> Tuple[str, Dict[str, Any]]:
    """Rewrite ``$n`` placeholders to ``:pn`` binds for ``sqlalchemy.text``.

    Quoted identifiers and string literals are kept as written, with colons
    escaped so ``text()`` does not take them for binds.
    """
    return (
        _NUMBERED.sub(_named_bind, text),
        {f"p{i}": v for i, v in enumerate(params, start=1)},
    )


class SQLAlchemyClient:
    """Run positional statements through an ``AsyncSession`` or ``AsyncConnection``.

    A single attempt per call; driver errors propagate unchanged. When
    ``commit`` is set and the target is an ``AsyncSession`` the session is
    committed after rows are fetched.
    """

    def __init__(self, session: Any, *, commit: bool = True) -> None:
        self.session = session
        self.commit = commit

    async def execute(self, text: str, params: Sequence[Any]) -> List[Mapping[str, Any]]:
        stmt, binds = to_named_binds(text, params)
        result = await self.session.execute(_text(stmt), binds)
        rows: List[Mapping[str, Any]] = [dict(r) for r in result.mappings().all()] if result.returns_rows else []
        if self.commit and isinstance(self.session, AsyncSession):
            await self.session.commit()
        return rows


def get_db_session(info_or_ctx: Any) -> Any | None:
    """Extract an AsyncSession-like object from context.

    Accepts either a Strawberry ``Info`` or a plain context object/dict. Tries
    common keys/attributes in order: ``db_session``, ``db``, ``session``,
    ``async_session``.
    """
    if info_or_ctx is None:
        return None
    ctx = getattr(info_or_ctx, 'context', info_or_ctx)
    if ctx is None:
        return None
    for key in ('db_session', 'db', 'session', 'async_session'):
        if isinstance(ctx, Mapping):
            val = ctx.get(key)
        else:
            val = getattr(ctx, key, None)
        if val is not None:
            return val
    return None


def get_db_client(info_or_ctx: Any, *, commit: bool = True) -> DatabaseClient:
    """Return the request's database client.

    An explicit ``db_client`` in the context wins; otherwise an SQLAlchemy
    session found by :func:`get_db_session` is wrapped in :class:`SQLAlchemyClient`.
    """
    ctx = getattr(info_or_ctx, 'context', info_or_ctx)
    client: Optional[Any] = None
    if isinstance(ctx, Mapping):
        client = ctx.get('db_client')
    elif ctx is not None:
        client = getattr(ctx, 'db_client', None)
    if client is not None:
        return client
    session = get_db_session(ctx)
    if session is None:
        raise ValueError("No db_client or db_session in context")
    _logger.debug("rowql: wrapping %s in SQLAlchemyClient", type(session).__name__)
    return SQLAlchemyClient(session, commit=commit)
