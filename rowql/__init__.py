"""RowQL public API and lightweight lazy exports.

Generates GraphQL ``insert<Type>`` mutations (input type, payload type,
resolver) from relational table metadata, on top of Strawberry and
SQLAlchemy.

Exposes:
- RowSchema, RowQLConfig
- Metadata: Table, Column, TableDef, ColumnDef, SATable, SAColumn
- SQLBuilder, SQLAlchemyClient
- create_insert_mutation_field, InsertResolver, CursorResolver
"""
from __future__ import annotations

_EXPORTS = {
    'RowSchema': '.schema',
    'RowQLConfig': '.config',
    'Table': '.metadata',
    'Column': '.metadata',
    'TableDef': '.metadata',
    'ColumnDef': '.metadata',
    'SATable': '.metadata',
    'SAColumn': '.metadata',
    'SQLBuilder': '.sql.builder',
    'SQLAlchemyClient': '.clients',
    'DatabaseClient': '.clients',
    'TableRow': '.rows',
    'create_insert_mutation_field': '.mutation',
    'InsertResolver': '.mutation',
    'CursorResolver': '.cursor',
    'serialize_cursor': '.cursor',
    'parse_cursor': '.cursor',
}


def __getattr__(name: str):  # PEP 562 lazy exports
    import importlib as _importlib
    mod = _EXPORTS.get(name)
    if mod is None:
        raise AttributeError(name)
    return getattr(_importlib.import_module(mod, __name__), name)


__all__ = sorted(_EXPORTS)
