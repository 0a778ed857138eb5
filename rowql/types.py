"""Strawberry types derived from table metadata.

Builders take the schema's type cache (``name -> Strawberry type``) and
return the cached type when the name was already built, so every generated
name maps to exactly one type per schema build.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional

import strawberry

from .cursor import Cursor
from .metadata import Column, Table
from .naming import constant_case, python_attr_name

__all__ = [
    'column_annotation',
    'build_table_type',
    'build_edge_type',
    'build_ordering_enum',
    'build_payload_interface',
    'cached_type',
]

_logger = logging.getLogger("rowql")

TypeCache = Dict[str, Any]

_CLIENT_MUTATION_ID_DESC = (
    "The exact same `clientMutationId` that was provided in the mutation input, "
    "unchanged and unused. May be used by a client to track mutations."
)


def column_annotation(column: Column) -> Any:
    """GraphQL-facing annotation of a column: nullable columns are Optional."""
    py_t = column.python_type
    return Optional[py_t] if column.is_nullable else py_t


def cached_type(cache: TypeCache, name: str, build: Callable[[], Any]) -> Any:
    st = cache.get(name)
    if st is None:
        st = build()
        cache[name] = st
        _logger.debug("rowql: built type %s", name)
    return st


def _make_column_resolver(column: Column, annotation: Any):
    def resolve(root):
        return root.value_of(column)
    resolve.__name__ = f"resolve_{python_attr_name(column.field_name)}"
    resolve.__annotations__ = {'return': annotation}
    return resolve


def build_table_type(table: Table, cache: TypeCache) -> Any:
    """Object type named after the table with one field per column."""
    name = table.get_type_name()

    def build():
        Plain = type(name, (), {'__doc__': table.description or f"A row of {table.get_markdown_type_name()}."})
        Plain.__module__ = __name__
        for col in table.get_columns():
            ann = column_annotation(col)
            setattr(
                Plain,
                python_attr_name(col.field_name),
                strawberry.field(
                    resolver=_make_column_resolver(col, ann),
                    name=col.field_name,
                    description=col.description,
                ),
            )
        Plain.__annotations__ = {}
        return strawberry.type(Plain, name=name, description=Plain.__doc__)

    return cached_type(cache, name, build)


def build_edge_type(table: Table, cache: TypeCache) -> Any:
    name = f"{table.get_type_name()}Edge"

    def build():
        node_type = build_table_type(table, cache)
        Plain = type(name, (), {'__doc__': f"A {table.get_markdown_type_name()} edge in a connection."})
        Plain.__module__ = __name__
        Plain.cursor = strawberry.field(description="A cursor for use in pagination.")
        Plain.node = strawberry.field(description=f"The {table.get_markdown_type_name()} at the end of the edge.")
        Plain.__annotations__ = {'cursor': Optional[Cursor], 'node': Optional[node_type]}
        return strawberry.type(Plain, name=name, description=Plain.__doc__)

    return cached_type(cache, name, build)


def build_ordering_enum(table: Table, cache: TypeCache) -> Any:
    """Enum of the table's orderable columns; member values are SQL column names."""
    name = f"{table.get_type_name()}Ordering"

    def build():
        members = {constant_case(col.field_name): col.name for col in table.get_columns()}
        py_enum = Enum(name, members)
        return strawberry.enum(py_enum, name=name, description=f"Methods to use when ordering {table.get_markdown_type_name()}.")

    return cached_type(cache, name, build)


def build_payload_interface(name: str, cache: TypeCache) -> Any:
    """Interface every mutation payload implements; contributes ``clientMutationId``."""

    def build():
        Plain = type(name, (), {'__doc__': "The payload every mutation returns."})
        Plain.__module__ = __name__
        Plain.client_mutation_id = strawberry.field(
            default=None,
            name='clientMutationId',
            description=_CLIENT_MUTATION_ID_DESC,
        )
        Plain.__annotations__ = {'client_mutation_id': Optional[str]}
        return strawberry.interface(Plain, name=name, description=Plain.__doc__)

    return cached_type(cache, name, build)
