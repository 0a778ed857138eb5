"""The ``insert<Type>`` mutation: input type, payload type and resolver."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated, Any, Callable, Dict, List, Mapping, Optional, Tuple

import strawberry
from strawberry import UNSET
from strawberry.types import Info as StrawberryInfo

from .clients import get_db_client
from .cursor import CursorResolver
from .metadata import Column, Table
from .naming import python_attr_name
from .rows import TableRow
from .sql.builder import SQLBuilder
from .types import (
    build_edge_type,
    build_ordering_enum,
    build_table_type,
    cached_type,
    column_annotation,
)

if TYPE_CHECKING:  # pragma: no cover
    from .adapters import BaseAdapter
    from .schema import RowSchema

__all__ = [
    'is_present',
    'is_truthy',
    'VALUE_PREDICATES',
    'InsertResolver',
    'build_input_type',
    'build_payload_type',
    'create_insert_mutation_field',
]

_logger = logging.getLogger("rowql")


# --- Value predicates ----------------------------------------------------

def is_present(value: Any) -> bool:
    """Supplied and not null. Keeps falsy scalars such as ``0``, ``""`` and ``False``."""
    return value is not None and value is not UNSET


def is_truthy(value: Any) -> bool:
    """Legacy filter: any falsy value falls back to the column default."""
    return value is not UNSET and bool(value)


VALUE_PREDICATES: Dict[str, Callable[[Any], bool]] = {
    'present': is_present,
    'truthy': is_truthy,
}


# --- Input type ----------------------------------------------------------

def build_input_type(table: Table, cache: Dict[str, Any]) -> Any:
    """``Insert<Type>Input``: one field per column plus ``clientMutationId``.

    Columns with a default are optional; the rest keep their own nullability.
    """
    name = f"Insert{table.get_type_name()}Input"

    def build():
        InPlain = type(name, (), {'__doc__': f"The {table.get_markdown_type_name()} to insert."})
        InPlain.__module__ = __name__
        anns: Dict[str, Any] = {}
        for col in table.get_columns():
            attr = python_attr_name(col.field_name)
            anns[attr] = Optional[col.python_type] if col.has_default else column_annotation(col)
            setattr(InPlain, attr, strawberry.field(default=UNSET, name=col.field_name, description=col.description))
        anns['client_mutation_id'] = Optional[str]
        InPlain.client_mutation_id = strawberry.field(
            default=UNSET,
            name='clientMutationId',
            description="An arbitrary value passed back in the payload to correlate mutations.",
        )
        InPlain.__annotations__ = anns
        return strawberry.input(InPlain, name=name, description=InPlain.__doc__)

    return cached_type(cache, name, build)


# --- Resolver ------------------------------------------------------------

def _input_value(input_obj: Any, field_name: str, attr: Optional[str] = None) -> Any:
    # Strawberry input instances or plain mappings keyed by GraphQL field name
    if isinstance(input_obj, Mapping):
        return input_obj.get(field_name, UNSET)
    return getattr(input_obj, attr or python_attr_name(field_name), UNSET)


class InsertResolver:
    """Execute ``insert into <table>`` for one submitted input.

    Holds the table and its column list as captured at build time. Each call
    performs exactly one statement through the request's database client;
    client errors propagate unchanged. Mutations run serially in graphql-core,
    so nothing here is batched or cached.
    """

    def __init__(
        self,
        table: Table,
        payload_type: Any,
        *,
        adapter: 'BaseAdapter',
        value_filter: str = 'present',
        commit: bool = True,
    ) -> None:
        if value_filter not in VALUE_PREDICATES:
            raise ValueError(f"Unknown value_filter {value_filter!r}")
        self.table = table
        self.columns: List[Column] = table.get_columns()
        self.payload_type = payload_type
        self.adapter = adapter
        self.accept = VALUE_PREDICATES[value_filter]
        self.commit = commit

    def entries(self, input_obj: Any) -> List[Tuple[Column, Any]]:
        """(column, value) pairs to insert, in table column order."""
        pairs = [(col, _input_value(input_obj, col.field_name)) for col in self.columns]
        return [(col, value) for col, value in pairs if self.accept(value)]

    def statement(self, input_obj: Any) -> SQLBuilder:
        entries = self.entries(input_obj)
        return self.adapter.insert_statement(
            self.table.get_identifier(self.adapter),
            [col.name for col, _ in entries],
            [value for _, value in entries],
        )

    async def resolve(self, info: Any, input_obj: Any) -> Any:
        client_mutation_id = _input_value(input_obj, 'clientMutationId', 'client_mutation_id')
        if client_mutation_id is UNSET:
            client_mutation_id = None
        text, params = self.statement(input_obj).build()
        _logger.debug("rowql: %s (%d params)", text, len(params))
        client = get_db_client(info, commit=self.commit)
        rows = await client.execute(text, params)
        row = rows[0] if rows else None
        output = TableRow(self.table, row) if row is not None else None
        return self.payload_type(client_mutation_id=client_mutation_id, output=output)


# --- Payload type --------------------------------------------------------

def build_payload_type(table: Table, schema: 'RowSchema') -> Any:
    """``Insert<Type>Payload`` implementing the schema's payload interface.

    Exposes the inserted row under the table's field name and an edge under
    ``<field>Edge`` whose optional ``orderBy`` picks the cursor column.
    """
    cache = schema._st_types
    name = f"Insert{table.get_type_name()}Payload"
    field_name = table.get_field_name()
    md = table.get_markdown_type_name()

    def build():
        row_type = build_table_type(table, cache)
        edge_type = build_edge_type(table, cache)
        order_enum = build_ordering_enum(table, cache)
        cursors = CursorResolver(table)

        def resolve_node(root):
            return root.output
        resolve_node.__annotations__ = {'return': Optional[row_type]}

        def resolve_edge(root, order_by=None):
            return cursors.resolve(root.output, order_by)
        resolve_edge.__annotations__ = {
            'order_by': Annotated[Optional[order_enum], strawberry.argument(name='orderBy')],
            'return': Optional[edge_type],
        }

        Plain = type(name, (schema.payload_interface(),), {
            '__doc__': f"Contains the {md} node inserted by the mutation.",
        })
        Plain.__module__ = __name__
        Plain.output = None
        Plain.node = strawberry.field(resolver=resolve_node, name=field_name, description=f"The inserted {md}.")
        Plain.edge = strawberry.field(
            resolver=resolve_edge,
            name=f"{field_name}Edge",
            description="An edge to be inserted in a connection with help of the containing cursor.",
        )
        Plain.__annotations__ = {'output': strawberry.Private[Optional[TableRow]]}
        return strawberry.type(Plain, name=name, description=Plain.__doc__)

    return cached_type(cache, name, build)


# --- Field ---------------------------------------------------------------

def create_insert_mutation_field(table: Table) -> Any:
    """Mutation field ``insert<Type>(input: Insert<Type>Input!): Insert<Type>Payload``.

    The table must be registered with a :class:`~rowql.schema.RowSchema`,
    which supplies the type cache, payload interface and dialect.
    """
    schema = table.schema
    if schema is None:
        raise ValueError(f"Table {table.name!r} is not registered with a RowSchema")
    input_type = build_input_type(table, schema._st_types)
    payload_type = build_payload_type(table, schema)
    resolver = InsertResolver(
        table,
        payload_type,
        adapter=schema.adapter,
        value_filter=schema.config.value_filter,
        commit=schema.config.commit,
    )

    async def insert(info, input):
        return await resolver.resolve(info, input)
    insert.__name__ = python_attr_name(f"insert{table.get_type_name()}")
    insert.__annotations__ = {
        'info': StrawberryInfo,
        'input': input_type,
        'return': Optional[payload_type],
    }
    return strawberry.mutation(
        resolver=insert,
        name=f"insert{table.get_type_name()}",
        description=f"Creates a new node of the {table.get_markdown_type_name()} type.",
    )
