from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import strawberry
from strawberry.schema.config import StrawberryConfig

from .adapters import BaseAdapter, get_adapter
from .config import RowQLConfig
from .metadata import Table, as_table
from .mutation import create_insert_mutation_field
from .naming import python_attr_name
from .types import build_payload_interface

__all__ = ['RowSchema']

_logger = logging.getLogger("rowql")


class RowSchema:
    """Registry of tables exposed through generated insert mutations.

    Owns the settings every table shares (dialect adapter, value filter,
    payload interface) and the cache of generated Strawberry types. Type
    names depend only on table type names, so building twice yields the same
    schema.
    """

    def __init__(self, config: Optional[RowQLConfig] = None, *, tables: Iterable[Any] = ()) -> None:
        self.config = config or RowQLConfig()
        self.adapter: BaseAdapter = get_adapter(self.config.dialect)
        self.tables: Dict[str, Table] = {}
        self._st_types: Dict[str, Any] = {}
        for t in tables:
            self.register(t)

    def register(self, source: Any) -> Table:
        """Attach a table (``Table``, ``sqlalchemy.Table`` or declarative model)."""
        table = as_table(source)
        type_name = table.get_type_name()
        existing = self.tables.get(type_name)
        if existing is not None and existing is not table:
            raise ValueError(f"A table with type name {type_name!r} is already registered")
        table.schema = self
        self.tables[type_name] = table
        return table

    def table(self, source: Any) -> Any:
        """Decorator form of :meth:`register` for declarative models; returns the model."""
        self.register(source)
        return source

    def get_table(self, type_name: str) -> Table:
        try:
            return self.tables[type_name]
        except KeyError:
            raise KeyError(f"Unknown table type {type_name!r}") from None

    def payload_interface(self) -> Any:
        return build_payload_interface(self.config.payload_interface_name, self._st_types)

    def mutation_fields(self) -> Dict[str, Any]:
        """``python name -> strawberry field`` for every registered table."""
        out: Dict[str, Any] = {}
        for type_name, table in self.tables.items():
            out[python_attr_name(f"insert{type_name}")] = create_insert_mutation_field(table)
        return out

    def type_names(self) -> List[str]:
        return sorted(self._st_types)

    def to_strawberry(self, *, strawberry_config: Optional[StrawberryConfig] = None) -> strawberry.Schema:
        # Rebuild Strawberry runtime classes fresh per call
        self._st_types = {}

        async def _ping() -> str:  # noqa: D401
            return 'pong'
        _ping.__annotations__ = {'return': str}
        QueryPlain = type('Query', (), {'__doc__': 'Root query.'})
        QueryPlain.ping = strawberry.field(resolver=_ping, name='_ping')
        QueryPlain.__annotations__ = {}
        Query = strawberry.type(QueryPlain)

        Mutation = None
        fields = self.mutation_fields()
        if fields:
            MPlain = type('Mutation', (), {'__doc__': 'Auto-generated RowQL root mutation.'})
            for fname, fdef in fields.items():
                setattr(MPlain, fname, fdef)
            MPlain.__annotations__ = {}
            Mutation = strawberry.type(MPlain)
        _logger.debug("rowql: schema built with %d table(s), types: %s", len(self.tables), self.type_names())
        if strawberry_config is not None:
            return strawberry.Schema(query=Query, mutation=Mutation, config=strawberry_config)
        return strawberry.Schema(query=Query, mutation=Mutation)
