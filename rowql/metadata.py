"""Table and column metadata consumed by the schema generators.

Generators only talk to the abstract :class:`Table` / :class:`Column`
interfaces. Two sources implement them:

- :class:`TableDef` / :class:`ColumnDef`: tables declared in code.
- :class:`SATable` / :class:`SAColumn`: a SQLAlchemy ``Table``, either from a
  declarative model (``Model.__table__``) or reflected with ``MetaData.reflect``.
"""
from __future__ import annotations

import uuid as _py_uuid
from abc import ABC, abstractmethod
from datetime import date, datetime, time
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import Table as SATableObj
from sqlalchemy.types import TypeDecorator
from sqlalchemy.sql.sqltypes import (
    JSON as SA_JSON,
    Boolean,
    Date,
    DateTime,
    Float,
    Integer,
    Numeric,
    String,
    Time,
    Uuid as SA_Uuid,
)
from strawberry.scalars import JSON as ST_JSON

from .naming import snake_to_camel

if TYPE_CHECKING:  # pragma: no cover
    from .adapters import BaseAdapter
    from .schema import RowSchema

__all__ = [
    'Column',
    'Table',
    'ColumnDef',
    'TableDef',
    'SAColumn',
    'SATable',
    'as_table',
    'sa_python_type',
    'tables_from_metadata',
]


class Column(ABC):
    """A table column as seen by the generators."""

    @property
    @abstractmethod
    def name(self) -> str:
        """SQL column name."""

    @property
    @abstractmethod
    def python_type(self) -> Any:
        """Python/Strawberry annotation the column maps to (without Optional)."""

    @property
    @abstractmethod
    def is_nullable(self) -> bool: ...

    @property
    @abstractmethod
    def has_default(self) -> bool: ...

    @property
    def description(self) -> Optional[str]:
        return None

    @property
    def field_name(self) -> str:
        return snake_to_camel(self.name)

    def get_field_name(self) -> str:
        return self.field_name

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


class Table(ABC):
    """A relational table as seen by the generators.

    ``schema`` is the owning :class:`~rowql.schema.RowSchema`; it is set on
    registration and supplies the dialect adapter used for identifiers.
    """

    schema: Optional['RowSchema'] = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Unqualified SQL table name."""

    @property
    def sql_schema(self) -> Optional[str]:
        """SQL schema (namespace) the table lives in, if any."""
        return None

    @property
    def description(self) -> Optional[str]:
        return None

    @abstractmethod
    def get_columns(self) -> List[Column]: ...

    @abstractmethod
    def get_primary_keys(self) -> List[Column]: ...

    def get_type_name(self) -> str:
        return snake_to_camel(self.name, upper_first=True)

    def get_markdown_type_name(self) -> str:
        return f"`{self.get_type_name()}`"

    def get_field_name(self) -> str:
        """Type name with its first letter lower-cased."""
        type_name = self.get_type_name()
        return type_name[:1].lower() + type_name[1:]

    def get_identifier(self, adapter: Optional['BaseAdapter'] = None) -> str:
        """Schema-qualified, quoted SQL identifier of the table."""
        if adapter is None:
            if self.schema is not None:
                adapter = self.schema.adapter
            else:
                from .adapters import get_adapter
                adapter = get_adapter('postgresql')
        return adapter.table_ident(self.name, self.sql_schema)

    def get_column(self, field_name: str) -> Optional[Column]:
        for col in self.get_columns():
            if col.field_name == field_name:
                return col
        return None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


# --- Declared in code ------------------------------------------------------

class ColumnDef(Column):
    def __init__(
        self,
        name: str,
        python_type: Any = str,
        *,
        nullable: bool = True,
        has_default: bool = False,
        description: Optional[str] = None,
        field_name: Optional[str] = None,
    ) -> None:
        self._name = name
        self._python_type = python_type
        self._nullable = nullable
        self._has_default = has_default
        self._description = description
        self._field_name = field_name

    @property
    def name(self) -> str:
        return self._name

    @property
    def python_type(self) -> Any:
        return self._python_type

    @property
    def is_nullable(self) -> bool:
        return self._nullable

    @property
    def has_default(self) -> bool:
        return self._has_default

    @property
    def description(self) -> Optional[str]:
        return self._description

    @property
    def field_name(self) -> str:
        return self._field_name or snake_to_camel(self._name)


class TableDef(Table):
    """Table declared directly from column definitions.

    ``primary_keys`` lists SQL column names in key order; each must be one of
    ``columns``.
    """

    def __init__(
        self,
        name: str,
        columns: Sequence[ColumnDef],
        primary_keys: Sequence[str] = (),
        *,
        sql_schema: Optional[str] = None,
        type_name: Optional[str] = None,
        field_name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> None:
        self._name = name
        self._columns = list(columns)
        by_name = {c.name: c for c in self._columns}
        missing = [pk for pk in primary_keys if pk not in by_name]
        if missing:
            raise ValueError(f"Primary key column(s) {missing} not found in table {name!r}")
        self._primary_keys = [by_name[pk] for pk in primary_keys]
        self._sql_schema = sql_schema
        self._type_name = type_name
        self._field_name = field_name
        self._description = description

    @property
    def name(self) -> str:
        return self._name

    @property
    def sql_schema(self) -> Optional[str]:
        return self._sql_schema

    @property
    def description(self) -> Optional[str]:
        return self._description

    def get_columns(self) -> List[Column]:
        return list(self._columns)

    def get_primary_keys(self) -> List[Column]:
        return list(self._primary_keys)

    def get_type_name(self) -> str:
        return self._type_name or super().get_type_name()

    def get_field_name(self) -> str:
        return self._field_name or super().get_field_name()


# --- SQLAlchemy ------------------------------------------------------------

def sa_python_type(sqlatype: Any) -> Any:
    """Map a SQLAlchemy column type to a Python (annotation) type.

    Defaults to str for unknown types (safe GraphQL scalar mapping).
    """
    # Unwrap TypeDecorator to its implementation type
    if isinstance(sqlatype, TypeDecorator):
        return sa_python_type(sqlatype.impl_instance)
    if isinstance(sqlatype, Boolean):
        return bool
    if isinstance(sqlatype, Integer):
        return int
    if isinstance(sqlatype, DateTime):
        return datetime
    if isinstance(sqlatype, Date):
        return date
    if isinstance(sqlatype, Time):
        return time
    if isinstance(sqlatype, SA_Uuid):
        return _py_uuid.UUID
    # SQLAlchemy Enum is a String subclass; expose its values as plain strings
    if isinstance(sqlatype, String):
        return str
    # Treat DECIMAL/NUMERIC as float for GraphQL scalar purposes
    if isinstance(sqlatype, (Float, Numeric)):
        return float
    if isinstance(sqlatype, SA_JSON):
        return ST_JSON
    return str


class SAColumn(Column):
    def __init__(self, sa_column: Any, *, field_name: Optional[str] = None) -> None:
        self.sa_column = sa_column
        self._field_name = field_name

    @property
    def name(self) -> str:
        return self.sa_column.name

    @property
    def python_type(self) -> Any:
        return sa_python_type(self.sa_column.type)

    @property
    def is_nullable(self) -> bool:
        return bool(self.sa_column.nullable)

    @property
    def has_default(self) -> bool:
        # Only database-side defaults count: statements are plain SQL, so
        # Python-side Column(default=...) values are never applied.
        col = self.sa_column
        if col.server_default is not None:
            return True
        if getattr(col, 'identity', None) is not None or getattr(col, 'computed', None) is not None:
            return True
        table = getattr(col, 'table', None)
        return table is not None and table.autoincrement_column is col

    @property
    def description(self) -> Optional[str]:
        return self.sa_column.comment

    @property
    def field_name(self) -> str:
        return self._field_name or snake_to_camel(self.name)


class SATable(Table):
    """Adapter over a SQLAlchemy ``Table``.

    ``field_names`` optionally overrides the API name of individual columns
    (keyed by SQL column name).
    """

    def __init__(
        self,
        sa_table: SATableObj,
        *,
        type_name: Optional[str] = None,
        field_name: Optional[str] = None,
        field_names: Optional[Dict[str, str]] = None,
    ) -> None:
        if not isinstance(sa_table, SATableObj):
            raise TypeError(f"SATable expects a sqlalchemy.Table, got {type(sa_table).__name__}")
        self.sa_table = sa_table
        self._type_name = type_name
        self._field_name = field_name
        overrides = field_names or {}
        self._columns: List[Column] = [
            SAColumn(c, field_name=overrides.get(c.name)) for c in sa_table.columns
        ]
        by_name = {c.name: c for c in self._columns}
        self._primary_keys = [by_name[c.name] for c in sa_table.primary_key.columns]

    @classmethod
    def from_model(cls, model_cls: Any, **kwargs: Any) -> 'SATable':
        """Build from a declarative model class; type name defaults to the class name."""
        table = getattr(model_cls, '__table__', None)
        if table is None:
            raise TypeError(f"{model_cls!r} has no __table__; not a SQLAlchemy declarative model")
        kwargs.setdefault('type_name', getattr(model_cls, '__name__', None))
        return cls(table, **kwargs)

    @property
    def name(self) -> str:
        return self.sa_table.name

    @property
    def sql_schema(self) -> Optional[str]:
        return self.sa_table.schema

    @property
    def description(self) -> Optional[str]:
        return self.sa_table.comment

    def get_columns(self) -> List[Column]:
        return list(self._columns)

    def get_primary_keys(self) -> List[Column]:
        return list(self._primary_keys)

    def get_type_name(self) -> str:
        return self._type_name or super().get_type_name()

    def get_field_name(self) -> str:
        return self._field_name or super().get_field_name()


def as_table(source: Any) -> Table:
    """Coerce a metadata source (Table, sqlalchemy.Table, declarative model) to a Table."""
    if isinstance(source, Table):
        return source
    if isinstance(source, SATableObj):
        return SATable(source)
    if getattr(source, '__table__', None) is not None:
        return SATable.from_model(source)
    raise TypeError(f"Unsupported table metadata source: {source!r}")


def tables_from_metadata(metadata: Any, names: Optional[Iterable[str]] = None) -> List[Table]:
    """Wrap the tables of a (possibly reflected) ``MetaData`` in dependency order."""
    wanted = set(names) if names is not None else None
    return [
        SATable(t) for t in metadata.sorted_tables
        if wanted is None or t.name in wanted
    ]
