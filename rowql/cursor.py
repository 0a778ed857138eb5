"""Edge cursors for inserted rows.

A cursor is either the value of one ordering column or the list of primary
key values in key order. On the wire it is the base64 of its compact JSON,
the same scheme connection fields use, so a returned edge can be spliced
into a paginated connection on the client.
"""
from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional
from uuid import UUID

import strawberry

if TYPE_CHECKING:  # pragma: no cover
    from .metadata import Column, Table
    from .rows import TableRow

__all__ = ['Cursor', 'CursorResolver', 'Edge', 'serialize_cursor', 'parse_cursor']


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode('ascii')
    raise TypeError(f"Cursor value of type {type(value).__name__} is not JSON serializable")


def serialize_cursor(value: Any) -> str:
    raw = json.dumps(value, separators=(',', ':'), default=_json_default)
    return base64.b64encode(raw.encode('utf-8')).decode('ascii')


def parse_cursor(value: str) -> Any:
    try:
        return json.loads(base64.b64decode(value.encode('ascii'), validate=True).decode('utf-8'))
    except (ValueError, UnicodeError) as exc:
        raise ValueError(f"Invalid cursor: {value!r}") from exc


@strawberry.scalar(
    name="Cursor",
    description="An opaque pagination cursor.",
    serialize=serialize_cursor,
    parse_value=parse_cursor,
)
class Cursor:
    """Cursor values are plain JSON data; this class only names the scalar."""


@dataclass
class Edge:
    cursor: Any
    node: Any


def order_column_name(order_by: Any) -> Optional[str]:
    """Normalize an ordering selector (enum member or raw name) to a SQL column name."""
    if order_by is None:
        return None
    if isinstance(order_by, Enum):
        return order_by.value
    return str(order_by)


class CursorResolver:
    """Derive the edge of an inserted row.

    With an ordering selector the cursor is that column's value; otherwise it
    is the list of primary key values in the table's declared key order.
    """

    def __init__(self, table: 'Table') -> None:
        self.table = table
        self.primary_keys: List['Column'] = table.get_primary_keys()

    def cursor_for(self, row: 'TableRow', order_by: Any = None) -> Any:
        column_name = order_column_name(order_by)
        if column_name:
            return row.get(column_name)
        return [row.get(pk.name) for pk in self.primary_keys]

    def resolve(self, row: Optional['TableRow'], order_by: Any = None) -> Optional[Edge]:
        # No inserted row: the edge is null rather than an error
        if row is None:
            return None
        return Edge(cursor=self.cursor_for(row, order_by), node=row)
