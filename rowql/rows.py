from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator, Mapping

if TYPE_CHECKING:  # pragma: no cover
    from .metadata import Column, Table

__all__ = ['TableRow']


class TableRow(Mapping[str, Any]):
    """A database row tagged with the table it came from.

    Keys are SQL column names. Output types resolve their fields through
    :meth:`value_of`, which applies the owning table's column mapping.
    """

    __slots__ = ('table', '_values')

    def __init__(self, table: 'Table', values: Mapping[str, Any]) -> None:
        self.table = table
        self._values = dict(values)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def value_of(self, column: 'Column') -> Any:
        return self._values.get(column.name)

    def field(self, field_name: str) -> Any:
        """Value of the column exposed under ``field_name`` in the API."""
        column = self.table.get_column(field_name)
        if column is None:
            raise KeyError(f"{self.table.get_type_name()} has no field {field_name!r}")
        return self.value_of(column)

    def __repr__(self) -> str:
        return f"<TableRow {self.table.name} {self._values!r}>"
