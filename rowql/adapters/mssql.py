from __future__ import annotations

from typing import Optional

from .base import BaseAdapter


class MSSQLAdapter(BaseAdapter):
    name = 'mssql'

    # Bracket quoting: [schema].[table]
    def quote_ident(self, name: str) -> str:
        return '[' + str(name).replace(']', ']]') + ']'

    # SQL Server has no RETURNING; the inserted row comes back via OUTPUT
    def output_clause(self) -> Optional[str]:
        return 'output inserted.*'

    def returning_clause(self) -> Optional[str]:
        return None
