from __future__ import annotations

from typing import Any, Optional, Sequence

from ..sql.builder import SQLBuilder


class BaseAdapter:
    """ANSI defaults: double-quoted identifiers and ``returning *``."""

    name = 'base'

    def quote_ident(self, name: str) -> str:
        return '"' + str(name).replace('"', '""') + '"'

    # Table identifier helper; adapters can override for dialect-specific quoting/qualification
    def table_ident(self, name: str, schema: Optional[str] = None) -> str:
        if schema:
            return f"{self.quote_ident(schema)}.{self.quote_ident(name)}"
        return self.quote_ident(name)

    def output_clause(self) -> Optional[str]:
        """Clause placed between the column list and VALUES (MSSQL OUTPUT)."""
        return None

    def returning_clause(self) -> Optional[str]:
        return 'returning *'

    def insert_statement(
        self,
        identifier: str,
        columns: Sequence[str],
        values: Sequence[Any],
    ) -> SQLBuilder:
        """Render a single-row INSERT that hands the full row back.

        ``columns`` are unquoted SQL names paired positionally with ``values``.
        An empty column list inserts a row of defaults.
        """
        if len(columns) != len(values):
            raise ValueError(f"{len(columns)} column(s) but {len(values)} value(s) for insert into {identifier}")
        sql = SQLBuilder().add(f"insert into {identifier}")
        if columns:
            sql.add(f"({', '.join(self.quote_ident(c) for c in columns)})")
        output = self.output_clause()
        if output:
            sql.add(output)
        if columns:
            sql.add('values').add(f"({', '.join('$' for _ in values)})", values)
        else:
            sql.add('default values')
        returning = self.returning_clause()
        if returning:
            sql.add(returning)
        return sql
