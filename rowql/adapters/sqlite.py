from __future__ import annotations

from .base import BaseAdapter


class SQLiteAdapter(BaseAdapter):
    """SQLite 3.35+ (``RETURNING`` support)."""

    name = 'sqlite'
