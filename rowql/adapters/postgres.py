from __future__ import annotations

from .base import BaseAdapter


class PostgresAdapter(BaseAdapter):
    name = 'postgres'
