"""Provides the :class:`SqliteStore` class."""

import os
import os.path
import sqlite3
from typing import Optional

from notease.stores.base import KeyValueStore


_SQL_CREATE_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

_SQL_GET = 'SELECT value FROM kv WHERE key = ?'
_SQL_SET = 'INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)'
_SQL_REMOVE = 'DELETE FROM kv WHERE key = ?'


class SqliteStore(KeyValueStore):
    """Keeps values in a single table of a SQLite database.

    Every :meth:`set` and :meth:`remove` is committed immediately. The path ``:memory:`` gives a database that
    disappears when the store is closed.

    Remember to call :meth:`close` when done with the instance, or use the instance as a context manager.

    .. attribute:: path
       :type: str
    """
    def __init__(self, path: str):
        if not path:
            raise ValueError('`path` must be set for SqliteStore.')
        self.path = path
        self.connection = None
        self._connect()

    def _connect(self):
        if not self.path == ':memory:':
            parent = os.path.dirname(self.path)
            if parent:
                os.makedirs(parent, exist_ok=True)
        self.connection = sqlite3.connect(self.path)
        self.connection.executescript(_SQL_CREATE_SCHEMA)

    def get(self, key: str) -> Optional[str]:
        cursor = self.connection.cursor()
        cursor.execute(_SQL_GET, (key,))
        row = cursor.fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        self.connection.execute(_SQL_SET, (key, value))
        self.connection.commit()

    def remove(self, key: str) -> None:
        self.connection.execute(_SQL_REMOVE, (key,))
        self.connection.commit()

    def close(self):
        if self.connection:
            self.connection.close()
            self.connection = None
