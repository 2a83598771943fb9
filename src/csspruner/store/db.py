"""SQLite connection wrapper for the optimized-CSS store."""

from __future__ import annotations

import sqlite3


class Database:
    """Single SQLite connection in WAL mode, opened explicitly or via ``with``."""

    def __init__(self, path: str = ":memory:") -> None:
        self._path = path
        self._conn: sqlite3.Connection | None = None

    @property
    def path(self) -> str:
        return self._path

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    def connect(self) -> None:
        """Open the connection; a no-op when already open."""
        if self._conn is not None:
            return
        self._conn = sqlite3.connect(self._path)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        assert self._conn is not None, "Database not connected"
        return self._conn.execute(sql, params)

    def executescript(self, script: str) -> None:
        assert self._conn is not None, "Database not connected"
        self._conn.executescript(script)

    def fetch_one(self, sql: str, params: tuple = ()) -> sqlite3.Row | None:
        """Execute a query and return the first row, or None."""
        return self.execute(sql, params).fetchone()

    def commit(self) -> None:
        assert self._conn is not None, "Database not connected"
        self._conn.commit()

    def __enter__(self) -> Database:
        self.connect()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
