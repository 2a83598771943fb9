from __future__ import annotations

import sqlite3
from datetime import datetime, timezone

from csspruner.errors import StoreError
from csspruner.store.db import Database


class UsedCssRepository:
    """Optimized stylesheets keyed by page URL and device class."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def save(self, url: str, css: str, is_mobile: bool = False) -> None:
        """Insert or replace the stylesheet stored for (*url*, *is_mobile*)."""
        try:
            self._db.execute(
                """INSERT INTO used_css (url, is_mobile, css, updated_at)
                   VALUES (?, ?, ?, ?)
                   ON CONFLICT(url, is_mobile)
                   DO UPDATE SET css = excluded.css, updated_at = excluded.updated_at""",
                (url, int(is_mobile), css, datetime.now(timezone.utc).isoformat()),
            )
            self._db.commit()
        except sqlite3.Error as exc:
            raise StoreError(f"Could not save CSS for {url}: {exc}", cause=exc) from exc

    def get(self, url: str, is_mobile: bool = False) -> str | None:
        """Return the stored stylesheet, or None if there is none."""
        row = self._db.fetch_one(
            "SELECT css FROM used_css WHERE url = ? AND is_mobile = ?",
            (url, int(is_mobile)),
        )
        if row is None:
            return None
        return row["css"]

    def delete(self, url: str) -> int:
        """Delete both device variants for *url*; return the number of rows removed."""
        cursor = self._db.execute("DELETE FROM used_css WHERE url = ?", (url,))
        self._db.commit()
        return cursor.rowcount

    def count(self) -> int:
        """Return the total number of stored stylesheets."""
        row = self._db.fetch_one("SELECT COUNT(*) as cnt FROM used_css")
        assert row is not None
        return row["cnt"]
