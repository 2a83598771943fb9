from __future__ import annotations

from csspruner.store.db import Database

SCHEMA = """
CREATE TABLE IF NOT EXISTS used_css (
    url TEXT NOT NULL,
    is_mobile INTEGER NOT NULL DEFAULT 0,
    css TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT '',
    PRIMARY KEY (url, is_mobile)
);
"""


def run_migrations(db: Database) -> None:
    """Create the used_css table if it does not exist."""
    db.executescript(SCHEMA)
    db.commit()
