from __future__ import annotations

from csspruner.store.db import Database
from csspruner.store.migrations import run_migrations
from csspruner.store.repositories import UsedCssRepository

__all__ = [
    "Database",
    "run_migrations",
    "UsedCssRepository",
]
