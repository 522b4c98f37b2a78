"""Persistent storage for commands using SQLite.

Usage:
    from clio.store import SQLiteStore

    with SQLiteStore(Path.home() / ".clio" / "clio.db") as store:
        store.save(command)
        results = store.search_command("log")
"""

from clio.store.base import Store
from clio.store.sqlite_store import SQLiteStore, to_like_pattern, to_match_query

__all__ = [
    "SQLiteStore",
    "Store",
    "to_like_pattern",
    "to_match_query",
]
