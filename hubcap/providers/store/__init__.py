"""SQLite persistence (aiosqlite) for the hierarchy, searches and links."""

from hubcap.providers.store.sqlite_hierarchy_store import SQLiteHierarchyStore
from hubcap.providers.store.sqlite_link_store import SQLiteLinkStore

__all__ = ["SQLiteHierarchyStore", "SQLiteLinkStore"]
