"""SQLite schema shared by the link and hierarchy stores.

Foreign keys cascade so deleting a hub removes its topics, subtopics,
searches and links, and deleting a search removes its links.  SQLite only
enforces them when ``PRAGMA foreign_keys`` is on for the connection, so
every store opens connections through :func:`connect`.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

_NOW = "(strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))"

SCHEMA_SQL = [
    f"""\
CREATE TABLE IF NOT EXISTS hubs (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT    NOT NULL,
    description TEXT,
    image_url   TEXT,
    color       TEXT,
    created_at  TEXT    NOT NULL DEFAULT {_NOW},
    updated_at  TEXT    NOT NULL DEFAULT {_NOW}
);""",
    f"""\
CREATE TABLE IF NOT EXISTS topics (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    hub_id      INTEGER NOT NULL REFERENCES hubs(id) ON DELETE CASCADE,
    name        TEXT    NOT NULL,
    description TEXT,
    image_url   TEXT,
    color       TEXT,
    created_at  TEXT    NOT NULL DEFAULT {_NOW},
    updated_at  TEXT    NOT NULL DEFAULT {_NOW}
);""",
    f"""\
CREATE TABLE IF NOT EXISTS subtopics (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    topic_id    INTEGER NOT NULL REFERENCES topics(id) ON DELETE CASCADE,
    name        TEXT    NOT NULL,
    description TEXT,
    image_url   TEXT,
    color       TEXT,
    created_at  TEXT    NOT NULL DEFAULT {_NOW},
    updated_at  TEXT    NOT NULL DEFAULT {_NOW}
);""",
    f"""\
CREATE TABLE IF NOT EXISTS searches (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    topic_id    INTEGER REFERENCES topics(id) ON DELETE CASCADE,
    subtopic_id INTEGER REFERENCES subtopics(id) ON DELETE CASCADE,
    query       TEXT    NOT NULL,
    description TEXT,
    total_links INTEGER NOT NULL DEFAULT 0,
    created_at  TEXT    NOT NULL DEFAULT {_NOW}
);""",
    f"""\
CREATE TABLE IF NOT EXISTS links (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    search_id    INTEGER NOT NULL REFERENCES searches(id) ON DELETE CASCADE,
    title        TEXT    NOT NULL,
    url          TEXT    NOT NULL,
    snippet      TEXT    NOT NULL DEFAULT '',
    source       TEXT    NOT NULL,
    category     TEXT    NOT NULL,
    thumbnail    TEXT,
    creator      TEXT,
    published_at TEXT,
    duration_sec REAL,
    embedding    TEXT,
    feedback     TEXT,
    is_removed   INTEGER NOT NULL DEFAULT 0,
    created_at   TEXT    NOT NULL DEFAULT {_NOW}
);""",
    "CREATE INDEX IF NOT EXISTS idx_topics_hub ON topics(hub_id);",
    "CREATE INDEX IF NOT EXISTS idx_subtopics_topic ON subtopics(topic_id);",
    "CREATE INDEX IF NOT EXISTS idx_searches_topic ON searches(topic_id);",
    "CREATE INDEX IF NOT EXISTS idx_searches_subtopic ON searches(subtopic_id);",
    "CREATE INDEX IF NOT EXISTS idx_links_search ON links(search_id);",
    "CREATE INDEX IF NOT EXISTS idx_links_category ON links(category);",
]


@asynccontextmanager
async def connect(db_path: Path) -> AsyncIterator[aiosqlite.Connection]:
    """Open a connection with row access by name and foreign keys enforced."""
    async with aiosqlite.connect(str(db_path)) as db:
        db.row_factory = aiosqlite.Row
        await db.execute("PRAGMA foreign_keys = ON")
        yield db


async def create_schema(db_path: Path) -> None:
    """Create every table and index if missing."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    async with connect(db_path) as db:
        for statement in SCHEMA_SQL:
            await db.execute(statement)
        await db.commit()
