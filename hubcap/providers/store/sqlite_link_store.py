"""SQLite-backed search and link persistence.

Uses ``aiosqlite`` with one short-lived connection per operation.
Embeddings are stored as JSON text.  :meth:`save_many` is the one method
that swallows its own failures (logged, ``[]`` returned) so a database
hiccup cannot end a search stream; every other method raises
:class:`StorageError`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import aiosqlite
import structlog

from hubcap.interfaces.link_store import ILinkStore
from hubcap.models.link import Feedback, Link, StoredLink
from hubcap.models.search import Search
from hubcap.providers.store.schema import connect, create_schema
from hubcap.utils.errors import StorageError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/hubcap.db")

_LINK_COLUMNS = (
    "id, search_id, title, url, snippet, source, category, thumbnail, creator, "
    "published_at, duration_sec, embedding, feedback, is_removed, created_at"
)

_INSERT_LINK_SQL = """\
INSERT INTO links (search_id, title, url, snippet, source, category, thumbnail,
                   creator, published_at, duration_sec, embedding)
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
"""

_SEARCH_COLUMNS = "id, topic_id, subtopic_id, query, description, total_links, created_at"


def _row_to_link(row: aiosqlite.Row) -> StoredLink:
    data = dict(row)
    data["embedding"] = json.loads(data["embedding"]) if data["embedding"] else None
    data["is_removed"] = bool(data["is_removed"])
    return StoredLink.model_validate(data)


def _row_to_search(row: aiosqlite.Row) -> Search:
    return Search.model_validate(dict(row))


class SQLiteLinkStore(ILinkStore):
    """SQLite persistence for the ``searches`` and ``links`` tables."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        await create_schema(self._db_path)
        logger.info("link_store_initialized", path=str(self._db_path))

    # ------------------------------------------------------------------
    # Searches
    # ------------------------------------------------------------------

    async def create_search(
        self,
        query: str,
        topic_id: int | None = None,
        subtopic_id: int | None = None,
        description: str | None = None,
    ) -> Search:
        try:
            async with connect(self._db_path) as db:
                cursor = await db.execute(
                    "INSERT INTO searches (topic_id, subtopic_id, query, description) "
                    "VALUES (?, ?, ?, ?)",
                    (topic_id, subtopic_id, query, description),
                )
                await db.commit()
                cursor = await db.execute(
                    f"SELECT {_SEARCH_COLUMNS} FROM searches WHERE id = ?", (cursor.lastrowid,)
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise StorageError(
                message=f"Failed to create search: {exc}", provider_name=self.get_provider_name()
            ) from exc

        search = _row_to_search(row)
        logger.info("search_created", search_id=search.id, topic_id=topic_id, query=query)
        return search

    async def get_search(self, search_id: int) -> Search | None:
        rows = await self._fetch(
            f"SELECT {_SEARCH_COLUMNS} FROM searches WHERE id = ?", (search_id,)
        )
        return _row_to_search(rows[0]) if rows else None

    async def get_recent_searches(self, limit: int = 10) -> list[Search]:
        rows = await self._fetch(
            f"SELECT {_SEARCH_COLUMNS} FROM searches ORDER BY created_at DESC, id DESC LIMIT ?",
            (limit,),
        )
        return [_row_to_search(r) for r in rows]

    async def get_searches_by_topic(self, topic_id: int) -> list[Search]:
        rows = await self._fetch(
            f"SELECT {_SEARCH_COLUMNS} FROM searches WHERE topic_id = ? "
            "ORDER BY created_at DESC, id DESC",
            (topic_id,),
        )
        return [_row_to_search(r) for r in rows]

    async def get_searches_by_subtopic(self, subtopic_id: int) -> list[Search]:
        rows = await self._fetch(
            f"SELECT {_SEARCH_COLUMNS} FROM searches WHERE subtopic_id = ? "
            "ORDER BY created_at DESC, id DESC",
            (subtopic_id,),
        )
        return [_row_to_search(r) for r in rows]

    async def update_link_count(self, search_id: int, count: int) -> None:
        await self._execute(
            "UPDATE searches SET total_links = ? WHERE id = ?", (count, search_id)
        )
        logger.info("search_link_count_updated", search_id=search_id, count=count)

    async def delete_search(self, search_id: int) -> bool:
        deleted = await self._execute("DELETE FROM searches WHERE id = ?", (search_id,))
        if deleted:
            logger.info("search_deleted", search_id=search_id)
        return deleted > 0

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    async def save_many(self, search_id: int, links: list[Link]) -> list[StoredLink]:
        if not links:
            return []
        try:
            async with connect(self._db_path) as db:
                ids: list[int] = []
                for link in links:
                    cursor = await db.execute(
                        _INSERT_LINK_SQL,
                        (
                            search_id,
                            link.title,
                            link.url,
                            link.snippet,
                            link.source,
                            link.category.value,
                            link.thumbnail,
                            link.creator,
                            link.published_at,
                            link.duration_sec,
                            json.dumps(link.embedding) if link.embedding is not None else None,
                        ),
                    )
                    ids.append(cursor.lastrowid)
                await db.commit()
                placeholders = ", ".join("?" for _ in ids)
                cursor = await db.execute(
                    f"SELECT {_LINK_COLUMNS} FROM links WHERE id IN ({placeholders}) ORDER BY id",
                    ids,
                )
                rows = await cursor.fetchall()
        except aiosqlite.Error as exc:
            logger.error(
                "links_save_failed", search_id=search_id, count=len(links), error=str(exc)
            )
            return []
        return [_row_to_link(r) for r in rows]

    async def get_link(self, link_id: int) -> StoredLink | None:
        rows = await self._fetch(f"SELECT {_LINK_COLUMNS} FROM links WHERE id = ?", (link_id,))
        return _row_to_link(rows[0]) if rows else None

    async def get_links_by_search(self, search_id: int) -> list[StoredLink]:
        rows = await self._fetch(
            f"SELECT {_LINK_COLUMNS} FROM links WHERE search_id = ? AND is_removed = 0 "
            "ORDER BY created_at ASC, id ASC",
            (search_id,),
        )
        return [_row_to_link(r) for r in rows]

    async def get_links_by_topic(self, topic_id: int) -> list[StoredLink]:
        columns = ", ".join(f"l.{c.strip()}" for c in _LINK_COLUMNS.split(","))
        rows = await self._fetch(
            f"SELECT {columns} FROM links l JOIN searches s ON s.id = l.search_id "
            "WHERE s.topic_id = ? AND l.is_removed = 0 ORDER BY l.created_at ASC, l.id ASC",
            (topic_id,),
        )
        return [_row_to_link(r) for r in rows]

    async def get_links_by_subtopic(self, subtopic_id: int) -> list[StoredLink]:
        columns = ", ".join(f"l.{c.strip()}" for c in _LINK_COLUMNS.split(","))
        rows = await self._fetch(
            f"SELECT {columns} FROM links l JOIN searches s ON s.id = l.search_id "
            "WHERE s.subtopic_id = ? AND l.is_removed = 0 ORDER BY l.created_at ASC, l.id ASC",
            (subtopic_id,),
        )
        return [_row_to_link(r) for r in rows]

    async def mark_removed(self, link_id: int) -> bool:
        updated = await self._execute("UPDATE links SET is_removed = 1 WHERE id = ?", (link_id,))
        return updated > 0

    async def set_feedback(self, link_id: int, feedback: Feedback) -> StoredLink | None:
        updated = await self._execute(
            "UPDATE links SET feedback = ? WHERE id = ?", (feedback.value, link_id)
        )
        if not updated:
            return None
        logger.info("link_feedback_recorded", link_id=link_id, feedback=feedback.value)
        return await self.get_link(link_id)

    async def get_feedback_links(self, topic_id: int) -> tuple[list[StoredLink], list[StoredLink]]:
        columns = ", ".join(f"l.{c.strip()}" for c in _LINK_COLUMNS.split(","))
        rows = await self._fetch(
            f"SELECT {columns} FROM links l JOIN searches s ON s.id = l.search_id "
            "WHERE s.topic_id = ? AND l.feedback IS NOT NULL ORDER BY l.id",
            (topic_id,),
        )
        links = [_row_to_link(r) for r in rows]
        liked = [link for link in links if link.feedback is Feedback.LIKE]
        disliked = [link for link in links if link.feedback is Feedback.DISCARD]
        return liked, disliked

    def get_provider_name(self) -> str:
        return "sqlite_links"

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _fetch(self, sql: str, params: tuple[Any, ...] = ()) -> list[aiosqlite.Row]:
        try:
            async with connect(self._db_path) as db:
                cursor = await db.execute(sql, params)
                return list(await cursor.fetchall())
        except aiosqlite.Error as exc:
            raise StorageError(message=str(exc), provider_name=self.get_provider_name()) from exc

    async def _execute(self, sql: str, params: tuple[Any, ...] = ()) -> int:
        """Run a write statement and return the affected row count."""
        try:
            async with connect(self._db_path) as db:
                cursor = await db.execute(sql, params)
                await db.commit()
                return cursor.rowcount
        except aiosqlite.Error as exc:
            raise StorageError(message=str(exc), provider_name=self.get_provider_name()) from exc
