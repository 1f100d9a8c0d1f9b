"""SQLite-backed Hub / Topic / Subtopic persistence."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import aiosqlite
import structlog

from hubcap.interfaces.hierarchy_store import IHierarchyStore
from hubcap.models.hierarchy import Hub, Subtopic, Topic
from hubcap.providers.store.schema import connect, create_schema
from hubcap.utils.errors import StorageError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/hubcap.db")

_EDITABLE_FIELDS = frozenset({"name", "description", "image_url", "color"})

_HUB_SELECT = """\
SELECT h.id, h.name, h.description, h.image_url, h.color, h.created_at, h.updated_at,
       (SELECT COUNT(*) FROM topics t WHERE t.hub_id = h.id) AS topic_count
FROM hubs h
"""

_TOPIC_SELECT = """\
SELECT t.id, t.hub_id, t.name, t.description, t.image_url, t.color, t.created_at, t.updated_at,
       (SELECT COUNT(*) FROM subtopics s WHERE s.topic_id = t.id) AS subtopic_count
FROM topics t
"""

_SUBTOPIC_SELECT = """\
SELECT id, topic_id, name, description, image_url, color, created_at, updated_at
FROM subtopics
"""


class SQLiteHierarchyStore(IHierarchyStore):
    """SQLite persistence for hubs, topics and subtopics."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        await create_schema(self._db_path)
        logger.info("hierarchy_store_initialized", path=str(self._db_path))

    # ------------------------------------------------------------------
    # Hubs
    # ------------------------------------------------------------------

    async def list_hubs(self) -> list[Hub]:
        rows = await self._fetch(_HUB_SELECT + "ORDER BY h.created_at DESC, h.id DESC")
        return [Hub.model_validate(dict(r)) for r in rows]

    async def get_hub(self, hub_id: int) -> Hub | None:
        rows = await self._fetch(_HUB_SELECT + "WHERE h.id = ?", (hub_id,))
        return Hub.model_validate(dict(rows[0])) if rows else None

    async def create_hub(
        self,
        name: str,
        description: str | None = None,
        image_url: str | None = None,
        color: str | None = None,
    ) -> Hub:
        hub_id = await self._insert(
            "INSERT INTO hubs (name, description, image_url, color) VALUES (?, ?, ?, ?)",
            (name, description, image_url, color),
        )
        logger.info("hub_created", hub_id=hub_id, name=name)
        hub = await self.get_hub(hub_id)
        if hub is None:
            raise self._vanished("hub", hub_id)
        return hub

    async def update_hub(self, hub_id: int, changes: dict[str, Any]) -> Hub | None:
        if not await self._update_row("hubs", hub_id, changes):
            return None
        return await self.get_hub(hub_id)

    async def delete_hub(self, hub_id: int) -> bool:
        deleted = await self._execute("DELETE FROM hubs WHERE id = ?", (hub_id,))
        if deleted:
            logger.info("hub_deleted", hub_id=hub_id)
        return deleted > 0

    # ------------------------------------------------------------------
    # Topics
    # ------------------------------------------------------------------

    async def list_topics(self, hub_id: int) -> list[Topic]:
        rows = await self._fetch(_TOPIC_SELECT + "WHERE t.hub_id = ? ORDER BY t.id", (hub_id,))
        return [Topic.model_validate(dict(r)) for r in rows]

    async def get_topic(self, topic_id: int) -> Topic | None:
        rows = await self._fetch(_TOPIC_SELECT + "WHERE t.id = ?", (topic_id,))
        return Topic.model_validate(dict(rows[0])) if rows else None

    async def create_topic(
        self,
        hub_id: int,
        name: str,
        description: str | None = None,
        image_url: str | None = None,
        color: str | None = None,
    ) -> Topic:
        topic_id = await self._insert(
            "INSERT INTO topics (hub_id, name, description, image_url, color) "
            "VALUES (?, ?, ?, ?, ?)",
            (hub_id, name, description, image_url, color),
        )
        logger.info("topic_created", topic_id=topic_id, hub_id=hub_id, name=name)
        topic = await self.get_topic(topic_id)
        if topic is None:
            raise self._vanished("topic", topic_id)
        return topic

    async def create_topics(self, hub_id: int, topics: list[dict[str, Any]]) -> list[Topic]:
        ids = await self._insert_many(
            "INSERT INTO topics (hub_id, name, description, image_url, color) "
            "VALUES (?, ?, ?, ?, ?)",
            [(hub_id, *_row_values(t)) for t in topics],
        )
        logger.info("topics_bulk_created", hub_id=hub_id, count=len(ids))
        created = set(ids)
        return [t for t in await self.list_topics(hub_id) if t.id in created]

    # ------------------------------------------------------------------
    # Subtopics
    # ------------------------------------------------------------------

    async def list_subtopics(self, topic_id: int) -> list[Subtopic]:
        rows = await self._fetch(_SUBTOPIC_SELECT + "WHERE topic_id = ? ORDER BY id", (topic_id,))
        return [Subtopic.model_validate(dict(r)) for r in rows]

    async def get_subtopic(self, subtopic_id: int) -> Subtopic | None:
        rows = await self._fetch(_SUBTOPIC_SELECT + "WHERE id = ?", (subtopic_id,))
        return Subtopic.model_validate(dict(rows[0])) if rows else None

    async def create_subtopic(
        self,
        topic_id: int,
        name: str,
        description: str | None = None,
        image_url: str | None = None,
        color: str | None = None,
    ) -> Subtopic:
        subtopic_id = await self._insert(
            "INSERT INTO subtopics (topic_id, name, description, image_url, color) "
            "VALUES (?, ?, ?, ?, ?)",
            (topic_id, name, description, image_url, color),
        )
        logger.info("subtopic_created", subtopic_id=subtopic_id, topic_id=topic_id, name=name)
        subtopic = await self.get_subtopic(subtopic_id)
        if subtopic is None:
            raise self._vanished("subtopic", subtopic_id)
        return subtopic

    async def create_subtopics(
        self, topic_id: int, subtopics: list[dict[str, Any]]
    ) -> list[Subtopic]:
        ids = await self._insert_many(
            "INSERT INTO subtopics (topic_id, name, description, image_url, color) "
            "VALUES (?, ?, ?, ?, ?)",
            [(topic_id, *_row_values(s)) for s in subtopics],
        )
        logger.info("subtopics_bulk_created", topic_id=topic_id, count=len(ids))
        created = set(ids)
        return [s for s in await self.list_subtopics(topic_id) if s.id in created]

    async def update_subtopic(
        self, subtopic_id: int, changes: dict[str, Any]
    ) -> Subtopic | None:
        if not await self._update_row("subtopics", subtopic_id, changes):
            return None
        return await self.get_subtopic(subtopic_id)

    async def delete_subtopic(self, subtopic_id: int) -> bool:
        deleted = await self._execute("DELETE FROM subtopics WHERE id = ?", (subtopic_id,))
        if deleted:
            logger.info("subtopic_deleted", subtopic_id=subtopic_id)
        return deleted > 0

    def get_provider_name(self) -> str:
        return "sqlite_hierarchy"

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

    async def _insert(self, sql: str, params: tuple[Any, ...]) -> int:
        try:
            async with connect(self._db_path) as db:
                cursor = await db.execute(sql, params)
                await db.commit()
                return cursor.lastrowid
        except aiosqlite.Error as exc:
            raise StorageError(message=str(exc), provider_name=self.get_provider_name()) from exc

    async def _execute(self, sql: str, params: tuple[Any, ...] = ()) -> int:
        try:
            async with connect(self._db_path) as db:
                cursor = await db.execute(sql, params)
                await db.commit()
                return cursor.rowcount
        except aiosqlite.Error as exc:
            raise StorageError(message=str(exc), provider_name=self.get_provider_name()) from exc

    async def _insert_many(self, sql: str, rows: list[tuple[Any, ...]]) -> list[int]:
        """Insert *rows* in one transaction; nothing is kept if any row fails."""
        try:
            async with connect(self._db_path) as db:
                ids: list[int] = []
                for params in rows:
                    cursor = await db.execute(sql, params)
                    ids.append(cursor.lastrowid)
                await db.commit()
                return ids
        except aiosqlite.Error as exc:
            raise StorageError(message=str(exc), provider_name=self.get_provider_name()) from exc

    async def _update_row(self, table: str, row_id: int, changes: dict[str, Any]) -> bool:
        fields = {k: v for k, v in changes.items() if k in _EDITABLE_FIELDS}
        if not fields:
            return True
        assignments = ", ".join(f"{name} = ?" for name in fields)
        updated = await self._execute(
            f"UPDATE {table} SET {assignments}, "
            "updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now') WHERE id = ?",
            (*fields.values(), row_id),
        )
        if updated:
            logger.info(
                "hierarchy_row_updated", table=table, row_id=row_id, fields=sorted(fields)
            )
        return updated > 0

    def _vanished(self, kind: str, row_id: int) -> StorageError:
        return StorageError(
            message=f"{kind} {row_id} missing right after insert",
            provider_name=self.get_provider_name(),
        )


def _row_values(entry: dict[str, Any]) -> tuple[Any, ...]:
    return (
        entry["name"],
        entry.get("description"),
        entry.get("image_url"),
        entry.get("color"),
    )
