"""Abstract base class for the Hub / Topic / Subtopic tables."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from hubcap.models.hierarchy import Hub, Subtopic, Topic


class IHierarchyStore(ABC):
    """CRUD contract for the organisational hierarchy.

    Deleting a hub cascades through its topics, subtopics, searches and
    links.
    """

    @abstractmethod
    async def initialize(self) -> None: ...

    @abstractmethod
    async def list_hubs(self) -> list[Hub]: ...

    @abstractmethod
    async def get_hub(self, hub_id: int) -> Hub | None: ...

    @abstractmethod
    async def create_hub(
        self,
        name: str,
        description: str | None = None,
        image_url: str | None = None,
        color: str | None = None,
    ) -> Hub: ...

    @abstractmethod
    async def update_hub(self, hub_id: int, changes: dict[str, Any]) -> Hub | None: ...

    @abstractmethod
    async def delete_hub(self, hub_id: int) -> bool: ...

    @abstractmethod
    async def list_topics(self, hub_id: int) -> list[Topic]: ...

    @abstractmethod
    async def get_topic(self, topic_id: int) -> Topic | None: ...

    @abstractmethod
    async def create_topic(
        self,
        hub_id: int,
        name: str,
        description: str | None = None,
        image_url: str | None = None,
        color: str | None = None,
    ) -> Topic: ...

    @abstractmethod
    async def create_topics(self, hub_id: int, topics: list[dict[str, Any]]) -> list[Topic]:
        """Insert several topics in one transaction.

        Each entry carries ``name`` plus optional ``description``,
        ``image_url`` and ``color``.  Nothing is kept if any insert fails.
        """

    @abstractmethod
    async def list_subtopics(self, topic_id: int) -> list[Subtopic]: ...

    @abstractmethod
    async def get_subtopic(self, subtopic_id: int) -> Subtopic | None: ...

    @abstractmethod
    async def create_subtopic(
        self,
        topic_id: int,
        name: str,
        description: str | None = None,
        image_url: str | None = None,
        color: str | None = None,
    ) -> Subtopic: ...

    @abstractmethod
    async def create_subtopics(
        self, topic_id: int, subtopics: list[dict[str, Any]]
    ) -> list[Subtopic]:
        """Insert several subtopics atomically, shaped like :meth:`create_topics`."""

    @abstractmethod
    async def update_subtopic(
        self, subtopic_id: int, changes: dict[str, Any]
    ) -> Subtopic | None: ...

    @abstractmethod
    async def delete_subtopic(self, subtopic_id: int) -> bool:
        """Delete a subtopic and, by cascade, its searches and links.  ``False`` if absent."""
