"""Abstract base class for search and link persistence.

The two operations the streaming pipeline depends on are
:meth:`ILinkStore.save_many` and :meth:`ILinkStore.update_link_count`;
the rest back the browsing, feedback and deletion routes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from hubcap.models.link import Feedback, Link, StoredLink
from hubcap.models.search import Search


class ILinkStore(ABC):
    """Contract for the searches/links tables."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables if they do not exist."""

    @abstractmethod
    async def create_search(
        self,
        query: str,
        topic_id: int | None = None,
        subtopic_id: int | None = None,
        description: str | None = None,
    ) -> Search:
        """Insert a search row and return it.

        Raises
        ------
        hubcap.utils.errors.StorageError
            If the insert fails.
        """

    @abstractmethod
    async def save_many(self, search_id: int, links: list[Link]) -> list[StoredLink]:
        """Bulk insert links for a search.

        Never raises: on failure the error is logged and ``[]`` returned,
        so a persistence hiccup cannot end a stream.
        """

    @abstractmethod
    async def update_link_count(self, search_id: int, count: int) -> None:
        """Set the denormalized ``total_links`` of a search."""

    @abstractmethod
    async def get_search(self, search_id: int) -> Search | None: ...

    @abstractmethod
    async def get_recent_searches(self, limit: int = 10) -> list[Search]: ...

    @abstractmethod
    async def get_searches_by_topic(self, topic_id: int) -> list[Search]: ...

    @abstractmethod
    async def get_searches_by_subtopic(self, subtopic_id: int) -> list[Search]: ...

    @abstractmethod
    async def delete_search(self, search_id: int) -> bool:
        """Delete a search and, by cascade, its links.  ``False`` if absent."""

    @abstractmethod
    async def get_link(self, link_id: int) -> StoredLink | None: ...

    @abstractmethod
    async def get_links_by_search(self, search_id: int) -> list[StoredLink]:
        """Non-removed links of a search in insertion order."""

    @abstractmethod
    async def get_links_by_topic(self, topic_id: int) -> list[StoredLink]:
        """Non-removed links across every search of a topic."""

    @abstractmethod
    async def get_links_by_subtopic(self, subtopic_id: int) -> list[StoredLink]:
        """Non-removed links across every search of a subtopic."""

    @abstractmethod
    async def mark_removed(self, link_id: int) -> bool:
        """Soft-delete a link.  ``False`` if no such link exists."""

    @abstractmethod
    async def set_feedback(self, link_id: int, feedback: Feedback) -> StoredLink | None:
        """Record like/discard on a link and return the updated row."""

    @abstractmethod
    async def get_feedback_links(self, topic_id: int) -> tuple[list[StoredLink], list[StoredLink]]:
        """Return ``(liked, disliked)`` links of a topic."""

    @abstractmethod
    def get_provider_name(self) -> str: ...
