"""Abstract base class for link-sharing notifiers (Slack)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from hubcap.models.link import Link


class INotifier(ABC):
    """Contract for services that post a batch of links somewhere."""

    @abstractmethod
    async def send_links(self, links: list[Link], context: dict[str, str | None] | None = None) -> None:
        """Deliver *links* with optional hub/topic/subtopic breadcrumbs.

        Raises
        ------
        hubcap.utils.errors.ConfigurationError
            If the destination is not configured.
        hubcap.utils.errors.NotificationError
            If the destination rejects the message.
        """

    @abstractmethod
    def get_provider_name(self) -> str: ...

    @abstractmethod
    def is_available(self) -> bool: ...
