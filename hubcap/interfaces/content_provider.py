"""Abstract base class for content providers.

A content provider queries exactly one external API (Perplexity, YouTube,
NewsAPI, iTunes, Unsplash, Giphy) for one :class:`LinkCategory` and
normalises the response into :class:`Link` records.  The stream
orchestrator runs every available provider concurrently and treats each
one as best-effort: ``fetch`` must not raise.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from hubcap.models.link import Link, LinkCategory
from hubcap.models.search import SearchContext


# Concrete implementations live in hubcap/providers/content/.
class IContentProvider(ABC):
    """Contract for a single best-effort content source."""

    @abstractmethod
    async def fetch(self, context: SearchContext) -> list[Link]:
        """Query the external API and return normalised links.

        Parameters
        ----------
        context:
            The enriched search context for this request.  Structured APIs
            use ``context.keyword_query``; LLM-backed providers embed
            ``context.prompt_context()`` in their prompt.

        Returns
        -------
        list[Link]
            Zero or more links, all in :meth:`get_category`, in the order
            the provider ranked them.  Network errors, timeouts, HTTP error
            statuses and malformed payloads are logged and yield ``[]``.
        """

    @abstractmethod
    def get_category(self) -> LinkCategory:
        """Return the category every link from this provider belongs to."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier, e.g. ``"youtube-shorts"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider's credentials are configured."""
