"""Feedback-driven "find more links" flow.

Past likes and discards on a topic steer a new search in two ways:

1. **Prompt guidance** -- :func:`build_context_from_feedback` condenses
   liked creators and frequent terms into a sentence the LLM providers
   append to their prompts.
2. **Re-ranking** -- each category of the new results is reordered by
   embedding similarity to the liked links and dissimilarity to the
   discarded ones (:func:`rank_links`).

The search itself runs through a :class:`SearchStreamOrchestrator`
configured with the "more" provider set (OpenAI + Perplexity link search
and recent YouTube uploads), so results are de-duplicated, embedded and
persisted exactly like a normal stream.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from hubcap.interfaces.link_store import ILinkStore
from hubcap.models.link import Link, StoredLink, group_by_category
from hubcap.models.search import SearchRequest
from hubcap.pipeline.orchestrator import SearchStreamOrchestrator
from hubcap.services.query_builder import build_context_from_feedback, build_search_context
from hubcap.services.ranking import rank_links
from hubcap.utils.errors import HubcapError
from hubcap.utils.logging import get_logger

_logger = get_logger(__name__)


class MoreLinksService:
    """Run a feedback-guided search and return ranked links per category."""

    def __init__(
        self,
        orchestrator: SearchStreamOrchestrator,
        link_store: ILinkStore,
        recent_days: int = 30,
    ) -> None:
        self._orchestrator = orchestrator
        self._link_store = link_store
        self._recent_days = recent_days

    async def load_feedback(self, topic_id: int | None) -> tuple[list[StoredLink], list[StoredLink]]:
        """Liked and discarded links of a topic; empty on lookup failure."""
        if topic_id is None:
            return [], []
        try:
            return await self._link_store.get_feedback_links(topic_id)
        except HubcapError as exc:
            _logger.warning("feedback_lookup_failed", topic_id=topic_id, error=str(exc))
            return [], []

    async def fetch_more(self, request: SearchRequest) -> dict[str, list[Link]]:
        liked, disliked = await self.load_feedback(request.topic_id)
        guidance = build_context_from_feedback(liked, disliked)
        context = build_search_context(request, feedback_context=guidance).model_copy(
            update={
                "published_after": datetime.now(tz=timezone.utc)  # noqa: UP017
                - timedelta(days=self._recent_days)
            }
        )

        links = await self._orchestrator.collect(request, context)

        liked_vectors = [link.embedding for link in liked if link.embedding]
        disliked_vectors = [link.embedding for link in disliked if link.embedding]
        ranked = {
            category: rank_links(items, liked_vectors, disliked_vectors)
            for category, items in group_by_category(links).items()
        }
        _logger.info(
            "more_links_ranked",
            topic_id=request.topic_id,
            liked=len(liked),
            disliked=len(disliked),
            total=len(links),
        )
        return ranked
