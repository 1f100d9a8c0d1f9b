"""Unit tests for MoreLinksService (feedback-guided search + re-ranking)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from hubcap.interfaces.link_store import ILinkStore
from hubcap.models.link import Feedback, LinkCategory, StoredLink
from hubcap.models.search import SearchRequest
from hubcap.pipeline.orchestrator import SearchStreamOrchestrator
from hubcap.services.more_links_service import MoreLinksService
from hubcap.utils.errors import StorageError


def _stored(make_link, link_id: int, feedback: Feedback, **kwargs) -> StoredLink:
    link = make_link(**kwargs)
    return StoredLink(**link.model_dump(), id=link_id, search_id=1, feedback=feedback)


@pytest.fixture
def orchestrator() -> MagicMock:
    mock = MagicMock(spec=SearchStreamOrchestrator)
    mock.collect = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def store() -> AsyncMock:
    mock = AsyncMock(spec=ILinkStore)
    mock.get_feedback_links.return_value = ([], [])
    return mock


class TestMoreLinksService:
    @pytest.mark.asyncio
    async def test_context_carries_guidance_and_recency(
        self, orchestrator, store, make_link
    ) -> None:
        liked = _stored(
            make_link, 1, Feedback.LIKE, title="Karpenter deep dive", creator="TechWorld"
        )
        store.get_feedback_links.return_value = ([liked], [])
        service = MoreLinksService(orchestrator, store, recent_days=30)

        await service.fetch_more(SearchRequest(topic="autoscaling", topic_id=5))

        store.get_feedback_links.assert_awaited_once_with(5)
        request, context = orchestrator.collect.call_args.args
        assert request.topic_id == 5
        assert "Prefer creators: TechWorld." in context.feedback_context
        assert "karpenter" in context.feedback_context
        expected = datetime.now(tz=timezone.utc) - timedelta(days=30)  # noqa: UP017
        assert abs((context.published_after - expected).total_seconds()) < 60

    @pytest.mark.asyncio
    async def test_ranks_each_category(self, orchestrator, store, make_link) -> None:
        liked = _stored(make_link, 1, Feedback.LIKE, embedding=[1.0, 0.0])
        disliked = _stored(make_link, 2, Feedback.DISCARD, embedding=[0.0, 1.0])
        store.get_feedback_links.return_value = ([liked], [disliked])
        orchestrator.collect.return_value = [
            make_link(url="https://a.org/far", embedding=[0.0, 1.0]),
            make_link(url="https://a.org/near", embedding=[1.0, 0.1]),
            make_link(
                url="https://youtube.com/watch?v=abc12345678",
                category=LinkCategory.LONG_FORM_VIDEOS,
                embedding=[1.0, 0.0],
            ),
        ]
        service = MoreLinksService(orchestrator, store)

        ranked = await service.fetch_more(SearchRequest(topic="q", topic_id=1))

        assert set(ranked) == {category.value for category in LinkCategory}
        assert [link.url for link in ranked["articles"]] == [
            "https://a.org/near",
            "https://a.org/far",
        ]
        assert len(ranked["long_form_videos"]) == 1
        assert ranked["podcasts"] == []

    @pytest.mark.asyncio
    async def test_no_topic_skips_feedback(self, orchestrator, store, make_link) -> None:
        orchestrator.collect.return_value = [
            make_link(url="https://a.org/1"),
            make_link(url="https://a.org/2"),
        ]
        service = MoreLinksService(orchestrator, store)

        ranked = await service.fetch_more(SearchRequest(topic="q"))

        store.get_feedback_links.assert_not_called()
        assert [link.url for link in ranked["articles"]] == ["https://a.org/1", "https://a.org/2"]
        context = orchestrator.collect.call_args.args[1]
        assert context.feedback_context is None

    @pytest.mark.asyncio
    async def test_feedback_lookup_failure_is_tolerated(self, orchestrator, store) -> None:
        store.get_feedback_links.side_effect = StorageError(message="locked")
        service = MoreLinksService(orchestrator, store)

        liked, disliked = await service.load_feedback(3)

        assert (liked, disliked) == ([], [])
