"""Unit tests for the Pydantic domain models."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from hubcap.models.hierarchy import Hub, Subtopic, Topic
from hubcap.models.link import (
    ExtractedLink,
    Feedback,
    Link,
    LinkCategory,
    StoredLink,
    group_by_category,
)
from hubcap.models.search import Search, SearchContext
from hubcap.models.stream import StreamEvent, StreamState


# ======================================================================
# Link
# ======================================================================


class TestLink:
    """Tests for Link, StoredLink and ExtractedLink."""

    def test_defaults(self) -> None:
        link = Link(title="T", url="https://a.org", source="a.org", category=LinkCategory.ARTICLES)
        assert link.snippet == ""
        assert link.thumbnail is None
        assert link.embedding is None

    def test_frozen_immutability(self, make_link) -> None:
        link = make_link()
        with pytest.raises(ValidationError):
            link.title = "changed"  # type: ignore[misc]

    def test_model_copy_enriches(self, make_link) -> None:
        link = make_link()
        enriched = link.model_copy(update={"thumbnail": "https://a.org/t.png"})
        assert enriched.thumbnail == "https://a.org/t.png"
        assert link.thumbnail is None

    def test_embedding_text(self, make_link) -> None:
        assert make_link(title="Title", snippet="").embedding_text() == "Title"
        assert make_link(title="Title", snippet="More").embedding_text() == "Title More"

    def test_category_values(self) -> None:
        assert [c.value for c in LinkCategory] == [
            "long_form_videos",
            "short_form_videos",
            "articles",
            "podcasts",
            "images",
        ]

    def test_rejects_unknown_category(self) -> None:
        with pytest.raises(ValidationError):
            Link(title="T", url="https://a.org", source="a", category="memes")

    def test_extracted_link_to_link(self) -> None:
        extracted = ExtractedLink(
            title="Talk", url="https://youtu.be/abc12345678", source="YouTube", creator="Chan"
        )
        link = extracted.to_link(LinkCategory.LONG_FORM_VIDEOS)
        assert link.category is LinkCategory.LONG_FORM_VIDEOS
        assert link.creator == "Chan"

    def test_stored_link_feedback(self, make_link) -> None:
        stored = StoredLink(**make_link().model_dump(), id=1, search_id=2, feedback="like")
        assert stored.feedback is Feedback.LIKE
        assert stored.is_removed is False

    def test_model_dump_json_valid(self, make_link) -> None:
        data = json.loads(make_link(category=LinkCategory.PODCASTS).model_dump_json())
        assert data["category"] == "podcasts"


class TestGroupByCategory:
    def test_every_key_present(self) -> None:
        grouped = group_by_category([])
        assert set(grouped) == {c.value for c in LinkCategory}
        assert all(v == [] for v in grouped.values())

    def test_order_preserved(self, make_link) -> None:
        links = [
            make_link(url="https://a.org/1"),
            make_link(url="https://a.org/v", category=LinkCategory.IMAGES),
            make_link(url="https://a.org/2"),
        ]
        grouped = group_by_category(links)
        assert [link.url for link in grouped["articles"]] == ["https://a.org/1", "https://a.org/2"]
        assert len(grouped["images"]) == 1


# ======================================================================
# Search / stream
# ======================================================================


class TestSearchModels:
    def test_prompt_context_with_feedback(self) -> None:
        context = SearchContext(
            original_query="q",
            enriched_query="Search Query: q",
            keyword_query="q",
            feedback_context="Prefer creators: X.",
        )
        assert context.prompt_context() == "Search Query: q Prefer creators: X."

    def test_prompt_context_without_feedback(self) -> None:
        context = SearchContext(original_query="q", enriched_query="Search Query: q", keyword_query="q")
        assert context.prompt_context() == "Search Query: q"

    def test_search_defaults(self) -> None:
        search = Search(id=1, query="q")
        assert search.total_links == 0
        assert search.created_at.tzinfo is not None


class TestStreamEvent:
    def test_result_event(self, make_link) -> None:
        event = StreamEvent.for_link(make_link())
        assert event.type == "result"
        assert event.result is not None

    def test_done_event(self) -> None:
        event = StreamEvent.done()
        assert event.type == "done"
        assert event.result is None

    def test_states(self) -> None:
        assert [s.value for s in StreamState] == ["running", "draining", "closed"]


# ======================================================================
# Hierarchy
# ======================================================================


class TestHierarchy:
    def test_counts_default_zero(self) -> None:
        assert Hub(id=1, name="Cloud").topic_count == 0
        assert Topic(id=1, hub_id=1, name="K8s").subtopic_count == 0

    def test_subtopic_requires_topic(self) -> None:
        with pytest.raises(ValidationError):
            Subtopic(id=1, name="HPA")  # type: ignore[call-arg]
