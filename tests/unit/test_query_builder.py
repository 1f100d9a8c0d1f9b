"""Unit tests for search context and feedback guidance building."""

from __future__ import annotations

from hubcap.models.link import LinkCategory
from hubcap.models.search import SearchRequest
from hubcap.services.query_builder import build_context_from_feedback, build_search_context


class TestBuildSearchContext:
    def test_bare_query(self) -> None:
        context = build_search_context(SearchRequest(topic="  rust async  "))

        assert context.original_query == "rust async"
        assert context.enriched_query == "Search Query: rust async"
        assert context.keyword_query == "rust async"
        assert context.feedback_context is None

    def test_full_hierarchy(self) -> None:
        request = SearchRequest(
            topic="autoscaling",
            hub_name="Cloud",
            hub_description="Infra talks",
            topic_name="Kubernetes",
            topic_description="Cluster ops",
            subtopic_name="HPA",
            search_description="beginner friendly",
        )

        context = build_search_context(request)

        assert context.context_parts == [
            "Hub: Cloud",
            "Hub Focus: Infra talks",
            "Topic: Kubernetes",
            "Topic Focus: Cluster ops",
            "Subtopic: HPA",
            "Search Query: autoscaling",
            "Additional Context: beginner friendly",
        ]
        assert context.enriched_query == " | ".join(context.context_parts)
        assert context.keyword_query == "autoscaling HPA Kubernetes Cloud"

    def test_keyword_query_skips_duplicate_names(self) -> None:
        request = SearchRequest(topic="Kubernetes", topic_name="kubernetes", hub_name="Cloud")

        assert build_search_context(request).keyword_query == "Kubernetes Cloud"

    def test_feedback_lands_in_prompt_context(self) -> None:
        context = build_search_context(
            SearchRequest(topic="rust"), feedback_context="Prefer creators: Jon."
        )

        assert context.prompt_context() == "Search Query: rust Prefer creators: Jon."


class TestBuildContextFromFeedback:
    def test_empty(self) -> None:
        assert build_context_from_feedback([], []) == ""

    def test_liked_creators_and_terms(self, make_link) -> None:
        liked = [
            make_link(url="https://a.org/1", title="Tokio deep dive", snippet="tokio", creator="Jon"),
            make_link(url="https://a.org/2", title="Tokio again", snippet="", creator="Jon"),
            make_link(url="https://a.org/3", title="Axum", snippet="", creator="Ana"),
        ]

        guidance = build_context_from_feedback(liked, [])

        assert guidance.startswith("Prefer creators: Jon, Ana.")
        assert "Favor content including: tokio" in guidance
        assert "Exclude similar" not in guidance

    def test_disliked_terms(self, make_link) -> None:
        disliked = [
            make_link(
                url="https://a.org/x",
                title="Clickbait",
                snippet="clickbait",
                category=LinkCategory.SHORT_FORM_VIDEOS,
            )
        ]

        guidance = build_context_from_feedback([], disliked)

        assert "Avoid content heavy on: clickbait" in guidance
        assert guidance.endswith("Exclude similar to disliked titles.")

    def test_creators_capped_at_five(self, make_link) -> None:
        liked = [
            make_link(url=f"https://a.org/{i}", title="t", snippet="", creator=f"C{i}")
            for i in range(8)
        ]

        guidance = build_context_from_feedback(liked, [])

        assert "C4" in guidance
        assert "C5" not in guidance
