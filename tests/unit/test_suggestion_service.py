"""Unit tests for LLM topic / subtopic suggestions."""

from __future__ import annotations

import json

import pytest

from hubcap.models.hierarchy import Suggestion
from hubcap.services.suggestion_service import (
    SuggestionService,
    is_exhaustive_request,
    parse_suggestions,
)
from hubcap.utils.errors import LLMError


def _payload(*names: str, key: str = "suggestions") -> str:
    return json.dumps({key: [{"name": n, "description": f"All about {n}"} for n in names]})


class TestParseSuggestions:
    def test_suggestions_key(self) -> None:
        result = parse_suggestions(_payload("Kubernetes", "Serverless"), limit=10)

        assert result == [
            Suggestion(name="Kubernetes", description="All about Kubernetes"),
            Suggestion(name="Serverless", description="All about Serverless"),
        ]

    @pytest.mark.parametrize(
        "text",
        [
            '[{"name": "A", "description": "a"}]',
            '{"topics": [{"name": "A", "description": "a"}]}',
            '{"subtopics": [{"name": "A", "description": "a"}]}',
            '{"name": "A", "description": "a"}',
            '{"whatever": [{"name": "A", "description": "a"}]}',
            '```json\n{"suggestions": [{"name": "A", "description": "a"}]}\n```',
        ],
    )
    def test_accepted_shapes(self, text: str) -> None:
        assert [s.name for s in parse_suggestions(text, limit=10)] == ["A"]

    def test_drops_invalid_entries(self) -> None:
        text = json.dumps(
            {
                "suggestions": [
                    None,
                    "Kubernetes",
                    {"name": "  ", "description": "blank name"},
                    {"name": "NoDescription"},
                    {"name": 7, "description": "numeric"},
                    {"name": " Serverless ", "description": " Functions "},
                ]
            }
        )

        assert parse_suggestions(text, limit=10) == [
            Suggestion(name="Serverless", description="Functions")
        ]

    def test_excluded_and_duplicate_names_are_skipped(self) -> None:
        text = _payload("Kubernetes", "serverless", "KUBERNETES", "Edge")

        result = parse_suggestions(text, limit=10, exclude=["Serverless"])

        assert [s.name for s in result] == ["Kubernetes", "Edge"]

    def test_limit(self) -> None:
        assert len(parse_suggestions(_payload(*"ABCDEFGH"), limit=3)) == 3

    @pytest.mark.parametrize("text", ["", "not json", "42", '{"note": "none"}', "[" * 100_000])
    def test_unusable_output_returns_empty(self, text: str) -> None:
        assert parse_suggestions(text, limit=10) == []


class TestExhaustiveRequest:
    @pytest.mark.parametrize(
        "request_text",
        ["All the Marvel movies", "every US state", "a comprehensive list of birds"],
    )
    def test_exhaustive(self, request_text: str) -> None:
        assert is_exhaustive_request(request_text) is True

    def test_ordinary(self) -> None:
        assert is_exhaustive_request("popular cloud tools") is False
        assert is_exhaustive_request("overall trends") is False


class TestSuggestionService:
    @pytest.mark.asyncio
    async def test_suggest_topics(self, mock_llm) -> None:
        mock_llm.complete.return_value = _payload("Kubernetes", "Networking")
        service = SuggestionService(mock_llm, topic_count=10, temperature=0.2)

        result = await service.suggest_topics(
            "Cloud", hub_description="Infra", exclude=["Networking"]
        )

        assert [s.name for s in result] == ["Kubernetes"]
        kwargs = mock_llm.complete.await_args.kwargs
        assert "Hub: Cloud" in kwargs["system_prompt"]
        assert "Do NOT include these already existing topics: Networking" in kwargs["system_prompt"]
        assert "Generate 10 topics for Hub: Cloud" in kwargs["user_prompt"]
        assert kwargs["temperature"] == 0.2

    @pytest.mark.asyncio
    async def test_suggest_topics_without_exclusions(self, mock_llm) -> None:
        mock_llm.complete.return_value = _payload("Kubernetes")
        service = SuggestionService(mock_llm)

        await service.suggest_topics("Cloud")

        system_prompt = mock_llm.complete.await_args.kwargs["system_prompt"]
        assert "Do NOT include" not in system_prompt
        assert "Hub description: Not specified" in system_prompt

    @pytest.mark.asyncio
    async def test_unusable_output_raises_llm_error(self, mock_llm) -> None:
        service = SuggestionService(mock_llm)

        with pytest.raises(LLMError, match="no usable suggestions"):
            await service.suggest_topics("Cloud")

    @pytest.mark.asyncio
    async def test_llm_failure_propagates(self, mock_llm) -> None:
        mock_llm.complete.side_effect = LLMError("quota", provider_name="mock-llm")
        service = SuggestionService(mock_llm)

        with pytest.raises(LLMError, match="quota"):
            await service.suggest_topics("Cloud")

    @pytest.mark.asyncio
    async def test_ordinary_subtopic_request(self, mock_llm) -> None:
        mock_llm.complete.return_value = _payload("HPA", "VPA")
        service = SuggestionService(mock_llm, subtopic_count=2, exhaustive_count=25)

        result = await service.suggest_subtopics(
            "Cloud", "Kubernetes", "autoscaling tools", exclude=["Cluster Autoscaler"]
        )

        assert [s.name for s in result.suggestions] == ["HPA", "VPA"]
        assert result.is_exhaustive is False
        assert result.max_reached is True
        kwargs = mock_llm.complete.await_args.kwargs
        assert "Curator request: autoscaling tools" in kwargs["system_prompt"]
        assert "Cluster Autoscaler" in kwargs["system_prompt"]
        assert kwargs["user_prompt"].startswith("Generate 2 subtopics for:")

    @pytest.mark.asyncio
    async def test_exhaustive_subtopic_request_raises_the_cap(self, mock_llm) -> None:
        mock_llm.complete.return_value = _payload("Alabama", "Alaska")
        service = SuggestionService(mock_llm, subtopic_count=10, exhaustive_count=25)

        result = await service.suggest_subtopics("Travel", "USA", "all the US states")

        assert result.is_exhaustive is True
        assert result.max_reached is False
        assert "Generate 25 subtopics" in mock_llm.complete.await_args.kwargs["user_prompt"]

    def test_availability_follows_llm(self, mock_llm) -> None:
        service = SuggestionService(mock_llm)
        assert service.is_available() is True

        mock_llm.is_available.return_value = False
        assert service.is_available() is False
