"""Unit tests for the OpenAI / Perplexity chat adapters and the LLM link provider."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import openai
import pytest

from hubcap.config.settings import Settings
from hubcap.models.link import LinkCategory
from hubcap.providers.content.llm_link_provider import LLMLinkProvider, is_plausible_url
from hubcap.providers.llm.openai_provider import (
    PERPLEXITY_BASE_URL,
    OpenAILLMProvider,
    PerplexityLLMProvider,
)
from hubcap.services.prompts import OPENAI_SYSTEM_PROMPT, openai_link_prompt, perplexity_link_prompt
from hubcap.utils.errors import LLMError


# ======================================================================
# Shared helpers
# ======================================================================


def _settings(**overrides) -> Settings:
    defaults = {
        "openai_api_key": "sk-test",
        "openai_base_url": "",
        "openai_text_model": "",
        "pplx_api_key": "pplx-test",
    }
    defaults.update(overrides)
    return Settings(**defaults)


def _completion(content: str | None) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    response.usage = MagicMock(total_tokens=42)
    return response


# ======================================================================
# OpenAI LLM Provider
# ======================================================================


class TestOpenAILLMProvider:
    def test_availability_follows_key(self) -> None:
        assert OpenAILLMProvider(_settings()).is_available() is True
        assert OpenAILLMProvider(_settings(openai_api_key="")).is_available() is False

    def test_provider_label(self) -> None:
        assert OpenAILLMProvider(_settings()).get_provider_name() == "openai"
        compatible = OpenAILLMProvider(_settings(openai_base_url="http://localhost:1234/v1"))
        assert compatible.get_provider_name() == "openai-compatible"

    @pytest.mark.asyncio
    async def test_complete_success(self) -> None:
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(return_value=_completion("hello"))

        with patch("hubcap.providers.llm.openai_provider.openai.AsyncOpenAI", return_value=mock_client):
            provider = OpenAILLMProvider(_settings())
            result = await provider.complete("system", "user", temperature=0.2, max_tokens=50)

        assert result == "hello"
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["messages"] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "user"},
        ]
        assert kwargs["max_tokens"] == 50

    @pytest.mark.asyncio
    async def test_empty_system_prompt_omitted(self) -> None:
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(return_value=_completion("ok"))

        with patch("hubcap.providers.llm.openai_provider.openai.AsyncOpenAI", return_value=mock_client):
            await OpenAILLMProvider(_settings()).complete("", "user only")

        messages = mock_client.chat.completions.create.call_args.kwargs["messages"]
        assert messages == [{"role": "user", "content": "user only"}]

    @pytest.mark.asyncio
    async def test_empty_response_raises(self) -> None:
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(return_value=_completion(None))

        with patch("hubcap.providers.llm.openai_provider.openai.AsyncOpenAI", return_value=mock_client):
            provider = OpenAILLMProvider(_settings())
            with pytest.raises(LLMError):
                await provider.complete("s", "u")

    @pytest.mark.asyncio
    async def test_api_error_wrapped(self) -> None:
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(
            side_effect=openai.APIError(message="Rate limit exceeded", request=MagicMock(), body=None)
        )

        with patch("hubcap.providers.llm.openai_provider.openai.AsyncOpenAI", return_value=mock_client):
            provider = OpenAILLMProvider(_settings())
            with pytest.raises(LLMError, match="API error"):
                await provider.complete("s", "u")


class TestPerplexityLLMProvider:
    def test_uses_perplexity_key_and_endpoint(self) -> None:
        with patch("hubcap.providers.llm.openai_provider.openai.AsyncOpenAI") as client_cls:
            provider = PerplexityLLMProvider(_settings(openai_api_key=""))

        assert provider.is_available() is True
        assert provider.get_provider_name() == "perplexity"
        kwargs = client_cls.call_args.kwargs
        assert kwargs["api_key"] == "pplx-test"
        assert kwargs["base_url"] == PERPLEXITY_BASE_URL

    def test_unavailable_without_key(self) -> None:
        assert PerplexityLLMProvider(_settings(pplx_api_key="")).is_available() is False


# ======================================================================
# LLM link provider
# ======================================================================


class TestLLMLinkProvider:
    @pytest.mark.asyncio
    async def test_extracts_and_categorises(self, mock_llm, search_context) -> None:
        mock_llm.complete = AsyncMock(
            return_value=(
                '{"links": ['
                '{"title": "Good", "url": "https://blog.dev/good", "description": "ok", "source": "Dev"},'
                '{"title": "Fake", "url": "https://example.com/fake"},'
                '{"title": "Relative", "url": "/just/a/path"}'
                "]}"
            )
        )
        provider = LLMLinkProvider(
            llm=mock_llm,
            category=LinkCategory.ARTICLES,
            prompt_builder=perplexity_link_prompt,
            source_label="Perplexity",
        )

        links = await provider.fetch(search_context)

        assert [link.url for link in links] == ["https://blog.dev/good"]
        assert links[0].category is LinkCategory.ARTICLES
        assert links[0].source == "Dev"
        kwargs = mock_llm.complete.call_args.kwargs
        assert kwargs["system_prompt"] == ""
        assert search_context.original_query in kwargs["user_prompt"]

    @pytest.mark.asyncio
    async def test_override_source_and_cap(self, mock_llm, search_context) -> None:
        entries = ",".join(
            f'{{"title": "T{i}", "url": "https://site{i}.org/x", "source": "Outlet"}}'
            for i in range(5)
        )
        mock_llm.complete = AsyncMock(return_value=f'{{"links": [{entries}]}}')
        provider = LLMLinkProvider(
            llm=mock_llm,
            category=LinkCategory.LONG_FORM_VIDEOS,
            prompt_builder=openai_link_prompt,
            source_label="OpenAI",
            system_prompt=OPENAI_SYSTEM_PROMPT,
            max_results=3,
            override_source=True,
        )

        links = await provider.fetch(search_context)

        assert len(links) == 3
        assert {link.source for link in links} == {"OpenAI"}
        assert mock_llm.complete.call_args.kwargs["system_prompt"] == OPENAI_SYSTEM_PROMPT

    @pytest.mark.asyncio
    async def test_llm_failure_returns_empty(self, mock_llm, search_context) -> None:
        mock_llm.complete = AsyncMock(side_effect=LLMError("timeout", provider_name="perplexity"))
        provider = LLMLinkProvider(
            llm=mock_llm,
            category=LinkCategory.ARTICLES,
            prompt_builder=perplexity_link_prompt,
            source_label="Perplexity",
        )

        assert await provider.fetch(search_context) == []

    @pytest.mark.asyncio
    async def test_article_thumbnails_resolved(self, mock_llm, search_context) -> None:
        mock_llm.complete = AsyncMock(
            return_value='{"links": [{"title": "A", "url": "https://news.site.org/a"}]}'
        )
        resolver = MagicMock()
        resolver.resolve = AsyncMock(return_value="https://news.site.org/a.png")
        provider = LLMLinkProvider(
            llm=mock_llm,
            category=LinkCategory.ARTICLES,
            prompt_builder=perplexity_link_prompt,
            source_label="Perplexity",
            thumbnail_resolver=resolver,
        )

        links = await provider.fetch(search_context)

        assert links[0].thumbnail == "https://news.site.org/a.png"

    @pytest.mark.asyncio
    async def test_unavailable_llm_skips_call(self, mock_llm, search_context) -> None:
        mock_llm.is_available.return_value = False
        provider = LLMLinkProvider(
            llm=mock_llm,
            category=LinkCategory.ARTICLES,
            prompt_builder=perplexity_link_prompt,
            source_label="Perplexity",
        )

        assert await provider.fetch(search_context) == []
        mock_llm.complete.assert_not_called()

    def test_provider_name_includes_category(self, mock_llm) -> None:
        provider = LLMLinkProvider(
            llm=mock_llm,
            category=LinkCategory.SHORT_FORM_VIDEOS,
            prompt_builder=perplexity_link_prompt,
            source_label="Perplexity",
        )

        assert provider.get_provider_name() == "mock-llm-short_form_videos"
        assert provider.get_category() is LinkCategory.SHORT_FORM_VIDEOS

    def test_plausible_url(self) -> None:
        assert is_plausible_url("https://realpython.com/") is True
        assert is_plausible_url("ftp://files.org/x") is False
        assert is_plausible_url("https://example.com/x") is False
