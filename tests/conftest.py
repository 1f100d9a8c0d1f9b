"""Shared pytest fixtures for the Hubcap test suite."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from hubcap.config.settings import Settings
from hubcap.interfaces.embedding_provider import IEmbeddingProvider
from hubcap.interfaces.llm_provider import ILLMProvider
from hubcap.models.link import Link, LinkCategory
from hubcap.models.search import SearchContext, SearchRequest
from hubcap.services.query_builder import build_search_context


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def settings() -> Settings:
    """Settings with every key configured and no grace delay."""
    return Settings(
        openai_api_key="sk-test",
        openai_base_url="",
        pplx_api_key="pplx-test",
        youtube_api_key="yt-test",
        newsapi_api_key="news-test",
        unsplash_access_key="unsplash-test",
        giphy_api_key="giphy-test",
        linkpreview_api_key="",
        slack_webhook_url="",
        stream_grace_period=0.0,
    )


@pytest.fixture
def search_request() -> SearchRequest:
    return SearchRequest(
        topic="kubernetes autoscaling",
        topic_id=None,
        hub_name="Cloud",
        topic_name="Kubernetes",
    )


@pytest.fixture
def search_context(search_request: SearchRequest) -> SearchContext:
    return build_search_context(search_request)


@pytest.fixture
def make_link():
    """Factory for ``Link`` objects with sensible defaults."""

    def _make(
        url: str = "https://example.org/a",
        category: LinkCategory = LinkCategory.ARTICLES,
        title: str = "A title",
        **kwargs: Any,
    ) -> Link:
        return Link(
            title=title,
            url=url,
            snippet=kwargs.pop("snippet", "A snippet"),
            source=kwargs.pop("source", "Test"),
            category=category,
            **kwargs,
        )

    return _make


@pytest.fixture
def mock_http() -> AsyncMock:
    """An ``httpx.AsyncClient`` stand-in; set ``.get``/``.post`` return values per test."""
    client = AsyncMock(spec=httpx.AsyncClient)
    client.get = AsyncMock()
    client.post = AsyncMock()
    return client


def json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    """Build an ``httpx.Response`` carrying *payload* as JSON."""
    return httpx.Response(
        status_code, json=payload, request=httpx.Request("GET", "https://api.test.local")
    )


@pytest.fixture
def json_response_factory():
    return json_response


@pytest.fixture
def mock_llm() -> MagicMock:
    """Mock LLM provider whose ``complete`` returns an empty JSON envelope."""
    llm = MagicMock(spec=ILLMProvider)
    llm.complete = AsyncMock(return_value='{"links": []}')
    llm.get_provider_name.return_value = "mock-llm"
    llm.is_available.return_value = True
    return llm


@pytest.fixture
def mock_embedder() -> MagicMock:
    """Mock embedding provider returning 3-dim vectors ``[i, 1, 0]``."""
    embedder = MagicMock(spec=IEmbeddingProvider)

    async def _embed(texts: list[str]) -> list[list[float]]:
        return [[float(i), 1.0, 0.0] for i in range(len(texts))]

    embedder.embed = AsyncMock(side_effect=_embed)
    embedder.get_dimension.return_value = 3
    embedder.get_provider_name.return_value = "mock-embedding"
    embedder.is_available.return_value = True
    return embedder


@pytest.fixture
def db_path():
    """Path to a throwaway SQLite database file."""
    tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
    tmp.close()
    yield tmp.name
    if os.path.exists(tmp.name):
        os.unlink(tmp.name)
