"""NewsAPI article provider.

Queries ``/v2/everything`` (English, by relevancy, last N days).  When that
call fails, for example on the free plan's date limits, a smaller
``/v2/top-headlines`` request is tried instead.
"""

from __future__ import annotations

import asyncio
from datetime import date, timedelta
from typing import Any

import httpx

from hubcap.models.link import Link, LinkCategory
from hubcap.models.search import SearchContext
from hubcap.providers.content.base import HTTPContentProvider, dict_items
from hubcap.services.thumbnail_resolver import ThumbnailResolver
from hubcap.utils.errors import HubcapError
from hubcap.utils.logging import get_logger
from hubcap.utils.text import hostname_label

_logger = get_logger(__name__)

NEWSAPI_URL = "https://newsapi.org/v2"


def _is_usable(article: Any) -> bool:
    if not isinstance(article, dict):
        return False
    title, url = article.get("title"), article.get("url")
    return bool(title and url) and title != "[Removed]" and "removed.com" not in url


class NewsAPIProvider(HTTPContentProvider):
    """Recent news articles from newsapi.org."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        thumbnail_resolver: ThumbnailResolver | None = None,
        page_size: int = 15,
        max_results: int = 10,
        headlines_page_size: int = 5,
        lookback_days: int = 20,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(http_client, timeout)
        self._api_key = api_key
        self._thumbnails = thumbnail_resolver
        self._page_size = page_size
        self._max_results = max_results
        self._headlines_page_size = headlines_page_size
        self._lookback_days = lookback_days

    async def _fetch(self, context: SearchContext) -> list[Link]:
        query = context.keyword_query
        try:
            articles = await self._everything(query)
        except (HubcapError, httpx.HTTPError, ValueError) as exc:
            _logger.warning("newsapi_everything_failed", error=str(exc))
            articles = await self._top_headlines(query)

        selected = [article for article in articles if _is_usable(article)][: self._max_results]
        # Thumbnail lookups run concurrently; gather keeps article order.
        return list(await asyncio.gather(*(self._to_link(a, query) for a in selected)))

    async def _everything(self, query: str) -> list[dict]:
        since = date.today() - timedelta(days=self._lookback_days)
        data = await self._get_json(
            f"{NEWSAPI_URL}/everything",
            params={
                "q": query,
                "apiKey": self._api_key,
                "language": "en",
                "sortBy": "relevancy",
                "pageSize": self._page_size,
                "from": since.isoformat(),
            },
        )
        return self._articles(data)

    async def _top_headlines(self, query: str) -> list[dict]:
        data = await self._get_json(
            f"{NEWSAPI_URL}/top-headlines",
            params={
                "q": query,
                "apiKey": self._api_key,
                "language": "en",
                "pageSize": self._headlines_page_size,
            },
        )
        return self._articles(data)

    def _articles(self, data: Any) -> list[dict]:
        if not isinstance(data, dict) or data.get("status") == "error":
            message = (
                data.get("message", "error response") if isinstance(data, dict) else "bad payload"
            )
            raise ValueError(f"NewsAPI: {message}")
        return dict_items(data, "articles")

    async def _to_link(self, article: dict, query: str) -> Link:
        url = article["url"]
        content = article.get("content") or ""
        snippet = article.get("description") or content[:200] or f"News article about {query}"
        source = (article.get("source") or {}).get("name") or hostname_label(url) or "News"
        published = article.get("publishedAt")

        thumbnail = article.get("urlToImage") or None
        if not thumbnail and self._thumbnails is not None:
            thumbnail = await self._thumbnails.resolve(url)

        return Link(
            title=article["title"],
            url=url,
            snippet=snippet,
            source=source,
            category=LinkCategory.ARTICLES,
            thumbnail=thumbnail,
            creator=article.get("author") or None,
            published_at=published.split("T", 1)[0] if published else None,
        )

    def get_category(self) -> LinkCategory:
        return LinkCategory.ARTICLES

    def get_provider_name(self) -> str:
        return "newsapi"

    def is_available(self) -> bool:
        return bool(self._api_key)
