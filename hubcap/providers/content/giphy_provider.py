"""Giphy GIF search.

Serves two callers: the stream (GIFs as ``images`` links) and the hub
image picker, which only needs small preview URLs.
"""

from __future__ import annotations

import httpx

from hubcap.models.link import Link, LinkCategory
from hubcap.models.search import SearchContext
from hubcap.providers.content.base import HTTPContentProvider, dict_items

GIPHY_SEARCH_URL = "https://api.giphy.com/v1/gifs/search"


class GiphyImageProvider(HTTPContentProvider):
    """Family-safe (rating ``g``) GIFs from Giphy."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        limit: int = 5,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(http_client, timeout)
        self._api_key = api_key
        self._limit = limit

    async def search_gifs(self, query: str, limit: int = 1) -> list[dict]:
        """Return raw Giphy results for *query*.

        Raises
        ------
        hubcap.utils.errors.ProviderError
            On HTTP errors (``RateLimitError`` for 429).
        """
        data = await self._get_json(
            GIPHY_SEARCH_URL,
            params={
                "api_key": self._api_key,
                "q": query,
                "limit": limit,
                "offset": 0,
                "rating": "g",
                "lang": "en",
                "bundle": "messaging_non_clips",
            },
        )
        return dict_items(data, "data")

    async def search_image_urls(self, query: str, limit: int = 1) -> list[dict[str, str]]:
        """Small preview images for the hub image picker: ``{id, url, title}``."""
        images = []
        for gif in await self.search_gifs(query, limit):
            url = ((gif.get("images") or {}).get("fixed_width_small") or {}).get("url")
            if url:
                images.append({"id": gif.get("id", ""), "url": url, "title": gif.get("title", "")})
        return images

    async def _fetch(self, context: SearchContext) -> list[Link]:
        topic = context.original_query
        links = []
        for gif in await self.search_gifs(context.keyword_query, self._limit):
            images = gif.get("images") or {}
            original = (images.get("original") or {}).get("url")
            preview = (images.get("fixed_width_small") or {}).get("url")
            if not original:
                continue
            title = gif.get("title") or f"{topic} GIF"
            links.append(
                Link(
                    title=title,
                    url=original,
                    snippet=f"{title}. GIF via Giphy.",
                    source="Giphy",
                    category=LinkCategory.IMAGES,
                    thumbnail=preview or original,
                    creator=gif.get("username") or None,
                )
            )
        return links

    def get_category(self) -> LinkCategory:
        return LinkCategory.IMAGES

    def get_provider_name(self) -> str:
        return "giphy"

    def is_available(self) -> bool:
        return bool(self._api_key)
