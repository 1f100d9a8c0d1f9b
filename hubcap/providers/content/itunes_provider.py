"""Apple Podcasts search via the public iTunes Search API (no key required)."""

from __future__ import annotations

import httpx

from hubcap.models.link import Link, LinkCategory
from hubcap.models.search import SearchContext
from hubcap.providers.content.base import HTTPContentProvider, dict_items

ITUNES_SEARCH_URL = "https://itunes.apple.com/search"


class ITunesPodcastProvider(HTTPContentProvider):
    """Podcasts matching the keyword query."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        limit: int = 10,
        max_results: int = 6,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(http_client, timeout)
        self._limit = limit
        self._max_results = max_results

    async def _fetch(self, context: SearchContext) -> list[Link]:
        query = context.keyword_query
        data = await self._get_json(
            ITUNES_SEARCH_URL,
            params={"term": query, "media": "podcast", "limit": self._limit},
        )

        links = []
        for item in dict_items(data, "results"):
            url = item.get("trackViewUrl") or item.get("collectionViewUrl")
            if not url:
                continue
            artist = item.get("artistName") or None
            links.append(
                Link(
                    title=item.get("trackName") or item.get("collectionName") or "Podcast",
                    url=url,
                    snippet=item.get("description")
                    or f"{artist or 'This show'} discusses {query} in this podcast.",
                    source="Apple Podcasts",
                    category=LinkCategory.PODCASTS,
                    thumbnail=item.get("artworkUrl600") or item.get("artworkUrl100") or None,
                    creator=artist,
                    published_at=(item.get("releaseDate") or "").split("T", 1)[0] or None,
                )
            )
            if len(links) >= self._max_results:
                break
        return links

    def get_category(self) -> LinkCategory:
        return LinkCategory.PODCASTS

    def get_provider_name(self) -> str:
        return "itunes"

    def is_available(self) -> bool:
        return True
