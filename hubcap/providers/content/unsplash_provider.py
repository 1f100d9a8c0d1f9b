"""Unsplash photo search, optionally with LLM keyword refinement.

A full enriched query makes a poor image search, so when an LLM is
configured it is asked for three visual keywords first (bounded by a
short timeout).  Any failure there falls back to the keyword query.
"""

from __future__ import annotations

import asyncio

import httpx

from hubcap.interfaces.llm_provider import ILLMProvider
from hubcap.models.link import Link, LinkCategory
from hubcap.models.search import SearchContext
from hubcap.providers.content.base import HTTPContentProvider, dict_items
from hubcap.services.prompts import image_keywords_prompt
from hubcap.utils.errors import HubcapError
from hubcap.utils.logging import get_logger

_logger = get_logger(__name__)

UNSPLASH_SEARCH_URL = "https://api.unsplash.com/search/photos"


class UnsplashImageProvider(HTTPContentProvider):
    """Landscape photos from Unsplash."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        access_key: str,
        keyword_llm: ILLMProvider | None = None,
        per_page: int = 5,
        keyword_timeout: float = 5.0,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(http_client, timeout)
        self._access_key = access_key
        self._keyword_llm = keyword_llm
        self._per_page = per_page
        self._keyword_timeout = keyword_timeout

    async def refine_keywords(self, context: SearchContext) -> str:
        """Return LLM-suggested keywords, or the keyword query on any failure."""
        if self._keyword_llm is None or not self._keyword_llm.is_available():
            return context.keyword_query
        try:
            keywords = await asyncio.wait_for(
                self._keyword_llm.complete(
                    system_prompt="",
                    user_prompt=image_keywords_prompt(context.original_query, context.enriched_query),
                    temperature=0.3,
                    max_tokens=50,
                    timeout=self._keyword_timeout,
                ),
                timeout=self._keyword_timeout,
            )
        except (HubcapError, asyncio.TimeoutError) as exc:
            _logger.info("unsplash_keyword_refinement_skipped", error=str(exc))
            return context.keyword_query
        keywords = " ".join(keywords.replace(",", " ").split())
        return keywords or context.keyword_query

    async def _fetch(self, context: SearchContext) -> list[Link]:
        keywords = await self.refine_keywords(context)
        data = await self._get_json(
            UNSPLASH_SEARCH_URL,
            params={
                "query": keywords,
                "per_page": self._per_page,
                "orientation": "landscape",
                "order_by": "relevant",
            },
            headers={"Authorization": f"Client-ID {self._access_key}"},
        )

        topic = context.original_query
        links = []
        for photo in dict_items(data, "results"):
            urls = photo.get("urls") or {}
            if not urls.get("regular"):
                continue
            description = photo.get("alt_description") or photo.get("description")
            photographer = (photo.get("user") or {}).get("name") or "Unknown"
            links.append(
                Link(
                    title=description or f"{topic} image",
                    url=urls["regular"],
                    snippet=f"{description or f'High-quality image related to {topic}'}. "
                    f"Photo by {photographer} on Unsplash.",
                    source="Unsplash",
                    category=LinkCategory.IMAGES,
                    thumbnail=urls.get("small") or urls["regular"],
                    creator=photographer,
                    published_at=(photo.get("created_at") or "").split("T", 1)[0] or None,
                )
            )
        return links

    def get_category(self) -> LinkCategory:
        return LinkCategory.IMAGES

    def get_provider_name(self) -> str:
        return "unsplash"

    def is_available(self) -> bool:
        return bool(self._access_key)
