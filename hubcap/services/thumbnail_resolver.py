"""Resolve preview images for article links.

YouTube URLs map straight to their thumbnail.  Anything else is looked up
through the LinkPreview API when ``LINKPREVIEW_API_KEY`` is set, with
results (including misses) cached.  Without a key, or on any failure,
the resolver returns ``None`` and the UI falls back to a text card.
"""

from __future__ import annotations

import httpx

from hubcap.interfaces.cache_provider import ICacheProvider
from hubcap.utils.logging import get_logger
from hubcap.utils.text import is_youtube_url, youtube_thumbnail

_logger = get_logger(__name__)

LINKPREVIEW_URL = "https://api.linkpreview.net/"

# Cached for URLs without a preview so they are not re-requested.
_NO_IMAGE = ""


class ThumbnailResolver:
    """Look up a representative image URL for a web page."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str = "",
        cache: ICacheProvider | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._http = http_client
        self._api_key = api_key
        self._cache = cache
        self._timeout = timeout

    def is_available(self) -> bool:
        return bool(self._api_key)

    async def resolve(self, url: str) -> str | None:
        """Return an image URL for *url*, or ``None``.  Never raises."""
        if not url:
            return None
        if is_youtube_url(url):
            return youtube_thumbnail(url)
        if not self._api_key:
            return None

        cache_key = f"thumbnail:{url}"
        if self._cache is not None:
            cached = await self._cache.get(cache_key)
            if cached is not None:
                return cached or None

        image = await self._fetch_preview(url)
        if self._cache is not None:
            await self._cache.set(cache_key, image or _NO_IMAGE)
        return image

    async def _fetch_preview(self, url: str) -> str | None:
        try:
            response = await self._http.get(
                LINKPREVIEW_URL,
                params={"key": self._api_key, "q": url},
                timeout=self._timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            _logger.warning("linkpreview_failed", url=url, error=str(exc))
            return None

        if not isinstance(data, dict) or data.get("error"):
            return None
        image = data.get("image")
        return image if isinstance(image, str) and image else None
