"""YouTube Data API v3 providers for long-form videos and Shorts.

Long-form: a single ``search`` call with ``videoDuration=long``.

Shorts: ``search`` with ``videoDuration=short`` and ``#shorts`` appended
to the query yields candidates; a ``videos`` call then fetches
``contentDetails`` so each candidate can be confirmed as a Short (ISO-8601
duration of 60 s or less, or tagged "shorts" in its title/description).
"""

from __future__ import annotations

import re
from typing import Any

import httpx

from hubcap.models.link import Link, LinkCategory
from hubcap.models.search import SearchContext
from hubcap.providers.content.base import HTTPContentProvider, dict_items
from hubcap.utils.text import decode_html_entities, truncate

YOUTUBE_API_URL = "https://www.googleapis.com/youtube/v3"

_ISO_DURATION_RE = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$"
)


def parse_iso8601_duration(value: str) -> int | None:
    """Convert a YouTube duration such as ``PT1M5S`` to seconds."""
    match = _ISO_DURATION_RE.match(value or "")
    if not match or not any(match.groupdict().values()):
        return None
    parts = {key: int(val) if val else 0 for key, val in match.groupdict().items()}
    return parts["days"] * 86400 + parts["hours"] * 3600 + parts["minutes"] * 60 + parts["seconds"]


def _thumbnail(video_id: str) -> str:
    return f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"


def _date_part(value: str | None) -> str | None:
    return value.split("T", 1)[0] if value else None


class _YouTubeProvider(HTTPContentProvider):
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(http_client, timeout)
        self._api_key = api_key

    def is_available(self) -> bool:
        return bool(self._api_key)

    async def _search(self, query: str, duration: str, max_results: int, context: SearchContext) -> list[dict]:
        params: dict[str, Any] = {
            "part": "snippet",
            "q": query,
            "type": "video",
            "videoDuration": duration,
            "maxResults": max_results,
            "order": "relevance",
            "key": self._api_key,
        }
        if context.published_after is not None:
            params["order"] = "date"
            params["publishedAfter"] = context.published_after.strftime("%Y-%m-%dT%H:%M:%SZ")
        data = await self._get_json(f"{YOUTUBE_API_URL}/search", params=params)
        return [
            item for item in dict_items(data, "items")
            if isinstance(item.get("id"), dict) and item["id"].get("videoId")
        ]


class YouTubeVideoProvider(_YouTubeProvider):
    """Long-form YouTube videos (``videoDuration=long``, i.e. over 20 minutes)."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        max_results: int = 10,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(http_client, api_key, timeout)
        self._max_results = max_results

    async def _fetch(self, context: SearchContext) -> list[Link]:
        items = await self._search(context.keyword_query, "long", self._max_results, context)
        links = []
        for item in items:
            video_id = item["id"]["videoId"]
            snippet = item.get("snippet") or {}
            description = decode_html_entities(snippet.get("description", ""))
            links.append(
                Link(
                    title=decode_html_entities(snippet.get("title", "")) or "YouTube video",
                    url=f"https://www.youtube.com/watch?v={video_id}",
                    snippet=truncate(description, 200),
                    source="YouTube",
                    category=LinkCategory.LONG_FORM_VIDEOS,
                    thumbnail=_thumbnail(video_id),
                    creator=snippet.get("channelTitle") or None,
                    published_at=_date_part(snippet.get("publishedAt")),
                )
            )
        return links

    def get_category(self) -> LinkCategory:
        return LinkCategory.LONG_FORM_VIDEOS

    def get_provider_name(self) -> str:
        return "youtube"


class YouTubeShortsProvider(_YouTubeProvider):
    """YouTube Shorts confirmed via ``contentDetails.duration``."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        candidates: int = 15,
        max_results: int = 5,
        max_duration_sec: int = 60,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(http_client, api_key, timeout)
        self._candidates = candidates
        self._max_results = max_results
        self._max_duration = max_duration_sec

    async def _fetch(self, context: SearchContext) -> list[Link]:
        items = await self._search(
            f"{context.keyword_query} #shorts", "short", self._candidates, context
        )
        if not items:
            return []

        ids = [item["id"]["videoId"] for item in items]
        data = await self._get_json(
            f"{YOUTUBE_API_URL}/videos",
            params={"part": "contentDetails,snippet", "id": ",".join(ids), "key": self._api_key},
        )

        links = []
        for video in dict_items(data, "items"):
            if len(links) >= self._max_results:
                break
            snippet = video.get("snippet") or {}
            title = decode_html_entities(snippet.get("title", ""))
            description = decode_html_entities(snippet.get("description", ""))
            details = video.get("contentDetails") or {}
            duration = parse_iso8601_duration(details.get("duration", ""))
            if not self._is_short(title, description, duration):
                continue
            video_id = video["id"]
            links.append(
                Link(
                    title=title or "YouTube Short",
                    url=f"https://www.youtube.com/shorts/{video_id}",
                    snippet=truncate(description, 200),
                    source="YouTube",
                    category=LinkCategory.SHORT_FORM_VIDEOS,
                    thumbnail=_thumbnail(video_id),
                    creator=snippet.get("channelTitle") or None,
                    published_at=_date_part(snippet.get("publishedAt")),
                    duration_sec=duration,
                )
            )
        return links

    def _is_short(self, title: str, description: str, duration: int | None) -> bool:
        if duration is not None and duration <= self._max_duration:
            return True
        return "shorts" in title.lower() or "#shorts" in description.lower()

    def get_category(self) -> LinkCategory:
        return LinkCategory.SHORT_FORM_VIDEOS

    def get_provider_name(self) -> str:
        return "youtube-shorts"
