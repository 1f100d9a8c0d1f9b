"""Unit tests for MemoryCacheProvider and ThumbnailResolver."""

from __future__ import annotations

import httpx
import pytest

from hubcap.providers.cache.memory_cache import MemoryCacheProvider
from hubcap.services.thumbnail_resolver import LINKPREVIEW_URL, ThumbnailResolver


# ======================================================================
# MemoryCacheProvider
# ======================================================================


class TestMemoryCacheProvider:
    @pytest.mark.asyncio
    async def test_set_get_delete(self) -> None:
        cache = MemoryCacheProvider()

        await cache.set("k", "v")
        assert await cache.get("k") == "v"
        assert await cache.exists("k") is True

        await cache.delete("k")
        assert await cache.get("k") is None
        assert await cache.exists("k") is False

    @pytest.mark.asyncio
    async def test_delete_missing_key(self) -> None:
        await MemoryCacheProvider().delete("nope")

    @pytest.mark.asyncio
    async def test_max_size_evicts(self) -> None:
        cache = MemoryCacheProvider(max_size=2)

        for key in ("a", "b", "c"):
            await cache.set(key, key)

        present = [key for key in ("a", "b", "c") if await cache.exists(key)]
        assert len(present) == 2
        assert "c" in present


# ======================================================================
# ThumbnailResolver
# ======================================================================


class TestThumbnailResolver:
    @pytest.mark.asyncio
    async def test_youtube_needs_no_request(self, mock_http) -> None:
        resolver = ThumbnailResolver(mock_http, api_key="lp")

        thumb = await resolver.resolve("https://youtu.be/abc12345678")

        assert thumb == "https://img.youtube.com/vi/abc12345678/maxresdefault.jpg"
        mock_http.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_key_returns_none(self, mock_http) -> None:
        resolver = ThumbnailResolver(mock_http, api_key="")

        assert await resolver.resolve("https://blog.dev/post") is None
        assert resolver.is_available() is False
        mock_http.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_linkpreview_lookup_is_cached(self, mock_http, json_response_factory) -> None:
        mock_http.get.return_value = json_response_factory({"image": "https://blog.dev/og.png"})
        resolver = ThumbnailResolver(mock_http, api_key="lp", cache=MemoryCacheProvider())

        first = await resolver.resolve("https://blog.dev/post")
        second = await resolver.resolve("https://blog.dev/post")

        assert first == second == "https://blog.dev/og.png"
        assert mock_http.get.call_count == 1
        assert mock_http.get.call_args.args[0] == LINKPREVIEW_URL
        assert mock_http.get.call_args.kwargs["params"] == {"key": "lp", "q": "https://blog.dev/post"}

    @pytest.mark.asyncio
    async def test_misses_are_cached(self, mock_http, json_response_factory) -> None:
        mock_http.get.return_value = json_response_factory({"title": "No image here"})
        resolver = ThumbnailResolver(mock_http, api_key="lp", cache=MemoryCacheProvider())

        assert await resolver.resolve("https://blog.dev/plain") is None
        assert await resolver.resolve("https://blog.dev/plain") is None
        assert mock_http.get.call_count == 1

    @pytest.mark.asyncio
    async def test_http_failure_returns_none(self, mock_http, json_response_factory) -> None:
        mock_http.get.return_value = json_response_factory({"error": 423}, status_code=423)
        resolver = ThumbnailResolver(mock_http, api_key="lp")

        assert await resolver.resolve("https://blog.dev/locked") is None

    @pytest.mark.asyncio
    async def test_transport_failure_returns_none(self, mock_http) -> None:
        mock_http.get.side_effect = httpx.ReadTimeout("slow")
        resolver = ThumbnailResolver(mock_http, api_key="lp")

        assert await resolver.resolve("https://blog.dev/slow") is None
