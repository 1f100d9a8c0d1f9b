"""Unit tests for hubcap.utils.text."""

from __future__ import annotations

import pytest

from hubcap.utils.text import (
    decode_html_entities,
    hostname_label,
    is_youtube_url,
    truncate,
    youtube_thumbnail,
    youtube_video_id,
)


class TestYouTubeThumbnail:
    def test_watch_url(self) -> None:
        assert (
            youtube_thumbnail("https://www.youtube.com/watch?v=abc12345678")
            == "https://img.youtube.com/vi/abc12345678/maxresdefault.jpg"
        )

    @pytest.mark.parametrize(
        "url",
        [
            "https://youtu.be/abc12345678",
            "https://www.youtube.com/embed/abc12345678",
            "https://www.youtube.com/shorts/abc12345678",
            "https://www.youtube.com/v/abc12345678",
            "https://www.youtube.com/watch?feature=share&v=abc12345678",
        ],
    )
    def test_other_url_shapes(self, url: str) -> None:
        assert youtube_video_id(url) == "abc12345678"

    def test_non_youtube_url(self) -> None:
        assert youtube_thumbnail("https://vimeo.com/12345") is None
        assert youtube_thumbnail("") is None

    def test_is_youtube_url(self) -> None:
        assert is_youtube_url("https://youtu.be/abc12345678") is True
        assert is_youtube_url("https://news.ycombinator.com") is False


class TestDecodeHtmlEntities:
    def test_decodes_youtube_entities(self) -> None:
        assert decode_html_entities("Rock &amp; Roll &#39;live&#39;") == "Rock & Roll 'live'"

    def test_decodes_numeric_and_named_entities(self) -> None:
        assert decode_html_entities("Caf&eacute; &#8211; Q&#x26;A &hellip;") == "Café – Q&A …"

    def test_passthrough(self) -> None:
        assert decode_html_entities("plain") == "plain"
        assert decode_html_entities("") == ""


class TestHostnameLabel:
    def test_strips_www(self) -> None:
        assert hostname_label("https://www.theverge.com/x") == "theverge.com"

    def test_keeps_subdomain(self) -> None:
        assert hostname_label("https://blog.rust-lang.org/") == "blog.rust-lang.org"

    def test_garbage(self) -> None:
        assert hostname_label("not a url") == ""


class TestTruncate:
    def test_short_text_untouched(self) -> None:
        assert truncate("hello", 10) == "hello"

    def test_long_text_cut_with_suffix(self) -> None:
        assert truncate("abcdefghij", 4) == "abcd..."
