"""Small string helpers shared by the content providers and the extractor."""

from __future__ import annotations

import html
import re
from urllib.parse import urlparse

# watch, short links, embeds and shorts all carry an 11-character video id.
_YOUTUBE_ID_PATTERNS = (
    re.compile(
        r"(?:youtube\.com/watch\?(?:[^#\s]*&)?v=|youtu\.be/|youtube\.com/embed/|youtube\.com/shorts/)"
        r"([a-zA-Z0-9_-]{11})"
    ),
    re.compile(r"youtube\.com/v/([a-zA-Z0-9_-]{11})"),
)


def decode_html_entities(text: str) -> str:
    """Decode named and numeric HTML entities (YouTube titles arrive escaped)."""
    if not text:
        return text
    return html.unescape(text)


def youtube_video_id(url: str) -> str | None:
    """Return the 11-character video id embedded in a YouTube URL, if any."""
    if not url:
        return None
    for pattern in _YOUTUBE_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def youtube_thumbnail(url: str) -> str | None:
    """Derive the max-resolution thumbnail URL for a YouTube video URL.

    Returns ``None`` for anything that is not a recognisable YouTube link.
    """
    video_id = youtube_video_id(url)
    if video_id is None:
        return None
    return f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"


def is_youtube_url(url: str) -> bool:
    return "youtube.com" in url or "youtu.be" in url


def hostname_label(url: str) -> str:
    """Return the URL's host without a leading ``www.`` (empty on parse failure)."""
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return ""
    return host[4:] if host.startswith("www.") else host


def truncate(text: str, limit: int, suffix: str = "...") -> str:
    """Cut *text* to *limit* characters, appending *suffix* only when cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + suffix
