"""Turn free-form LLM answers into link records.

LLM search providers are asked for a strict ``{"links": [...]}`` JSON
envelope, but models regularly answer with a fenced code block, a
numbered markdown list or plain prose with URLs sprinkled in.

Architecture: strict parse, then a fallback chain
-------------------------------------------------
1. **Strict parse** -- strip a leading code fence and ``json.loads`` the
   payload.  A ``links`` array maps field by field onto
   :class:`ExtractedLink` (missing title becomes ``"Untitled"``, missing
   description an empty snippet).
2. **Pattern matchers** -- tried in order, each returning a list or
   ``None``; the first non-empty result wins:

   - numbered bold entries (``1. **Title**`` / ``URL:`` / ``Description:``)
   - numbered inline entries (``1. Title - URL: https://... - desc``)
   - numbered dashed entries (``1. Title - https://... - desc``)
   - any URL found on a line (with bare YouTube ids promoted to URLs)

Every matcher drops placeholder URLs (``example.com``, ``placeholder``,
anything shorter than 10 characters).  Extraction is pure: the same text
always yields the same ordered list, and nothing here raises.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import Any

from hubcap.models.link import ExtractedLink
from hubcap.utils.logging import get_logger
from hubcap.utils.text import hostname_label, youtube_thumbnail

_logger = get_logger(__name__)

_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)

_BOLD_ENTRY_RE = re.compile(
    r"(\d+)\.\s*\*\*(.+?)\*\*[^\n]*\n.*?URL:\s*(https?://\S+)[^\n]*\n.*?Description:\s*([^\n]+)",
    re.MULTILINE,
)
_INLINE_ENTRY_RE = re.compile(
    r"\d+\.\s*([^-\n]+?)[ \t]*-?[ \t]*URL:[ \t]*(https?://\S+)[ \t]*-?[ \t]*([^\n]*)",
    re.MULTILINE,
)
_DASHED_ENTRY_RE = re.compile(
    r"^\s*\d+\.\s*([^-\n]+?)\s+-\s+(https?://\S+)(?:\s+-\s+([^\n]*))?$",
    re.MULTILINE,
)
_URL_RE = re.compile(r"https?://[^\s)]+")
_BARE_YOUTUBE_RE = re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/)([a-zA-Z0-9_-]{11})")
_TRAILING_PUNCT_RE = re.compile(r"[,.!?)\]]+$")
_LIST_PREFIX_RE = re.compile(r"^\d+\.\s*")
_BULLET_PREFIX_RE = re.compile(r"^[-*]\s*")

_SNIPPET_LIMIT = 150

Matcher = Callable[[str, str], "list[ExtractedLink] | None"]


def is_placeholder_url(url: str) -> bool:
    """Return ``True`` for URLs an LLM obviously invented."""
    return "example.com" in url or "placeholder" in url or len(url) < 10


def _clean_url(url: str) -> str:
    return _TRAILING_PUNCT_RE.sub("", url.strip())


def _clean_title(text: str) -> str:
    title = _BULLET_PREFIX_RE.sub("", _LIST_PREFIX_RE.sub("", text.strip())).strip()
    title = title.strip("\"'")
    return re.sub(r"\s*-\s*$", "", title).strip()


def _build(title: str, url: str, snippet: str, source: str) -> ExtractedLink:
    return ExtractedLink(
        title=title,
        url=url,
        snippet=snippet,
        source=source,
        thumbnail=youtube_thumbnail(url),
    )


# ---------------------------------------------------------------------------
# Strict JSON envelope
# ---------------------------------------------------------------------------

def strip_code_fence(text: str) -> str:
    stripped = text.strip()
    if stripped.startswith("```"):
        match = _JSON_FENCE_RE.search(stripped)
        if match:
            return match.group(1)
    return stripped


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _optional_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if value else None


def parse_json_envelope(text: str, source: str) -> list[ExtractedLink] | None:
    """Parse a ``{"links": [...]}`` document; ``None`` if it is not one."""
    try:
        data = json.loads(strip_code_fence(text))
    except (ValueError, RecursionError):
        return None
    if not isinstance(data, dict) or not isinstance(data.get("links"), list):
        return None

    links: list[ExtractedLink] = []
    for entry in data["links"]:
        if not isinstance(entry, dict):
            continue
        url = str(entry.get("url") or "")
        links.append(
            ExtractedLink(
                title=str(entry.get("title") or "Untitled"),
                url=url,
                snippet=str(entry.get("description") or entry.get("snippet") or ""),
                source=str(entry.get("source") or source),
                thumbnail=youtube_thumbnail(url),
                creator=_optional_str(entry.get("creator")),
                published_at=_optional_str(entry.get("published_at")),
                duration_sec=_optional_number(entry.get("duration_sec")),
                section=_optional_str(entry.get("section")),
            )
        )
    return links


# ---------------------------------------------------------------------------
# Pattern matchers
# ---------------------------------------------------------------------------

def match_bold_entries(text: str, source: str) -> list[ExtractedLink] | None:
    links = []
    for match in _BOLD_ENTRY_RE.finditer(text):
        url = _clean_url(match.group(3))
        if is_placeholder_url(url):
            continue
        links.append(_build(match.group(2).strip(), url, match.group(4).strip(), source))
    return links or None


def match_inline_entries(text: str, source: str) -> list[ExtractedLink] | None:
    links = []
    for match in _INLINE_ENTRY_RE.finditer(text):
        url = _clean_url(match.group(2))
        if is_placeholder_url(url):
            continue
        title = match.group(1).strip()
        description = match.group(3).strip() or title
        links.append(_build(title, url, description, source))
    return links or None


def match_dashed_entries(text: str, source: str) -> list[ExtractedLink] | None:
    links = []
    for match in _DASHED_ENTRY_RE.finditer(text):
        url = _clean_url(match.group(2))
        if is_placeholder_url(url):
            continue
        title = match.group(1).strip() or "Untitled"
        description = (match.group(3) or "").strip() or title
        links.append(_build(title, url, description, source))
    return links or None


def match_urls_per_line(text: str, source: str) -> list[ExtractedLink] | None:
    links = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or "**URL:**" in line or line.startswith("URL:"):
            continue

        urls = _URL_RE.findall(line)
        for raw_url in urls:
            url = _clean_url(raw_url)
            if is_placeholder_url(url):
                continue
            title = _clean_title(line.replace(raw_url, "", 1))
            if not title:
                domain = hostname_label(url)
                title = domain[:1].upper() + domain[1:] if domain else "Untitled"
            snippet = line if len(line) <= _SNIPPET_LIMIT else line[: _SNIPPET_LIMIT - 3] + "..."
            links.append(_build(title, url, snippet, source))

        if urls:
            continue
        bare = _BARE_YOUTUBE_RE.search(line)
        if bare:
            url = f"https://www.youtube.com/watch?v={bare.group(1)}"
            title = _clean_title(line.replace(bare.group(0), "", 1)) or "YouTube Video"
            links.append(_build(title, url, line, source))
    return links or None


_MATCHERS: tuple[Matcher, ...] = (
    match_bold_entries,
    match_inline_entries,
    match_dashed_entries,
    match_urls_per_line,
)


class LinkExtractor:
    """Extracts link records from raw LLM output.

    The matcher chain is injectable so each layout can be exercised on its
    own; the default chain is the one described in the module docstring.
    """

    def __init__(self, matchers: tuple[Matcher, ...] = _MATCHERS) -> None:
        self._matchers = matchers

    def extract(self, text: str, source: str) -> list[ExtractedLink]:
        """Return every link found in *text*, labelled with *source*.

        Never raises; unparseable input yields ``[]``.
        """
        if not text or not text.strip():
            return []

        links = parse_json_envelope(text, source)
        if links is not None:
            _logger.debug("links_parsed_from_json", source=source, count=len(links))
            return links

        for matcher in self._matchers:
            links = matcher(text, source)
            if links:
                _logger.debug(
                    "links_parsed_from_text",
                    source=source,
                    matcher=matcher.__name__,
                    count=len(links),
                )
                return links

        _logger.debug("no_links_extracted", source=source, length=len(text))
        return []


def extract_links(text: str, source: str) -> list[ExtractedLink]:
    """Module-level shortcut for ``LinkExtractor().extract``."""
    return LinkExtractor().extract(text, source)
