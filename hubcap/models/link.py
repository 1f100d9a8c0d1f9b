"""Link models: the unit of content every provider produces.

A :class:`Link` is created by a content provider and never mutated
afterwards.  Enrichment (thumbnail lookup, embedding) produces a copy via
``model_copy(update={...})``.  :class:`StoredLink` is the persisted row,
which adds the identifiers and the two user-editable fields (soft-delete
flag and like/discard feedback).
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class LinkCategory(str, Enum):  # noqa: UP042 - StrEnum requires Python 3.11+
    """Content buckets the UI renders as separate columns."""

    LONG_FORM_VIDEOS = "long_form_videos"
    SHORT_FORM_VIDEOS = "short_form_videos"
    ARTICLES = "articles"
    PODCASTS = "podcasts"
    IMAGES = "images"


class Feedback(str, Enum):  # noqa: UP042 - StrEnum requires Python 3.11+
    """User verdict on a link, used by the re-ranking flow."""

    LIKE = "like"
    DISCARD = "discard"


class ExtractedLink(BaseModel):
    """A link parsed out of free-form LLM text, before it has a category."""

    model_config = ConfigDict(frozen=True)

    title: str
    url: str
    snippet: str = ""
    source: str
    thumbnail: str | None = None
    creator: str | None = None
    published_at: str | None = None
    duration_sec: float | None = None
    section: str | None = None

    def to_link(self, category: LinkCategory) -> Link:
        return Link(
            title=self.title,
            url=self.url,
            snippet=self.snippet,
            source=self.source,
            category=category,
            thumbnail=self.thumbnail,
            creator=self.creator,
            published_at=self.published_at,
            duration_sec=self.duration_sec,
        )


class Link(BaseModel):
    """A discovered piece of content with provenance metadata.

    ``url`` is the de-duplication key within one search.  ``embedding`` is
    filled in by the orchestrator just before persistence and is never
    sent to streaming clients.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    url: str
    snippet: str = ""
    source: str
    category: LinkCategory
    thumbnail: str | None = None
    creator: str | None = None
    published_at: str | None = None
    duration_sec: float | None = None
    embedding: list[float] | None = None

    def embedding_text(self) -> str:
        """Text the embeddings API sees for this link (title + snippet)."""
        return f"{self.title} {self.snippet}".strip()


class StoredLink(Link):
    """A link row as persisted in the ``links`` table."""

    id: int
    search_id: int
    is_removed: bool = False
    feedback: Feedback | None = None
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=timezone.utc)  # noqa: UP017
    )


def group_by_category(links: list[Link]) -> dict[str, list[Link]]:
    """Bucket links into every category key (empty lists included), order kept."""
    grouped: dict[str, list[Link]] = {category.value: [] for category in LinkCategory}
    for link in links:
        grouped[link.category.value].append(link)
    return grouped
