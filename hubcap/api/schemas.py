"""Pydantic request/response schemas for the Hubcap API.

Request bodies accept the camelCase keys the web client sends
(``topicId``, ``hubName``...) as well as snake_case.  Responses are
snake_case throughout.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from hubcap.models.hierarchy import Hub, Subtopic, Suggestion, Topic
from hubcap.models.link import Feedback, Link, LinkCategory, StoredLink, group_by_category
from hubcap.models.search import Search, SearchRequest


class _CamelRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class SearchStreamRequest(_CamelRequest):
    """Body of ``POST /search-stream``, ``/search`` and ``/more``."""

    topic: str
    topic_id: int | None = None
    subtopic_id: int | None = None
    search_description: str | None = None
    hub_name: str | None = None
    hub_description: str | None = None
    topic_name: str | None = None
    topic_description: str | None = None
    subtopic_name: str | None = None
    subtopic_description: str | None = None

    def to_search_request(self) -> SearchRequest:
        return SearchRequest(**self.model_dump(by_alias=False))


class LinkOut(BaseModel):
    """A link as returned to clients (no embedding)."""

    id: int | None = None
    search_id: int | None = None
    title: str
    url: str
    snippet: str = ""
    source: str
    category: LinkCategory
    thumbnail: str | None = None
    creator: str | None = None
    published_at: str | None = None
    duration_sec: float | None = None
    feedback: Feedback | None = None
    is_removed: bool = False
    created_at: datetime | None = None

    @classmethod
    def from_link(cls, link: Link) -> LinkOut:
        return cls.model_validate(link.model_dump(exclude={"embedding"}))


def grouped_links(links: list[Link]) -> dict[str, list[LinkOut]]:
    """Group links into every category key, as the web client expects."""
    return {
        category: [LinkOut.from_link(link) for link in items]
        for category, items in group_by_category(links).items()
    }


class GroupedLinksResponse(BaseModel):
    """Links bucketed by category, plus the total across buckets."""

    results: dict[str, list[LinkOut]]
    total: int


class ProviderStatusResponse(BaseModel):
    status: str
    providers: dict[str, bool]
    timestamp: datetime


class SearchListResponse(BaseModel):
    searches: list[Search]


class SearchLinksResponse(BaseModel):
    search: Search
    results: dict[str, list[LinkOut]]
    total: int


class SearchGroup(BaseModel):
    """One search of a topic with its links and a preview image."""

    search_id: int
    query: str
    description: str | None = None
    created_at: datetime
    link_count: int
    pill_image: str | None = None
    links: dict[str, list[LinkOut]]


class _GroupedSearchLinks(BaseModel):
    all_links: dict[str, list[LinkOut]]
    searches: list[SearchGroup]
    total_searches: int
    total_links: int


class TopicLinksResponse(_GroupedSearchLinks):
    topic_id: int


class SubtopicLinksResponse(_GroupedSearchLinks):
    subtopic_id: int


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------


class FeedbackRequest(_CamelRequest):
    feedback: Feedback


class SuccessResponse(BaseModel):
    success: bool = True


# ---------------------------------------------------------------------------
# Hierarchy
# ---------------------------------------------------------------------------


class HubCreateRequest(_CamelRequest):
    name: str
    description: str | None = None
    image_url: str | None = None
    color: str | None = None


class HubUpdateRequest(_CamelRequest):
    name: str | None = None
    description: str | None = None
    image_url: str | None = None
    color: str | None = None


class TopicCreateRequest(_CamelRequest):
    hub_id: int
    name: str
    description: str | None = None
    image_url: str | None = None
    color: str | None = None


class SubtopicCreateRequest(_CamelRequest):
    topic_id: int
    name: str
    description: str | None = None
    image_url: str | None = None
    color: str | None = None


class SubtopicUpdateRequest(_CamelRequest):
    name: str | None = None
    description: str | None = None
    image_url: str | None = None
    color: str | None = None


class BulkEntry(_CamelRequest):
    """One topic or subtopic of a bulk create."""

    name: str
    description: str | None = None
    image_url: str | None = None
    color: str | None = None

    def to_row(self) -> dict[str, Any]:
        return {
            "name": self.name.strip(),
            "description": (self.description or "").strip() or None,
            "image_url": self.image_url or None,
            "color": self.color or None,
        }


class TopicBulkCreateRequest(_CamelRequest):
    hub_id: int
    topics: list[BulkEntry]


class SubtopicBulkCreateRequest(_CamelRequest):
    topic_id: int
    subtopics: list[BulkEntry]


class TopicBulkCreateResponse(BaseModel):
    topics: list[Topic]
    count: int


class SubtopicBulkCreateResponse(BaseModel):
    subtopics: list[Subtopic]
    count: int


class TopicSuggestionRequest(_CamelRequest):
    hub_name: str
    hub_description: str | None = None
    exclude_topics: list[str] = Field(default_factory=list)


class SubtopicSuggestionRequest(_CamelRequest):
    hub_name: str
    topic_name: str
    subtopic_description: str
    hub_description: str | None = None
    topic_description: str | None = None
    exclude_subtopics: list[str] = Field(default_factory=list)


class SuggestionResponse(BaseModel):
    suggestions: list[Suggestion]


class SubtopicSuggestionResponse(SuggestionResponse):
    is_exhaustive: bool
    max_reached: bool


class HubDetailResponse(BaseModel):
    hub: Hub
    topics: list[Topic]


class TopicDetailResponse(BaseModel):
    topic: Topic
    hub: Hub | None = None
    subtopics: list[Subtopic]


class SubtopicDetailResponse(BaseModel):
    subtopic: Subtopic
    topic: Topic | None = None
    hub: Hub | None = None


# ---------------------------------------------------------------------------
# Sharing / images
# ---------------------------------------------------------------------------


class SharedLink(_CamelRequest):
    title: str
    url: str
    snippet: str = ""
    source: str = ""
    category: LinkCategory = LinkCategory.ARTICLES

    def to_link(self) -> Link:
        return Link(**self.model_dump(by_alias=False))


class ShareContext(BaseModel):
    hub: str | None = None
    topic: str | None = None
    subtopic: str | None = None


class SlackShareRequest(_CamelRequest):
    links: list[SharedLink] = Field(default_factory=list)
    context: ShareContext | None = None


class GiphyImage(BaseModel):
    id: str
    url: str
    title: str = ""


class GiphyResponse(BaseModel):
    image_url: str | None = None
    images: list[GiphyImage] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None


__all__ = [
    "ErrorResponse",
    "FeedbackRequest",
    "GiphyImage",
    "GiphyResponse",
    "GroupedLinksResponse",
    "HealthResponse",
    "HubCreateRequest",
    "HubDetailResponse",
    "HubUpdateRequest",
    "LinkOut",
    "ProviderStatusResponse",
    "SearchGroup",
    "SearchLinksResponse",
    "SearchListResponse",
    "SearchStreamRequest",
    "ShareContext",
    "SharedLink",
    "SlackShareRequest",
    "StoredLink",
    "SubtopicCreateRequest",
    "SubtopicDetailResponse",
    "SuccessResponse",
    "TopicCreateRequest",
    "TopicDetailResponse",
    "TopicLinksResponse",
    "grouped_links",
]
