"""Pydantic v2 data models for Hubcap."""

from hubcap.models.hierarchy import Hub, Subtopic, Suggestion, Topic
from hubcap.models.link import (
    ExtractedLink,
    Feedback,
    Link,
    LinkCategory,
    StoredLink,
    group_by_category,
)
from hubcap.models.search import Search, SearchContext, SearchRequest
from hubcap.models.stream import StreamEvent, StreamState

__all__ = [
    "ExtractedLink",
    "Feedback",
    "Hub",
    "Link",
    "LinkCategory",
    "Search",
    "SearchContext",
    "SearchRequest",
    "StoredLink",
    "StreamEvent",
    "StreamState",
    "Subtopic",
    "Suggestion",
    "Topic",
    "group_by_category",
]
