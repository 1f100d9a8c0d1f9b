"""Search models.

:class:`SearchContext` carries everything a provider needs to build its
own query: the raw user query, the pipe-delimited enriched context built
from the hub/topic/subtopic hierarchy, a compact keyword query for
structured APIs, and optional feedback guidance used by the "more links"
flow.  :class:`Search` is the persisted search row.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class SearchRequest(BaseModel):
    """Validated input of one streaming search."""

    model_config = ConfigDict(frozen=True)

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


class SearchContext(BaseModel):
    """Per-request query context shared (read-only) by every provider."""

    model_config = ConfigDict(frozen=True)

    original_query: str
    enriched_query: str
    context_parts: list[str] = Field(default_factory=list)
    keyword_query: str
    hub_name: str | None = None
    topic_name: str | None = None
    subtopic_name: str | None = None
    description: str | None = None
    feedback_context: str | None = None
    # Only set by the "more links" flow (YouTube recency filter).
    published_after: datetime | None = None

    def prompt_context(self) -> str:
        """Context sentence appended to LLM task prompts."""
        parts = [self.enriched_query]
        if self.feedback_context:
            parts.append(self.feedback_context)
        return " ".join(parts)


class Search(BaseModel):
    """One user-initiated query and its denormalized link count."""

    model_config = ConfigDict(frozen=True)

    id: int
    topic_id: int | None = None
    subtopic_id: int | None = None
    query: str
    description: str | None = None
    total_links: int = 0
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=timezone.utc)  # noqa: UP017
    )
