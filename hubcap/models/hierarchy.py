"""Hub → Topic → Subtopic organisational models.

These are plain metadata records; searches attach to a topic and,
optionally, a subtopic.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)  # noqa: UP017


class Hub(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    description: str | None = None
    image_url: str | None = None
    color: str | None = None
    topic_count: int = 0
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class Topic(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    hub_id: int
    name: str
    description: str | None = None
    image_url: str | None = None
    color: str | None = None
    subtopic_count: int = 0
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class Subtopic(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    topic_id: int
    name: str
    description: str | None = None
    image_url: str | None = None
    color: str | None = None
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


class Suggestion(BaseModel):
    """An LLM-proposed topic or subtopic, not yet persisted."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
