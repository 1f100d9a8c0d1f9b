"""Stream state machine and the events it emits."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict

from hubcap.models.link import Link


class StreamState(str, Enum):  # noqa: UP042 - StrEnum requires Python 3.11+
    """Lifecycle of one search stream.

    RUNNING → DRAINING once every provider task has settled, then
    DRAINING → CLOSED after the link count update and the grace delay.
    A consumer that stops early moves the stream straight to CLOSED.
    """

    RUNNING = "running"
    DRAINING = "draining"
    CLOSED = "closed"


class StreamEvent(BaseModel):
    """One server-sent event: a single result, or the terminal ``done``."""

    model_config = ConfigDict(frozen=True)

    type: Literal["result", "done"]
    result: Link | None = None

    @classmethod
    def for_link(cls, link: Link) -> StreamEvent:
        return cls(type="result", result=link)

    @classmethod
    def done(cls) -> StreamEvent:
        return cls(type="done")
