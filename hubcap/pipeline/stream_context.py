"""Per-request state of one search stream.

One :class:`StreamContext` is created per request and only ever touched
by the orchestrator's multiplexer coroutine, so it needs no locking.  It
owns the seen-URL sets used for de-duplication, the emitted/saved
counters and the :class:`StreamState` machine.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from hubcap.models.link import Link, LinkCategory
from hubcap.models.stream import StreamState

_ALLOWED_TRANSITIONS: dict[StreamState, frozenset[StreamState]] = {
    StreamState.RUNNING: frozenset({StreamState.DRAINING, StreamState.CLOSED}),
    StreamState.DRAINING: frozenset({StreamState.CLOSED}),
    StreamState.CLOSED: frozenset(),
}


def _empty_seen() -> dict[LinkCategory, set[str]]:
    return {category: set() for category in LinkCategory}


@dataclass
class StreamContext:
    """Mutable bookkeeping for one stream.

    Attributes
    ----------
    search_id:
        Row id of the search being streamed, or ``None`` when the search
        row could not be created (results are then streamed unsaved).
    seen_urls:
        URLs already admitted, per category.  A URL is unique across the
        whole search, not only within its category.
    emitted:
        Result events yielded so far.
    saved:
        Link rows the store confirmed as written.
    """

    search_id: int | None = None
    seen_urls: dict[LinkCategory, set[str]] = field(default_factory=_empty_seen)
    emitted: int = 0
    saved: int = 0
    state: StreamState = StreamState.RUNNING

    @property
    def is_closed(self) -> bool:
        return self.state is StreamState.CLOSED

    def transition(self, new_state: StreamState) -> None:
        """Advance the state machine; raises ``ValueError`` on an illegal move."""
        if new_state not in _ALLOWED_TRANSITIONS[self.state]:
            raise ValueError(f"Illegal stream transition {self.state.value} -> {new_state.value}")
        self.state = new_state

    def has_seen(self, url: str) -> bool:
        return any(url in urls for urls in self.seen_urls.values())

    def admit(self, link: Link) -> bool:
        """Record *link* and return ``True`` if its URL is new to this search."""
        url = link.url.strip()
        if not url or self.has_seen(url):
            return False
        self.seen_urls[link.category].add(url)
        return True

    def admit_batch(self, links: list[Link]) -> list[Link]:
        """Keep the links with new URLs, preserving batch order."""
        return [link for link in links if self.admit(link)]
