"""Unit tests for the per-request stream context."""

from __future__ import annotations

import pytest

from hubcap.models.link import LinkCategory
from hubcap.models.stream import StreamState
from hubcap.pipeline.stream_context import StreamContext


class TestAdmit:
    def test_new_url_admitted_once(self, make_link) -> None:
        ctx = StreamContext()
        link = make_link(url="https://site.org/a")

        assert ctx.admit(link) is True
        assert ctx.admit(link) is False
        assert "https://site.org/a" in ctx.seen_urls[LinkCategory.ARTICLES]

    def test_same_url_across_categories_rejected(self, make_link) -> None:
        ctx = StreamContext()

        assert ctx.admit(make_link(url="https://site.org/a", category=LinkCategory.ARTICLES))
        assert not ctx.admit(make_link(url="https://site.org/a", category=LinkCategory.IMAGES))

    def test_empty_url_rejected(self, make_link) -> None:
        assert StreamContext().admit(make_link(url="  ")) is False

    def test_admit_batch_keeps_order(self, make_link) -> None:
        ctx = StreamContext()
        batch = [
            make_link(url="https://site.org/b"),
            make_link(url="https://site.org/a"),
            make_link(url="https://site.org/b"),
        ]

        admitted = ctx.admit_batch(batch)

        assert [link.url for link in admitted] == ["https://site.org/b", "https://site.org/a"]


class TestTransitions:
    def test_happy_path(self) -> None:
        ctx = StreamContext()

        ctx.transition(StreamState.DRAINING)
        ctx.transition(StreamState.CLOSED)

        assert ctx.is_closed

    def test_running_can_close_directly(self) -> None:
        ctx = StreamContext()

        ctx.transition(StreamState.CLOSED)

        assert ctx.is_closed

    def test_closed_is_terminal(self) -> None:
        ctx = StreamContext(state=StreamState.CLOSED)

        with pytest.raises(ValueError):
            ctx.transition(StreamState.RUNNING)

    def test_draining_cannot_go_back(self) -> None:
        ctx = StreamContext(state=StreamState.DRAINING)

        with pytest.raises(ValueError):
            ctx.transition(StreamState.RUNNING)
