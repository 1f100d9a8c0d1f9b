"""Unit tests for the Slack webhook notifier and its message builder."""

from __future__ import annotations

import httpx
import pytest

from hubcap.models.link import LinkCategory
from hubcap.providers.notify.slack_provider import (
    SlackWebhookNotifier,
    build_message,
    format_link,
)
from hubcap.utils.errors import ConfigurationError, NotificationError

WEBHOOK = "https://hooks.slack.com/services/T000/B000/XXXX"


class TestBuildMessage:
    def test_format_link(self, make_link) -> None:
        link = make_link(
            url="https://podcasts.apple.com/1",
            title="Ship It",
            snippet="x" * 150,
            source="Apple Podcasts",
            category=LinkCategory.PODCASTS,
        )

        text = format_link(link)

        assert text.startswith("🎙️ *<https://podcasts.apple.com/1|Ship It>*")
        assert f"\n_{'x' * 100}..._" in text
        assert text.endswith(" • Apple Podcasts")

    def test_blocks_with_breadcrumb(self, make_link) -> None:
        links = [make_link(url="https://a.org/1"), make_link(url="https://a.org/2")]

        message = build_message(links, {"hub": "Cloud", "topic": "Kubernetes", "subtopic": None})

        assert message["text"] == "🔗 2 links shared from Hubcap"
        blocks = message["blocks"]
        assert blocks[0]["type"] == "header"
        assert "(2)" in blocks[0]["text"]["text"]
        assert blocks[1]["type"] == "context"
        assert blocks[1]["elements"][0]["text"] == "Hub: *Cloud* › Topic: *Kubernetes*"
        assert blocks[2] == {"type": "divider"}
        assert [b["type"] for b in blocks[3:]] == ["section", "section"]

    def test_no_context_line_without_context(self, make_link) -> None:
        message = build_message([make_link()])

        assert message["text"] == "🔗 1 link shared from Hubcap"
        assert [b["type"] for b in message["blocks"]] == ["header", "divider", "section"]


class TestSlackWebhookNotifier:
    @pytest.mark.asyncio
    async def test_posts_payload(self, mock_http, make_link) -> None:
        mock_http.post.return_value = httpx.Response(200, text="ok")
        notifier = SlackWebhookNotifier(mock_http, WEBHOOK)

        await notifier.send_links([make_link()], {"hub": "Cloud"})

        assert mock_http.post.call_args.args[0] == WEBHOOK
        assert "blocks" in mock_http.post.call_args.kwargs["json"]

    @pytest.mark.asyncio
    async def test_not_configured(self, mock_http, make_link) -> None:
        notifier = SlackWebhookNotifier(mock_http, "")

        assert notifier.is_available() is False
        with pytest.raises(ConfigurationError):
            await notifier.send_links([make_link()])
        mock_http.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejected(self, mock_http, make_link) -> None:
        mock_http.post.return_value = httpx.Response(404, text="no_service")
        notifier = SlackWebhookNotifier(mock_http, WEBHOOK)

        with pytest.raises(NotificationError, match="HTTP 404"):
            await notifier.send_links([make_link()])

    @pytest.mark.asyncio
    async def test_transport_failure(self, mock_http, make_link) -> None:
        mock_http.post.side_effect = httpx.ConnectError("refused")
        notifier = SlackWebhookNotifier(mock_http, WEBHOOK)

        with pytest.raises(NotificationError):
            await notifier.send_links([make_link()])
