"""Slack incoming-webhook notifier for sharing curated links.

Builds a Block Kit message: a header with the link count, an optional
``Hub › Topic › Subtopic`` breadcrumb, a divider and one section per link.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from hubcap.interfaces.notifier import INotifier
from hubcap.models.link import Link, LinkCategory
from hubcap.utils.errors import ConfigurationError, NotificationError
from hubcap.utils.text import truncate

logger = structlog.get_logger(logger_name=__name__)

CATEGORY_EMOJI: dict[LinkCategory, str] = {
    LinkCategory.LONG_FORM_VIDEOS: "🎬",
    LinkCategory.SHORT_FORM_VIDEOS: "📹",
    LinkCategory.ARTICLES: "📰",
    LinkCategory.PODCASTS: "🎙️",
    LinkCategory.IMAGES: "🖼️",
}
_DEFAULT_EMOJI = "🔗"


def format_link(link: Link) -> str:
    """Render one link as Slack mrkdwn."""
    text = f"{CATEGORY_EMOJI.get(link.category, _DEFAULT_EMOJI)} *<{link.url}|{link.title}>*"
    if link.snippet:
        text += f"\n_{truncate(link.snippet, 100)}_"
    if link.source:
        text += f" • {link.source}"
    return text


def build_message(links: list[Link], context: dict[str, str | None] | None = None) -> dict[str, Any]:
    """Build the webhook payload for *links*."""
    count = len(links)
    breadcrumb = []
    if context:
        for key, label in (("hub", "Hub"), ("topic", "Topic"), ("subtopic", "Subtopic")):
            if context.get(key):
                breadcrumb.append(f"{label}: *{context[key]}*")

    blocks: list[dict[str, Any]] = [
        {
            "type": "header",
            "text": {"type": "plain_text", "text": f"📚 Curated Links ({count})", "emoji": True},
        },
    ]
    if breadcrumb:
        blocks.append(
            {"type": "context", "elements": [{"type": "mrkdwn", "text": " › ".join(breadcrumb)}]}
        )
    blocks.append({"type": "divider"})
    blocks.extend(
        {"type": "section", "text": {"type": "mrkdwn", "text": format_link(link)}}
        for link in links
    )

    return {
        "text": f"🔗 {count} link{'s' if count != 1 else ''} shared from Hubcap",
        "blocks": blocks,
    }


class SlackWebhookNotifier(INotifier):
    """Posts link batches to a Slack incoming webhook."""

    def __init__(self, http_client: httpx.AsyncClient, webhook_url: str, timeout: float = 10.0) -> None:
        self._http = http_client
        self._webhook_url = webhook_url
        self._timeout = timeout

    async def send_links(self, links: list[Link], context: dict[str, str | None] | None = None) -> None:
        if not self._webhook_url:
            raise ConfigurationError(
                message="Slack webhook not configured", provider_name=self.get_provider_name()
            )

        try:
            response = await self._http.post(
                self._webhook_url, json=build_message(links, context), timeout=self._timeout
            )
        except httpx.HTTPError as exc:
            raise NotificationError(
                message=f"Slack webhook request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if response.status_code >= 400:
            logger.error("slack_webhook_rejected", status=response.status_code, body=response.text[:200])
            raise NotificationError(
                message=f"Slack webhook returned HTTP {response.status_code}",
                provider_name=self.get_provider_name(),
            )
        logger.info("slack_links_sent", count=len(links))

    def get_provider_name(self) -> str:
        return "slack"

    def is_available(self) -> bool:
        return bool(self._webhook_url)
