"""Outbound notifiers."""

from hubcap.providers.notify.slack_provider import SlackWebhookNotifier

__all__ = ["SlackWebhookNotifier"]
