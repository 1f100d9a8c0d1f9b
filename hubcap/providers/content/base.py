"""Shared plumbing for HTTP-backed content providers.

:class:`HTTPContentProvider` implements :meth:`IContentProvider.fetch` as
a template method: subclasses implement ``_fetch`` and may raise freely,
while ``fetch`` logs any failure and returns an empty batch so a broken
provider never disturbs its siblings in the stream.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any

import httpx

from hubcap.interfaces.content_provider import IContentProvider
from hubcap.models.link import Link
from hubcap.models.search import SearchContext
from hubcap.utils.errors import HubcapError, ProviderError, RateLimitError
from hubcap.utils.logging import get_logger

_logger = get_logger(__name__)

# Errors a provider is expected to hit: transport, HTTP status, our own
# wrapped errors and malformed JSON payloads.
_RECOVERABLE_ERRORS = (
    HubcapError,
    httpx.HTTPError,
    ValueError,
    KeyError,
    TypeError,
    AttributeError,
)


def dict_items(data: Any, key: str) -> list[dict]:
    """Dict entries of the list at ``data[key]``; ``[]`` for any other shape."""
    if not isinstance(data, dict):
        return []
    items = data.get(key)
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


class HTTPContentProvider(IContentProvider):
    """Base class for providers that call a REST API through ``httpx``.

    Parameters
    ----------
    http_client:
        Shared ``httpx.AsyncClient`` injected at startup.
    timeout:
        Per-request timeout in seconds.
    """

    def __init__(self, http_client: httpx.AsyncClient, timeout: float = 10.0) -> None:
        self._http = http_client
        self._timeout = timeout

    async def fetch(self, context: SearchContext) -> list[Link]:
        if not self.is_available():
            return []
        try:
            links = await self._fetch(context)
        except _RECOVERABLE_ERRORS as exc:
            _logger.warning(
                "content_provider_failed",
                provider=self.get_provider_name(),
                category=self.get_category().value,
                error=str(exc),
            )
            return []
        _logger.info(
            "content_provider_completed",
            provider=self.get_provider_name(),
            category=self.get_category().value,
            count=len(links),
        )
        return links

    @abstractmethod
    async def _fetch(self, context: SearchContext) -> list[Link]:
        """Provider-specific request and mapping; may raise."""

    async def _get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET *url* and decode JSON, mapping HTTP errors onto our hierarchy."""
        try:
            response = await self._http.get(
                url, params=params, headers=headers, timeout=self._timeout
            )
        except httpx.HTTPError as exc:
            raise ProviderError(
                message=f"Request to {httpx.URL(url).host} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        if response.status_code == 429:
            raise RateLimitError(provider_name=self.get_provider_name())
        if response.status_code >= 400:
            raise ProviderError(
                message=f"HTTP {response.status_code} from {httpx.URL(url).host}",
                provider_name=self.get_provider_name(),
            )
        return response.json()
