"""Custom exception hierarchy for Hubcap.

All application exceptions inherit from :class:`HubcapError`, which
carries an optional ``provider_name`` so handlers can tell which external
service (e.g. "youtube", "perplexity", "sqlite") caused the failure.

    HubcapError  (base)
    +-- ProviderError        (content API call failed or returned junk)
    +-- RateLimitError       (provider answered 429)
    +-- LLMError             (chat completion failure)
    +-- EmbeddingError       (embeddings API failure)
    +-- StorageError         (database read/write failure)
    +-- NotificationError    (Slack webhook rejected the message)
    +-- ConfigurationError   (missing key / webhook / invalid config)

Content adapters catch these inside ``fetch`` and return an empty batch,
so none of them ever reaches a streaming client.
"""


class HubcapError(Exception):
    """Base exception for all Hubcap errors.

    ``__str__`` prefixes the provider name in brackets for log output,
    e.g. ``[youtube] quotaExceeded``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# External service errors
# ---------------------------------------------------------------------------

class ProviderError(HubcapError):
    """Raised when a content API call fails or its payload cannot be used."""

    def __init__(
        self,
        message: str = "Content provider request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class RateLimitError(ProviderError):
    """Raised when a provider rejects a request with HTTP 429."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class LLMError(HubcapError):
    """Raised when an LLM API call fails or returns an empty response."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EmbeddingError(HubcapError):
    """Raised when the embeddings API call fails."""

    def __init__(
        self,
        message: str = "Embedding generation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Storage / delivery errors
# ---------------------------------------------------------------------------

class StorageError(HubcapError):
    """Raised when a database operation fails."""

    def __init__(
        self,
        message: str = "Storage operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class NotificationError(HubcapError):
    """Raised when an outbound notification (Slack webhook) is rejected."""

    def __init__(
        self,
        message: str = "Notification delivery failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(HubcapError):
    """Raised when configuration is invalid or a required key is missing."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
