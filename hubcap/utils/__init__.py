"""Utility modules for Hubcap.

- **errors** -- Exception hierarchy rooted at HubcapError; adapters raise
  subclasses internally and recover at their ``fetch`` boundary.
- **logging** -- structlog setup with coloured console output in
  development and JSON in production.
- **text** -- HTML entity decoding, YouTube id/thumbnail helpers and
  truncation shared by the providers and the link extractor.
"""

from hubcap.utils.errors import (
    ConfigurationError,
    EmbeddingError,
    HubcapError,
    LLMError,
    NotificationError,
    ProviderError,
    RateLimitError,
    StorageError,
)
from hubcap.utils.logging import configure_logging, get_logger
from hubcap.utils.text import (
    decode_html_entities,
    hostname_label,
    truncate,
    youtube_thumbnail,
    youtube_video_id,
)

__all__ = [
    "ConfigurationError",
    "EmbeddingError",
    "HubcapError",
    "LLMError",
    "NotificationError",
    "ProviderError",
    "RateLimitError",
    "StorageError",
    "configure_logging",
    "decode_html_entities",
    "get_logger",
    "hostname_label",
    "truncate",
    "youtube_thumbnail",
    "youtube_video_id",
]
