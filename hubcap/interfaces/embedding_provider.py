"""Abstract base class for text embedding providers.

Embeddings are computed for every persisted link (title + snippet) and
consumed by :func:`hubcap.services.ranking.rank_links`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IEmbeddingProvider(ABC):
    """Contract for services that map text to fixed-length vectors."""

    @abstractmethod
    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Embed a batch of texts, one vector per input, order preserved.

        Raises
        ------
        hubcap.utils.errors.EmbeddingError
            If the embeddings API call fails.
        """

    @abstractmethod
    async def embed_single(self, text: str) -> list[float]:
        """Embed one text."""

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the vector length this provider produces."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier, e.g. ``"openai-embedding"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if real embeddings (not zero vectors) are produced."""
