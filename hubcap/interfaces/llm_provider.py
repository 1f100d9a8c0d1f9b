"""Abstract base class for LLM chat-completion backends.

Used by the LLM-backed content providers (Perplexity / OpenAI link
search) and by the Unsplash keyword refinement step.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: OpenAILLMProvider, PerplexityLLMProvider
# Located in: hubcap/providers/llm/
class ILLMProvider(ABC):
    """Contract for chat-completion services."""

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 1200,
        timeout: float | None = None,
    ) -> str:
        """Generate a text completion from the model.

        Parameters
        ----------
        system_prompt:
            The system message.  An empty string sends only the user
            message.
        user_prompt:
            The user-facing prompt.
        temperature:
            Sampling temperature (0.0 = deterministic, 1.0 = creative).
        max_tokens:
            Upper bound on the number of tokens in the response.
        timeout:
            Per-call timeout in seconds; the provider default when ``None``.

        Returns
        -------
        str
            The model's text response.

        Raises
        ------
        hubcap.utils.errors.LLMError
            If the API call fails or returns an empty response.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier such as ``"openai"`` or ``"perplexity"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured."""
