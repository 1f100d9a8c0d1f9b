"""OpenAI-compatible LLM provider adapters.

Wraps the ``openai`` async client to implement :class:`ILLMProvider`.
Perplexity exposes an OpenAI-compatible chat completions API, so
:class:`PerplexityLLMProvider` is the same adapter pointed at
``https://api.perplexity.ai`` with the ``sonar`` model and the
``PPLX_API_KEY`` credential.
"""

from __future__ import annotations

import openai
import structlog

from hubcap.config.settings import Settings
from hubcap.interfaces.llm_provider import ILLMProvider
from hubcap.utils.errors import LLMError

logger = structlog.get_logger(logger_name=__name__)

PERPLEXITY_BASE_URL = "https://api.perplexity.ai"


class OpenAILLMProvider(ILLMProvider):
    """LLM provider backed by an OpenAI-compatible API.

    Uses ``gpt-4o-mini`` by default; ``openai_text_model`` and
    ``openai_base_url`` point it at other models or compatible hosts.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._api_key = self._resolve_api_key(settings)
        self._timeout = settings.llm_timeout

        client_kwargs: dict = {
            "api_key": self._api_key or "unset",
            "timeout": openai.Timeout(self._timeout, connect=5.0),
        }
        base_url = self._resolve_base_url(settings)
        if base_url:
            client_kwargs["base_url"] = base_url

        self._client = openai.AsyncOpenAI(**client_kwargs)
        self._model = self._resolve_model(settings)
        self._provider_label = self._resolve_label(settings)

    # ------------------------------------------------------------------
    # Configuration hooks (overridden by PerplexityLLMProvider)
    # ------------------------------------------------------------------

    def _resolve_api_key(self, settings: Settings) -> str:
        return settings.openai_api_key

    def _resolve_base_url(self, settings: Settings) -> str:
        return settings.openai_base_url

    def _resolve_model(self, settings: Settings) -> str:
        return settings.openai_text_model or "gpt-4o-mini"

    def _resolve_label(self, settings: Settings) -> str:
        return "openai-compatible" if settings.openai_base_url else "openai"

    # ------------------------------------------------------------------
    # ILLMProvider implementation
    # ------------------------------------------------------------------

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 1200,
        timeout: float | None = None,
    ) -> str:
        """Generate a text completion via the chat completions API."""
        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})

        effective_timeout = timeout if timeout is not None else self._timeout
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                timeout=effective_timeout,
            )
            content = response.choices[0].message.content if response.choices else None
            if not content:
                raise LLMError(
                    message=f"{self._provider_label} returned empty response",
                    provider_name=self.get_provider_name(),
                )
            logger.info(
                "llm_completion",
                model=self._model,
                provider=self._provider_label,
                tokens=response.usage.total_tokens if response.usage else None,
            )
            return content
        except openai.APITimeoutError as exc:
            raise LLMError(
                message=f"{self._provider_label} timed out after {effective_timeout}s",
                provider_name=self.get_provider_name(),
            ) from exc
        except openai.APIError as exc:
            raise LLMError(
                message=f"{self._provider_label} API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    def get_provider_name(self) -> str:
        return self._provider_label

    def is_available(self) -> bool:
        return bool(self._api_key)


class PerplexityLLMProvider(OpenAILLMProvider):
    """Perplexity ``sonar`` search-grounded chat via its OpenAI-compatible API."""

    def _resolve_api_key(self, settings: Settings) -> str:
        return settings.pplx_api_key

    def _resolve_base_url(self, settings: Settings) -> str:
        return PERPLEXITY_BASE_URL

    def _resolve_model(self, settings: Settings) -> str:
        return settings.perplexity_model or "sonar"

    def _resolve_label(self, settings: Settings) -> str:
        return "perplexity"
