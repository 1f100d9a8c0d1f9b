"""LLM provider adapters.

Both implement ILLMProvider (hubcap/interfaces/llm_provider.py) on top of
the ``openai`` async SDK:
    - OpenAILLMProvider     -- gpt-4o-mini (or any OpenAI-compatible host)
    - PerplexityLLMProvider -- Perplexity ``sonar`` via api.perplexity.ai
"""

from hubcap.providers.llm.openai_provider import OpenAILLMProvider, PerplexityLLMProvider

__all__ = ["OpenAILLMProvider", "PerplexityLLMProvider"]
