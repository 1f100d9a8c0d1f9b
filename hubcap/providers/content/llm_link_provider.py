"""LLM-backed link search (Perplexity, OpenAI).

One instance serves one category: it sends a category-specific prompt,
runs the answer through :class:`LinkExtractor`, keeps only plausible URLs
and, for articles, fills missing thumbnails via the resolver.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from hubcap.interfaces.content_provider import IContentProvider
from hubcap.interfaces.llm_provider import ILLMProvider
from hubcap.models.link import Link, LinkCategory
from hubcap.models.search import SearchContext
from hubcap.services.link_extractor import LinkExtractor, is_placeholder_url
from hubcap.services.thumbnail_resolver import ThumbnailResolver
from hubcap.utils.errors import HubcapError
from hubcap.utils.logging import get_logger

_logger = get_logger(__name__)

PromptBuilder = Callable[[LinkCategory, str, str], str]


def is_plausible_url(url: str) -> bool:
    return url.startswith("http") and "." in url and not is_placeholder_url(url)


class LLMLinkProvider(IContentProvider):
    """Ask an LLM for links in one category.

    Parameters
    ----------
    llm:
        Chat-completion backend (Perplexity or OpenAI).
    category:
        Category requested in the prompt and stamped on every link.
    prompt_builder:
        ``(category, topic, context) -> user prompt``.
    source_label:
        Label passed to the extractor, e.g. ``"Perplexity"``.
    system_prompt:
        Optional system message; Perplexity gets none.
    override_source:
        Stamp ``source_label`` on every link instead of the outlet name
        the model reports.
    """

    def __init__(
        self,
        llm: ILLMProvider,
        category: LinkCategory,
        prompt_builder: PromptBuilder,
        source_label: str,
        extractor: LinkExtractor | None = None,
        thumbnail_resolver: ThumbnailResolver | None = None,
        system_prompt: str = "",
        max_results: int = 10,
        override_source: bool = False,
        temperature: float = 0.3,
        max_tokens: int = 1200,
    ) -> None:
        self._llm = llm
        self._category = category
        self._prompt_builder = prompt_builder
        self._source_label = source_label
        self._extractor = extractor or LinkExtractor()
        self._thumbnails = thumbnail_resolver
        self._system_prompt = system_prompt
        self._max_results = max_results
        self._override_source = override_source
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def fetch(self, context: SearchContext) -> list[Link]:
        if not self.is_available():
            return []
        prompt = self._prompt_builder(
            self._category, context.original_query, context.prompt_context()
        )
        try:
            text = await self._llm.complete(
                system_prompt=self._system_prompt,
                user_prompt=prompt,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except HubcapError as exc:
            _logger.warning(
                "llm_link_search_failed",
                provider=self.get_provider_name(),
                error=str(exc),
            )
            return []

        extracted = [
            item for item in self._extractor.extract(text, self._source_label)
            if is_plausible_url(item.url)
        ][: self._max_results]

        links = []
        for item in extracted:
            link = item.to_link(self._category)
            if self._override_source:
                link = link.model_copy(update={"source": self._source_label})
            links.append(link)

        if self._category is LinkCategory.ARTICLES and self._thumbnails is not None:
            links = await self._fill_thumbnails(links)

        _logger.info(
            "llm_link_search_completed",
            provider=self.get_provider_name(),
            count=len(links),
        )
        return links

    async def _fill_thumbnails(self, links: list[Link]) -> list[Link]:
        async def _resolve(link: Link) -> Link:
            if link.thumbnail:
                return link
            thumbnail = await self._thumbnails.resolve(link.url)
            return link.model_copy(update={"thumbnail": thumbnail}) if thumbnail else link

        return list(await asyncio.gather(*(_resolve(link) for link in links)))

    def get_category(self) -> LinkCategory:
        return self._category

    def get_provider_name(self) -> str:
        return f"{self._llm.get_provider_name()}-{self._category.value}"

    def is_available(self) -> bool:
        return self._llm.is_available()
