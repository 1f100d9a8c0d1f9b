"""Hubcap FastAPI application entry point.

Wires together all providers, services, and routes via dependency
injection.  Loads configuration from ``.env`` and ``config/config.yaml``
and configures structured logging.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from hubcap import __version__
from hubcap.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from hubcap.api.routes import router as api_router
from hubcap.config.loader import load_config, provider_limit
from hubcap.config.settings import Settings
from hubcap.interfaces.content_provider import IContentProvider
from hubcap.interfaces.llm_provider import ILLMProvider
from hubcap.pipeline.orchestrator import SearchStreamOrchestrator
from hubcap.providers.cache.memory_cache import MemoryCacheProvider
from hubcap.providers.content.giphy_provider import GiphyImageProvider
from hubcap.providers.content.itunes_provider import ITunesPodcastProvider
from hubcap.providers.content.llm_link_provider import LLMLinkProvider
from hubcap.providers.content.newsapi_provider import NewsAPIProvider
from hubcap.providers.content.unsplash_provider import UnsplashImageProvider
from hubcap.providers.content.youtube_provider import YouTubeShortsProvider, YouTubeVideoProvider
from hubcap.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
from hubcap.providers.llm.openai_provider import OpenAILLMProvider, PerplexityLLMProvider
from hubcap.providers.notify.slack_provider import SlackWebhookNotifier
from hubcap.providers.store.sqlite_hierarchy_store import SQLiteHierarchyStore
from hubcap.providers.store.sqlite_link_store import SQLiteLinkStore
from hubcap.services.link_extractor import LinkExtractor
from hubcap.services.more_links_service import MoreLinksService
from hubcap.services.prompts import (
    LLM_LINK_CATEGORIES,
    OPENAI_SYSTEM_PROMPT,
    openai_link_prompt,
    perplexity_link_prompt,
)
from hubcap.services.suggestion_service import SuggestionService
from hubcap.services.thumbnail_resolver import ThumbnailResolver
from hubcap.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Provider assembly
# ---------------------------------------------------------------------------


def _llm_link_providers(
    llm: ILLMProvider,
    extractor: LinkExtractor,
    thumbnails: ThumbnailResolver,
    app_config: dict,
    *,
    openai_style: bool,
) -> list[IContentProvider]:
    """One LLM link provider per LLM-searchable category."""
    if openai_style:
        return [
            LLMLinkProvider(
                llm=llm,
                category=category,
                prompt_builder=openai_link_prompt,
                source_label="OpenAI",
                extractor=extractor,
                thumbnail_resolver=thumbnails,
                system_prompt=OPENAI_SYSTEM_PROMPT,
                max_results=provider_limit(app_config, "openai", "max_results", 3),
                override_source=True,
            )
            for category in LLM_LINK_CATEGORIES
        ]

    section = app_config.get("providers", {}).get("perplexity", {})
    return [
        LLMLinkProvider(
            llm=llm,
            category=category,
            prompt_builder=perplexity_link_prompt,
            source_label="Perplexity",
            extractor=extractor,
            thumbnail_resolver=thumbnails,
            max_results=provider_limit(app_config, "perplexity", "max_results", 10),
            temperature=float(section.get("temperature", 0.3)),
            max_tokens=int(section.get("max_tokens", 1200)),
        )
        for category in LLM_LINK_CATEGORIES
    ]


def _build_all(app_settings: Settings, app_config: dict | None = None) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    app_config = app_config if app_config is not None else config
    timeout = app_settings.provider_timeout

    # -- Shared resources --
    http_client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)
    thumbnail_config = app_config.get("thumbnails", {})
    cache = MemoryCacheProvider(
        max_size=int(thumbnail_config.get("cache_size", 512)),
        ttl=int(thumbnail_config.get("cache_ttl", 3600)),
    )
    thumbnails = ThumbnailResolver(
        http_client=http_client,
        api_key=app_settings.linkpreview_api_key,
        cache=cache,
        timeout=timeout,
    )
    extractor = LinkExtractor()

    # -- LLMs & embeddings --
    perplexity = PerplexityLLMProvider(settings=app_settings)
    openai_llm = OpenAILLMProvider(settings=app_settings)
    embedder = OpenAIEmbeddingProvider(settings=app_settings)

    # -- Content providers --
    youtube_long = YouTubeVideoProvider(
        http_client=http_client,
        api_key=app_settings.youtube_api_key,
        max_results=provider_limit(app_config, "youtube", "max_results", 10),
        timeout=timeout,
    )
    giphy = GiphyImageProvider(
        http_client=http_client,
        api_key=app_settings.giphy_api_key,
        limit=provider_limit(app_config, "giphy", "limit", 5),
        timeout=timeout,
    )

    stream_providers: list[IContentProvider] = [
        *_llm_link_providers(perplexity, extractor, thumbnails, app_config, openai_style=False),
        youtube_long,
        YouTubeShortsProvider(
            http_client=http_client,
            api_key=app_settings.youtube_api_key,
            candidates=provider_limit(app_config, "youtube", "shorts_candidates", 15),
            max_results=provider_limit(app_config, "youtube", "shorts_max_results", 5),
            max_duration_sec=provider_limit(app_config, "youtube", "shorts_max_duration_sec", 60),
            timeout=timeout,
        ),
        NewsAPIProvider(
            http_client=http_client,
            api_key=app_settings.newsapi_api_key,
            thumbnail_resolver=thumbnails,
            page_size=provider_limit(app_config, "newsapi", "page_size", 15),
            max_results=provider_limit(app_config, "newsapi", "max_results", 10),
            headlines_page_size=provider_limit(app_config, "newsapi", "headlines_page_size", 5),
            lookback_days=provider_limit(app_config, "newsapi", "lookback_days", 20),
            timeout=timeout,
        ),
        ITunesPodcastProvider(
            http_client=http_client,
            limit=provider_limit(app_config, "itunes", "limit", 10),
            max_results=provider_limit(app_config, "itunes", "max_results", 6),
            timeout=timeout,
        ),
        UnsplashImageProvider(
            http_client=http_client,
            access_key=app_settings.unsplash_access_key,
            keyword_llm=openai_llm,
            per_page=provider_limit(app_config, "unsplash", "per_page", 5),
            keyword_timeout=app_settings.keyword_refinement_timeout,
            timeout=timeout,
        ),
        giphy,
    ]

    # -- Stores --
    link_store = SQLiteLinkStore(db_path=app_settings.database_path)
    hierarchy_store = SQLiteHierarchyStore(db_path=app_settings.database_path)

    # -- Orchestrators --
    search_orchestrator = SearchStreamOrchestrator(
        providers=stream_providers,
        link_store=link_store,
        embedding_provider=embedder,
        grace_period=app_settings.stream_grace_period,
        queue_size=app_settings.stream_queue_size,
    )
    more_orchestrator = SearchStreamOrchestrator(
        providers=[
            *_llm_link_providers(openai_llm, extractor, thumbnails, app_config, openai_style=True),
            *_llm_link_providers(perplexity, extractor, thumbnails, app_config, openai_style=False),
            youtube_long,
        ],
        link_store=link_store,
        embedding_provider=embedder,
        grace_period=app_settings.stream_grace_period,
        queue_size=app_settings.stream_queue_size,
    )
    more_links_service = MoreLinksService(
        orchestrator=more_orchestrator,
        link_store=link_store,
        recent_days=int(app_config.get("more", {}).get("youtube_recent_days", 30)),
    )

    suggestion_config = app_config.get("suggestions", {})
    suggestion_service = SuggestionService(
        llm=openai_llm,
        topic_count=int(suggestion_config.get("topic_count", 10)),
        subtopic_count=int(suggestion_config.get("subtopic_count", 10)),
        exhaustive_count=int(suggestion_config.get("exhaustive_count", 25)),
        temperature=float(suggestion_config.get("temperature", 0.2)),
    )

    notifier = SlackWebhookNotifier(
        http_client=http_client,
        webhook_url=app_settings.slack_webhook_url,
        timeout=timeout,
    )

    # -- Provider registry for /health --
    provider_registry: dict[str, bool] = {
        p.get_provider_name(): p.is_available() for p in stream_providers
    }
    provider_registry.update(
        {
            "openai": openai_llm.is_available(),
            "embeddings": embedder.is_available(),
            "linkpreview": thumbnails.is_available(),
            "slack": notifier.is_available(),
            "database": True,
        }
    )

    return {
        "http_client": http_client,
        "search_orchestrator": search_orchestrator,
        "more_links_service": more_links_service,
        "suggestion_service": suggestion_service,
        "link_store": link_store,
        "hierarchy_store": hierarchy_store,
        "notifier": notifier,
        "giphy_provider": giphy,
        "provider_registry": provider_registry,
    }


# ---------------------------------------------------------------------------
# Application lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = _build_all(settings)
    for key, value in components.items():
        setattr(application.state, key, value)

    # Both stores share one database file; either initialize creates all tables.
    await components["link_store"].initialize()
    await components["hierarchy_store"].initialize()

    _logger.info(
        "app_startup",
        version=__version__,
        environment=settings.app_env,
        providers=sorted(name for name, ok in components["provider_registry"].items() if ok),
    )

    yield

    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="Hubcap API",
        version=__version__,
        description=(
            "Curate links for a topic: fan one query out to LLM search, YouTube, "
            "news, podcast and image APIs and stream de-duplicated results back "
            "as server-sent events."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    # -- API routes --
    application.include_router(api_router)

    return application


app = create_app()


def main() -> None:
    """Console entry point: ``hubcap``."""
    uvicorn.run(
        "hubcap.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )


if __name__ == "__main__":
    main()
