"""Streaming multi-provider search orchestrator.

Runs every available content provider concurrently and turns their
results into a stream of :class:`StreamEvent` objects ending with exactly
one ``done`` event.

ARCHITECTURE NOTE:
    Fan-out / fan-in over a bounded ``asyncio.Queue``.  One task per
    provider awaits ``provider.fetch`` and puts a single outcome on the
    queue.  The multiplexer (the ``stream`` async generator itself) takes
    outcomes in arrival order and, for each batch:

        1. drops URLs already seen in this search (StreamContext)
        2. embeds the surviving links (title + snippet)
        3. persists them with ``save_many`` (write-then-notify)
        4. yields one ``result`` event per link, in the provider's order

    Once every provider has reported the stream moves RUNNING → DRAINING,
    waits a short grace period, writes the final link count and yields
    ``done`` before moving to CLOSED.

    Failure isolation: a provider that raises is logged and treated as an
    empty batch.  Persistence and embedding failures are logged and the
    links are still streamed.  If the consumer stops early (client
    disconnect, ``aclose()``), the ``finally`` block marks the stream
    CLOSED and cancels any provider still in flight; their results are
    discarded.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass, field

import structlog

from hubcap.interfaces.content_provider import IContentProvider
from hubcap.interfaces.embedding_provider import IEmbeddingProvider
from hubcap.interfaces.link_store import ILinkStore
from hubcap.models.link import Link
from hubcap.models.search import SearchContext, SearchRequest
from hubcap.models.stream import StreamEvent, StreamState
from hubcap.pipeline.stream_context import StreamContext
from hubcap.services.query_builder import build_search_context
from hubcap.utils.errors import HubcapError
from hubcap.utils.logging import get_logger


@dataclass
class _ProviderOutcome:
    """What one provider task hands to the multiplexer."""

    provider: str
    links: list[Link] = field(default_factory=list)
    failed: bool = False


class SearchStreamOrchestrator:
    """Fan out a search to every available provider and stream the results.

    Parameters
    ----------
    providers:
        Content providers to run.  Unavailable ones (missing API key) are
        skipped when a stream starts.
    link_store:
        Persistence for the search row and its links.  ``None`` streams
        without persisting.
    embedding_provider:
        Optional embedder; links are persisted with their vectors so the
        "more links" flow can re-rank later.
    grace_period:
        Seconds to wait after the last provider settles before the final
        bookkeeping and the ``done`` event.
    queue_size:
        Capacity of the provider → multiplexer queue.
    """

    def __init__(
        self,
        providers: list[IContentProvider],
        link_store: ILinkStore | None = None,
        embedding_provider: IEmbeddingProvider | None = None,
        grace_period: float = 0.5,
        queue_size: int = 32,
    ) -> None:
        self._providers = list(providers)
        self._link_store = link_store
        self._embedding_provider = embedding_provider
        self._grace_period = grace_period
        self._queue_size = queue_size
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def providers(self) -> list[IContentProvider]:
        return list(self._providers)

    def available_providers(self) -> list[IContentProvider]:
        return [p for p in self._providers if p.is_available()]

    async def stream(
        self,
        request: SearchRequest,
        context: SearchContext | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """Yield one ``result`` event per new link, then exactly one ``done``.

        Parameters
        ----------
        request:
            The validated search request (used for the search row).
        context:
            Pre-built search context; built from *request* when omitted.
        """
        context = context or build_search_context(request)
        stream_ctx = StreamContext(search_id=await self._open_search(request))
        providers = self.available_providers()
        queue: asyncio.Queue[_ProviderOutcome] = asyncio.Queue(maxsize=self._queue_size)

        self._logger.info(
            "search_stream_started",
            search_id=stream_ctx.search_id,
            query=context.original_query,
            providers=[p.get_provider_name() for p in providers],
        )

        tasks = [
            asyncio.create_task(
                self._run_provider(provider, context, queue),
                name=f"provider:{provider.get_provider_name()}",
            )
            for provider in providers
        ]

        try:
            for _ in range(len(tasks)):
                outcome = await queue.get()
                batch = stream_ctx.admit_batch(outcome.links)
                dropped = len(outcome.links) - len(batch)
                if dropped:
                    self._logger.debug(
                        "duplicate_links_dropped", provider=outcome.provider, count=dropped
                    )
                if not batch:
                    continue
                for link in await self._persist(stream_ctx, batch):
                    stream_ctx.emitted += 1
                    yield StreamEvent.for_link(link)

            stream_ctx.transition(StreamState.DRAINING)
            await asyncio.gather(*tasks)
            if self._grace_period > 0:
                await asyncio.sleep(self._grace_period)
            await self._finalize_count(stream_ctx)

            self._logger.info(
                "search_stream_completed",
                search_id=stream_ctx.search_id,
                emitted=stream_ctx.emitted,
                saved=stream_ctx.saved,
            )
            yield StreamEvent.done()
            stream_ctx.transition(StreamState.CLOSED)
        finally:
            if not stream_ctx.is_closed:
                stream_ctx.state = StreamState.CLOSED
                pending = [task for task in tasks if not task.done()]
                for task in pending:
                    task.cancel()
                self._logger.info(
                    "search_stream_cancelled",
                    search_id=stream_ctx.search_id,
                    emitted=stream_ctx.emitted,
                    cancelled_providers=len(pending),
                )

    async def collect(
        self,
        request: SearchRequest,
        context: SearchContext | None = None,
    ) -> list[Link]:
        """Run a full stream and return every emitted link in order."""
        links: list[Link] = []
        async for event in self.stream(request, context):
            if event.type == "result" and event.result is not None:
                links.append(event.result)
        return links

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _open_search(self, request: SearchRequest) -> int | None:
        if self._link_store is None:
            return None
        try:
            search = await self._link_store.create_search(
                query=request.topic,
                topic_id=request.topic_id,
                subtopic_id=request.subtopic_id,
                description=request.search_description,
            )
        except HubcapError as exc:
            self._logger.warning("search_record_failed", query=request.topic, error=str(exc))
            return None
        return search.id

    async def _run_provider(
        self,
        provider: IContentProvider,
        context: SearchContext,
        queue: asyncio.Queue[_ProviderOutcome],
    ) -> None:
        name = provider.get_provider_name()
        try:
            links = await provider.fetch(context)
            outcome = _ProviderOutcome(provider=name, links=list(links))
        except Exception as exc:  # noqa: BLE001 - one provider must not end the stream
            self._logger.error("provider_task_failed", provider=name, error=str(exc))
            outcome = _ProviderOutcome(provider=name, failed=True)
        await queue.put(outcome)

    async def _persist(self, stream_ctx: StreamContext, links: list[Link]) -> list[Link]:
        """Embed and save *links*; returns what should be emitted.

        Saved rows replace the plain links so clients receive row ids.
        """
        links = await self._embed(links)
        if stream_ctx.search_id is None or self._link_store is None:
            return links
        stored = await self._link_store.save_many(stream_ctx.search_id, links)
        stream_ctx.saved += len(stored)
        if len(stored) == len(links):
            return list(stored)
        return links

    async def _embed(self, links: list[Link]) -> list[Link]:
        if self._embedding_provider is None:
            return links
        try:
            vectors = await self._embedding_provider.embed([link.embedding_text() for link in links])
        except HubcapError as exc:
            self._logger.warning("link_embedding_failed", count=len(links), error=str(exc))
            return links
        if len(vectors) != len(links):
            self._logger.warning(
                "link_embedding_count_mismatch", expected=len(links), received=len(vectors)
            )
            return links
        return [
            link.model_copy(update={"embedding": vector})
            for link, vector in zip(links, vectors)
        ]

    async def _finalize_count(self, stream_ctx: StreamContext) -> None:
        if stream_ctx.search_id is None or self._link_store is None:
            return
        try:
            await self._link_store.update_link_count(stream_ctx.search_id, stream_ctx.saved)
        except HubcapError as exc:
            self._logger.warning(
                "link_count_update_failed", search_id=stream_ctx.search_id, error=str(exc)
            )
