"""FastAPI routes for Hubcap.

Service dependencies are resolved from ``app.state`` (populated at startup
by ``main._build_all``) through ``Depends`` and the ``Annotated`` pattern.

Route map (all under ``/api``)::

    POST   /search-stream              SSE stream of results, then "done"
    GET    /search-stream              endpoint status + provider availability
    POST   /search                     same pipeline, grouped JSON response
    POST   /more                       feedback-ranked additional links
    GET    /searches                   recent searches
    GET    /searches/{id}/links        links of one search, grouped
    DELETE /searches/{id}              delete a search and its links
    POST   /links/{id}/feedback        like / discard
    DELETE /links/{id}                 soft delete
    GET    /topics/{id}/links          topic links, overall and per search
    GET    /subtopics/{id}/links       subtopic links, overall and per search
    GET    /hubs                       list hubs
    POST   /hubs                       create hub
    GET    /hubs/{id}                  hub + its topics
    PATCH  /hubs/{id}                  edit hub
    DELETE /hubs/{id}                  delete hub (cascades)
    POST   /topics                     create topic
    POST   /topics/bulk                create several topics
    POST   /topics/suggestions         LLM topic ideas for a hub
    GET    /topics/{id}                topic + hub + subtopics
    GET    /topics/{id}/subtopics      subtopics of a topic
    POST   /subtopics                  create subtopic
    POST   /subtopics/bulk             create several subtopics
    POST   /subtopics/suggestions      LLM subtopic ideas for a topic
    GET    /subtopics/{id}             subtopic + topic + hub
    PATCH  /subtopics/{id}             edit subtopic
    DELETE /subtopics/{id}             delete subtopic (cascades)
    POST   /send-to-slack              share links to Slack
    GET    /giphy                      hub image picker
    GET    /health                     health + provider registry
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from fastapi.responses import StreamingResponse

from hubcap import __version__
from hubcap.api.schemas import (
    BulkEntry,
    ErrorResponse,
    FeedbackRequest,
    GiphyImage,
    GiphyResponse,
    GroupedLinksResponse,
    HealthResponse,
    HubCreateRequest,
    HubDetailResponse,
    HubUpdateRequest,
    LinkOut,
    ProviderStatusResponse,
    SearchGroup,
    SearchLinksResponse,
    SearchListResponse,
    SearchStreamRequest,
    SlackShareRequest,
    SubtopicBulkCreateRequest,
    SubtopicBulkCreateResponse,
    SubtopicCreateRequest,
    SubtopicDetailResponse,
    SubtopicLinksResponse,
    SubtopicSuggestionRequest,
    SubtopicSuggestionResponse,
    SubtopicUpdateRequest,
    SuccessResponse,
    SuggestionResponse,
    TopicBulkCreateRequest,
    TopicBulkCreateResponse,
    TopicCreateRequest,
    TopicDetailResponse,
    TopicLinksResponse,
    TopicSuggestionRequest,
    grouped_links,
)
from hubcap.api.sse import sse_response
from hubcap.interfaces.hierarchy_store import IHierarchyStore
from hubcap.interfaces.link_store import ILinkStore
from hubcap.interfaces.notifier import INotifier
from hubcap.models.hierarchy import Hub, Subtopic, Topic
from hubcap.models.link import LinkCategory, StoredLink
from hubcap.models.search import Search, SearchRequest
from hubcap.pipeline.orchestrator import SearchStreamOrchestrator
from hubcap.providers.content.giphy_provider import GiphyImageProvider
from hubcap.services.more_links_service import MoreLinksService
from hubcap.services.suggestion_service import SuggestionService
from hubcap.utils.errors import ConfigurationError, HubcapError, LLMError, NotificationError

logger = structlog.get_logger(logger_name=__name__)

router = APIRouter(prefix="/api", tags=["hubcap"])


# ---------------------------------------------------------------------------
# Dependency helpers -- pull singletons from app.state
# ---------------------------------------------------------------------------


def _get_orchestrator(request: Request) -> SearchStreamOrchestrator:
    return request.app.state.search_orchestrator


def _get_more_links(request: Request) -> MoreLinksService:
    return request.app.state.more_links_service


def _get_link_store(request: Request) -> ILinkStore:
    return request.app.state.link_store


def _get_hierarchy_store(request: Request) -> IHierarchyStore:
    return request.app.state.hierarchy_store


def _get_notifier(request: Request) -> INotifier | None:
    return getattr(request.app.state, "notifier", None)


def _get_giphy(request: Request) -> GiphyImageProvider | None:
    return getattr(request.app.state, "giphy_provider", None)


def _get_suggestions(request: Request) -> SuggestionService | None:
    return getattr(request.app.state, "suggestion_service", None)


def _get_provider_registry(request: Request) -> dict[str, bool]:
    return getattr(request.app.state, "provider_registry", {})


OrchestratorDep = Annotated[SearchStreamOrchestrator, Depends(_get_orchestrator)]
MoreLinksDep = Annotated[MoreLinksService, Depends(_get_more_links)]
LinkStoreDep = Annotated[ILinkStore, Depends(_get_link_store)]
HierarchyStoreDep = Annotated[IHierarchyStore, Depends(_get_hierarchy_store)]
NotifierDep = Annotated[INotifier | None, Depends(_get_notifier)]
GiphyDep = Annotated[GiphyImageProvider | None, Depends(_get_giphy)]
SuggestionDep = Annotated[SuggestionService | None, Depends(_get_suggestions)]
ProviderRegistryDep = Annotated[dict[str, bool], Depends(_get_provider_registry)]

_NOT_FOUND = {404: {"model": ErrorResponse}}


def _validated_search(body: SearchStreamRequest) -> SearchRequest:
    if not body.topic.strip():
        raise HTTPException(status_code=400, detail="Topic is required")
    return body.to_search_request()


def _pill_image(links: list[StoredLink]) -> str | None:
    """Preview image for a search pill: first image, else first thumbnail."""
    for link in links:
        if link.category is LinkCategory.IMAGES and (link.thumbnail or link.url):
            return link.thumbnail or link.url
    return next((link.thumbnail for link in links if link.thumbnail), None)


def _search_groups(searches: list[Search], links: list[StoredLink]) -> list[SearchGroup]:
    """One pill per search, in the order given, each with its grouped links."""
    by_search: dict[int, list[StoredLink]] = {}
    for link in links:
        by_search.setdefault(link.search_id, []).append(link)
    return [
        SearchGroup(
            search_id=s.id,
            query=s.query,
            description=s.description,
            created_at=s.created_at,
            link_count=len(by_search.get(s.id, [])),
            pill_image=_pill_image(by_search.get(s.id, [])),
            links=grouped_links(by_search.get(s.id, [])),
        )
        for s in searches
    ]


def _bulk_rows(entries: list[BulkEntry], kind: str) -> list[dict[str, Any]]:
    if not entries:
        raise HTTPException(status_code=400, detail=f"At least one {kind} is required")
    if any(not entry.name.strip() for entry in entries):
        raise HTTPException(status_code=400, detail=f"Every {kind} needs a name")
    return [entry.to_row() for entry in entries]


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


@router.post(
    "/search-stream",
    response_class=StreamingResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Stream search results as server-sent events",
)
async def search_stream(
    body: SearchStreamRequest,
    orchestrator: OrchestratorDep,
) -> StreamingResponse:
    """Fan the query out to every available provider.

    Emits one ``{"type": "result", ...}`` frame per new link in arrival
    order, then a single ``{"type": "done"}`` frame.
    """
    search = _validated_search(body)
    logger.info("search_stream_requested", topic=search.topic, topic_id=search.topic_id)
    return sse_response(orchestrator.stream(search))


@router.get(
    "/search-stream",
    response_model=ProviderStatusResponse,
    summary="Streaming endpoint status",
)
async def search_stream_status(orchestrator: OrchestratorDep) -> ProviderStatusResponse:
    return ProviderStatusResponse(
        status="ok",
        providers={p.get_provider_name(): p.is_available() for p in orchestrator.providers},
        timestamp=datetime.now(tz=timezone.utc),  # noqa: UP017
    )


@router.post(
    "/search",
    response_model=GroupedLinksResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Run a search and return grouped results",
)
async def search(
    body: SearchStreamRequest,
    orchestrator: OrchestratorDep,
) -> GroupedLinksResponse:
    links = await orchestrator.collect(_validated_search(body))
    return GroupedLinksResponse(results=grouped_links(links), total=len(links))


@router.post(
    "/more",
    response_model=GroupedLinksResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Find more links, ranked by past feedback",
)
async def more_links(
    body: SearchStreamRequest,
    service: MoreLinksDep,
) -> GroupedLinksResponse:
    ranked = await service.fetch_more(_validated_search(body))
    return GroupedLinksResponse(
        results={
            category: [LinkOut.from_link(link) for link in items]
            for category, items in ranked.items()
        },
        total=sum(len(items) for items in ranked.values()),
    )


# ---------------------------------------------------------------------------
# Searches & links
# ---------------------------------------------------------------------------


@router.get(
    "/searches",
    response_model=SearchListResponse,
    summary="List recent searches",
)
async def list_searches(
    link_store: LinkStoreDep,
    limit: int = Query(default=10, ge=1, le=100),
) -> SearchListResponse:
    return SearchListResponse(searches=await link_store.get_recent_searches(limit))


@router.get(
    "/searches/{search_id}/links",
    response_model=SearchLinksResponse,
    responses=_NOT_FOUND,
    summary="Links of one search, grouped by category",
)
async def get_search_links(search_id: int, link_store: LinkStoreDep) -> SearchLinksResponse:
    found = await link_store.get_search(search_id)
    if found is None:
        raise HTTPException(status_code=404, detail=f"Search {search_id} not found")
    links = await link_store.get_links_by_search(search_id)
    return SearchLinksResponse(search=found, results=grouped_links(links), total=len(links))


@router.delete(
    "/searches/{search_id}",
    response_model=SuccessResponse,
    responses=_NOT_FOUND,
    summary="Delete a search and its links",
)
async def delete_search(search_id: int, link_store: LinkStoreDep) -> SuccessResponse:
    if not await link_store.delete_search(search_id):
        raise HTTPException(status_code=404, detail=f"Search {search_id} not found")
    return SuccessResponse()


@router.post(
    "/links/{link_id}/feedback",
    response_model=LinkOut,
    responses=_NOT_FOUND,
    summary="Record like / discard feedback on a link",
)
async def set_link_feedback(
    link_id: int,
    body: FeedbackRequest,
    link_store: LinkStoreDep,
) -> LinkOut:
    updated = await link_store.set_feedback(link_id, body.feedback)
    if updated is None:
        raise HTTPException(status_code=404, detail=f"Link {link_id} not found")
    return LinkOut.from_link(updated)


@router.delete(
    "/links/{link_id}",
    response_model=SuccessResponse,
    responses=_NOT_FOUND,
    summary="Remove a link from its search",
)
async def remove_link(link_id: int, link_store: LinkStoreDep) -> SuccessResponse:
    if not await link_store.mark_removed(link_id):
        raise HTTPException(status_code=404, detail=f"Link {link_id} not found")
    return SuccessResponse()


@router.get(
    "/topics/{topic_id}/links",
    response_model=TopicLinksResponse,
    summary="All links of a topic, overall and per search",
)
async def get_topic_links(topic_id: int, link_store: LinkStoreDep) -> TopicLinksResponse:
    searches = await link_store.get_searches_by_topic(topic_id)
    links = await link_store.get_links_by_topic(topic_id)
    return TopicLinksResponse(
        topic_id=topic_id,
        all_links=grouped_links(links),
        searches=_search_groups(searches, links),
        total_searches=len(searches),
        total_links=len(links),
    )



@router.get(
    "/subtopics/{subtopic_id}/links",
    response_model=SubtopicLinksResponse,
    responses=_NOT_FOUND,
    summary="All links of a subtopic, overall and per search",
)
async def get_subtopic_links(
    subtopic_id: int,
    link_store: LinkStoreDep,
    store: HierarchyStoreDep,
) -> SubtopicLinksResponse:
    if await store.get_subtopic(subtopic_id) is None:
        raise HTTPException(status_code=404, detail=f"Subtopic {subtopic_id} not found")
    searches = await link_store.get_searches_by_subtopic(subtopic_id)
    links = await link_store.get_links_by_subtopic(subtopic_id)
    return SubtopicLinksResponse(
        subtopic_id=subtopic_id,
        all_links=grouped_links(links),
        searches=_search_groups(searches, links),
        total_searches=len(searches),
        total_links=len(links),
    )


# ---------------------------------------------------------------------------
# Hubs
# ---------------------------------------------------------------------------


@router.get("/hubs", response_model=list[Hub], summary="List hubs")
async def list_hubs(store: HierarchyStoreDep) -> list[Hub]:
    return await store.list_hubs()


@router.post(
    "/hubs",
    response_model=Hub,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
    summary="Create a hub",
)
async def create_hub(body: HubCreateRequest, store: HierarchyStoreDep) -> Hub:
    if not body.name.strip():
        raise HTTPException(status_code=400, detail="Name is required")
    return await store.create_hub(
        name=body.name.strip(),
        description=body.description,
        image_url=body.image_url,
        color=body.color,
    )


@router.get(
    "/hubs/{hub_id}",
    response_model=HubDetailResponse,
    responses=_NOT_FOUND,
    summary="Get a hub and its topics",
)
async def get_hub(hub_id: int, store: HierarchyStoreDep) -> HubDetailResponse:
    hub = await store.get_hub(hub_id)
    if hub is None:
        raise HTTPException(status_code=404, detail=f"Hub {hub_id} not found")
    return HubDetailResponse(hub=hub, topics=await store.list_topics(hub_id))


@router.patch(
    "/hubs/{hub_id}",
    response_model=Hub,
    responses={**_NOT_FOUND, 400: {"model": ErrorResponse}},
    summary="Edit a hub",
)
async def update_hub(hub_id: int, body: HubUpdateRequest, store: HierarchyStoreDep) -> Hub:
    changes = body.model_dump(exclude_unset=True)
    if "name" in changes and not (changes["name"] or "").strip():
        raise HTTPException(status_code=400, detail="Name cannot be empty")
    hub = await store.update_hub(hub_id, changes)
    if hub is None:
        raise HTTPException(status_code=404, detail=f"Hub {hub_id} not found")
    return hub


@router.delete(
    "/hubs/{hub_id}",
    response_model=SuccessResponse,
    responses=_NOT_FOUND,
    summary="Delete a hub with everything under it",
)
async def delete_hub(hub_id: int, store: HierarchyStoreDep) -> SuccessResponse:
    if not await store.delete_hub(hub_id):
        raise HTTPException(status_code=404, detail=f"Hub {hub_id} not found")
    return SuccessResponse()


# ---------------------------------------------------------------------------
# Topics & subtopics
# ---------------------------------------------------------------------------


@router.post(
    "/topics",
    response_model=Topic,
    status_code=201,
    responses={**_NOT_FOUND, 400: {"model": ErrorResponse}},
    summary="Create a topic in a hub",
)
async def create_topic(body: TopicCreateRequest, store: HierarchyStoreDep) -> Topic:
    if not body.name.strip():
        raise HTTPException(status_code=400, detail="Name is required")
    if await store.get_hub(body.hub_id) is None:
        raise HTTPException(status_code=404, detail=f"Hub {body.hub_id} not found")
    return await store.create_topic(
        hub_id=body.hub_id,
        name=body.name.strip(),
        description=body.description,
        image_url=body.image_url,
        color=body.color,
    )


@router.post(
    "/topics/bulk",
    response_model=TopicBulkCreateResponse,
    status_code=201,
    responses={**_NOT_FOUND, 400: {"model": ErrorResponse}},
    summary="Create several topics in a hub at once",
)
async def create_topics_bulk(
    body: TopicBulkCreateRequest, store: HierarchyStoreDep
) -> TopicBulkCreateResponse:
    rows = _bulk_rows(body.topics, "topic")
    if await store.get_hub(body.hub_id) is None:
        raise HTTPException(status_code=404, detail=f"Hub {body.hub_id} not found")
    topics = await store.create_topics(body.hub_id, rows)
    return TopicBulkCreateResponse(topics=topics, count=len(topics))


@router.get(
    "/topics/{topic_id}",
    response_model=TopicDetailResponse,
    responses=_NOT_FOUND,
    summary="Get a topic with its hub and subtopics",
)
async def get_topic(topic_id: int, store: HierarchyStoreDep) -> TopicDetailResponse:
    topic = await store.get_topic(topic_id)
    if topic is None:
        raise HTTPException(status_code=404, detail=f"Topic {topic_id} not found")
    return TopicDetailResponse(
        topic=topic,
        hub=await store.get_hub(topic.hub_id),
        subtopics=await store.list_subtopics(topic_id),
    )


@router.get(
    "/topics/{topic_id}/subtopics",
    response_model=list[Subtopic],
    responses=_NOT_FOUND,
    summary="List subtopics of a topic",
)
async def list_subtopics(topic_id: int, store: HierarchyStoreDep) -> list[Subtopic]:
    if await store.get_topic(topic_id) is None:
        raise HTTPException(status_code=404, detail=f"Topic {topic_id} not found")
    return await store.list_subtopics(topic_id)


@router.post(
    "/subtopics",
    response_model=Subtopic,
    status_code=201,
    responses={**_NOT_FOUND, 400: {"model": ErrorResponse}},
    summary="Create a subtopic in a topic",
)
async def create_subtopic(body: SubtopicCreateRequest, store: HierarchyStoreDep) -> Subtopic:
    if not body.name.strip():
        raise HTTPException(status_code=400, detail="Name is required")
    if await store.get_topic(body.topic_id) is None:
        raise HTTPException(status_code=404, detail=f"Topic {body.topic_id} not found")
    return await store.create_subtopic(
        topic_id=body.topic_id,
        name=body.name.strip(),
        description=body.description,
        image_url=body.image_url,
        color=body.color,
    )


@router.get(
    "/subtopics/{subtopic_id}",
    response_model=SubtopicDetailResponse,
    responses=_NOT_FOUND,
    summary="Get a subtopic with its topic and hub",
)
async def get_subtopic(subtopic_id: int, store: HierarchyStoreDep) -> SubtopicDetailResponse:
    subtopic = await store.get_subtopic(subtopic_id)
    if subtopic is None:
        raise HTTPException(status_code=404, detail=f"Subtopic {subtopic_id} not found")
    topic = await store.get_topic(subtopic.topic_id)
    hub = await store.get_hub(topic.hub_id) if topic else None
    return SubtopicDetailResponse(subtopic=subtopic, topic=topic, hub=hub)


@router.patch(
    "/subtopics/{subtopic_id}",
    response_model=Subtopic,
    responses={**_NOT_FOUND, 400: {"model": ErrorResponse}},
    summary="Edit a subtopic",
)
async def update_subtopic(
    subtopic_id: int, body: SubtopicUpdateRequest, store: HierarchyStoreDep
) -> Subtopic:
    changes = body.model_dump(exclude_unset=True)
    if "name" in changes:
        if not (changes["name"] or "").strip():
            raise HTTPException(status_code=400, detail="Name cannot be empty")
        changes["name"] = changes["name"].strip()
    subtopic = await store.update_subtopic(subtopic_id, changes)
    if subtopic is None:
        raise HTTPException(status_code=404, detail=f"Subtopic {subtopic_id} not found")
    return subtopic


@router.delete(
    "/subtopics/{subtopic_id}",
    response_model=SuccessResponse,
    responses=_NOT_FOUND,
    summary="Delete a subtopic with its searches and links",
)
async def delete_subtopic(subtopic_id: int, store: HierarchyStoreDep) -> SuccessResponse:
    if not await store.delete_subtopic(subtopic_id):
        raise HTTPException(status_code=404, detail=f"Subtopic {subtopic_id} not found")
    return SuccessResponse()


@router.post(
    "/subtopics/bulk",
    response_model=SubtopicBulkCreateResponse,
    status_code=201,
    responses={**_NOT_FOUND, 400: {"model": ErrorResponse}},
    summary="Create several subtopics in a topic at once",
)
async def create_subtopics_bulk(
    body: SubtopicBulkCreateRequest, store: HierarchyStoreDep
) -> SubtopicBulkCreateResponse:
    rows = _bulk_rows(body.subtopics, "subtopic")
    if await store.get_topic(body.topic_id) is None:
        raise HTTPException(status_code=404, detail=f"Topic {body.topic_id} not found")
    subtopics = await store.create_subtopics(body.topic_id, rows)
    return SubtopicBulkCreateResponse(subtopics=subtopics, count=len(subtopics))


# ---------------------------------------------------------------------------
# Suggestions
# ---------------------------------------------------------------------------

_SUGGESTION_ERRORS = {
    400: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def _require_suggestions(service: SuggestionService | None) -> SuggestionService:
    if service is None or not service.is_available():
        raise HTTPException(status_code=503, detail="OpenAI API key not configured")
    return service


@router.post(
    "/topics/suggestions",
    response_model=SuggestionResponse,
    responses=_SUGGESTION_ERRORS,
    summary="Suggest topics for a hub",
)
async def suggest_topics(
    body: TopicSuggestionRequest, service: SuggestionDep
) -> SuggestionResponse:
    if not body.hub_name.strip():
        raise HTTPException(status_code=400, detail="Hub name is required")
    service = _require_suggestions(service)
    try:
        suggestions = await service.suggest_topics(
            hub_name=body.hub_name.strip(),
            hub_description=body.hub_description,
            exclude=body.exclude_topics,
        )
    except LLMError as exc:
        logger.warning("topic_suggestions_failed", hub=body.hub_name, error=exc.message)
        raise HTTPException(status_code=502, detail=exc.message) from exc
    return SuggestionResponse(suggestions=suggestions)


@router.post(
    "/subtopics/suggestions",
    response_model=SubtopicSuggestionResponse,
    responses=_SUGGESTION_ERRORS,
    summary="Suggest subtopics for a topic from a curator request",
)
async def suggest_subtopics(
    body: SubtopicSuggestionRequest, service: SuggestionDep
) -> SubtopicSuggestionResponse:
    required = (body.hub_name, body.topic_name, body.subtopic_description)
    if any(not value.strip() for value in required):
        raise HTTPException(
            status_code=400,
            detail="Hub name, topic name, and subtopic description are required",
        )
    service = _require_suggestions(service)
    try:
        result = await service.suggest_subtopics(
            hub_name=body.hub_name.strip(),
            topic_name=body.topic_name.strip(),
            request=body.subtopic_description.strip(),
            hub_description=body.hub_description,
            topic_description=body.topic_description,
            exclude=body.exclude_subtopics,
        )
    except LLMError as exc:
        logger.warning("subtopic_suggestions_failed", topic=body.topic_name, error=exc.message)
        raise HTTPException(status_code=502, detail=exc.message) from exc
    return SubtopicSuggestionResponse(
        suggestions=result.suggestions,
        is_exhaustive=result.is_exhaustive,
        max_reached=result.max_reached,
    )


# ---------------------------------------------------------------------------
# Sharing & images
# ---------------------------------------------------------------------------


@router.post(
    "/send-to-slack",
    response_model=SuccessResponse,
    responses={
        400: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Share links to the configured Slack channel",
)
async def send_to_slack(body: SlackShareRequest, notifier: NotifierDep) -> SuccessResponse:
    if not body.links:
        raise HTTPException(status_code=400, detail="No links provided")
    if notifier is None or not notifier.is_available():
        raise HTTPException(status_code=503, detail="Slack webhook not configured")

    context = body.context.model_dump() if body.context else None
    try:
        await notifier.send_links([link.to_link() for link in body.links], context)
    except ConfigurationError as exc:
        raise HTTPException(status_code=503, detail=exc.message) from exc
    except NotificationError as exc:
        logger.error("slack_share_failed", error=exc.message)
        raise HTTPException(status_code=502, detail=exc.message) from exc
    return SuccessResponse()


@router.get(
    "/giphy",
    response_model=GiphyResponse,
    responses={
        400: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Search Giphy for hub images",
)
async def giphy_search(
    giphy: GiphyDep,
    q: str = Query(default=""),
    limit: int = Query(default=1, ge=1, le=25),
) -> GiphyResponse:
    if not q.strip():
        raise HTTPException(status_code=400, detail="Query parameter 'q' is required")
    if giphy is None or not giphy.is_available():
        raise HTTPException(status_code=503, detail="Giphy API key not configured")
    try:
        images = await giphy.search_image_urls(q.strip(), limit)
    except HubcapError as exc:
        logger.warning("giphy_search_failed", query=q, error=exc.message)
        raise HTTPException(status_code=502, detail=exc.message) from exc
    return GiphyResponse(
        image_url=images[0]["url"] if images else None,
        images=[GiphyImage(**image) for image in images],
    )


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health(registry: ProviderRegistryDep, response: Response) -> HealthResponse:
    response.headers["Cache-Control"] = "no-store"
    providers: dict[str, Any] = dict(registry)
    return HealthResponse(status="healthy", version=__version__, providers=providers)
