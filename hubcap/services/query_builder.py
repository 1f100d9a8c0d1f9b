"""Build the per-request :class:`SearchContext` and feedback guidance."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable

from hubcap.models.link import Link
from hubcap.models.search import SearchContext, SearchRequest

_TERM_RE = re.compile(r"[a-z0-9]+")


def build_search_context(
    request: SearchRequest,
    feedback_context: str | None = None,
) -> SearchContext:
    """Concatenate the hierarchy metadata into the enriched query.

    The enriched query is a ``" | "``-joined list of labelled parts
    (``Hub:``, ``Hub Focus:``, ``Topic:``, ``Topic Focus:``, ``Subtopic:``,
    ``Subtopic Focus:``, ``Search Query:``, ``Additional Context:``).  The
    keyword query used by structured APIs is the raw query followed by
    subtopic, topic and hub names, skipping any already present.
    """
    query = request.topic.strip()
    parts: list[str] = []
    if request.hub_name:
        parts.append(f"Hub: {request.hub_name}")
        if request.hub_description:
            parts.append(f"Hub Focus: {request.hub_description}")
    if request.topic_name:
        parts.append(f"Topic: {request.topic_name}")
        if request.topic_description:
            parts.append(f"Topic Focus: {request.topic_description}")
    if request.subtopic_name:
        parts.append(f"Subtopic: {request.subtopic_name}")
        if request.subtopic_description:
            parts.append(f"Subtopic Focus: {request.subtopic_description}")
    parts.append(f"Search Query: {query}")
    if request.search_description:
        parts.append(f"Additional Context: {request.search_description}")

    keywords = [query]
    for name in (request.subtopic_name, request.topic_name, request.hub_name):
        if name and name.strip() and name.strip().lower() not in (k.lower() for k in keywords):
            keywords.append(name.strip())

    return SearchContext(
        original_query=query,
        enriched_query=" | ".join(parts),
        context_parts=parts,
        keyword_query=" ".join(keywords),
        hub_name=request.hub_name,
        topic_name=request.topic_name,
        subtopic_name=request.subtopic_name,
        description=request.search_description,
        feedback_context=feedback_context or None,
    )


def _top_terms(links: Iterable[Link], limit: int) -> list[str]:
    counts: Counter[str] = Counter()
    for link in links:
        counts.update(_TERM_RE.findall(f"{link.title} {link.snippet}".lower()))
    # most_common keeps first-seen order among ties.
    return [term for term, _ in counts.most_common(limit)]


def build_context_from_feedback(liked: list[Link], disliked: list[Link]) -> str:
    """Summarise past likes/discards into one guidance sentence for LLM prompts."""
    creators: list[str] = []
    for link in liked:
        if link.creator and link.creator not in creators:
            creators.append(link.creator)
    creators = creators[:5]

    top_liked = _top_terms(liked, 8)
    top_disliked = _top_terms(disliked, 6)

    sentences = []
    if creators:
        sentences.append(f"Prefer creators: {', '.join(creators)}.")
    if top_liked:
        sentences.append(f"Favor content including: {', '.join(top_liked)}.")
    if top_disliked:
        sentences.append(f"Avoid content heavy on: {', '.join(top_disliked)}.")
    if disliked:
        sentences.append("Exclude similar to disliked titles.")
    return " ".join(sentences)
