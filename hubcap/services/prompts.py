"""Prompt templates for the LLM-backed link providers and suggestions.

Kept deliberately short: the link templates ask for the strict
``{"links": [...]}`` envelope the link extractor parses first, the
suggestion templates for a ``{"suggestions": [...]}`` object.
"""

from __future__ import annotations

from hubcap.models.link import LinkCategory

_LINK_SCHEMA = (
    '{"links": [{"title": string, "url": string, "source": string, '
    '"section": "long_form_videos"|"short_form_videos"|"articles", '
    '"description": string, "creator": string|null, '
    '"published_at": string|null, "duration_sec": number|null}]}'
)

OPENAI_SYSTEM_PROMPT = (
    "You are a retrieval assistant. You must only return verifiable, real URLs. "
    "Never invent URLs or sources. If uncertain, return fewer items. "
    "Prefer recent content, credible domains, diverse creators and original sources."
)

_TASKS: dict[LinkCategory, str] = {
    LinkCategory.LONG_FORM_VIDEOS: 'Find up to 10 real YouTube long-form videos (≥5 minutes) about "{topic}".',
    LinkCategory.SHORT_FORM_VIDEOS: 'Find up to 10 real YouTube Shorts (≤60s) about "{topic}".',
    LinkCategory.ARTICLES: 'Find up to 10 real, recent, reputable articles about "{topic}".',
}

LLM_LINK_CATEGORIES: tuple[LinkCategory, ...] = tuple(_TASKS)


def link_task(category: LinkCategory, topic: str, context: str = "") -> str:
    """One-sentence task for *category*, with the search context appended."""
    try:
        task = _TASKS[category].format(topic=topic)
    except KeyError:
        raise ValueError(f"No LLM link task for category {category.value!r}") from None
    return f"{task} {context}".strip()


def perplexity_link_prompt(category: LinkCategory, topic: str, context: str = "") -> str:
    """Full user prompt sent to Perplexity (no system message)."""
    return (
        "You are a rigorous research assistant. Cite only real sources. "
        "Return STRICT JSON only, no prose.\n\n"
        f"{_LINK_SCHEMA}\n\n"
        f"Task: {link_task(category, topic, context)}\n"
        "If fewer results are credible, return fewer. Output JSON now."
    )


def openai_link_prompt(category: LinkCategory, topic: str, context: str = "") -> str:
    """User prompt paired with :data:`OPENAI_SYSTEM_PROMPT`."""
    return (
        f"Return ONLY strict JSON: {_LINK_SCHEMA}\n"
        f"Task: {link_task(category, topic, context)}\n"
        f'Set "section" to "{category.value}". Output JSON only.'
    )


def image_keywords_prompt(query: str, context: str) -> str:
    """Prompt used to condense a search into 2-4 visual keywords for Unsplash."""
    return (
        "Generate the 3 best keywords for finding relevant, high-quality images "
        f'on Unsplash for the search "{query}". Context: {context}. '
        "Return only the keywords separated by spaces, no punctuation or explanation."
    )


# ---------------------------------------------------------------------------
# Hierarchy suggestions
# ---------------------------------------------------------------------------

_SUGGESTION_SCHEMA = '{"suggestions": [{"name": string, "description": string}]}'


def topic_suggestion_system_prompt(
    hub_name: str, hub_description: str | None, exclude: list[str]
) -> str:
    """System prompt asking for topics that organise a hub."""
    lines = [
        "You organise a content library. A hub holds topics; each topic is a "
        "distinct, searchable theme that a curator can collect videos, articles "
        "and podcasts for.",
        f"Hub: {hub_name}",
        f"Hub description: {hub_description or 'Not specified'}",
        "Each name is 1-4 words. Each description is one sentence.",
    ]
    if exclude:
        lines.append(f"Do NOT include these already existing topics: {', '.join(exclude)}")
    lines.append(f"Return STRICT JSON only: {_SUGGESTION_SCHEMA}")
    return "\n".join(lines)


def topic_suggestion_user_prompt(hub_name: str, hub_description: str | None, count: int) -> str:
    return (
        f"Generate {count} topics for Hub: {hub_name}\n"
        f"Description: {hub_description or 'Not provided'}\n\n"
        'Return a JSON object with a "suggestions" property containing an array of topics.'
    )


def subtopic_suggestion_system_prompt(
    hub_name: str,
    hub_description: str | None,
    topic_name: str,
    topic_description: str | None,
    request: str,
    count: int,
    exclude: list[str],
) -> str:
    """System prompt asking for subtopics that answer a curator's request."""
    lines = [
        "You organise a content library into hubs, topics and subtopics. "
        "Subtopics are narrow, concrete entries inside one topic.",
        f"Hub: {hub_name} ({hub_description or 'Not specified'})",
        f"Topic: {topic_name} ({topic_description or 'Not specified'})",
        f"Curator request: {request}",
        f"Return at most {count} subtopics. Each name is 1-5 words and each "
        "description is one sentence.",
    ]
    if exclude:
        lines.append(f"Do NOT include these already existing subtopics: {', '.join(exclude)}")
    lines.append(f"Return STRICT JSON only: {_SUGGESTION_SCHEMA}")
    return "\n".join(lines)


def subtopic_suggestion_user_prompt(
    hub_name: str, topic_name: str, request: str, count: int
) -> str:
    return (
        f"Generate {count} subtopics for:\nHub: {hub_name}\nTopic: {topic_name}\n"
        f"Request: {request}\n\n"
        'Return a JSON object with a "suggestions" array containing the subtopics.'
    )
