"""LLM-generated topic and subtopic suggestions.

The model is asked for ``{"suggestions": [{"name", "description"}]}`` but
the parser also accepts a bare array, a ``topics``/``subtopics`` key, a
single object, or the first array found anywhere at the top level.
Entries without a non-blank name and description are dropped, as are
names the caller already has.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

from hubcap.interfaces.llm_provider import ILLMProvider
from hubcap.models.hierarchy import Suggestion
from hubcap.services.link_extractor import strip_code_fence
from hubcap.services.prompts import (
    subtopic_suggestion_system_prompt,
    subtopic_suggestion_user_prompt,
    topic_suggestion_system_prompt,
    topic_suggestion_user_prompt,
)
from hubcap.utils.errors import LLMError
from hubcap.utils.logging import get_logger

_logger = get_logger(__name__)

_EXHAUSTIVE_RE = re.compile(r"\b(all|every|complete|exhaustive|comprehensive)\b", re.IGNORECASE)
_LIST_KEYS = ("suggestions", "topics", "subtopics")


@dataclass(frozen=True)
class SubtopicSuggestions:
    suggestions: list[Suggestion]
    is_exhaustive: bool
    max_reached: bool


def is_exhaustive_request(request: str) -> bool:
    """``True`` when the curator asks for *all* of something."""
    return bool(_EXHAUSTIVE_RE.search(request))


def _candidate_entries(data: Any) -> list[Any]:
    if isinstance(data, list):
        return data
    if not isinstance(data, dict):
        return []
    for key in _LIST_KEYS:
        if isinstance(data.get(key), list):
            return data[key]
    if data.get("name") and data.get("description"):
        return [data]
    for value in data.values():
        if isinstance(value, list):
            return value
    return []


def parse_suggestions(
    text: str, limit: int, exclude: list[str] | tuple[str, ...] = ()
) -> list[Suggestion]:
    """Parse model output into at most *limit* suggestions; never raises."""
    try:
        data = json.loads(strip_code_fence(text or ""))
    except (ValueError, RecursionError):
        return []

    seen = {name.strip().casefold() for name in exclude}
    suggestions: list[Suggestion] = []
    for entry in _candidate_entries(data):
        if not isinstance(entry, dict):
            continue
        name, description = entry.get("name"), entry.get("description")
        if not isinstance(name, str) or not isinstance(description, str):
            continue
        name, description = name.strip(), description.strip()
        if not name or not description or name.casefold() in seen:
            continue
        seen.add(name.casefold())
        suggestions.append(Suggestion(name=name, description=description))
        if len(suggestions) >= limit:
            break
    return suggestions


class SuggestionService:
    """Ask an LLM for topics of a hub or subtopics of a topic.

    Parameters
    ----------
    llm:
        Chat-completion backend.
    topic_count:
        Topics requested per call.
    subtopic_count:
        Subtopics requested for an ordinary request.
    exhaustive_count:
        Subtopics requested when the curator asks for "all" of something.
    """

    def __init__(
        self,
        llm: ILLMProvider,
        topic_count: int = 10,
        subtopic_count: int = 10,
        exhaustive_count: int = 25,
        temperature: float = 0.2,
        max_tokens: int = 1500,
    ) -> None:
        self._llm = llm
        self._topic_count = topic_count
        self._subtopic_count = subtopic_count
        self._exhaustive_count = exhaustive_count
        self._temperature = temperature
        self._max_tokens = max_tokens

    def is_available(self) -> bool:
        return self._llm.is_available()

    async def suggest_topics(
        self,
        hub_name: str,
        hub_description: str | None = None,
        exclude: list[str] | None = None,
    ) -> list[Suggestion]:
        """Topic ideas for a hub.

        Raises
        ------
        LLMError
            If the model call fails or yields no usable suggestion.
        """
        exclude = exclude or []
        text = await self._llm.complete(
            system_prompt=topic_suggestion_system_prompt(hub_name, hub_description, exclude),
            user_prompt=topic_suggestion_user_prompt(hub_name, hub_description, self._topic_count),
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        suggestions = self._require(parse_suggestions(text, self._topic_count, exclude))
        _logger.info("topic_suggestions_generated", hub=hub_name, count=len(suggestions))
        return suggestions

    async def suggest_subtopics(
        self,
        hub_name: str,
        topic_name: str,
        request: str,
        hub_description: str | None = None,
        topic_description: str | None = None,
        exclude: list[str] | None = None,
    ) -> SubtopicSuggestions:
        exclude = exclude or []
        exhaustive = is_exhaustive_request(request)
        count = self._exhaustive_count if exhaustive else self._subtopic_count
        text = await self._llm.complete(
            system_prompt=subtopic_suggestion_system_prompt(
                hub_name, hub_description, topic_name, topic_description, request, count, exclude
            ),
            user_prompt=subtopic_suggestion_user_prompt(hub_name, topic_name, request, count),
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        suggestions = self._require(parse_suggestions(text, count, exclude))
        _logger.info(
            "subtopic_suggestions_generated",
            topic=topic_name,
            count=len(suggestions),
            exhaustive=exhaustive,
        )
        return SubtopicSuggestions(
            suggestions=suggestions,
            is_exhaustive=exhaustive,
            max_reached=len(suggestions) >= count,
        )

    def _require(self, suggestions: list[Suggestion]) -> list[Suggestion]:
        if not suggestions:
            raise LLMError(
                message="Model returned no usable suggestions",
                provider_name=self._llm.get_provider_name(),
            )
        return suggestions
