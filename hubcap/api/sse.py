"""Server-sent event framing for the search stream.

Each :class:`StreamEvent` becomes one ``data: <json>\\n\\n`` frame.  Link
embeddings never leave the server.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from contextlib import aclosing
from typing import Any

from fastapi.responses import StreamingResponse

from hubcap.models.stream import StreamEvent

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def event_payload(event: StreamEvent) -> dict[str, Any]:
    if event.type == "done" or event.result is None:
        return {"type": "done"}
    return {
        "type": "result",
        "result": event.result.model_dump(mode="json", exclude={"embedding"}),
    }


def format_sse(payload: dict[str, Any]) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


async def _frames(events: AsyncIterator[StreamEvent]) -> AsyncIterator[str]:
    # Closing on disconnect cancels in-flight provider tasks.
    async with aclosing(events) as stream:
        async for event in stream:
            yield format_sse(event_payload(event))


def sse_response(events: AsyncIterator[StreamEvent]) -> StreamingResponse:
    """Wrap an event iterator in a ``text/event-stream`` response."""
    return StreamingResponse(
        _frames(events),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
