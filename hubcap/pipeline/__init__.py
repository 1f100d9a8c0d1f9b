"""Search stream orchestration."""

from hubcap.pipeline.orchestrator import SearchStreamOrchestrator
from hubcap.pipeline.stream_context import StreamContext

__all__ = ["SearchStreamOrchestrator", "StreamContext"]
