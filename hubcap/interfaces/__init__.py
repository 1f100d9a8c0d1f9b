"""Abstract provider interfaces (ABCs) for Hubcap.

Every external dependency is accessed through one of these so that the
pipeline, services and routes never import a concrete client.
"""

from hubcap.interfaces.cache_provider import ICacheProvider
from hubcap.interfaces.content_provider import IContentProvider
from hubcap.interfaces.embedding_provider import IEmbeddingProvider
from hubcap.interfaces.hierarchy_store import IHierarchyStore
from hubcap.interfaces.link_store import ILinkStore
from hubcap.interfaces.llm_provider import ILLMProvider
from hubcap.interfaces.notifier import INotifier

__all__ = [
    "ICacheProvider",
    "IContentProvider",
    "IEmbeddingProvider",
    "IHierarchyStore",
    "ILLMProvider",
    "ILinkStore",
    "INotifier",
]
