"""Cache providers.

The thumbnail resolver caches LinkPreview lookups here so a URL that shows
up in several searches is only resolved once per TTL window.
"""

from hubcap.providers.cache.memory_cache import MemoryCacheProvider

__all__ = ["MemoryCacheProvider"]
