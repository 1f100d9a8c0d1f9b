"""Content providers: one adapter per external content API.

All implement IContentProvider (hubcap/interfaces/content_provider.py);
the stream orchestrator runs every available one concurrently.
"""

from hubcap.providers.content.giphy_provider import GiphyImageProvider
from hubcap.providers.content.itunes_provider import ITunesPodcastProvider
from hubcap.providers.content.llm_link_provider import LLMLinkProvider
from hubcap.providers.content.newsapi_provider import NewsAPIProvider
from hubcap.providers.content.unsplash_provider import UnsplashImageProvider
from hubcap.providers.content.youtube_provider import YouTubeShortsProvider, YouTubeVideoProvider

__all__ = [
    "GiphyImageProvider",
    "ITunesPodcastProvider",
    "LLMLinkProvider",
    "NewsAPIProvider",
    "UnsplashImageProvider",
    "YouTubeShortsProvider",
    "YouTubeVideoProvider",
]
