"""Hubcap: content curation service with streaming multi-provider search."""

__version__ = "0.1.0"
