"""Configuration module: exports Settings and load_config."""

from hubcap.config.loader import load_config, provider_limit
from hubcap.config.settings import Settings

__all__ = ["Settings", "load_config", "provider_limit"]
