"""YAML configuration loader with environment variable overrides.

Layers, later overriding earlier:

  1. config/config.yaml  -- static per-provider limits checked into the repo
  2. .env file           -- local developer overrides (not committed)
  3. Environment vars    -- set at deploy time

``load_config`` reads the YAML file and deep-merges the env-derived values
from :class:`Settings` on top.
"""

from pathlib import Path

import yaml

from hubcap.config.settings import Settings


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.
        settings: Pre-built settings; a fresh ``Settings()`` is read otherwise.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "providers": {
            "available": settings.get_available_content_providers(),
        },
        "stream": {
            "grace_period": settings.stream_grace_period,
            "queue_size": settings.stream_queue_size,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def provider_limit(config: dict, provider: str, key: str, default: int) -> int:
    """Read ``providers.<provider>.<key>`` from a loaded config dict."""
    section = config.get("providers", {}).get(provider, {})
    if not isinstance(section, dict):
        return default
    value = section.get(key, default)
    return int(value) if value is not None else default


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
