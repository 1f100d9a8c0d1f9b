"""Unit tests for Settings and the YAML config loader."""

from __future__ import annotations

from pathlib import Path

from hubcap.config.loader import _deep_merge, load_config, provider_limit
from hubcap.config.settings import Settings


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)

        assert settings.database_path == "data/hubcap.db"
        assert settings.stream_grace_period == 0.5
        assert settings.provider_timeout == 10.0

    def test_available_content_providers(self) -> None:
        settings = Settings(
            _env_file=None,
            pplx_api_key="p",
            youtube_api_key="",
            newsapi_api_key="n",
            unsplash_access_key="",
            giphy_api_key="",
        )

        assert settings.get_available_content_providers() == ["perplexity", "newsapi", "itunes"]


class TestLoadConfig:
    def test_repo_config_file(self, project_root: Path) -> None:
        config = load_config(
            str(project_root / "config" / "config.yaml"),
            settings=Settings(_env_file=None, app_env="test"),
        )

        assert config["providers"]["itunes"]["max_results"] == 6
        assert config["app"]["env"] == "test"
        assert "itunes" in config["providers"]["available"]

    def test_missing_file_yields_env_only(self, tmp_path: Path) -> None:
        config = load_config(str(tmp_path / "absent.yaml"), settings=Settings(_env_file=None))

        assert set(config) == {"app", "providers", "stream", "logging"}

    def test_provider_limit(self) -> None:
        config = {"providers": {"youtube": {"max_results": "7"}, "broken": "oops"}}

        assert provider_limit(config, "youtube", "max_results", 10) == 7
        assert provider_limit(config, "youtube", "missing", 3) == 3
        assert provider_limit(config, "broken", "x", 4) == 4
        assert provider_limit({}, "giphy", "limit", 5) == 5

    def test_deep_merge(self) -> None:
        base = {"a": {"b": 1, "c": 2}, "d": 1}

        _deep_merge(base, {"a": {"c": 3}, "e": 4})

        assert base == {"a": {"b": 1, "c": 3}, "d": 1, "e": 4}
