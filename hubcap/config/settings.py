"""Application settings loaded from environment variables via pydantic-settings.

Values are read from two sources, environment variables first and then
the project-root ``.env`` file.  Field ``youtube_api_key`` maps to env var
``YOUTUBE_API_KEY`` and so on.  An empty API key means "not configured":
the matching content provider reports itself unavailable and the stream
orchestrator never schedules it.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Hubcap application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === LLM / Embeddings ===
    openai_api_key: str = ""
    openai_base_url: str = ""  # OpenAI-compatible endpoint override
    openai_text_model: str = ""  # Empty = gpt-4o-mini
    openai_embedding_model: str = ""  # Empty = text-embedding-3-small
    pplx_api_key: str = ""
    perplexity_model: str = "sonar"

    # === Content APIs ===
    youtube_api_key: str = ""
    newsapi_api_key: str = ""
    unsplash_access_key: str = ""
    giphy_api_key: str = ""
    linkpreview_api_key: str = ""

    # === Sharing ===
    slack_webhook_url: str = ""

    # === Persistence ===
    database_path: str = "data/hubcap.db"

    # === Streaming ===
    # Grace period between the last adapter settling and the terminal
    # "done" event; lets the final persistence writes land first.
    stream_grace_period: float = 0.5
    stream_queue_size: int = 32

    # === Timeouts (seconds) ===
    provider_timeout: float = 10.0
    llm_timeout: float = 30.0
    keyword_refinement_timeout: float = 5.0

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    def get_available_content_providers(self) -> list[str]:
        """Return the content API names whose credentials are configured."""
        providers: list[str] = []
        if self.pplx_api_key:
            providers.append("perplexity")
        if self.youtube_api_key:
            providers.append("youtube")
        if self.newsapi_api_key:
            providers.append("newsapi")
        # iTunes Search needs no key.
        providers.append("itunes")
        if self.unsplash_access_key:
            providers.append("unsplash")
        if self.giphy_api_key:
            providers.append("giphy")
        return providers
