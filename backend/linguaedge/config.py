"""Application configuration."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "LinguaEdge"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Project (absence of an API key turns the proxy into a plain passthrough)
    api_key: Optional[str] = Field(default=None, alias="LINGUAEDGE_API_KEY")
    api_base_url: str = "https://api.altified.com"
    plan_status_endpoint: str = "/plan-status/"
    languages_endpoint: str = "/languages/"
    translate_endpoint: str = "/translate/"

    # Origin site
    origin_url: Optional[str] = None
    domain: Optional[str] = None  # Used in hreflang hrefs; falls back to the request origin

    # Caching (seconds)
    config_cache_ttl: int = 3600
    language_names_ttl_multiplier: int = 24
    page_cache_ttl: int = 3600
    page_cache_max_entries: int = 1000

    # Translation engine
    fold_buffer: int = 200
    viewport_height: int = 800
    reveal_delay_ms: int = 300
    prerender: bool = False

    # Timeouts (seconds)
    translate_timeout: float = 10.0
    origin_timeout: float = 30.0
    collaborator_timeout: float = 10.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def language_names_ttl(self) -> int:
        """Language names change far less often than project plans."""
        return self.config_cache_ttl * self.language_names_ttl_multiplier

    @property
    def translate_url(self) -> str:
        return f"{self.api_base_url.rstrip('/')}{self.translate_endpoint}"


settings = Settings()
