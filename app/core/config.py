"""Application settings loaded from environment / .env file."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Upstream API ──────────────────────────────────────
    api_base_url: str = "http://localhost:3000"
    http_timeout: float = 10.0
    cache_control_header: str = "max-age=60"

    # ── Response cache ────────────────────────────────────
    default_cache_ttl: float = 60.0  # seconds

    # ── Preload ───────────────────────────────────────────
    preload_endpoints: list[str] = ["/api/customers", "/api/invoices?limit=10"]
    preload_on_startup: bool = False

    # ── Service ───────────────────────────────────────────
    admin_token: str = ""  # cache admin endpoints are disabled when empty
    allowed_origins: str = "*"
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
