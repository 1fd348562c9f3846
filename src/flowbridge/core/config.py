from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Flowbridge"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True  # Set to False in production

    # Database
    database_url: str
    database_migrations_url: str | None = None
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    # n8n remote API
    n8n_http_timeout_seconds: float = 30.0
    n8n_webhook_timeout_seconds: float = 30.0

    # n8n sync - a single page of this size unless n8n_sync_all_pages is set
    n8n_sync_page_limit: int = 100
    n8n_sync_all_pages: bool = False

    # n8n execution polling
    n8n_poll_max_attempts: int = 30
    n8n_poll_interval_seconds: float = 2.0

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Validate CORS origins - reject wildcards when credentials are used."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    @field_validator("n8n_sync_page_limit")
    @classmethod
    def validate_sync_page_limit(cls, v: int) -> int:
        # n8n rejects page sizes above 250
        if not 1 <= v <= 250:
            raise ValueError("N8N_SYNC_PAGE_LIMIT must be between 1 and 250")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
