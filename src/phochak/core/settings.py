"""Application settings and configuration.

This module defines all configuration options for the Phochak application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Phochak", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(default="change-me", alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")

    # Database configuration
    database_url: str = Field(default="sqlite:///./phochak.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # JWT authentication settings (tokens are issued by the auth service)
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 14,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Object storage URL templates: head + upload_key + tail
    shorts_streaming_url_prefix_head: str = Field(
        default="https://cdn.phochak.local/hls/",
        alias="SHORTS_STREAMING_URL_PREFIX_HEAD",
    )
    shorts_streaming_url_prefix_tail: str = Field(
        default="/index.m3u8",
        alias="SHORTS_STREAMING_URL_PREFIX_TAIL",
    )
    thumbnail_url_prefix_head: str = Field(
        default="https://cdn.phochak.local/thumbnail/",
        alias="THUMBNAIL_URL_PREFIX_HEAD",
    )
    thumbnail_url_prefix_tail: str = Field(
        default="_01.jpg",
        alias="THUMBNAIL_URL_PREFIX_TAIL",
    )

    # Push gateway integration
    push_enabled: bool = Field(default=False, alias="PUSH_ENABLED")
    push_base_url: str | None = Field(default=None, alias="PUSH_BASE_URL")
    push_service_id: str = Field(default="phochak-api", alias="PUSH_SERVICE_ID")
    push_shared_secret: str | None = Field(default=None, alias="PUSH_SHARED_SECRET")
    push_audience: str = Field(default="phochak-push", alias="PUSH_JWT_AUD")
    push_token_ttl_seconds: int = Field(default=300, alias="PUSH_TOKEN_TTL_SECONDS")
    push_http_timeout_seconds: float = Field(
        default=5.0,
        alias="PUSH_HTTP_TIMEOUT_SECONDS",
    )
    push_dispatch_interval_seconds: float = Field(
        default=2.0,
        alias="PUSH_DISPATCH_INTERVAL_SECONDS",
    )
    push_outbound_batch_size: int = Field(default=20, alias="PUSH_OUTBOUND_BATCH_SIZE")
    push_outbound_max_retries: int = Field(default=5, alias="PUSH_OUTBOUND_MAX_RETRIES")
    push_claim_timeout_seconds: float = Field(
        default=60.0,
        alias="PUSH_CLAIM_TIMEOUT_SECONDS",
    )

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous operations like
        Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()
