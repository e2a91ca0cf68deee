"""Application settings and configuration.

This module defines all configuration options for the SheWorks marketplace API.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="SheWorks", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./sheworks.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Shared store for presence, rate limits and the translation cache.
    # When unset every store lives in process memory.
    redis_url: str | None = Field(default=None, alias="REDIS_URL")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Translation providers
    deepl_api_key: str | None = Field(default=None, alias="DEEPL_API_KEY")
    deepl_api_url: str = Field(
        default="https://api-free.deepl.com/v2/translate",
        alias="DEEPL_API_URL",
    )
    mymemory_api_url: str = Field(
        default="https://api.mymemory.translated.net/get",
        alias="MYMEMORY_API_URL",
    )
    translation_http_timeout_seconds: float = Field(
        default=10.0,
        alias="TRANSLATION_HTTP_TIMEOUT_SECONDS",
    )

    # Translation cache
    translation_cache_ttl_seconds: int = Field(
        default=24 * 60 * 60,
        alias="TRANSLATION_CACHE_TTL_SECONDS",
    )
    translation_cache_max_entries: int = Field(
        default=10_000,
        alias="TRANSLATION_CACHE_MAX_ENTRIES",
    )

    # Translation throttling (per caller identity)
    translation_rate_limit: int = Field(default=10, alias="TRANSLATION_RATE_LIMIT")
    translation_rate_window_seconds: int = Field(
        default=60,
        alias="TRANSLATION_RATE_WINDOW_SECONDS",
    )

    # Batch translation fan-out
    translation_batch_concurrency: int = Field(
        default=4,
        alias="TRANSLATION_BATCH_CONCURRENCY",
    )
    translation_batch_delay_seconds: float = Field(
        default=0.1,
        alias="TRANSLATION_BATCH_DELAY_SECONDS",
    )

    # Payment processor
    stripe_secret_key: str | None = Field(default=None, alias="STRIPE_SECRET_KEY")
    stripe_api_url: str = Field(default="https://api.stripe.com", alias="STRIPE_API_URL")
    payment_http_timeout_seconds: float = Field(
        default=15.0,
        alias="PAYMENT_HTTP_TIMEOUT_SECONDS",
    )

    # Order pricing
    tax_rate: float = Field(default=0.1, alias="TAX_RATE")

    # CORS configuration for web frontend and realtime channel access
    frontend_url: str = Field(default="http://localhost:5173", alias="FRONTEND_URL")
    cors_origins: list[str] = Field(
        default=["http://localhost:5173"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def allowed_origins(self) -> list[str]:
        """Return the origins allowed for both REST and realtime clients.

        Returns:
            The configured CORS origins with the frontend URL appended when missing
        """
        origins = list(self.cors_origins)
        if self.frontend_url and self.frontend_url not in origins:
            origins.append(self.frontend_url)
        return origins

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling like Alembic."""
        url = self.database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url


settings = Settings()  # type: ignore[call-arg]
