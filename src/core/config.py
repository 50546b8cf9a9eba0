"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ASYNC_DRIVERS = {
    "postgres://": "postgresql+asyncpg://",
    "postgresql://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}


class Settings(BaseSettings):
    """Heartline settings, read from the environment and an optional ``.env``."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Heartline API")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Store
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/heartline",
        description="Postgres (or SQLite for local runs) connection URL",
    )
    db_pool_size: int = Field(default=5, ge=1)
    db_max_overflow: int = Field(default=10, ge=0)
    db_pool_recycle_seconds: int = Field(
        default=1800,
        description="Reconnect pooled connections older than this",
    )

    # Authentication collaborator
    supabase_url: str = Field(
        default="",
        description="Supabase project URL; enables ES256 verification via JWKS",
    )
    jwt_secret_key: str = Field(
        default="CHANGE-ME-IN-PRODUCTION",
        description="HS256 secret for locally issued tokens and tests",
    )
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_minutes: int = Field(default=30)

    # Discovery
    swipe_deck_max_size: int = Field(default=100, ge=1)

    # Conversations
    message_max_length: int = Field(default=2000, ge=1)
    message_append_retries: int = Field(
        default=3,
        ge=1,
        description="Attempts to append a message when its position collides",
    )

    # Chat list
    empty_chat_placeholder: str = Field(
        default="Start chatting!",
        description="Preview text shown for a match without messages",
    )
    own_message_prefix: str = Field(
        default="You: ",
        description="Prefix for previews of the viewer's own last message",
    )

    # Live updates
    subscription_queue_size: int = Field(
        default=64,
        ge=1,
        description="Pending change events buffered per live subscription",
    )
    change_feed_channel: str = Field(
        default="heartline_changes",
        description="Postgres NOTIFY channel that carries change events between workers",
    )
    change_feed_database_url: str = Field(
        default="",
        description=(
            "Direct (session mode) Postgres URL for LISTEN; "
            "defaults to database_url. Transaction poolers drop listeners."
        ),
    )

    # HTTP edge
    rate_limit_enabled: bool = Field(
        default=True,
        description="Turn slowapi limits off (tests, local load runs)",
    )
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:8081",
        description="Comma-separated list of allowed origins",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """The database URL rewritten to its async driver.

        Hosting providers hand out plain ``postgres://`` or
        ``postgresql://`` URLs; the async engine needs the driver named.
        """
        for prefix, replacement in _ASYNC_DRIVERS.items():
            if self.database_url.startswith(prefix):
                return replacement + self.database_url[len(prefix):]
        return self.database_url

    @computed_field  # type: ignore[prop-decorator]
    @property
    def change_feed_dsn(self) -> str:
        """Plain ``postgresql://`` DSN for the shared change feed.

        Empty when the store is not Postgres; the feed then stays
        in-process.
        """
        url = self.change_feed_database_url or self.database_url
        for prefix in ("postgresql+asyncpg://", "postgresql://", "postgres://"):
            if url.startswith(prefix):
                return "postgresql://" + url[len(prefix):]
        return ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def supabase_jwks_url(self) -> str:
        if not self.supabase_url:
            return ""
        return f"{self.supabase_url.rstrip('/')}/auth/v1/.well-known/jwks.json"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
