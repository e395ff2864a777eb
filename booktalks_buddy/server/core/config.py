"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class AuthConfig(BaseModel):
    """Bearer token verification settings for the hosted identity provider."""

    jwt_secret: str = Field(
        default="change-me", alias="AUTH_JWT_SECRET", description="Shared secret used to verify HS256 access tokens"
    )
    jwt_algorithm: str = Field(default="HS256", alias="AUTH_JWT_ALGORITHM", description="Token signing algorithm")
    jwt_audience: Optional[str] = Field(
        default="authenticated", alias="AUTH_JWT_AUDIENCE", description="Expected token audience (empty to skip)"
    )

    model_config = {"populate_by_name": True}


class SubscriptionConfig(BaseModel):
    """Subscription validation settings."""

    validation_timeout_ms: int = Field(
        default=5000,
        le=10000,
        alias="SUBSCRIPTION_VALIDATION_TIMEOUT_MS",
        description="Timeout for a single subscription lookup",
    )
    cache_ttl_seconds: int = Field(
        default=300,
        ge=60,
        alias="SUBSCRIPTION_CACHE_TTL_SECONDS",
        description="How long a validated subscription status is reused",
    )
    cache_max_size: int = Field(
        default=10000,
        ge=1,
        alias="SUBSCRIPTION_CACHE_MAX_SIZE",
        description="Most subscription statuses kept in memory",
    )

    model_config = {"populate_by_name": True}


class EntitlementsConfig(BaseModel):
    """Entitlement calculation settings."""

    cache_ttl_seconds: int = Field(
        default=300, alias="ENTITLEMENTS_CACHE_TTL_SECONDS", description="How long computed entitlements are reused"
    )
    cache_max_size: int = Field(
        default=10000, ge=1, alias="ENTITLEMENTS_CACHE_MAX_SIZE", description="Most entitlement lists kept in memory"
    )
    role_enforcement_enabled: bool = Field(
        default=False,
        alias="ROLE_ENFORCEMENT_ENABLED",
        description="Require an active subscription for club lead entitlements",
    )
    club_create_limit: int = Field(
        default=3, alias="CLUB_CREATE_LIMIT", description="Clubs a holder of CAN_CREATE_LIMITED_CLUBS may lead"
    )
    club_join_limit: int = Field(
        default=5, alias="CLUB_JOIN_LIMIT", description="Clubs a holder of CAN_JOIN_LIMITED_CLUBS may join"
    )

    model_config = {"populate_by_name": True}


class BookSearchConfig(BaseModel):
    """Book metadata search API settings."""

    api_url: str = Field(
        default="https://www.googleapis.com/books/v1/volumes",
        alias="BOOK_SEARCH_API_URL",
        description="Volumes search endpoint",
    )
    api_key: Optional[str] = Field(default=None, alias="BOOK_SEARCH_API_KEY", description="Optional API key")
    timeout_seconds: float = Field(
        default=10.0, alias="BOOK_SEARCH_TIMEOUT_SECONDS", description="HTTP timeout for search requests"
    )

    model_config = {"populate_by_name": True}


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS", description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )
    allow_methods: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_METHODS", description="Allowed HTTP methods (use * for all)"
    )
    allow_headers: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_HEADERS", description="Allowed HTTP headers (use * for all)"
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    # =====================================================================
    # Pydantic Configuration
    # =====================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Server Configuration
    # =====================================================================
    server_host: str = Field(default="0.0.0.0", description="Server host address to bind to", alias="SERVER_HOST")
    server_port: int = Field(default=8000, description="Server port number", alias="SERVER_PORT")

    # =====================================================================
    # Logging Configuration
    # =====================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="LOG_LEVEL",
    )
    log_format: str = Field(default="detailed", description="Log format (simple, detailed, json)", alias="LOG_FORMAT")
    log_file: str = Field(default="logs/booktalks_buddy.log", description="Log file path", alias="LOG_FILE")
    enable_file_logging: bool = Field(
        default=False, description="Also write logs to a rotating file", alias="ENABLE_FILE_LOGGING"
    )

    # =====================================================================
    # Database Configuration
    # =====================================================================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./booktalks.db",
        description="Async database connection URL (postgres URLs are rewritten to asyncpg)",
        alias="DATABASE_URL",
    )
    create_tables_on_startup: bool = Field(
        default=True,
        description="Create missing tables at startup (development only, production uses Alembic)",
        alias="CREATE_TABLES_ON_STARTUP",
    )

    # =====================================================================
    # Auth Configuration
    # =====================================================================
    auth_jwt_secret: str = Field(default="change-me", alias="AUTH_JWT_SECRET")
    auth_jwt_algorithm: str = Field(default="HS256", alias="AUTH_JWT_ALGORITHM")
    auth_jwt_audience: Optional[str] = Field(default="authenticated", alias="AUTH_JWT_AUDIENCE")

    # =====================================================================
    # Subscription & Entitlements Configuration
    # =====================================================================
    subscription_validation_timeout_ms: int = Field(default=5000, le=10000, alias="SUBSCRIPTION_VALIDATION_TIMEOUT_MS")
    subscription_cache_ttl_seconds: int = Field(default=300, ge=60, alias="SUBSCRIPTION_CACHE_TTL_SECONDS")
    subscription_cache_max_size: int = Field(default=10000, ge=1, alias="SUBSCRIPTION_CACHE_MAX_SIZE")
    entitlements_cache_ttl_seconds: int = Field(default=300, alias="ENTITLEMENTS_CACHE_TTL_SECONDS")
    entitlements_cache_max_size: int = Field(default=10000, ge=1, alias="ENTITLEMENTS_CACHE_MAX_SIZE")
    role_enforcement_enabled: bool = Field(default=False, alias="ROLE_ENFORCEMENT_ENABLED")
    club_create_limit: int = Field(default=3, alias="CLUB_CREATE_LIMIT")
    club_join_limit: int = Field(default=5, alias="CLUB_JOIN_LIMIT")

    # =====================================================================
    # Book Search Configuration
    # =====================================================================
    book_search_api_url: str = Field(
        default="https://www.googleapis.com/books/v1/volumes", alias="BOOK_SEARCH_API_URL"
    )
    book_search_api_key: Optional[str] = Field(default=None, alias="BOOK_SEARCH_API_KEY")
    book_search_timeout_seconds: float = Field(default=10.0, alias="BOOK_SEARCH_TIMEOUT_SECONDS")

    # =====================================================================
    # CORS Configuration
    # =====================================================================
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(default=["*"], alias="CORS_ALLOW_METHODS")
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def auth(self) -> AuthConfig:
        """Get bearer token verification configuration."""
        return AuthConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def subscription(self) -> SubscriptionConfig:
        """Get subscription validation configuration."""
        return SubscriptionConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def entitlements(self) -> EntitlementsConfig:
        """Get entitlement calculation configuration."""
        return EntitlementsConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def book_search(self) -> BookSearchConfig:
        """Get book metadata search configuration."""
        return BookSearchConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration from environment variables."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
