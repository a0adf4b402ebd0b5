"""Application settings and configuration.

This module defines all configuration options for the Solo Stage application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Solo Stage", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    site_url: str = Field(default="http://localhost:8787", alias="SITE_URL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./solo.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Redis backs sessions and rate-limit windows; empty disables both
    redis_url: str = Field(default="redis://localhost:6379/0", alias="REDIS_URL")
    kv_socket_timeout_seconds: float = Field(default=0.5, alias="KV_SOCKET_TIMEOUT_SECONDS")

    # Fixed-window rate limiting keyed by hashed client IP
    rate_limit_enabled: bool = Field(default=True, alias="RATE_LIMIT_ENABLED")
    rate_limit_max_requests: int = Field(default=100, alias="RATE_LIMIT_MAX_REQUESTS")
    rate_limit_window_seconds: int = Field(default=3600, alias="RATE_LIMIT_WINDOW_SECONDS")
    client_ip_header: str = Field(default="cf-connecting-ip", alias="CLIENT_IP_HEADER")

    # Admin sessions
    session_ttl_seconds: int = Field(default=86_400 * 7, alias="SESSION_TTL_SECONDS")
    session_cookie_name: str = Field(default="session", alias="SESSION_COOKIE_NAME")
    session_cookie_secure: bool = Field(default=True, alias="SESSION_COOKIE_SECURE")
    allowed_email: str | None = Field(default=None, alias="ALLOWED_EMAIL")

    # Google OAuth login
    google_client_id: str = Field(default="", alias="GOOGLE_CLIENT_ID")
    google_client_secret: str = Field(default="", alias="GOOGLE_CLIENT_SECRET")
    google_redirect_uri: str = Field(
        default="http://localhost:8787/auth/callback",
        alias="GOOGLE_REDIRECT_URI",
    )
    oauth_http_timeout_seconds: float = Field(default=10.0, alias="OAUTH_HTTP_TIMEOUT_SECONDS")

    # Post identifier allocation
    post_id_timezone: str = Field(default="UTC", alias="POST_ID_TIMEZONE")
    post_id_max_attempts: int = Field(default=30, alias="POST_ID_MAX_ATTEMPTS")
    post_id_retry_delay_seconds: float = Field(default=1.0, alias="POST_ID_RETRY_DELAY_SECONDS")

    # Image uploads
    upload_dir: str = Field(default="./uploads", alias="UPLOAD_DIR")
    upload_max_bytes: int = Field(default=5 * 1024 * 1024, alias="UPLOAD_MAX_BYTES")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["http://localhost:8787"],
        alias="CORS_ORIGINS",
    )
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["Content-Type", "Authorization"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def kv_configured(self) -> bool:
        """Return True when a key-value store URL is present."""
        return bool(self.redis_url.strip())


settings = Settings()
