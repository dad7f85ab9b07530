"""
Configuration settings for the API dispatch client.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development (see .env.example).
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from api_dispatch.models.enums import ExecutionContext


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "API Dispatch Client"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "production"  # "development" turns on request tracing
    LOG_LEVEL: str = "INFO"

    # === Origin Resolution ===
    API_BASE_URL: str | None = None  # Server-only, never exposed to the page
    PUBLIC_API_BASE_URL: str | None = None
    EXECUTION_CONTEXT: ExecutionContext = ExecutionContext.SERVER
    PAGE_ORIGIN: str = "http://localhost"  # Same-origin target in browser context

    # === Timeouts & Retry ===
    DEFAULT_TIMEOUT_MS: int = 15000  # 0 disables the client-side deadline
    RETRY_ATTEMPTS: int = 1  # 1 = no retries
    RETRY_BACKOFF_MS: int = 300
    RETRY_ON_STATUSES: list[int] = [408, 429, 500, 502, 503, 504]

    # === Transport ===
    TRANSPORT_MAX_CONNECTIONS: int = 10
    TRANSPORT_MAX_KEEPALIVE: int = 5
    TRANSPORT_FOLLOW_REDIRECTS: bool = True

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True

    @property
    def debug(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"


# Global settings instance
settings = Settings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings singleton.

    Returns:
        Settings instance
    """
    return settings
