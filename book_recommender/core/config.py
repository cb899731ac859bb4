"""
Book Recommender - Application Configuration

Patterns Applied:
- Pydantic Settings with SettingsConfigDict
- Environment variable prefix BOOKREC_ for the book recommender
- Malformed-book handling resolved as a single switch (malformed_policy)
"""

from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict

from book_recommender.core.exceptions import ConfigurationError


class MalformedBookPolicy(str, Enum):
    """How books without genre data are treated by the pipeline.

    EXCLUDE: drop the book from the corpus before any vocabulary is built.
    ZERO_FILL: keep the book with an all-zero genre vector.
    """

    EXCLUDE = "exclude"
    ZERO_FILL = "zero_fill"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables with BOOKREC_ prefix.
    Example: BOOKREC_PORT=8085, BOOKREC_MALFORMED_POLICY=zero_fill
    """

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8085

    # Application metadata
    service_name: str = "book-recommender"
    version: str = "0.1.0"
    environment: str = "development"

    # Logging configuration
    log_level: str = "INFO"
    log_json: bool = True

    # Recommendation configuration
    default_top_n: int = 5
    max_top_n: int = 50
    malformed_policy: MalformedBookPolicy = MalformedBookPolicy.EXCLUDE

    # Tracing configuration
    tracing_enabled: bool = True
    tracing_console_export: bool = False

    model_config = SettingsConfigDict(
        env_prefix="BOOKREC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def get_settings() -> Settings:
    """Get application settings instance.

    Returns:
        Settings instance with values from environment

    Raises:
        ConfigurationError: If top-N bounds are inconsistent
    """
    settings = Settings()
    if settings.default_top_n < 1:
        raise ConfigurationError(
            f"default_top_n must be positive, got {settings.default_top_n}"
        )
    if settings.default_top_n > settings.max_top_n:
        raise ConfigurationError(
            f"default_top_n ({settings.default_top_n}) exceeds max_top_n ({settings.max_top_n})"
        )
    return settings
