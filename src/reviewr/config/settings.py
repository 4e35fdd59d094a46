"""Runtime configuration settings for reviewr.

This module uses Pydantic Settings for values that can be overridden via
environment variables. Connection details for the review platforms live in
``config.toml`` (see ``reviewr.models.config``); these settings only tune how
the tool itself behaves.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReviewrSettings(BaseSettings):
    """General settings.

    Can be overridden via environment variables with REVIEWR_ prefix.
    """

    model_config = SettingsConfigDict(env_prefix="REVIEWR_")

    data_path: Path | None = Field(
        default=None,
        description="Data directory (defaults to ~/.reviewr)",
    )
    log_level: str = Field(
        default="INFO",
        description="Level for the rotating application log",
    )


class HttpSettings(BaseSettings):
    """HTTP client settings shared by every platform adapter.

    Can be overridden via environment variables with REVIEWR_HTTP_ prefix.
    """

    model_config = SettingsConfigDict(env_prefix="REVIEWR_HTTP_")

    timeout_seconds: float = Field(
        default=30.0,
        description="Per-request timeout in seconds",
    )
    user_agent: str = Field(
        default="reviewr/1.0",
        description="User-Agent header sent to every platform",
    )


# Singleton instances for easy import
reviewr_settings = ReviewrSettings()
http_settings = HttpSettings()
