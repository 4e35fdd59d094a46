"""Configuration service for reviewr.

Resolves the data directory and loads ``config.toml`` from it.

Data Directory Resolution (highest priority first):
    1. ``--data-path`` command-line option
    2. ``REVIEWR_DATA_PATH`` environment variable
    3. ``~/.reviewr``

Typical Usage:
    >>> service = ConfigService(data_path=None)
    >>> config = service.load_config()
    >>> error_log = service.error_log()
"""

import logging
from pathlib import Path

from reviewr.config.paths import (
    APP_LOG_FILENAME,
    CONFIG_FILENAME,
    DEFAULT_DATA_DIR_NAME,
    EMPLOYEES_DIR,
    ERROR_LOG_FILENAME,
)
from reviewr.config.settings import reviewr_settings
from reviewr.models.config import ReviewrConfig
from reviewr.services.error_log import ErrorLog

logger = logging.getLogger(__name__)


def resolve_data_path(data_path: Path | None = None) -> Path:
    """Pick the data directory from the option, the environment or the home default."""
    if data_path is not None:
        return data_path.expanduser()
    if reviewr_settings.data_path is not None:
        return reviewr_settings.data_path.expanduser()
    return Path.home() / DEFAULT_DATA_DIR_NAME


class ConfigService:
    """Locations inside the data directory plus config loading."""

    def __init__(self, data_path: Path | None = None):
        """Initialize config service.

        Args:
            data_path: Explicit data directory (defaults to environment or ~/.reviewr)
        """
        self.data_path = resolve_data_path(data_path)

    @property
    def config_path(self) -> Path:
        return self.data_path / CONFIG_FILENAME

    @property
    def error_log_path(self) -> Path:
        return self.data_path / ERROR_LOG_FILENAME

    @property
    def app_log_path(self) -> Path:
        return self.data_path / APP_LOG_FILENAME

    @property
    def employees_dir(self) -> Path:
        return self.data_path / EMPLOYEES_DIR

    def ensure_data_dir(self) -> None:
        self.data_path.mkdir(parents=True, exist_ok=True)

    def load_config(self) -> ReviewrConfig:
        """Load configuration, returning defaults when the file is missing.

        Raises:
            ConfigurationError: If the file exists but is invalid.
        """
        config = ReviewrConfig.load(self.config_path)
        logger.debug(f"Loaded configuration from {self.config_path}")
        return config

    def error_log(self) -> ErrorLog:
        return ErrorLog(self.error_log_path)


def get_config_service(data_path: Path | None = None) -> ConfigService:
    """Get a ConfigService instance.

    Args:
        data_path: Explicit data directory (defaults to environment or ~/.reviewr)

    Returns:
        ConfigService instance
    """
    return ConfigService(data_path)
