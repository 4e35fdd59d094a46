"""Application logging setup."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from reviewr.constants import LOG_BACKUP_COUNT, LOG_MAX_BYTES

APP_LOGGER = "reviewr"


def configure_logging(log_level: str, log_file: Path | None = None) -> logging.Logger:
    """Configure the ``reviewr`` logger.

    The browser owns the terminal, so when a log file is given no stream
    handler is installed and everything goes to the rotating file.

    Args:
        log_level: Log level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional log file path.

    Returns:
        The configured application logger.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(level)
    app_logger.propagate = False

    # Reconfiguring (e.g. repeated CLI invocations in one process) must not stack handlers
    for handler in list(app_logger.handlers):
        handler.close()
    app_logger.handlers.clear()

    if level == logging.DEBUG:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler: logging.Handler
    if log_file:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                log_file,
                mode="a",
                maxBytes=LOG_MAX_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
        except OSError as e:
            handler = logging.StreamHandler()
            handler.setFormatter(formatter)
            app_logger.addHandler(handler)
            app_logger.warning(f"Could not set up file logging to {log_file}: {e}")
            return app_logger
    else:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)
    app_logger.addHandler(handler)
    return app_logger
