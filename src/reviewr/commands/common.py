"""Shared plumbing for command modules."""

from dataclasses import dataclass
from pathlib import Path

import typer

from reviewr.config.messages import ERROR_MESSAGES
from reviewr.exceptions import ConfigurationError
from reviewr.models.config import ReviewrConfig
from reviewr.services.config_service import ConfigService, get_config_service
from reviewr.utils import print_error


@dataclass
class CliState:
    """Global options captured by the root callback and stored on ``ctx.obj``."""

    data_path: Path | None = None
    verbose: bool = False
    debug: bool = False


def config_service_for(ctx: typer.Context) -> ConfigService:
    state = ctx.obj if isinstance(ctx.obj, CliState) else CliState()
    return get_config_service(state.data_path)


def load_config_or_exit(service: ConfigService) -> ReviewrConfig:
    """Load ``config.toml`` or print why it is invalid and exit 1."""
    try:
        return service.load_config()
    except ConfigurationError as e:
        print_error(
            ERROR_MESSAGES["invalid_config"].format(path=service.config_path, details=e.message)
        )
        raise typer.Exit(code=1) from e
