"""Configuration commands."""

import tomli_w
import typer

from reviewr.commands.common import config_service_for, load_config_or_exit
from reviewr.utils import get_console, print_info

config_app = typer.Typer(
    name="config",
    help="Show the effective configuration",
    no_args_is_help=True,
)


@config_app.command("show")
def show(ctx: typer.Context) -> None:
    """Print the effective configuration with credentials masked."""
    service = config_service_for(ctx)
    config = load_config_or_exit(service)
    if not service.config_path.exists():
        print_info(f"[dim]{service.config_path} does not exist; showing defaults[/dim]\n")
    get_console().print(tomli_w.dumps(config.masked_dump()), markup=False, highlight=False)


@config_app.command("path")
def path(ctx: typer.Context) -> None:
    """Print the location of config.toml."""
    print(config_service_for(ctx).config_path)
