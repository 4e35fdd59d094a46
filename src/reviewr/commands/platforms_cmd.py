"""Platform connectivity commands."""

import asyncio

import typer
from rich.markup import escape
from rich.table import Table

from reviewr.commands.common import config_service_for, load_config_or_exit
from reviewr.config.messages import ERROR_MESSAGES
from reviewr.services.registry import build_registry
from reviewr.utils import get_console, print_error, print_header

platforms_app = typer.Typer(
    name="platforms",
    help="Check connectivity to configured platforms",
    no_args_is_help=True,
)


@platforms_app.command("status")
def status(ctx: typer.Context) -> None:
    """Probe every platform in config.toml and show the result.

    The probe is diagnostic only; it does not decide which platforms
    ``review`` fetches from and it never writes to the error log.
    """
    service = config_service_for(ctx)
    config = load_config_or_exit(service)
    registry = build_registry(config, service.error_log())

    if not len(registry):
        print_error(
            ERROR_MESSAGES["no_platforms_configured"].format(config_path=service.config_path)
        )
        raise typer.Exit(code=1)

    print_header("Platform Status")
    statuses = asyncio.run(registry.test_all_connections())

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Platform", style="cyan")
    table.add_column("Id", style="dim")
    table.add_column("URL", style="dim")
    table.add_column("Status")
    for platform in registry.all_platforms():
        connection = statuses[platform.id]
        table.add_row(
            escape(f"{platform.icon} {platform.name}"),
            escape(platform.id),
            escape(platform.base_url or "-"),
            f"{connection.icon} {escape(connection.describe())}",
        )
    get_console().print(table)
