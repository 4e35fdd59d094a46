"""Main CLI entry point for reviewr."""

import logging
import sys
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console

from reviewr.commands.common import CliState, config_service_for
from reviewr.commands.config_cmd import config_app
from reviewr.commands.employee_cmd import add_command, list_command
from reviewr.commands.errors_cmd import errors_app
from reviewr.commands.platforms_cmd import platforms_app
from reviewr.commands.review_cmd import review_command
from reviewr.config.messages import HELP_TEXT, PROJECT_TAGLINE, PROJECT_URL
from reviewr.config.settings import reviewr_settings
from reviewr.constants import VERSION
from reviewr.utils import print_banner, print_error, print_panel
from reviewr.utils.log_config import configure_logging

# Load .env file from current directory if it exists
load_dotenv(Path.cwd() / ".env", verbose=False)

logger = logging.getLogger(__name__)

# Create main Typer app
app = typer.Typer(
    name="reviewr",
    help=PROJECT_TAGLINE,
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# Add command groups
app.add_typer(errors_app, name="errors")
app.add_typer(platforms_app, name="platforms")
app.add_typer(config_app, name="config")

# Create console for output
console = Console()


@app.command("review")
def review(
    ctx: typer.Context,
    employee: str | None = typer.Argument(
        None,
        help="Employee name (choose from a list when omitted)",
    ),
    days: int | None = typer.Option(
        None,
        "--days",
        "-d",
        min=1,
        help="Look back this many days (defaults to ui_preferences.default_time_period_days)",
    ),
) -> None:
    """Fetch an employee's activity from every configured platform and browse it.

    Platforms are queried concurrently. A platform that fails is recorded in
    the error log and shown as "No data available"; the others still load.
    """
    review_command(config_service_for(ctx), employee, days)


@app.command("list")
def list_employees(ctx: typer.Context) -> None:
    """List employees."""
    list_command(config_service_for(ctx))


@app.command("add")
def add_employee(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Employee name"),
    title: str = typer.Option(..., "--title", "-t", help="Job title"),
    email: str | None = typer.Option(
        None,
        "--email",
        "-e",
        help="Committer email used to find the employee on every platform",
    ),
) -> None:
    """Add or replace an employee record."""
    add_command(config_service_for(ctx), name, title, email)


@app.command("version")
def version() -> None:
    """Show version information."""
    print_panel(
        f"[bold cyan]reviewr[/bold cyan] version [green]{VERSION}[/green]\n\n"
        f"{PROJECT_TAGLINE}\n\n"
        f"[dim]{PROJECT_URL}[/dim]",
        title="Version",
        style="cyan",
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    data_path: Path | None = typer.Option(
        None,
        "--data-path",
        help="Data directory (defaults to $REVIEWR_DATA_PATH or ~/.reviewr)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Write debug output to the application log",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Show a traceback when a command fails unexpectedly",
    ),
    version_flag: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version information",
        is_eager=True,
    ),
) -> None:
    """reviewr - one view of a person's reviews, changes and tickets.

    Get started:
        reviewr add "Ada Lovelace" --title Engineer --email ada@example.com
        reviewr review "Ada Lovelace"
        reviewr errors list
    """
    # Handle version flag
    if version_flag:
        version()
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        print_banner()
        console.print(HELP_TEXT)
        raise typer.Exit()

    ctx.obj = CliState(data_path=data_path, verbose=verbose, debug=debug)
    service = config_service_for(ctx)
    try:
        service.ensure_data_dir()
    except OSError as e:
        logger.debug(f"Could not create data directory {service.data_path}: {e}")
    else:
        configure_logging(
            "DEBUG" if verbose else reviewr_settings.log_level,
            log_file=service.app_log_path,
        )
    logger.debug(f"reviewr {VERSION} using data directory {service.data_path}")


def cli_main() -> None:
    """Main entry point for the CLI.

    This is the function that gets called when running 'reviewr' command.
    It handles exceptions and provides user-friendly error messages.
    """
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        # Check if it's a typer.Exit with code
        if isinstance(e, typer.Exit):
            sys.exit(e.exit_code)

        from reviewr.config.messages import ERROR_MESSAGES

        print_error(ERROR_MESSAGES["generic_error"].format(error=str(e)))

        # Show traceback in debug mode
        if "--debug" in sys.argv:
            import traceback

            console.print("\n[dim]Traceback:[/dim]")
            traceback.print_exc()

        sys.exit(1)


if __name__ == "__main__":
    cli_main()
