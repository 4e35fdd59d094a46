"""Platform error log commands.

Commands:
- list: Show recent failures, newest first
- stats: Failure counts per platform and error type
- export: Write failures as a JSON array
- clear: Delete the error log
"""

import json
from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from reviewr.commands.common import config_service_for
from reviewr.config.messages import ERROR_MESSAGES, INFO_MESSAGES, SUCCESS_MESSAGES
from reviewr.utils import get_console, print_error, print_info, print_success

errors_app = typer.Typer(
    name="errors",
    help="Inspect the platform error log",
    no_args_is_help=True,
)


@errors_app.command("list")
def list_errors(
    ctx: typer.Context,
    platform: str | None = typer.Option(
        None, "--platform", "-p", help="Only show errors for this platform id"
    ),
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Maximum number of errors to show"),
) -> None:
    """Show the most recent platform errors.

    Example:
        reviewr errors list
        reviewr errors list --platform gitlab:work --limit 5
    """
    error_log = config_service_for(ctx).error_log()
    records = error_log.read_recent(limit, platform)
    if not records:
        print_info(INFO_MESSAGES["no_errors"])
        return

    console = get_console()
    for record in records:
        console.print(
            f"[dim]{record.timestamp}[/dim] [cyan]{escape(record.platform_id)}[/cyan] "
            f"[yellow]{escape(record.error_type)}[/yellow] ({escape(record.operation)})"
        )
        console.print(f"  {escape(record.error_message)}")
        if record.user:
            console.print(f"  [dim]User:[/dim] {escape(record.user)}")
        if record.request_url:
            status = f" -> {record.status_code}" if record.status_code is not None else ""
            console.print(f"  [dim]Request:[/dim] {escape(record.request_url)}{status}")


@errors_app.command("stats")
def error_stats(ctx: typer.Context) -> None:
    """Show failure counts per platform."""
    stats = config_service_for(ctx).error_log().stats()
    if not stats:
        print_info(INFO_MESSAGES["no_error_stats"])
        return

    table = Table(title="Platform Errors", show_header=True, header_style="bold cyan")
    table.add_column("Platform", style="cyan")
    table.add_column("Total", justify="right")
    table.add_column("By type")
    table.add_column("Last error", style="dim")
    for platform_id in sorted(stats):
        entry = stats[platform_id]
        by_type = ", ".join(
            f"{error_type}: {count}" for error_type, count in sorted(entry.error_types.items())
        )
        table.add_row(
            escape(platform_id),
            str(entry.total_errors),
            escape(by_type),
            entry.last_error_time or "-",
        )
    get_console().print(table)


@errors_app.command("export")
def export_errors(
    ctx: typer.Context,
    platform: str | None = typer.Option(
        None, "--platform", "-p", help="Only export errors for this platform id"
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="File to write (prints to stdout when omitted)"
    ),
) -> None:
    """Export platform errors as a JSON array.

    Example:
        reviewr errors export --output errors.json
        reviewr errors export --platform jira | jq length
    """
    error_log = config_service_for(ctx).error_log()

    if output is None:
        records = error_log.read_all(platform)
        print(json.dumps([record.model_dump(mode="json") for record in records], indent=2))
        return

    try:
        count = error_log.export(output, platform)
    except OSError as e:
        print_error(ERROR_MESSAGES["export_failed"].format(path=output, error=e))
        raise typer.Exit(code=1) from e
    print_success(SUCCESS_MESSAGES["errors_exported"].format(count=count, path=output))


@errors_app.command("clear")
def clear_errors(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Delete the platform error log."""
    error_log = config_service_for(ctx).error_log()
    if not error_log.path.exists():
        print_info(INFO_MESSAGES["no_error_log"])
        return

    if not force and not typer.confirm("Delete all recorded platform errors?"):
        raise typer.Exit()

    error_log.clear()
    print_success(SUCCESS_MESSAGES["errors_cleared"])
