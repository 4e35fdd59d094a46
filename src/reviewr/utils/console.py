"""Console output helpers built on rich.

Commands print through these functions so message styling stays consistent
across the CLI. Success, warning and error messages are printed literally;
info messages may carry rich markup.
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from reviewr.config.messages import PROJECT_TAGLINE

_console: Console | None = None


def get_console() -> Console:
    """Shared console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def print_success(message: str) -> None:
    get_console().print(f"[green]✓[/green] {escape(message)}")


def print_error(message: str) -> None:
    get_console().print(f"[red]✗ {escape(message)}[/red]")


def print_warning(message: str) -> None:
    get_console().print(f"[yellow]⚠ {escape(message)}[/yellow]")


def print_info(message: str) -> None:
    get_console().print(message)


def print_header(message: str) -> None:
    get_console().print(f"\n[bold cyan]{message}[/bold cyan]\n")


def print_panel(content: str, title: str | None = None, style: str = "cyan") -> None:
    get_console().print(Panel(content, title=title, border_style=style, expand=False))


def print_banner() -> None:
    get_console().print(f"[bold cyan]reviewr[/bold cyan] [dim]- {PROJECT_TAGLINE}[/dim]\n")
