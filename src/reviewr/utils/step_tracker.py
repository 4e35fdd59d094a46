"""Progress display for concurrent platform fetches."""

import asyncio

from rich.console import Console
from rich.markup import escape

from reviewr.services.fetch_progress import (
    FetchAllCompleted,
    FetchCompleted,
    FetchProgress,
    FetchStarted,
)
from reviewr.utils.console import get_console


class FetchTracker:
    """Print one line per platform as fetch events arrive.

    Example:
        >>> tracker = FetchTracker(total_platforms=3)
        >>> await tracker.follow(queue)  # returns after FetchAllCompleted
    """

    def __init__(self, total_platforms: int, console: Console | None = None):
        """Initialize fetch tracker.

        Args:
            total_platforms: Number of platforms being fetched
            console: Console to print to (defaults to the shared console)
        """
        self.total_platforms = total_platforms
        self.console = console or get_console()
        self.completed = 0
        self.succeeded = 0
        self.failures: dict[str, str] = {}

    def _prefix(self) -> str:
        return f"[{self.completed}/{self.total_platforms}]"

    def handle(self, event: FetchProgress) -> bool:
        """Render one event.

        Returns:
            True once the final ``FetchAllCompleted`` event has been seen.
        """
        if isinstance(event, FetchStarted):
            self.console.print(f"[dim]○ Fetching from {escape(event.platform_name)}...[/dim]")
        elif isinstance(event, FetchCompleted):
            self.completed += 1
            if event.success:
                self.succeeded += 1
                self.console.print(
                    f"[green]✓[/green] [cyan bold]{self._prefix()}[/cyan bold] "
                    f"{escape(event.platform_name)}: {event.items_count} items"
                )
            else:
                error = event.error_message or "unknown error"
                self.failures[event.platform_id] = error
                self.console.print(
                    f"[red]✗[/red] [cyan bold]{self._prefix()}[/cyan bold] "
                    f"{escape(event.platform_name)} failed"
                )
                self.console.print(f"  [red]{escape(error)}[/red]")
        elif isinstance(event, FetchAllCompleted):
            return True
        return False

    async def follow(self, queue: "asyncio.Queue[FetchProgress]") -> None:
        """Consume events from ``queue`` until the fetch reports completion."""
        while True:
            event = await queue.get()
            try:
                if self.handle(event):
                    return
            finally:
                queue.task_done()
