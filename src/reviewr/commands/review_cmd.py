"""The ``review`` command: fetch one person's activity and browse it."""

import asyncio
import logging
import sys

import typer
from rich.console import Console
from rich.markup import escape

from reviewr.commands.common import load_config_or_exit
from reviewr.commands.employee_cmd import load_employees
from reviewr.config.messages import ERROR_MESSAGES, INFO_MESSAGES
from reviewr.constants import FETCH_PROGRESS_QUEUE_SIZE
from reviewr.exceptions import EmployeeError
from reviewr.models.activity import DetailedActivities
from reviewr.models.employee import Employee
from reviewr.services.config_service import ConfigService
from reviewr.services.employee_service import EmployeeStore
from reviewr.services.registry import PlatformRegistry, ProgressQueue, build_registry
from reviewr.tui.browser import create_browser
from reviewr.tui.render import summary_table
from reviewr.tui.selector import select_employee
from reviewr.utils import get_console, print_error, print_info, print_warning
from reviewr.utils.step_tracker import FetchTracker

logger = logging.getLogger(__name__)


def _resolve_employee(store: EmployeeStore, name: str | None, console: Console) -> Employee:
    if name:
        try:
            return store.get(name)
        except EmployeeError as e:
            print_error(e.message)
            raise typer.Exit(code=1) from e

    employees = load_employees(store)
    if not employees:
        print_error(ERROR_MESSAGES["no_employees"])
        raise typer.Exit(code=1)

    employee = select_employee(employees, console)
    if employee is None:
        print_warning(ERROR_MESSAGES["no_selection"])
        raise typer.Exit()
    return employee


async def fetch_with_progress(
    registry: PlatformRegistry,
    email: str,
    days: int,
    console: Console,
) -> tuple[dict[str, DetailedActivities], FetchTracker]:
    """Run ``fetch_all`` while printing one progress line per platform."""
    queue: ProgressQueue = asyncio.Queue(maxsize=FETCH_PROGRESS_QUEUE_SIZE)
    tracker = FetchTracker(len(registry.configured_adapters()), console)
    results, _ = await asyncio.gather(
        registry.fetch_all(email, days, queue),
        tracker.follow(queue),
    )
    return results, tracker


def review_command(service: ConfigService, employee_name: str | None, days: int | None) -> None:
    """Fetch activity for one employee from every configured platform and browse it.

    Raises:
        typer.Exit: Code 1 when nothing is configured or the employee is
            unknown, 130 when the fetch is interrupted.
    """
    console = get_console()
    config = load_config_or_exit(service)
    error_log = service.error_log()
    registry = build_registry(config, error_log)

    if not registry.configured_adapters():
        print_error(
            ERROR_MESSAGES["no_platforms_configured"].format(config_path=service.config_path)
        )
        raise typer.Exit(code=1)

    employee = _resolve_employee(EmployeeStore(service.employees_dir), employee_name, console)
    if not employee.has_email:
        print_warning(INFO_MESSAGES["no_email"].format(name=employee.name))
        raise typer.Exit()

    email = (employee.committer_email or "").strip()
    window = days if days is not None else config.ui_preferences.default_time_period_days
    print_info(INFO_MESSAGES["fetching"].format(
            name=escape(employee.name), email=escape(email), days=window
        ))

    try:
        results, tracker = asyncio.run(fetch_with_progress(registry, email, window, console))
    except KeyboardInterrupt:
        console.print(f"\n[yellow]{INFO_MESSAGES['cancelled']}[/yellow]")
        raise typer.Exit(code=130) from None

    print_info(
        INFO_MESSAGES["fetch_summary"].format(
            succeeded=tracker.succeeded, attempted=tracker.total_platforms
        )
    )
    if tracker.failures:
        print_info(f"[dim]{INFO_MESSAGES['fetch_failures_hint']}[/dim]")

    browser = create_browser(
        employee.name, email, registry, results, config.ui_preferences, console=console
    )
    if console.is_terminal and sys.stdin.isatty():
        logger.info(f"Opening browser for {employee.name}")
        browser.run()
    console.print(summary_table(browser.state, browser.context))
