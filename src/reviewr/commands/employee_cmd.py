"""Employee record commands: ``reviewr list`` and ``reviewr add``."""

import logging

import typer

from reviewr.config.messages import ERROR_MESSAGES, SUCCESS_MESSAGES
from reviewr.exceptions import EmployeeError
from reviewr.models.employee import Employee
from reviewr.services.config_service import ConfigService
from reviewr.services.employee_service import EmployeeStore
from reviewr.tui.selector import employee_table
from reviewr.utils import get_console, print_error, print_info, print_success, print_warning

logger = logging.getLogger(__name__)


def load_employees(store: EmployeeStore) -> list[Employee]:
    """Every readable record; unreadable ones are reported and skipped."""
    employees = []
    for name in store.list_names():
        try:
            employees.append(store.get(name))
        except EmployeeError as e:
            logger.warning(f"Skipping employee '{name}': {e.message}")
            print_warning(e.message)
    return employees


def list_command(service: ConfigService) -> None:
    """Print every employee as a table."""
    employees = load_employees(EmployeeStore(service.employees_dir))
    if not employees:
        print_info(ERROR_MESSAGES["no_employees"])
        return
    get_console().print(employee_table(employees))


def add_command(
    service: ConfigService,
    name: str,
    title: str,
    email: str | None = None,
) -> None:
    """Create or overwrite an employee record.

    Raises:
        typer.Exit: With code 1 when the name or title is rejected.
    """
    store = EmployeeStore(service.employees_dir)
    try:
        store.add(name, title, email)
    except EmployeeError as e:
        print_error(e.message)
        raise typer.Exit(code=1) from e
    print_success(SUCCESS_MESSAGES["employee_added"].format(name=name))
