"""Numbered employee picker used when ``review`` is run without a name."""

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from reviewr.models.employee import Employee


def employee_table(employees: list[Employee]) -> Table:
    table = Table(title="Employees", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Title")
    table.add_column("Email", style="dim")
    for number, employee in enumerate(employees, start=1):
        table.add_row(
            str(number),
            escape(employee.name),
            escape(employee.title),
            escape(employee.committer_email or "-"),
        )
    return table


def select_employee(employees: list[Employee], console: Console) -> Employee | None:
    """Show the employees and ask for a number.

    Returns:
        The chosen employee, or None when the list is empty or the answer is 0.
    """
    if not employees:
        return None

    console.print(employee_table(employees))
    while True:
        choice: int = typer.prompt(
            f"Select an employee (1-{len(employees)}, 0 to cancel)", type=int
        )
        if choice == 0:
            return None
        if 1 <= choice <= len(employees):
            return employees[choice - 1]
        console.print(f"[red]Please enter a number between 0 and {len(employees)}[/red]")
