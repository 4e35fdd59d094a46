"""CLI commands for reviewr."""

from reviewr.commands.config_cmd import config_app
from reviewr.commands.employee_cmd import add_command, list_command
from reviewr.commands.errors_cmd import errors_app
from reviewr.commands.platforms_cmd import platforms_app
from reviewr.commands.review_cmd import review_command

__all__ = [
    "add_command",
    "config_app",
    "errors_app",
    "list_command",
    "platforms_app",
    "review_command",
]
