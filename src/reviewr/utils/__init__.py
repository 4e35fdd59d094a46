"""Utility helpers for reviewr."""

from reviewr.utils.console import (
    get_console,
    print_banner,
    print_error,
    print_header,
    print_info,
    print_panel,
    print_success,
    print_warning,
)

__all__ = [
    "get_console",
    "print_banner",
    "print_error",
    "print_header",
    "print_info",
    "print_panel",
    "print_success",
    "print_warning",
]
