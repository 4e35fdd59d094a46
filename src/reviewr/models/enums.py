"""Enum types for reviewr.

This module provides type-safe enumerations for activity categories,
connection states, error tags and UI themes. Using enums instead of string
constants provides:
- IDE autocomplete and type checking
- Iteration over valid values
- Stable serialized values in config and log files
"""

from enum import Enum


class CategoryKind(str, Enum):
    """Kinds of activity a subject can have on a platform."""

    # Code review
    CHANGES_CREATED = "changes_created"
    CHANGES_REVIEWED = "changes_reviewed"
    CHANGES_MERGED = "changes_merged"
    REVIEWS_GIVEN = "reviews_given"
    REVIEWS_RECEIVED = "reviews_received"

    # Issue tracking
    ISSUES_CREATED = "issues_created"
    ISSUES_ASSIGNED = "issues_assigned"
    ISSUES_RESOLVED = "issues_resolved"
    ISSUES_COMMENTED = "issues_commented"

    # Repository
    MERGE_REQUESTS_CREATED = "merge_requests_created"
    MERGE_REQUESTS_REVIEWED = "merge_requests_reviewed"
    MERGE_REQUESTS_MERGED = "merge_requests_merged"
    COMMITS_PUSHED = "commits_pushed"

    # Open extension case, carries its own name
    OTHER = "other"

    @classmethod
    def values(cls) -> list[str]:
        """Return list of all kind values."""
        return [k.value for k in cls]


class ConnectionState(str, Enum):
    """Result of a platform health check."""

    CONNECTED = "connected"
    WARNING = "warning"
    ERROR = "error"
    NOT_CONFIGURED = "not_configured"


class ErrorType(str, Enum):
    """Tags written to the ``error_type`` field of the error log."""

    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    AUTHENTICATION_ERROR = "authentication_error"
    API_ERROR = "api_error"
    JSON_PARSE_ERROR = "json_parse_error"
    CONFIGURATION_ERROR = "configuration_error"
    UNEXPECTED_ERROR = "unexpected_error"

    @classmethod
    def values(cls) -> list[str]:
        """Return list of all error tags."""
        return [t.value for t in cls]


class UiTheme(str, Enum):
    """Color themes for the terminal browser."""

    DEFAULT = "default"
    DARK = "dark"
    LIGHT = "light"
    HIGH_CONTRAST = "high_contrast"

    @classmethod
    def values(cls) -> list[str]:
        """Return list of all theme names."""
        return [t.value for t in cls]
