"""Custom exceptions for reviewr.

All exceptions inherit from ReviewrError, allowing callers to catch every
reviewr failure with a single except clause if desired.

Exception hierarchy:
    ReviewrError (base)
    ├── ConfigurationError
    ├── PlatformError
    │   ├── NetworkError
    │   ├── AuthenticationError
    │   ├── ApiError
    │   └── DataParseError
    └── EmployeeError
        ├── EmployeeNotFoundError
        └── InvalidEmployeeNameError
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from reviewr.models.enums import ErrorType

if TYPE_CHECKING:
    from reviewr.models.errors import ErrorContext


class ReviewrError(Exception):
    """Base exception for all reviewr errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(ReviewrError):
    """Raised when configuration is missing, malformed or incomplete.

    Fatal to the one adapter it concerns; a broken config file as a whole is
    fatal to the command.
    """

    def __init__(self, message: str, config_file: Path | None = None, key: str | None = None):
        details: dict[str, Any] = {}
        if config_file:
            details["config_file"] = str(config_file)
        if key:
            details["key"] = key
        super().__init__(message, details)
        self.config_file = config_file
        self.key = key


# =============================================================================
# Platform Errors
# =============================================================================


class PlatformError(ReviewrError):
    """Raised when a platform adapter cannot complete an operation.

    Attributes:
        platform_id: Stable id of the adapter that failed.
        error_type: Tag recorded in the error log.
        context: The error-log record already written for this failure, if any.
    """

    default_error_type = ErrorType.UNEXPECTED_ERROR

    def __init__(
        self,
        message: str,
        platform_id: str,
        error_type: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.platform_id = platform_id
        self.error_type = error_type or self.default_error_type.value
        self.context = context

    @property
    def logged(self) -> bool:
        return self.context is not None


class NetworkError(PlatformError):
    """Connection refused, DNS failure, timeout and other transport problems."""

    default_error_type = ErrorType.NETWORK_ERROR


class AuthenticationError(PlatformError):
    """Credentials were rejected (HTTP 401/403)."""

    default_error_type = ErrorType.AUTHENTICATION_ERROR


class ApiError(PlatformError):
    """Any other non-success HTTP status."""

    default_error_type = ErrorType.API_ERROR


class DataParseError(PlatformError):
    """Response body was not the JSON shape the adapter expected."""

    default_error_type = ErrorType.JSON_PARSE_ERROR


# =============================================================================
# Employee Store Errors
# =============================================================================


class EmployeeError(ReviewrError):
    """Base class for employee store failures."""


class EmployeeNotFoundError(EmployeeError):
    """No record exists for the requested name."""

    def __init__(self, name: str):
        super().__init__(f"Employee '{name}' not found")
        self.name = name


class InvalidEmployeeNameError(EmployeeError):
    """Name is empty, too long or contains path characters."""
