"""Structured error records for the platform error log."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


def _now_rfc3339() -> str:
    return datetime.now(UTC).isoformat()


class ErrorContext(BaseModel):
    """One platform failure.

    Created at the failure site, appended to ``error.log`` as a single JSON
    line, and never changed afterwards. The ``with_*`` helpers return
    updated copies so a record can be assembled fluently before it is
    written.
    """

    model_config = ConfigDict(frozen=True)

    platform_id: str
    operation: str
    user: str | None = None
    timestamp: str = Field(default_factory=_now_rfc3339)
    error_type: str = ""
    error_message: str = ""
    request_url: str | None = None
    status_code: int | None = None
    response_body: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)

    def with_user(self, user: str | None) -> ErrorContext:
        return self.model_copy(update={"user": user})

    def with_error(self, error_type: str, message: str) -> ErrorContext:
        return self.model_copy(update={"error_type": error_type, "error_message": message})

    def with_request_details(
        self,
        url: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ) -> ErrorContext:
        return self.model_copy(
            update={"request_url": url, "status_code": status_code, "response_body": response_body}
        )

    def with_metadata(self, key: str, value: str) -> ErrorContext:
        return self.model_copy(update={"metadata": {**self.metadata, key: value}})

    def summary(self) -> str:
        """One-line description used in application logs."""
        parts = [
            f"Platform error: {self.platform_id}",
            f"Operation: {self.operation}",
            f"Type: {self.error_type}",
            f"Message: {self.error_message}",
        ]
        if self.user:
            parts.append(f"User: {self.user}")
        if self.request_url:
            parts.append(f"URL: {self.request_url}")
        if self.status_code is not None:
            parts.append(f"Status: {self.status_code}")
        return " | ".join(parts)


class ErrorStats(BaseModel):
    """Aggregated failures for one platform."""

    total_errors: int = 0
    error_types: dict[str, int] = Field(default_factory=dict)
    last_error_time: str | None = None
