"""Connection status reported by platform health checks."""

from __future__ import annotations

from dataclasses import dataclass

from reviewr.models.enums import ConnectionState

_STATUS_ICONS = {
    ConnectionState.CONNECTED: "✅",
    ConnectionState.WARNING: "⚠️",
    ConnectionState.ERROR: "❌",
    ConnectionState.NOT_CONFIGURED: "⚪",
}


@dataclass(frozen=True)
class ConnectionStatus:
    """Outcome of ``test_connection``.

    Diagnostic only: whether a platform is fetched from is decided by
    ``is_configured``, never by this status.
    """

    state: ConnectionState
    reason: str | None = None

    @classmethod
    def connected(cls) -> ConnectionStatus:
        return cls(ConnectionState.CONNECTED)

    @classmethod
    def warning(cls, reason: str) -> ConnectionStatus:
        return cls(ConnectionState.WARNING, reason)

    @classmethod
    def error(cls, reason: str) -> ConnectionStatus:
        return cls(ConnectionState.ERROR, reason)

    @classmethod
    def not_configured(cls) -> ConnectionStatus:
        return cls(ConnectionState.NOT_CONFIGURED)

    @property
    def icon(self) -> str:
        return _STATUS_ICONS[self.state]

    def describe(self) -> str:
        label = self.state.value.replace("_", " ").capitalize()
        return f"{label}: {self.reason}" if self.reason else label
