"""Progress events emitted while platforms are fetched concurrently."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FetchStarted:
    """A platform's fetch task has begun."""

    platform_id: str
    platform_name: str


@dataclass(frozen=True)
class FetchCompleted:
    """A platform's fetch task has finished, successfully or not."""

    platform_id: str
    platform_name: str
    success: bool
    items_count: int = 0
    error_message: str | None = None


@dataclass(frozen=True)
class FetchAllCompleted:
    """Every platform has reported; no further events follow."""

    attempted: int
    succeeded: int


FetchProgress = FetchStarted | FetchCompleted | FetchAllCompleted
