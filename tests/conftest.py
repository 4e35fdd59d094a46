"""Pytest configuration and fixtures for reviewr tests."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from fixtures import make_item

from reviewr.models.activity import ActivityCategory, DetailedActivities
from reviewr.services.error_log import ErrorLog


@pytest.fixture
def anyio_backend() -> str:
    """Restrict anyio tests to asyncio backend."""
    return "asyncio"


@pytest.fixture(autouse=True)
def reset_app_logger() -> Iterator[None]:
    """Undo CLI logging setup so file handlers never leak between tests."""
    yield
    app_logger = logging.getLogger("reviewr")
    for handler in list(app_logger.handlers):
        handler.close()
    app_logger.handlers.clear()
    app_logger.propagate = True
    app_logger.setLevel(logging.NOTSET)


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated reviewr data directory.

    Returns:
        Path to the (already created) data directory
    """
    path = tmp_path / "reviewr-data"
    path.mkdir()
    monkeypatch.delenv("REVIEWR_DATA_PATH", raising=False)
    return path


@pytest.fixture
def error_log(data_dir: Path) -> ErrorLog:
    """Error log inside the temporary data directory."""
    return ErrorLog(data_dir / "error.log")


@pytest.fixture
def sample_activities() -> DetailedActivities:
    """Two Gerrit categories; change 101 appears in both."""
    activities = DetailedActivities()
    activities.add(
        ActivityCategory.CHANGES_CREATED,
        [
            make_item("101", "Add retry to uploader"),
            make_item("102", "Remove dead code", project="tools/lint", status="MERGED"),
        ],
    )
    activities.add(
        ActivityCategory.REVIEWS_RECEIVED,
        [make_item("101", "Add retry to uploader", category=ActivityCategory.REVIEWS_RECEIVED)],
    )
    return activities
