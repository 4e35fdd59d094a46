"""Append-only telemetry log of platform failures.

Each failure is one JSON object on its own line in ``error.log``. Writers
never hold the file open between records: every append opens the file,
writes one complete line and closes it again, so records from adapters
failing at the same time (or from separate reviewr processes) cannot
interleave inside a line.
"""

import json
import logging
from collections.abc import Iterator
from pathlib import Path

from pydantic import ValidationError

from reviewr.constants import PLATFORM_ERRORS_LOGGER
from reviewr.models.errors import ErrorContext, ErrorStats

logger = logging.getLogger(__name__)
platform_errors_logger = logging.getLogger(PLATFORM_ERRORS_LOGGER)


class ErrorLog:
    """Reader and writer for one error log file.

    The path is passed in explicitly; there is no process-wide default.
    """

    def __init__(self, path: Path):
        self.path = path

    def append(self, context: ErrorContext) -> None:
        """Append one record and echo it to the application log.

        A record that cannot be written is reported on the application log
        only; losing telemetry must never turn into a second failure.
        """
        platform_errors_logger.error(context.summary())

        line = context.model_dump_json() + "\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(line)
        except OSError as e:
            logger.warning(f"Failed to write error log {self.path}: {e}")

    def _iter_records(self) -> Iterator[ErrorContext]:
        """Yield every parseable record in file order, skipping bad lines."""
        if not self.path.exists():
            return

        with self.path.open("rb") as fh:
            for line_number, raw in enumerate(fh, start=1):
                raw = raw.strip()
                if not raw:
                    continue
                try:
                    record = ErrorContext.model_validate_json(raw.decode("utf-8"))
                except (UnicodeDecodeError, ValidationError):
                    logger.debug(f"Skipping unparsable error log line {line_number}")
                    continue
                yield record

    def read_recent(self, limit: int, platform_id: str | None = None) -> list[ErrorContext]:
        """Return the most recent records, newest first.

        Args:
            limit: Maximum number of records to return.
            platform_id: Only return records for this platform when given.
        """
        if limit <= 0:
            return []

        records = [
            record
            for record in self._iter_records()
            if platform_id is None or record.platform_id == platform_id
        ]
        records.reverse()
        return records[:limit]

    def read_all(self, platform_id: str | None = None) -> list[ErrorContext]:
        """Return every record, newest first."""
        records = [
            record
            for record in self._iter_records()
            if platform_id is None or record.platform_id == platform_id
        ]
        records.reverse()
        return records

    def stats(self) -> dict[str, ErrorStats]:
        """Aggregate failures per platform in a single pass over the file."""
        stats: dict[str, ErrorStats] = {}
        for record in self._iter_records():
            entry = stats.setdefault(record.platform_id, ErrorStats())
            entry.total_errors += 1
            entry.error_types[record.error_type] = entry.error_types.get(record.error_type, 0) + 1
            if entry.last_error_time is None or record.timestamp > entry.last_error_time:
                entry.last_error_time = record.timestamp
        return stats

    def export(self, destination: Path, platform_id: str | None = None) -> int:
        """Write records as a JSON array and return how many were written."""
        records = self.read_all(platform_id)
        payload = [record.model_dump(mode="json") for record in records]
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        return len(records)

    def clear(self) -> bool:
        """Delete the log file.

        Returns:
            True if a file was removed, False if there was nothing to clear.
        """
        if not self.path.exists():
            return False
        self.path.unlink()
        logger.info(f"Cleared error log {self.path}")
        return True
