"""Employee store: one TOML file per person under ``employees/``.

The file stem is the employee name, so names are validated before they are
ever turned into a path.
"""

import logging
import tomllib
from pathlib import Path

import tomli_w
from pydantic import ValidationError

from reviewr.config.paths import EMPLOYEE_FILE_EXTENSION
from reviewr.exceptions import EmployeeError, EmployeeNotFoundError, InvalidEmployeeNameError
from reviewr.models.employee import Employee
from reviewr.utils.platform import acquire_file_lock, release_file_lock

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 255
_FORBIDDEN_NAME_CHARS = frozenset('/\\:*?"<>|')


def validate_employee_name(name: str) -> None:
    """Reject names that are empty, too long or unsafe as a file name.

    Raises:
        InvalidEmployeeNameError: If the name cannot be used.
    """
    if not name.strip():
        raise InvalidEmployeeNameError("Employee name cannot be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidEmployeeNameError(
            f"Employee name is too long (max {MAX_NAME_LENGTH} characters)"
        )
    bad = sorted({ch for ch in name if ch in _FORBIDDEN_NAME_CHARS})
    if bad:
        raise InvalidEmployeeNameError(
            f"Employee name contains invalid characters: {' '.join(bad)}"
        )
    if any(ord(ch) < 32 for ch in name):
        raise InvalidEmployeeNameError("Employee name contains control characters")
    if name.startswith(".") or ".." in name:
        raise InvalidEmployeeNameError("Employee name cannot start with '.' or contain '..'")


class EmployeeStore:
    """Keyed TOML file store for employee records."""

    def __init__(self, employees_dir: Path):
        self.employees_dir = employees_dir

    def _path_for(self, name: str) -> Path:
        validate_employee_name(name)
        return self.employees_dir / f"{name}{EMPLOYEE_FILE_EXTENSION}"

    def list_names(self) -> list[str]:
        """Return all employee names, sorted."""
        if not self.employees_dir.exists():
            return []
        return sorted(
            path.stem
            for path in self.employees_dir.iterdir()
            if path.is_file() and path.suffix == EMPLOYEE_FILE_EXTENSION
        )

    def exists(self, name: str) -> bool:
        return self._path_for(name).exists()

    def get(self, name: str) -> Employee:
        """Load one record.

        Raises:
            EmployeeNotFoundError: If no record exists for the name.
            EmployeeError: If the record cannot be parsed.
        """
        path = self._path_for(name)
        if not path.exists():
            raise EmployeeNotFoundError(name)

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
            return Employee.model_validate(data)
        except (tomllib.TOMLDecodeError, ValidationError) as e:
            logger.warning(f"Failed to parse employee file {path}: {e}")
            raise EmployeeError(f"Invalid employee file format: {path.name}") from e

    def add(self, name: str, title: str, committer_email: str | None = None) -> Employee:
        """Create or overwrite a record.

        Raises:
            InvalidEmployeeNameError: If the name is unsafe.
            EmployeeError: If the title is empty.
        """
        path = self._path_for(name)
        if not title.strip():
            raise EmployeeError("Title cannot be empty")

        email = committer_email.strip() if committer_email else None
        employee = Employee(name=name, title=title.strip(), committer_email=email or None)

        self.employees_dir.mkdir(parents=True, exist_ok=True)
        # Append mode so the file is only emptied once the lock is held
        with open(path, "ab") as f:
            acquire_file_lock(f, blocking=True)
            try:
                f.truncate(0)
                tomli_w.dump(employee.model_dump(exclude_none=True), f)
            finally:
                release_file_lock(f)

        logger.info(f"Employee '{name}' added to {path}")
        return employee
