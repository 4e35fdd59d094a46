"""Services for reviewr business logic."""

from reviewr.services.config_service import ConfigService, get_config_service
from reviewr.services.employee_service import EmployeeStore
from reviewr.services.error_log import ErrorLog
from reviewr.services.registry import PlatformRegistry, build_registry

__all__ = [
    "ConfigService",
    "get_config_service",
    "EmployeeStore",
    "ErrorLog",
    "PlatformRegistry",
    "build_registry",
]
