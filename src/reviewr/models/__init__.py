"""Data models for reviewr.

Configuration models live in ``reviewr.models.config`` and are not
re-exported here, since they depend on ``reviewr.exceptions``:
      from reviewr.models.config import ReviewrConfig
"""

from .activity import ActivityCategory, ActivityItem, ActivityMetrics, DetailedActivities
from .connection import ConnectionStatus
from .employee import Employee
from .enums import CategoryKind, ConnectionState, ErrorType, UiTheme
from .errors import ErrorContext, ErrorStats

__all__ = [
    "ActivityCategory",
    "ActivityItem",
    "ActivityMetrics",
    "DetailedActivities",
    "ConnectionStatus",
    "Employee",
    "CategoryKind",
    "ConnectionState",
    "ErrorType",
    "UiTheme",
    "ErrorContext",
    "ErrorStats",
]
