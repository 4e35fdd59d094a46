"""Path constants for reviewr.

This module defines the layout of the data directory. Everything reviewr
persists lives under one root (``~/.reviewr`` unless overridden with
``--data-path`` or ``REVIEWR_DATA_PATH``).
"""

# =============================================================================
# Data Directory Structure
# =============================================================================

DEFAULT_DATA_DIR_NAME = ".reviewr"
CONFIG_FILENAME = "config.toml"
ERROR_LOG_FILENAME = "error.log"
APP_LOG_FILENAME = "reviewr.log"
EMPLOYEES_DIR = "employees"

EMPLOYEE_FILE_EXTENSION = ".toml"
