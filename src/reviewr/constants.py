"""Constants for reviewr.

This module contains:
- VERSION: Package version
- Fetch limits and page sizes per platform
- Platform wire-format details
- Log rotation and display limits

For paths, messages, and runtime settings, import from:
- reviewr.config.paths
- reviewr.config.messages
- reviewr.config.settings

For type-safe enums, import from:
- reviewr.models.enums
"""

from reviewr import __version__

# =============================================================================
# Version
# =============================================================================

VERSION = __version__

# =============================================================================
# Fetch Configuration
# =============================================================================

DEFAULT_TIME_PERIOD_DAYS = 30
DEFAULT_MAX_RESULTS_PER_CATEGORY = 100
CONFIG_VERSION = 1

GERRIT_PAGE_SIZE = 100
JIRA_PAGE_SIZE = 50
GITLAB_PAGE_SIZE = 100
# Pages scanned for a list that is filtered client-side
GITLAB_MAX_FILTERED_PAGES = 3

# Bounded so a burst of platform updates never blocks a fetch task
FETCH_PROGRESS_QUEUE_SIZE = 100

# =============================================================================
# Platform Wire Formats
# =============================================================================

# Gerrit prefixes every JSON body to defeat cross-site script inclusion
GERRIT_XSSI_PREFIX = ")]}'"
GERRIT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

JIRA_SEARCH_FIELDS = (
    "summary",
    "status",
    "assignee",
    "reporter",
    "created",
    "updated",
    "resolutiondate",
    "project",
    "issuetype",
    "priority",
    "components",
)

GITLAB_API_PATH = "/api/v4"
GITLAB_ID_PREFIX = "gitlab"

# Response bodies are stored in the error log up to this many characters
RESPONSE_BODY_SNIPPET_CHARS = 2000

# =============================================================================
# Logging
# =============================================================================

LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3
PLATFORM_ERRORS_LOGGER = "reviewr.platform_errors"

# =============================================================================
# Display
# =============================================================================

TITLE_DISPLAY_CHARS = 60
PROJECT_DISPLAY_CHARS = 20
DEFAULT_PLATFORM_ICON = "📄"
SECRET_MASK = "********"
