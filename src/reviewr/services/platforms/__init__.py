"""Platform adapters for reviewr."""

from reviewr.services.platforms.base import ReviewPlatform
from reviewr.services.platforms.gerrit import GerritPlatform
from reviewr.services.platforms.gitlab import GitLabPlatform
from reviewr.services.platforms.jira import JiraPlatform

__all__ = [
    "ReviewPlatform",
    "GerritPlatform",
    "GitLabPlatform",
    "JiraPlatform",
]
