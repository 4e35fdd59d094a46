"""Shared test data for reviewr tests."""

from pathlib import Path

from reviewr.models.activity import ActivityCategory, ActivityItem

TEST_EMAIL = "ada@example.com"
TEST_GERRIT_URL = "https://review.example.com"
TEST_JIRA_URL = "https://example.atlassian.net"
TEST_GITLAB_URL = "https://gitlab.example.com"

CONFIG_ALL_PLATFORMS = f"""
version = 1

[platforms.gerrit]
gerrit_url = "{TEST_GERRIT_URL}/"
username = "ada"
http_password = "gerrit-secret"

[platforms.jira]
jira_url = "{TEST_JIRA_URL}"
username = "{TEST_EMAIL}"
api_token = "jira-secret"

[platforms.gitlab.work]
name = "Work GitLab"
gitlab_url = "{TEST_GITLAB_URL}"
token = "glpat-secret"
"""

CONFIG_GERRIT_AND_JIRA = CONFIG_ALL_PLATFORMS.split("[platforms.gitlab.work]")[0]


def make_item(
    item_id: str,
    title: str = "Fix flaky test",
    *,
    platform: str = "gerrit",
    category: ActivityCategory = ActivityCategory.CHANGES_CREATED,
    project: str = "core/server",
    url: str | None = None,
    status: str = "NEW",
) -> ActivityItem:
    """Build an ActivityItem with sensible defaults."""
    return ActivityItem(
        id=item_id,
        title=title,
        status=status,
        created="2024-01-15T10:30:00+00:00",
        updated="2024-01-16T08:00:00+00:00",
        url=f"{TEST_GERRIT_URL}/c/{project}/+/{item_id}" if url is None else url,
        platform=platform,
        category=category,
        project=project,
    )


def write_config(data_dir: Path, text: str) -> Path:
    """Write ``config.toml`` into a data directory."""
    path = data_dir / "config.toml"
    path.write_text(text, encoding="utf-8")
    return path
