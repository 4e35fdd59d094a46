"""Jira Cloud adapter."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx

from reviewr.constants import (
    DEFAULT_MAX_RESULTS_PER_CATEGORY,
    JIRA_PAGE_SIZE,
    JIRA_SEARCH_FIELDS,
)
from reviewr.models.activity import (
    ActivityCategory,
    ActivityItem,
    ActivityMetrics,
    DetailedActivities,
)
from reviewr.models.config import JiraConfig
from reviewr.services.error_log import ErrorLog
from reviewr.services.platforms.base import ReviewPlatform

logger = logging.getLogger(__name__)

SEARCH_PATH = "/rest/api/3/search"
JIRA_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"


def parse_jira_timestamp(value: str | None) -> datetime | None:
    """Parse ``2024-01-15T10:30:00.000+0000``; None when absent or malformed."""
    if not value:
        return None
    try:
        return datetime.strptime(value, JIRA_TIMESTAMP_FORMAT)
    except ValueError:
        return None


def _field_text(value: Any) -> str:
    """Flatten a Jira field value (option, user, list or scalar) to text."""
    if value is None:
        return ""
    if isinstance(value, dict):
        for key in ("value", "name", "displayName", "key"):
            if value.get(key):
                return str(value[key])
        return ""
    if isinstance(value, list):
        return ", ".join(text for text in (_field_text(v) for v in value) if text)
    return str(value)


class JiraPlatform(ReviewPlatform):
    """Jira REST API v3 searched with JQL; the subject is addressed by email."""

    def __init__(
        self,
        config: JiraConfig,
        error_log: ErrorLog,
        max_results_per_category: int = DEFAULT_MAX_RESULTS_PER_CATEGORY,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(error_log, max_results_per_category, transport)
        self._config = config
        self._base_url = config.base_url

    @property
    def name(self) -> str:
        return "JIRA"

    @property
    def icon(self) -> str:
        return "🎫"

    @property
    def id(self) -> str:
        return "jira"

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def probe_path(self) -> str:
        return "/rest/api/3/myself"

    def is_configured(self) -> bool:
        return self._config.is_configured()

    def _auth(self) -> httpx.Auth | None:
        return httpx.BasicAuth(self._config.username, self._config.api_token)

    def get_item_url(self, item: ActivityItem) -> str:
        return f"{self._base_url}/browse/{item.id}"

    # -------------------------------------------------------------------------
    # JQL
    # -------------------------------------------------------------------------

    def _with_project_filter(self, jql: str) -> str:
        if not self._config.project_filter:
            return jql
        projects = ", ".join(f'"{key}"' for key in self._config.project_filter)
        return f"project in ({projects}) AND {jql}"

    def category_queries(self, user: str, days: int) -> list[tuple[ActivityCategory, str]]:
        """JQL per category, without ordering clauses."""
        queries = [
            (ActivityCategory.ISSUES_CREATED, f'reporter = "{user}" AND created >= -{days}d'),
            (ActivityCategory.ISSUES_RESOLVED, f'assignee = "{user}" AND resolved >= -{days}d'),
            (ActivityCategory.ISSUES_ASSIGNED, f'assignee = "{user}" AND resolution = Unresolved'),
        ]
        return [(category, self._with_project_filter(jql)) for category, jql in queries]

    def _commented_query(self, user: str, days: int) -> str:
        return self._with_project_filter(f'watcher = "{user}" AND updated >= -{days}d')

    # -------------------------------------------------------------------------
    # Fetching
    # -------------------------------------------------------------------------

    async def _fetch_detailed(
        self, client: httpx.AsyncClient, user: str, days: int
    ) -> DetailedActivities:
        activities = DetailedActivities()
        order = {
            ActivityCategory.ISSUES_CREATED: "created",
            ActivityCategory.ISSUES_RESOLVED: "resolved",
            ActivityCategory.ISSUES_ASSIGNED: "updated",
        }
        for category, jql in self.category_queries(user, days):
            issues = await self._search(client, f"{jql} ORDER BY {order[category]} DESC", user)
            activities.add(category, [self._issue_to_item(i, category, user) for i in issues])

        commented = await self._fetch_commented(client, user, days)
        activities.add(ActivityCategory.ISSUES_COMMENTED, commented)
        return activities

    async def _fetch_commented(
        self, client: httpx.AsyncClient, user: str, days: int
    ) -> list[ActivityItem]:
        """Watched issues whose comments include one by the subject in the window."""
        jql = f"{self._commented_query(user, days)} ORDER BY updated DESC"
        issues = await self._search(client, jql, user, extra_fields=("comment",))
        since = datetime.now(UTC) - timedelta(days=days)

        items: list[ActivityItem] = []
        for issue in issues:
            comments = ((issue.get("fields") or {}).get("comment") or {}).get("comments") or []
            if any(self._is_recent_comment_by(c, user, since) for c in comments):
                items.append(self._issue_to_item(issue, ActivityCategory.ISSUES_COMMENTED, user))
        return items

    @staticmethod
    def _is_recent_comment_by(comment: dict[str, Any], user: str, since: datetime) -> bool:
        author = comment.get("author") or {}
        if (author.get("emailAddress") or "").lower() != user.lower():
            return False
        created = parse_jira_timestamp(comment.get("created"))
        return created is not None and created >= since

    async def _search(
        self,
        client: httpx.AsyncClient,
        jql: str,
        user: str,
        extra_fields: tuple[str, ...] = (),
    ) -> list[dict[str, Any]]:
        """Run a JQL search, paging with ``startAt`` up to the cap."""
        url = f"{self._base_url}{SEARCH_PATH}"
        fields = ",".join(
            (*JIRA_SEARCH_FIELDS, *extra_fields, *self._config.custom_fields.values())
        )
        issues: list[dict[str, Any]] = []

        logger.debug(f"JIRA JQL query: {jql}")
        while len(issues) < self._max_results:
            params = {
                "jql": jql,
                "startAt": len(issues),
                "maxResults": min(JIRA_PAGE_SIZE, self._max_results - len(issues)),
                "fields": fields,
            }
            payload, response = await self._get_json(client, url, "search_issues", user, params)
            try:
                page = payload["issues"]
                total = int(payload.get("total", 0))
            except (KeyError, TypeError, ValueError) as e:
                raise self._parse_error(e, "search_issues", user, response) from e

            issues.extend(page)
            if not page or len(issues) >= total:
                break

        return issues[: self._max_results]

    async def _count(self, client: httpx.AsyncClient, jql: str, user: str) -> int:
        """Total matches for a JQL query without fetching any issues."""
        url = f"{self._base_url}{SEARCH_PATH}"
        payload, response = await self._get_json(
            client, url, "count_issues", user, {"jql": jql, "maxResults": 0}
        )
        try:
            return int(payload["total"])
        except (KeyError, TypeError, ValueError) as e:
            raise self._parse_error(e, "count_issues", user, response) from e

    def _issue_to_item(
        self, issue: dict[str, Any], category: ActivityCategory, user: str
    ) -> ActivityItem:
        try:
            key = issue["key"]
            fields = issue["fields"]
            project = fields["project"]["key"]
            status = fields["status"]["name"]
        except (KeyError, TypeError) as e:
            raise self._parse_error(e, "search_issues", user) from e

        metadata = {
            "issue_type": _field_text(fields.get("issuetype")),
            "project": project,
            "status": status,
            "assignee": _field_text(fields.get("assignee")),
            "reporter": _field_text(fields.get("reporter")),
            "priority": _field_text(fields.get("priority")),
            "components": _field_text(fields.get("components")),
            "resolved": fields.get("resolutiondate") or "",
        }
        for name, field_id in self._config.custom_fields.items():
            metadata[name] = _field_text(fields.get(field_id))

        return ActivityItem(
            id=key,
            title=fields.get("summary") or "",
            status=status,
            created=fields.get("created") or "",
            updated=fields.get("updated") or "",
            url=f"{self._base_url}/browse/{key}",
            platform=self.id,
            category=category,
            project=project,
            metadata={k: v for k, v in metadata.items() if v},
        )

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------

    async def get_activity_metrics(self, user: str, days: int) -> ActivityMetrics:
        """Counts from ``maxResults=0`` searches, plus the filtered comment list."""
        operation = "get_activity_metrics"
        self._require_configured(operation, user)

        counts: dict[ActivityCategory, int] = {}
        async with self._client() as client:
            for category, jql in self.category_queries(user, days):
                counts[category] = await self._count(client, jql, user)
            commented = await self._fetch_commented(client, user, days)
        counts[ActivityCategory.ISSUES_COMMENTED] = len(commented)

        return ActivityMetrics.from_counts(
            counts,
            {
                "tickets_created": counts[ActivityCategory.ISSUES_CREATED],
                "tickets_resolved": counts[ActivityCategory.ISSUES_RESOLVED],
                "tickets_assigned": counts[ActivityCategory.ISSUES_ASSIGNED],
                "comments_added": counts[ActivityCategory.ISSUES_COMMENTED],
            },
        )

    def _platform_counters(self, activities: DetailedActivities) -> dict[str, int]:
        return {
            "tickets_created": len(activities.items(ActivityCategory.ISSUES_CREATED)),
            "tickets_resolved": len(activities.items(ActivityCategory.ISSUES_RESOLVED)),
            "tickets_assigned": len(activities.items(ActivityCategory.ISSUES_ASSIGNED)),
            "comments_added": len(activities.items(ActivityCategory.ISSUES_COMMENTED)),
        }
