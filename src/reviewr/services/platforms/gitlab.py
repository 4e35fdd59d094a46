"""GitLab adapter; one instance per configured GitLab server."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx

from reviewr.constants import (
    DEFAULT_MAX_RESULTS_PER_CATEGORY,
    GITLAB_API_PATH,
    GITLAB_ID_PREFIX,
    GITLAB_MAX_FILTERED_PAGES,
    GITLAB_PAGE_SIZE,
)
from reviewr.models.activity import ActivityCategory, ActivityItem, DetailedActivities
from reviewr.models.config import GitLabConfig
from reviewr.services.error_log import ErrorLog
from reviewr.services.platforms.base import ReviewPlatform

logger = logging.getLogger(__name__)

_STATUS_LABELS = {"opened": "Open", "merged": "Merged", "closed": "Closed", "locked": "Locked"}


def username_from_email(user: str) -> str:
    """GitLab filters by username; take the part of an email before ``@``."""
    return user.split("@", 1)[0] if "@" in user else user


def _project_path(record: dict[str, Any]) -> str:
    """``group/project`` from ``references.full`` or, failing that, ``web_url``."""
    full = (record.get("references") or {}).get("full") or ""
    for marker in ("!", "#"):
        if marker in full:
            return full.rsplit(marker, 1)[0]
    web_url = record.get("web_url") or ""
    if "/-/" in web_url:
        # https://host/group/project/-/merge_requests/1
        return web_url.split("/-/", 1)[0].split("/", 3)[-1]
    return str(record.get("project_id", ""))


class GitLabPlatform(ReviewPlatform):
    """GitLab REST API v4 with a personal access token."""

    def __init__(
        self,
        instance: str,
        config: GitLabConfig,
        error_log: ErrorLog,
        max_results_per_category: int = DEFAULT_MAX_RESULTS_PER_CATEGORY,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(error_log, max_results_per_category, transport)
        self._instance = instance
        self._config = config
        self._base_url = config.base_url
        self._api_url = config.api_base_url()

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def icon(self) -> str:
        return "🦊"

    @property
    def id(self) -> str:
        return f"{GITLAB_ID_PREFIX}:{self._instance}"

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def probe_path(self) -> str:
        return f"{GITLAB_API_PATH}/user"

    def is_configured(self) -> bool:
        return self._config.is_configured()

    def _auth(self) -> httpx.Auth | None:
        return None

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        headers["Authorization"] = f"Bearer {self._config.token}"
        return headers

    def get_item_url(self, item: ActivityItem) -> str:
        path = item.metadata.get("project_path") or item.project
        iid = item.metadata.get("iid")
        if not iid:
            return item.url
        kind = "merge_requests" if item.id.startswith("mr-") else "issues"
        return f"{self._base_url}/{path}/-/{kind}/{iid}"

    async def _fetch_detailed(
        self, client: httpx.AsyncClient, user: str, days: int
    ) -> DetailedActivities:
        username = username_from_email(user)
        since = (datetime.now(UTC) - timedelta(days=days)).strftime("%Y-%m-%dT%H:%M:%S.000Z")
        recent = {"created_after": since, "order_by": "created_at", "sort": "desc"}

        activities = DetailedActivities()

        category = ActivityCategory.MERGE_REQUESTS_CREATED
        mrs = await self._list(
            client,
            "merge_requests",
            user,
            {"author_username": username, "state": "all", **recent},
        )
        activities.add(category, [self._merge_request_to_item(mr, category, user) for mr in mrs])

        category = ActivityCategory.MERGE_REQUESTS_REVIEWED
        mrs = await self._list(
            client,
            "merge_requests",
            user,
            {"reviewer_username": username, "state": "all", **recent},
        )
        activities.add(category, [self._merge_request_to_item(mr, category, user) for mr in mrs])

        # No merged_by filter exists server-side
        category = ActivityCategory.MERGE_REQUESTS_MERGED
        mrs = await self._list(
            client,
            "merge_requests",
            user,
            {"state": "merged", "updated_after": since, "order_by": "updated_at", "sort": "desc"},
            keep=lambda mr: ((mr.get("merged_by") or {}).get("username") == username),
        )
        activities.add(category, [self._merge_request_to_item(mr, category, user) for mr in mrs])

        category = ActivityCategory.ISSUES_ASSIGNED
        issues = await self._list(
            client, "issues", user, {"assignee_username": username, "state": "all", **recent}
        )
        activities.add(category, [self._issue_to_item(i, category, user) for i in issues])

        category = ActivityCategory.ISSUES_CREATED
        issues = await self._list(
            client, "issues", user, {"author_username": username, "state": "all", **recent}
        )
        activities.add(category, [self._issue_to_item(i, category, user) for i in issues])

        return activities

    async def _list(
        self,
        client: httpx.AsyncClient,
        resource: str,
        user: str,
        params: dict[str, Any],
        keep: Callable[[dict[str, Any]], bool] | None = None,
    ) -> list[dict[str, Any]]:
        """Page through a list endpoint using ``X-Next-Page`` up to the cap.

        ``keep`` filters records client-side before they count toward the cap.
        A filtered list scans at most ``GITLAB_MAX_FILTERED_PAGES`` pages.
        """
        url = f"{self._api_url}/{resource}"
        operation = f"list_{resource}"
        records: list[dict[str, Any]] = []
        page: str | None = "1"
        pages_read = 0

        while page and len(records) < self._max_results:
            if keep is not None and pages_read >= GITLAB_MAX_FILTERED_PAGES:
                logger.debug(f"Stopped scanning {resource} on {self.id} after {pages_read} pages")
                break
            query = {**params, "scope": "all", "per_page": GITLAB_PAGE_SIZE, "page": page}
            batch, response = await self._get_json(client, url, operation, user, query)
            if not isinstance(batch, list):
                raise self._parse_error(
                    TypeError(f"expected a list of {resource}"), operation, user, response
                )

            pages_read += 1
            records.extend(r for r in batch if keep is None or keep(r))
            page = response.headers.get("X-Next-Page") or None

        return records[: self._max_results]

    def _merge_request_to_item(
        self, mr: dict[str, Any], category: ActivityCategory, user: str
    ) -> ActivityItem:
        try:
            iid = str(mr["iid"])
            state = mr["state"]
        except (KeyError, TypeError) as e:
            raise self._parse_error(e, "list_merge_requests", user) from e

        path = _project_path(mr)
        metadata = {
            "author": (mr.get("author") or {}).get("name", ""),
            "item_type": "Merge Request",
            "target_branch": mr.get("target_branch", ""),
            "source_branch": mr.get("source_branch", ""),
            "assignee": ((mr.get("assignees") or [{}])[0]).get("name", ""),
            "merged_by": (mr.get("merged_by") or {}).get("name", ""),
            "project_path": path,
            "iid": iid,
        }
        return ActivityItem(
            id=f"mr-{iid}",
            title=mr.get("title", ""),
            status=_STATUS_LABELS.get(state, state),
            created=mr.get("created_at", ""),
            updated=mr.get("updated_at", ""),
            url=mr.get("web_url") or f"{self._base_url}/{path}/-/merge_requests/{iid}",
            platform=self.id,
            category=category,
            project=path,
            metadata={k: v for k, v in metadata.items() if v},
        )

    def _issue_to_item(
        self, issue: dict[str, Any], category: ActivityCategory, user: str
    ) -> ActivityItem:
        try:
            iid = str(issue["iid"])
            state = issue["state"]
        except (KeyError, TypeError) as e:
            raise self._parse_error(e, "list_issues", user) from e

        path = _project_path(issue)
        metadata = {
            "author": (issue.get("author") or {}).get("name", ""),
            "item_type": "Issue",
            "assignee": ((issue.get("assignees") or [{}])[0]).get("name", ""),
            "project_path": path,
            "iid": iid,
        }
        return ActivityItem(
            id=f"issue-{iid}",
            title=issue.get("title", ""),
            status=_STATUS_LABELS.get(state, state),
            created=issue.get("created_at", ""),
            updated=issue.get("updated_at", ""),
            url=issue.get("web_url") or f"{self._base_url}/{path}/-/issues/{iid}",
            platform=self.id,
            category=category,
            project=path,
            metadata={k: v for k, v in metadata.items() if v},
        )

    def _platform_counters(self, activities: DetailedActivities) -> dict[str, int]:
        created = activities.items(ActivityCategory.MERGE_REQUESTS_CREATED)
        return {
            "mrs_open": sum(1 for item in created if item.status == "Open"),
            "mrs_merged": sum(1 for item in created if item.status == "Merged"),
        }
