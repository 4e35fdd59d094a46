"""Gerrit code review adapter."""

import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from reviewr.constants import (
    DEFAULT_MAX_RESULTS_PER_CATEGORY,
    GERRIT_PAGE_SIZE,
    GERRIT_TIMESTAMP_FORMAT,
    GERRIT_XSSI_PREFIX,
)
from reviewr.models.activity import ActivityCategory, ActivityItem, DetailedActivities
from reviewr.models.config import GerritConfig
from reviewr.services.error_log import ErrorLog
from reviewr.services.platforms.base import ReviewPlatform

logger = logging.getLogger(__name__)

# Query per category; {user} and {days} are filled in per fetch
GERRIT_CATEGORY_QUERIES: tuple[tuple[ActivityCategory, str], ...] = (
    (ActivityCategory.CHANGES_CREATED, "owner:{user} -age:{days}d"),
    (ActivityCategory.CHANGES_MERGED, "owner:{user} status:merged -age:{days}d"),
    (ActivityCategory.REVIEWS_GIVEN, "reviewer:{user} -owner:{user} -age:{days}d"),
    (ActivityCategory.REVIEWS_RECEIVED, "owner:{user} is:reviewed -age:{days}d"),
)


def normalize_gerrit_timestamp(value: str) -> str:
    """Convert ``2024-01-15 10:30:00.000000000`` (UTC) to ISO-8601.

    Values that do not look like Gerrit timestamps are returned unchanged.
    """
    if not value:
        return value
    try:
        parsed = datetime.strptime(value.split(".", 1)[0], GERRIT_TIMESTAMP_FORMAT)
    except ValueError:
        return value
    return parsed.replace(tzinfo=UTC).isoformat()


class GerritPlatform(ReviewPlatform):
    """Gerrit REST API over the authenticated ``/a/`` prefix."""

    def __init__(
        self,
        config: GerritConfig,
        error_log: ErrorLog,
        max_results_per_category: int = DEFAULT_MAX_RESULTS_PER_CATEGORY,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(error_log, max_results_per_category, transport)
        self._config = config
        self._base_url = config.base_url

    @property
    def name(self) -> str:
        return "Gerrit"

    @property
    def icon(self) -> str:
        return "🔍"

    @property
    def id(self) -> str:
        return "gerrit"

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def probe_path(self) -> str:
        return "/a/config/server/version"

    def is_configured(self) -> bool:
        return self._config.is_configured()

    def _auth(self) -> httpx.Auth | None:
        return httpx.BasicAuth(self._config.username, self._config.http_password)

    def _parse_body(self, text: str) -> Any:
        return super()._parse_body(text.removeprefix(GERRIT_XSSI_PREFIX))

    def get_item_url(self, item: ActivityItem) -> str:
        return f"{self._base_url}/c/{item.project}/+/{item.id}"

    async def _fetch_detailed(
        self, client: httpx.AsyncClient, user: str, days: int
    ) -> DetailedActivities:
        activities = DetailedActivities()
        for category, template in GERRIT_CATEGORY_QUERIES:
            query = template.format(user=user, days=days)
            changes = await self._query_changes(client, query, user)
            items = [self._change_to_item(change, category, user) for change in changes]
            activities.add(category, items)
        return activities

    async def _query_changes(
        self, client: httpx.AsyncClient, query: str, user: str
    ) -> list[dict[str, Any]]:
        """Run one change query, following ``_more_changes`` up to the cap."""
        url = f"{self._base_url}/a/changes/"
        changes: list[dict[str, Any]] = []
        start = 0

        logger.debug(f"Querying Gerrit: {query}")
        while len(changes) < self._max_results:
            page_size = min(GERRIT_PAGE_SIZE, self._max_results - len(changes))
            params = {"q": query, "n": page_size, "S": start, "o": "DETAILED_ACCOUNTS"}
            page, response = await self._get_json(client, url, "query_changes", user, params)
            if not isinstance(page, list):
                raise self._parse_error(
                    TypeError("expected a list of changes"), "query_changes", user, response
                )

            changes.extend(page)
            last = page[-1] if page else None
            if not isinstance(last, dict) or not last.get("_more_changes"):
                break
            start += len(page)

        return changes[: self._max_results]

    def _change_to_item(
        self, change: dict[str, Any], category: ActivityCategory, user: str
    ) -> ActivityItem:
        try:
            number = str(change["_number"])
            project = change["project"]
        except (KeyError, TypeError) as e:
            raise self._parse_error(e, "query_changes", user) from e

        owner = change.get("owner") or {}
        metadata = {
            "owner": owner.get("name") or owner.get("email") or str(owner.get("_account_id", "")),
            "branch": change.get("branch", ""),
            "change_id": change.get("change_id", ""),
        }
        return ActivityItem(
            id=number,
            title=change.get("subject", ""),
            status=change.get("status", ""),
            created=normalize_gerrit_timestamp(change.get("created", "")),
            updated=normalize_gerrit_timestamp(change.get("updated", "")),
            url=f"{self._base_url}/c/{project}/+/{number}",
            platform=self.id,
            category=category,
            project=project,
            metadata={k: v for k, v in metadata.items() if v},
        )

    def _platform_counters(self, activities: DetailedActivities) -> dict[str, int]:
        statuses = [item.status for item in activities.items(ActivityCategory.CHANGES_CREATED)]
        return {
            "open": statuses.count("NEW"),
            "merged": statuses.count("MERGED"),
            "abandoned": statuses.count("ABANDONED"),
        }
