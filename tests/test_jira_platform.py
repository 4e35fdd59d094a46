"""Tests for the Jira adapter."""

from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
import pytest
from fixtures import TEST_EMAIL, TEST_JIRA_URL

from reviewr.exceptions import ApiError, DataParseError
from reviewr.models.activity import ActivityCategory
from reviewr.models.config import JiraConfig
from reviewr.services.error_log import ErrorLog
from reviewr.services.platforms.jira import JiraPlatform, parse_jira_timestamp


def _jira_time(delta: timedelta) -> str:
    return (datetime.now(UTC) - delta).strftime("%Y-%m-%dT%H:%M:%S.000+0000")


def _issue(key: str, **fields: Any) -> dict[str, Any]:
    base: dict[str, Any] = {
        "summary": f"Issue {key}",
        "status": {"name": "In Progress"},
        "project": {"key": key.split("-")[0]},
        "issuetype": {"name": "Bug"},
        "assignee": {"displayName": "Ada Lovelace"},
        "reporter": {"displayName": "Grace Hopper"},
        "priority": {"name": "High"},
        "components": [{"name": "api"}, {"name": "ui"}],
        "created": "2024-01-15T10:30:00.000+0000",
        "updated": "2024-01-16T08:00:00.000+0000",
    }
    base.update(fields)
    return {"key": key, "fields": base}


def _comment(email: str, age: timedelta) -> dict[str, Any]:
    return {"author": {"emailAddress": email}, "created": _jira_time(age)}


def _search_response(issues: list[dict[str, Any]], total: int | None = None) -> httpx.Response:
    return httpx.Response(
        200, json={"issues": issues, "total": len(issues) if total is None else total}
    )


def _platform(error_log: ErrorLog, handler: Any, **config: Any) -> JiraPlatform:
    jira_config = JiraConfig(
        jira_url=TEST_JIRA_URL, username=TEST_EMAIL, api_token="token", **config
    )
    return JiraPlatform(jira_config, error_log, transport=httpx.MockTransport(handler))


class TestQueries:
    """Tests for JQL construction."""

    def test_project_filter_prefixes_every_query(self, error_log: ErrorLog) -> None:
        platform = _platform(error_log, None, project_filter=["CORE", "WEB"])

        queries = platform.category_queries(TEST_EMAIL, 14)

        assert [category for category, _ in queries] == [
            ActivityCategory.ISSUES_CREATED,
            ActivityCategory.ISSUES_RESOLVED,
            ActivityCategory.ISSUES_ASSIGNED,
        ]
        for _, jql in queries:
            assert jql.startswith('project in ("CORE", "WEB") AND ')
        assert f'reporter = "{TEST_EMAIL}" AND created >= -14d' in queries[0][1]

    def test_parse_timestamp(self) -> None:
        parsed = parse_jira_timestamp("2024-01-15T10:30:00.000+0000")
        assert parsed == datetime(2024, 1, 15, 10, 30, tzinfo=UTC)
        assert parse_jira_timestamp("not a date") is None
        assert parse_jira_timestamp(None) is None


class TestFetch:
    """Tests for get_detailed_activities."""

    @pytest.mark.anyio
    async def test_fetches_categories_and_filters_comments(self, error_log: ErrorLog) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/rest/api/3/search"
            jql = request.url.params["jql"]
            if jql.startswith("watcher"):
                assert "comment" in request.url.params["fields"].split(",")
                recent_by_subject = _comment(TEST_EMAIL, timedelta(days=2))
                too_old = _comment(TEST_EMAIL, timedelta(days=90))
                someone_else = _comment("grace@example.com", timedelta(days=1))
                return _search_response(
                    [
                        _issue("CORE-1", comment={"comments": [too_old, recent_by_subject]}),
                        _issue("CORE-2", comment={"comments": [too_old]}),
                        _issue("CORE-3", comment={"comments": [someone_else]}),
                    ]
                )
            if jql.startswith("reporter"):
                return _search_response([_issue("CORE-10", customfield_100={"value": "Team A"})])
            return _search_response([])

        platform = _platform(error_log, handler, custom_fields={"team": "customfield_100"})
        activities = await platform.get_detailed_activities(TEST_EMAIL, 30)

        assert activities.categories() == [
            ActivityCategory.ISSUES_CREATED,
            ActivityCategory.ISSUES_RESOLVED,
            ActivityCategory.ISSUES_ASSIGNED,
            ActivityCategory.ISSUES_COMMENTED,
        ]
        commented = activities.items(ActivityCategory.ISSUES_COMMENTED)
        assert [item.id for item in commented] == ["CORE-1"]

        [created] = activities.items(ActivityCategory.ISSUES_CREATED)
        assert created.url == f"{TEST_JIRA_URL}/browse/CORE-10"
        assert created.project == "CORE"
        assert created.status == "In Progress"
        assert created.metadata["team"] == "Team A"
        assert created.metadata["components"] == "api, ui"
        assert created.metadata["assignee"] == "Ada Lovelace"

    @pytest.mark.anyio
    async def test_paginates_with_start_at(self, error_log: ErrorLog) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if not request.url.params["jql"].startswith("reporter"):
                return _search_response([])
            start = int(request.url.params["startAt"])
            if start == 0:
                return _search_response([_issue("CORE-1"), _issue("CORE-2")], total=3)
            return _search_response([_issue("CORE-3")], total=3)

        activities = await _platform(error_log, handler).get_detailed_activities(TEST_EMAIL, 30)

        ids = [item.id for item in activities.items(ActivityCategory.ISSUES_CREATED)]
        assert ids == ["CORE-1", "CORE-2", "CORE-3"]

    @pytest.mark.anyio
    async def test_server_error(self, error_log: ErrorLog) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="Internal Server Error")

        with pytest.raises(ApiError):
            await _platform(error_log, handler).get_detailed_activities(TEST_EMAIL, 30)

        [record] = error_log.read_all()
        assert record.platform_id == "jira"
        assert record.error_type == "api_error"
        assert record.status_code == 500

    @pytest.mark.anyio
    async def test_missing_issues_key(self, error_log: ErrorLog) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"errorMessages": []})

        with pytest.raises(DataParseError):
            await _platform(error_log, handler).get_detailed_activities(TEST_EMAIL, 30)
        [record] = error_log.read_all()
        assert record.error_type == "json_parse_error"
        assert record.status_code == 200
        assert "errorMessages" in (record.response_body or "")


class TestMetrics:
    """Tests for count-only metrics."""

    @pytest.mark.anyio
    async def test_counts_use_max_results_zero(self, error_log: ErrorLog) -> None:
        totals = {"reporter": 7, "assignee = \"ada@example.com\" AND resolved": 3}

        def handler(request: httpx.Request) -> httpx.Response:
            jql = request.url.params["jql"]
            if jql.startswith("watcher"):
                return _search_response([])
            assert request.url.params["maxResults"] == "0"
            for prefix, total in totals.items():
                if jql.startswith(prefix):
                    return _search_response([], total=total)
            return _search_response([], total=2)

        metrics = await _platform(error_log, handler).get_activity_metrics(TEST_EMAIL, 30)

        assert metrics.items_by_category[ActivityCategory.ISSUES_CREATED] == 7
        assert metrics.items_by_category[ActivityCategory.ISSUES_RESOLVED] == 3
        assert metrics.items_by_category[ActivityCategory.ISSUES_ASSIGNED] == 2
        assert metrics.items_by_category[ActivityCategory.ISSUES_COMMENTED] == 0
        assert metrics.total_items == 12
        assert metrics.platform_specific["tickets_created"] == 7
