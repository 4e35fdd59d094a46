"""Tests for the platform registry and concurrent fetching."""

import asyncio
import json
from pathlib import Path

import httpx
import pytest
from fixtures import (
    CONFIG_ALL_PLATFORMS,
    CONFIG_GERRIT_AND_JIRA,
    TEST_EMAIL,
    make_item,
    write_config,
)

from reviewr.exceptions import AuthenticationError, PlatformError
from reviewr.models.activity import ActivityCategory, ActivityItem, DetailedActivities
from reviewr.models.config import ReviewrConfig
from reviewr.models.enums import ConnectionState
from reviewr.services.error_log import ErrorLog
from reviewr.services.fetch_progress import FetchAllCompleted, FetchCompleted, FetchStarted
from reviewr.services.platforms.base import ReviewPlatform
from reviewr.services.registry import PlatformRegistry, build_registry


class FakePlatform(ReviewPlatform):
    """Adapter whose fetch returns canned activities or fails on demand."""

    def __init__(
        self,
        platform_id: str,
        error_log: ErrorLog,
        outcome: DetailedActivities | Exception | None = None,
        configured: bool = True,
        logged_failure: bool = False,
    ):
        super().__init__(error_log)
        self._id = platform_id
        self._outcome = outcome if outcome is not None else DetailedActivities()
        self._configured = configured
        self._logged_failure = logged_failure
        self.blocker: asyncio.Event | None = None
        self.arrived: asyncio.Event | None = None
        self.partner: asyncio.Event | None = None

    @property
    def name(self) -> str:
        return self._id.title()

    @property
    def icon(self) -> str:
        return "*"

    @property
    def id(self) -> str:
        return self._id

    @property
    def base_url(self) -> str:
        return f"https://{self._id}.example.com"

    @property
    def probe_path(self) -> str:
        return "/"

    def is_configured(self) -> bool:
        return self._configured

    def get_item_url(self, item: ActivityItem) -> str:
        return item.url

    def _auth(self) -> httpx.Auth | None:
        return None

    async def _fetch_detailed(
        self, client: httpx.AsyncClient, user: str, days: int
    ) -> DetailedActivities:
        if self.arrived is not None:
            self.arrived.set()
        if self.partner is not None:
            await self.partner.wait()
        if self.blocker is not None:
            await self.blocker.wait()
        if isinstance(self._outcome, Exception):
            if self._logged_failure:
                raise self._fail(AuthenticationError, str(self._outcome), "fetch", user)
            raise self._outcome
        return self._outcome


def _activities(platform_id: str, count: int) -> DetailedActivities:
    activities = DetailedActivities()
    activities.add(
        ActivityCategory.CHANGES_CREATED,
        [make_item(str(n), platform=platform_id) for n in range(count)],
    )
    return activities


class TestRegistration:
    """Tests for registration and ordering."""

    def test_register_replaces_by_id(self, error_log: ErrorLog) -> None:
        registry = PlatformRegistry(error_log)
        first = FakePlatform("gerrit", error_log)
        second = FakePlatform("gerrit", error_log)

        registry.register(first)
        registry.register(second)

        assert len(registry) == 1
        assert registry.get("gerrit") is second
        assert "gerrit" in registry
        assert registry.get("jira") is None

    def test_configured_adapters_skip_incomplete(self, error_log: ErrorLog) -> None:
        registry = PlatformRegistry(error_log)
        registry.register(FakePlatform("gerrit", error_log))
        registry.register(FakePlatform("jira", error_log, configured=False))

        assert [p.id for p in registry.configured_adapters()] == ["gerrit"]
        assert [p.id for p in registry.all_platforms()] == ["gerrit", "jira"]

    def test_display_order_prefers_configured_order(self, error_log: ErrorLog) -> None:
        registry = PlatformRegistry(error_log)
        for platform_id in ("gitlab:work", "gerrit", "jira", "gitlab:oss"):
            registry.register(FakePlatform(platform_id, error_log))
        registry.register(FakePlatform("off", error_log, configured=False))

        order = registry.display_order(["jira", "gitlab"])

        assert order == ["jira", "gitlab:work", "gitlab:oss", "gerrit"]

    def test_display_order_without_preferences(self, error_log: ErrorLog) -> None:
        registry = PlatformRegistry(error_log)
        registry.register(FakePlatform("b", error_log))
        registry.register(FakePlatform("a", error_log))

        assert registry.display_order() == ["b", "a"]


class TestFetchAll:
    """Tests for fetch_all."""

    @pytest.mark.anyio
    async def test_failures_are_isolated_and_logged_once(self, error_log: ErrorLog) -> None:
        registry = PlatformRegistry(error_log)
        registry.register(FakePlatform("ok1", error_log, _activities("ok1", 2)))
        registry.register(
            FakePlatform("logged", error_log, RuntimeError("bad creds"), logged_failure=True)
        )
        registry.register(FakePlatform("ok2", error_log, _activities("ok2", 1)))
        registry.register(FakePlatform("raw", error_log, PlatformError("no", platform_id="raw")))
        registry.register(FakePlatform("crash", error_log, KeyError("surprise")))
        registry.register(FakePlatform("off", error_log, configured=False))

        results = await registry.fetch_all(TEST_EMAIL, 30)

        assert set(results) == {"ok1", "ok2"}
        assert results["ok1"].total_items == 2
        records = error_log.read_all()
        assert sorted(r.platform_id for r in records) == ["crash", "logged", "raw"]
        by_platform = {r.platform_id: r for r in records}
        assert by_platform["logged"].error_type == "authentication_error"
        assert by_platform["crash"].error_type == "unexpected_error"
        assert by_platform["raw"].operation == "fetch_all"
        assert by_platform["raw"].user == TEST_EMAIL

    @pytest.mark.anyio
    async def test_no_configured_platforms(self, error_log: ErrorLog) -> None:
        registry = PlatformRegistry(error_log)
        registry.register(FakePlatform("off", error_log, configured=False))

        assert registry.configured_adapters() == []
        assert await registry.fetch_all(TEST_EMAIL, 30) == {}
        assert error_log.read_all() == []

    @pytest.mark.anyio
    async def test_progress_events(self, error_log: ErrorLog) -> None:
        registry = PlatformRegistry(error_log)
        registry.register(FakePlatform("gerrit", error_log, _activities("gerrit", 3)))
        registry.register(FakePlatform("jira", error_log, KeyError("boom")))
        queue: asyncio.Queue = asyncio.Queue()

        await registry.fetch_all(TEST_EMAIL, 30, queue)

        events = [queue.get_nowait() for _ in range(queue.qsize())]
        assert sum(isinstance(e, FetchStarted) for e in events) == 2
        completed = {e.platform_id: e for e in events if isinstance(e, FetchCompleted)}
        assert completed["gerrit"].success and completed["gerrit"].items_count == 3
        assert not completed["jira"].success
        assert completed["jira"].error_message == "'boom'"
        assert events[-1] == FetchAllCompleted(attempted=2, succeeded=1)

    @pytest.mark.anyio
    async def test_cancellation_logs_nothing(self, error_log: ErrorLog) -> None:
        registry = PlatformRegistry(error_log)
        slow = FakePlatform("slow", error_log, _activities("slow", 1))
        slow.blocker = asyncio.Event()
        registry.register(slow)

        task = asyncio.create_task(registry.fetch_all(TEST_EMAIL, 30))
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert error_log.read_all() == []

    @pytest.mark.anyio
    async def test_adapters_run_concurrently(self, error_log: ErrorLog) -> None:
        first = FakePlatform("first", error_log, _activities("first", 1))
        second = FakePlatform("second", error_log, _activities("second", 1))
        first.arrived, second.arrived = asyncio.Event(), asyncio.Event()
        first.partner, second.partner = second.arrived, first.arrived
        registry = PlatformRegistry(error_log)
        registry.register(first)
        registry.register(second)

        # Each adapter waits for the other to start, so a serial fetch never finishes
        results = await asyncio.wait_for(registry.fetch_all(TEST_EMAIL, 30), timeout=5)

        assert set(results) == {"first", "second"}


class TestBuildRegistry:
    """Tests for building adapters from config.toml."""

    @pytest.mark.anyio
    async def test_two_of_three_platforms_succeed(self, data_dir: Path) -> None:
        error_log = ErrorLog(data_dir / "error.log")
        config = ReviewrConfig.load(write_config(data_dir, CONFIG_ALL_PLATFORMS))

        def handler(request: httpx.Request) -> httpx.Response:
            host = request.url.host
            if host == "example.atlassian.net":
                return httpx.Response(401, text="Unauthorized")
            if host == "review.example.com":
                return httpx.Response(200, text=")]}'\n[]")
            return httpx.Response(200, json=[])

        registry = build_registry(config, error_log, httpx.MockTransport(handler))
        results = await registry.fetch_all(TEST_EMAIL, 30)

        assert set(results) == {"gerrit", "gitlab:work"}
        assert registry.display_order(config.ui_preferences.preferred_platform_order) == [
            "gerrit",
            "jira",
            "gitlab:work",
        ]
        [record] = error_log.read_all()
        assert record.platform_id == "jira"
        assert record.error_type == "authentication_error"
        assert json.loads(record.model_dump_json())["status_code"] == 401

    @pytest.mark.anyio
    async def test_one_network_failure_among_two_platforms(self, data_dir: Path) -> None:
        error_log = ErrorLog(data_dir / "error.log")
        config = ReviewrConfig.load(write_config(data_dir, CONFIG_GERRIT_AND_JIRA))

        def changes(count: int, status: str) -> list[dict[str, object]]:
            return [
                {"_number": n, "project": "core/server", "subject": f"Change {n}", "status": status}
                for n in range(count)
            ]

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "example.atlassian.net":
                raise httpx.ConnectError("connection refused", request=request)
            query = request.url.params["q"]
            if "status:merged" in query:
                body = changes(2, "MERGED")
            elif query.startswith("owner:") and "is:reviewed" not in query:
                body = changes(3, "NEW")
            else:
                body = []
            return httpx.Response(200, text=")]}'\n" + json.dumps(body))

        registry = build_registry(config, error_log, httpx.MockTransport(handler))
        results = await registry.fetch_all(TEST_EMAIL, 30)

        assert list(results) == ["gerrit"]
        gerrit = results["gerrit"]
        assert len(gerrit.items(ActivityCategory.CHANGES_CREATED)) == 3
        assert len(gerrit.items(ActivityCategory.CHANGES_MERGED)) == 2
        [record] = error_log.read_all()
        assert record.platform_id == "jira"
        assert record.error_type == "network_error"

    @pytest.mark.anyio
    async def test_all_connections(self, data_dir: Path) -> None:
        error_log = ErrorLog(data_dir / "error.log")
        config = ReviewrConfig.load(write_config(data_dir, CONFIG_ALL_PLATFORMS))

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "gitlab.example.com":
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json={})

        registry = build_registry(config, error_log, httpx.MockTransport(handler))
        statuses = await registry.test_all_connections()

        assert statuses["gerrit"].state is ConnectionState.CONNECTED
        assert statuses["jira"].state is ConnectionState.CONNECTED
        assert statuses["gitlab:work"].state is ConnectionState.ERROR
        assert error_log.read_all() == []
