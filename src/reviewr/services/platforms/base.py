"""Base platform adapter interface.

Every review or tracking service is wrapped in a ``ReviewPlatform`` that
speaks the normalized activity schema. The base class owns the parts that
are the same everywhere: building the HTTP client, turning transport and
HTTP failures into ``PlatformError`` subclasses, writing exactly one
error-log record per failure, the connection probe, and item search.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from reviewr.config.settings import http_settings
from reviewr.constants import (
    DEFAULT_MAX_RESULTS_PER_CATEGORY,
    DEFAULT_TIME_PERIOD_DAYS,
    RESPONSE_BODY_SNIPPET_CHARS,
)
from reviewr.exceptions import (
    ApiError,
    AuthenticationError,
    DataParseError,
    NetworkError,
    PlatformError,
)
from reviewr.models.activity import ActivityItem, ActivityMetrics, DetailedActivities
from reviewr.models.connection import ConnectionStatus
from reviewr.models.enums import ErrorType
from reviewr.models.errors import ErrorContext
from reviewr.services.error_log import ErrorLog

logger = logging.getLogger(__name__)


class ReviewPlatform(ABC):
    """Abstract base class for platform adapters.

    Subclasses provide identity, configuration checks, the probe path and
    ``_fetch_detailed``; the public operations are implemented here in
    terms of those.
    """

    def __init__(
        self,
        error_log: ErrorLog,
        max_results_per_category: int = DEFAULT_MAX_RESULTS_PER_CATEGORY,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize adapter.

        Args:
            error_log: Where failures are recorded.
            max_results_per_category: Cap on items fetched per category.
            transport: Optional httpx transport (tests pass a MockTransport).
        """
        self._error_log = error_log
        self._max_results = max_results_per_category
        self._transport = transport
        self._last_fetch: dict[str, DetailedActivities] = {}

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name."""
        ...

    @property
    @abstractmethod
    def icon(self) -> str:
        """Glyph shown next to the name."""
        ...

    @property
    @abstractmethod
    def id(self) -> str:
        """Stable id, unique across the registry."""
        ...

    @abstractmethod
    def is_configured(self) -> bool:
        """Whether local configuration is complete. Never touches the network."""
        ...

    @abstractmethod
    def get_item_url(self, item: ActivityItem) -> str:
        """Rebuild the web URL for an item from its fields."""
        ...

    # -------------------------------------------------------------------------
    # Subclass hooks
    # -------------------------------------------------------------------------

    @property
    @abstractmethod
    def base_url(self) -> str:
        """Service root with no trailing slash."""
        ...

    @property
    @abstractmethod
    def probe_path(self) -> str:
        """Path of the lightweight endpoint hit by ``test_connection``."""
        ...

    @abstractmethod
    def _auth(self) -> httpx.Auth | None:
        ...

    def _headers(self) -> dict[str, str]:
        return {"Accept": "application/json", "User-Agent": http_settings.user_agent}

    @abstractmethod
    async def _fetch_detailed(
        self, client: httpx.AsyncClient, user: str, days: int
    ) -> DetailedActivities:
        """Fetch every category for the subject.

        Raises:
            PlatformError: With the logged context attached.
        """
        ...

    def _platform_counters(self, activities: DetailedActivities) -> dict[str, int]:
        """Service-specific counters added to metrics."""
        return {}

    def _parse_body(self, text: str) -> Any:
        return json.loads(text)

    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------

    async def get_detailed_activities(self, user: str, days: int) -> DetailedActivities:
        """Full item lists per category over the trailing ``days`` window.

        Raises:
            PlatformError: If any category cannot be fetched. The failure has
                already been written to the error log.
        """
        operation = "get_detailed_activities"
        self._require_configured(operation, user)

        logger.debug(f"Fetching detailed activities from {self.id} for {user} ({days}d)")
        async with self._client() as client:
            activities = await self._fetch_detailed(client, user, days)

        self._last_fetch[user] = activities
        logger.info(f"Fetched {activities.total_items} items from {self.id} for {user}")
        return activities

    async def get_activity_metrics(self, user: str, days: int) -> ActivityMetrics:
        """Summary counts over the trailing window.

        Derived from the detailed lists by default; adapters with a cheap
        count endpoint override this.
        """
        activities = await self.get_detailed_activities(user, days)
        return activities.to_metrics(self._platform_counters(activities))

    async def search_items(self, query: str, user: str) -> list[ActivityItem]:
        """Case-insensitive match on id, title and project.

        Reuses the last fetch for this subject when there is one, otherwise
        fetches with the default window. An item listed under several
        categories is returned once.
        """
        activities = self._last_fetch.get(user)
        if activities is None:
            activities = await self.get_detailed_activities(user, DEFAULT_TIME_PERIOD_DAYS)

        results: list[ActivityItem] = []
        seen: set[str] = set()
        for item in activities.all_items():
            if item.id in seen or not item.matches(query):
                continue
            seen.add(item.id)
            results.append(item)
        return results

    async def test_connection(self) -> ConnectionStatus:
        """Hit the probe endpoint once and classify the outcome.

        Timeouts are a warning; connection failures, rejected credentials and
        other non-success statuses are errors.
        """
        if not self.is_configured():
            return ConnectionStatus.not_configured()

        url = f"{self.base_url}{self.probe_path}"
        try:
            async with self._client() as client:
                response = await client.get(url)
        except httpx.TimeoutException:
            return ConnectionStatus.warning("Connection timed out")
        except httpx.RequestError as e:
            return ConnectionStatus.error(f"Connection failed: {e}")

        if response.is_success:
            return ConnectionStatus.connected()
        if response.status_code in (401, 403):
            return ConnectionStatus.error("Authentication failed")
        return ConnectionStatus.error(f"HTTP {response.status_code}")

    # -------------------------------------------------------------------------
    # Helpers for subclasses
    # -------------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            auth=self._auth(),
            headers=self._headers(),
            timeout=http_settings.timeout_seconds,
            transport=self._transport,
            follow_redirects=True,
        )

    def _require_configured(self, operation: str, user: str) -> None:
        if not self.is_configured():
            raise self._fail(
                PlatformError,
                f"{self.name} is not configured",
                operation,
                user,
                error_type=ErrorType.CONFIGURATION_ERROR.value,
            )
        if not user:
            raise self._fail(
                PlatformError,
                "No user given",
                operation,
                user,
                error_type=ErrorType.CONFIGURATION_ERROR.value,
            )

    def _fail(
        self,
        exc_class: type[PlatformError],
        message: str,
        operation: str,
        user: str | None,
        *,
        error_type: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
        response_body: str | None = None,
        metadata: dict[str, str] | None = None,
    ) -> PlatformError:
        """Record a failure in the error log and build the exception to raise."""
        tag = error_type or exc_class.default_error_type.value
        context = ErrorContext(platform_id=self.id, operation=operation).with_user(user)
        context = context.with_error(tag, message)
        if url is not None:
            snippet = response_body[:RESPONSE_BODY_SNIPPET_CHARS] if response_body else None
            context = context.with_request_details(url, status_code, snippet)
        for key, value in (metadata or {}).items():
            context = context.with_metadata(key, value)

        self._error_log.append(context)
        return exc_class(message, platform_id=self.id, error_type=tag, context=context)

    async def _get_response(
        self,
        client: httpx.AsyncClient,
        url: str,
        operation: str,
        user: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """GET a URL, raising a logged ``PlatformError`` on any failure."""
        try:
            response = await client.get(url, params=params)
        except httpx.TimeoutException as e:
            raise self._fail(
                NetworkError,
                f"Request timed out: {e}",
                operation,
                user,
                error_type=ErrorType.TIMEOUT.value,
                url=url,
            ) from e
        except httpx.RequestError as e:
            raise self._fail(
                NetworkError, f"Failed to connect: {e}", operation, user, url=url
            ) from e

        if response.status_code in (401, 403):
            raise self._fail(
                AuthenticationError,
                f"Authentication failed with status {response.status_code}",
                operation,
                user,
                url=str(response.request.url),
                status_code=response.status_code,
                response_body=response.text,
            )
        if not response.is_success:
            raise self._fail(
                ApiError,
                f"API returned status {response.status_code}",
                operation,
                user,
                url=str(response.request.url),
                status_code=response.status_code,
                response_body=response.text,
            )
        return response

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        url: str,
        operation: str,
        user: str,
        params: dict[str, Any] | None = None,
    ) -> tuple[Any, httpx.Response]:
        """GET a URL and decode its JSON body.

        Returns:
            The decoded payload and the response it came from, so callers can
            report shape errors with the status and body.
        """
        response = await self._get_response(client, url, operation, user, params)
        try:
            return self._parse_body(response.text), response
        except ValueError as e:
            raise self._fail(
                DataParseError,
                f"Invalid JSON in response: {e}",
                operation,
                user,
                url=str(response.request.url),
                status_code=response.status_code,
                response_body=response.text,
            ) from e

    def _parse_error(
        self,
        error: Exception,
        operation: str,
        user: str,
        response: httpx.Response | None = None,
    ) -> PlatformError:
        """Log a payload that decoded but did not have the expected shape.

        When the response is given its URL, status and a body snippet are
        recorded with the failure.
        """
        message = f"Unexpected response format: {error!r}"
        if response is None:
            return self._fail(DataParseError, message, operation, user)
        return self._fail(
            DataParseError,
            message,
            operation,
            user,
            url=str(response.request.url),
            status_code=response.status_code,
            response_body=response.text,
        )
