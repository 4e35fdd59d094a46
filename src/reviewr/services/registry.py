"""Platform registry: owns every adapter and fans out concurrent fetches.

Typical Usage:
    >>> registry = build_registry(config, error_log)
    >>> results = await registry.fetch_all("ada@example.com", 30)
    >>> results.keys()  # only platforms whose fetch succeeded
"""

import asyncio
import logging
from collections.abc import Iterable

import httpx

from reviewr.exceptions import PlatformError
from reviewr.models.activity import DetailedActivities
from reviewr.models.config import ReviewrConfig
from reviewr.models.connection import ConnectionStatus
from reviewr.models.enums import ErrorType
from reviewr.models.errors import ErrorContext
from reviewr.services.error_log import ErrorLog
from reviewr.services.fetch_progress import (
    FetchAllCompleted,
    FetchCompleted,
    FetchProgress,
    FetchStarted,
)
from reviewr.services.platforms.base import ReviewPlatform
from reviewr.services.platforms.gerrit import GerritPlatform
from reviewr.services.platforms.gitlab import GitLabPlatform
from reviewr.services.platforms.jira import JiraPlatform

logger = logging.getLogger(__name__)

ProgressQueue = asyncio.Queue[FetchProgress]


class PlatformRegistry:
    """Sole owner of the platform adapters, keyed by stable id.

    Adapter failures never escape ``fetch_all``: a failing platform is
    logged once and left out of the result mapping.
    """

    def __init__(self, error_log: ErrorLog):
        self._error_log = error_log
        self._platforms: dict[str, ReviewPlatform] = {}

    def register(self, platform: ReviewPlatform) -> None:
        """Insert or replace an adapter by its id."""
        if platform.id in self._platforms:
            logger.debug(f"Replacing platform {platform.id}")
        self._platforms[platform.id] = platform

    def get(self, platform_id: str) -> ReviewPlatform | None:
        return self._platforms.get(platform_id)

    def all_platforms(self) -> list[ReviewPlatform]:
        return list(self._platforms.values())

    def configured_adapters(self) -> list[ReviewPlatform]:
        """Adapters whose local configuration is complete.

        Callers must not rely on the order; use :meth:`display_order` for
        presentation.
        """
        return [platform for platform in self._platforms.values() if platform.is_configured()]

    def __len__(self) -> int:
        return len(self._platforms)

    def __contains__(self, platform_id: object) -> bool:
        return platform_id in self._platforms

    def display_order(self, preferred_order: Iterable[str] = ()) -> list[str]:
        """Configured platform ids, preferred entries first.

        A preferred entry matches an id exactly or as a type prefix, so
        ``gitlab`` picks up every ``gitlab:<instance>``. Remaining ids follow
        in registration order.
        """
        remaining = [platform.id for platform in self.configured_adapters()]
        ordered: list[str] = []
        for preferred in preferred_order:
            for platform_id in list(remaining):
                if platform_id == preferred or platform_id.startswith(f"{preferred}:"):
                    ordered.append(platform_id)
                    remaining.remove(platform_id)
        return ordered + remaining

    # -------------------------------------------------------------------------
    # Fan-out
    # -------------------------------------------------------------------------

    async def fetch_all(
        self,
        user: str,
        days: int,
        progress: ProgressQueue | None = None,
    ) -> dict[str, DetailedActivities]:
        """Fetch detailed activities from every configured platform at once.

        Args:
            user: Subject email address.
            days: Trailing window in days.
            progress: Optional queue that receives ``FetchStarted`` /
                ``FetchCompleted`` per platform and a final ``FetchAllCompleted``.

        Returns:
            Mapping of platform id to activities for the platforms that
            succeeded. Failed platforms have no entry.
        """
        platforms = self.configured_adapters()
        logger.info(f"Fetching activity for {user} from {len(platforms)} platform(s)")

        outcomes = await asyncio.gather(
            *(self._fetch_one(platform, user, days, progress) for platform in platforms)
        )
        results = {
            platform.id: activities
            for platform, activities in zip(platforms, outcomes, strict=True)
            if activities is not None
        }

        logger.info(f"Fetched data from {len(results)} of {len(platforms)} platform(s)")
        await self._emit(
            progress, FetchAllCompleted(attempted=len(platforms), succeeded=len(results))
        )
        return results

    async def _fetch_one(
        self,
        platform: ReviewPlatform,
        user: str,
        days: int,
        progress: ProgressQueue | None,
    ) -> DetailedActivities | None:
        await self._emit(progress, FetchStarted(platform.id, platform.name))
        try:
            activities = await platform.get_detailed_activities(user, days)
        except PlatformError as e:
            if not e.logged:
                self._record(platform, user, e.error_type, e.message)
            logger.warning(f"Fetch from {platform.id} failed: {e.message}")
            await self._emit(
                progress, FetchCompleted(platform.id, platform.name, False, error_message=e.message)
            )
            return None
        except Exception as e:
            self._record(platform, user, ErrorType.UNEXPECTED_ERROR.value, str(e))
            logger.exception(f"Unexpected failure fetching from {platform.id}")
            await self._emit(
                progress, FetchCompleted(platform.id, platform.name, False, error_message=str(e))
            )
            return None

        await self._emit(
            progress,
            FetchCompleted(platform.id, platform.name, True, items_count=activities.total_items),
        )
        return activities

    def _record(self, platform: ReviewPlatform, user: str, error_type: str, message: str) -> None:
        context = ErrorContext(platform_id=platform.id, operation="fetch_all").with_user(user)
        self._error_log.append(context.with_error(error_type, message))

    @staticmethod
    async def _emit(progress: ProgressQueue | None, event: FetchProgress) -> None:
        if progress is not None:
            await progress.put(event)

    async def test_all_connections(self) -> dict[str, ConnectionStatus]:
        """Probe every registered platform concurrently (diagnostics only)."""
        platforms = self.all_platforms()
        statuses = await asyncio.gather(*(self._test_one(platform) for platform in platforms))
        return {platform.id: status for platform, status in zip(platforms, statuses, strict=True)}

    @staticmethod
    async def _test_one(platform: ReviewPlatform) -> ConnectionStatus:
        try:
            return await platform.test_connection()
        except Exception as e:
            logger.warning(f"Connection test for {platform.id} failed: {e}")
            return ConnectionStatus.error(str(e))


def build_registry(
    config: ReviewrConfig,
    error_log: ErrorLog,
    transport: httpx.AsyncBaseTransport | None = None,
) -> PlatformRegistry:
    """Create adapters for every platform section present in the config."""
    registry = PlatformRegistry(error_log)
    max_results = config.global_settings.max_results_per_category
    platforms = config.platforms

    if platforms.gerrit is not None:
        registry.register(GerritPlatform(platforms.gerrit, error_log, max_results, transport))
    if platforms.jira is not None:
        registry.register(JiraPlatform(platforms.jira, error_log, max_results, transport))
    for instance, gitlab_config in platforms.gitlab.items():
        registry.register(
            GitLabPlatform(instance, gitlab_config, error_log, max_results, transport)
        )

    registered = ", ".join(platform.id for platform in registry.all_platforms())
    logger.debug(f"Registered platforms: {registered or 'none'}")
    return registry
