"""Interactive multi-platform browser.

Single-threaded loop: render, wait for one key, apply it, repeat. The only
side effect besides drawing is opening an item's URL in the web browser,
and a failure there is logged and ignored.
"""

import logging
import webbrowser
from collections.abc import Callable, Mapping

from rich.console import Console
from rich.live import Live

from reviewr.models.activity import ActivityItem, DetailedActivities
from reviewr.models.config import UiPreferences
from reviewr.services.registry import PlatformRegistry
from reviewr.tui.keys import read_action
from reviewr.tui.render import BrowserContext, render_browser
from reviewr.tui.state import Action, BrowserState
from reviewr.utils.platform import cbreak_terminal

logger = logging.getLogger(__name__)


def open_url(url: str) -> bool:
    """Open a URL in the system web browser, best effort.

    Returns:
        True if a browser accepted the URL.
    """
    try:
        opened = webbrowser.open(url)
    except (OSError, webbrowser.Error) as e:
        logger.warning(f"Failed to open browser for {url}: {e}")
        return False
    if not opened:
        logger.warning(f"No web browser available to open {url}")
    return opened


class MultiPlatformBrowser:
    """Drives ``BrowserState`` from the keyboard and draws it with rich."""

    def __init__(
        self,
        state: BrowserState,
        context: BrowserContext,
        console: Console | None = None,
        url_for: Callable[[ActivityItem], str] | None = None,
        url_opener: Callable[[str], bool] = open_url,
        key_source: Callable[[], Action] = read_action,
    ):
        self.state = state
        self.context = context
        self.console = console or Console()
        self._url_for = url_for
        self._url_opener = url_opener
        self._key_source = key_source

    def step(self, action: Action) -> None:
        """Apply one action, opening the confirmed item if there is one."""
        item = self.state.handle(action)
        if item is not None:
            self._open_item(item)

    def _open_item(self, item: ActivityItem) -> None:
        url = item.url
        if not url and self._url_for is not None:
            url = self._url_for(item)
        if not url:
            logger.warning(f"Item {item.id} on {item.platform} has no URL")
            return
        logger.info(f"Opening {url}")
        try:
            self._url_opener(url)
        except Exception as e:
            logger.warning(f"URL opener failed for {url}: {e}")

    def run(self) -> None:
        """Run until the user quits."""
        with cbreak_terminal():
            with Live(
                render_browser(self.state, self.context),
                console=self.console,
                screen=True,
                auto_refresh=False,
            ) as live:
                while not self.state.should_quit:
                    self.step(self._key_source())
                    live.update(render_browser(self.state, self.context), refresh=True)


def create_browser(
    employee_name: str,
    employee_email: str,
    registry: PlatformRegistry,
    results: Mapping[str, DetailedActivities],
    preferences: UiPreferences,
    console: Console | None = None,
) -> MultiPlatformBrowser:
    """Wire fetched results, platform identities and UI preferences together.

    Every configured platform is listed, including ones whose fetch failed.
    """
    order = registry.display_order(preferences.preferred_platform_order)
    platforms = [registry.get(platform_id) for platform_id in order]
    context = BrowserContext(
        employee_name=employee_name,
        employee_email=employee_email,
        platform_names={p.id: p.name for p in platforms if p is not None},
        platform_icons={p.id: p.icon for p in platforms if p is not None},
        show_icons=preferences.show_platform_icons,
        theme=preferences.theme,
    )

    def url_for(item: ActivityItem) -> str:
        platform = registry.get(item.platform)
        return platform.get_item_url(item) if platform else ""

    return MultiPlatformBrowser(
        BrowserState(platform_order=order, activities=dict(results)),
        context,
        console=console,
        url_for=url_for,
    )
