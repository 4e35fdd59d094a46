"""Navigation state for the multi-platform browser.

Pure data and transitions, no terminal or network access, so every
navigation rule can be exercised directly in tests. The browser loop feeds
decoded key actions into :meth:`BrowserState.handle` and renders the result.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from reviewr.models.activity import ActivityCategory, ActivityItem, DetailedActivities


class ViewMode(str, Enum):
    """Which level of the hierarchy is on screen."""

    SUMMARY = "summary"
    PLATFORM = "platform"
    CATEGORY = "category"


class Action(str, Enum):
    """Key actions understood by the browser."""

    QUIT = "quit"
    ESCAPE = "escape"
    TOGGLE_HELP = "toggle_help"
    SUMMARY = "summary"
    NEXT_PLATFORM = "next_platform"
    PREV_PLATFORM = "prev_platform"
    CONFIRM = "confirm"
    BACK = "back"
    UP = "up"
    DOWN = "down"
    NONE = "none"


# While help is shown only these actions do anything
_HELP_ACTIONS = frozenset({Action.TOGGLE_HELP, Action.ESCAPE})


def _wrap(index: int, step: int, length: int) -> int:
    return (index + step) % length if length else 0


@dataclass
class BrowserState:
    """Current view plus one selected index per level.

    ``platform_order`` lists every platform shown in the summary, including
    ones with no fetched data; ``activities`` holds only successful fetches
    and is never modified.
    """

    platform_order: list[str]
    activities: Mapping[str, DetailedActivities]
    view: ViewMode = ViewMode.SUMMARY
    platform_index: int = 0
    category_index: int = 0
    item_index: int = 0
    show_help: bool = False
    should_quit: bool = False

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    @property
    def current_platform(self) -> str | None:
        if self.view is ViewMode.SUMMARY or not self.platform_order:
            return None
        return self.platform_order[self.platform_index]

    @property
    def selected_platform(self) -> str | None:
        if not self.platform_order:
            return None
        return self.platform_order[self.platform_index]

    def categories(self, platform_id: str | None) -> list[ActivityCategory]:
        activities = self.activities.get(platform_id) if platform_id else None
        return activities.categories() if activities else []

    @property
    def current_category(self) -> ActivityCategory | None:
        if self.view is not ViewMode.CATEGORY:
            return None
        categories = self.categories(self.current_platform)
        if not categories:
            return None
        return categories[self.category_index]

    def items(self) -> list[ActivityItem]:
        """Items of the category on screen; empty outside the category view."""
        category = self.current_category
        platform_id = self.current_platform
        if category is None or platform_id is None:
            return []
        return self.activities[platform_id].items(category)

    @property
    def selected_item(self) -> ActivityItem | None:
        items = self.items()
        return items[self.item_index] if items else None

    def _list_length(self) -> int:
        if self.view is ViewMode.SUMMARY:
            return len(self.platform_order)
        if self.view is ViewMode.PLATFORM:
            return len(self.categories(self.current_platform))
        return len(self.items())

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def handle(self, action: Action) -> ActivityItem | None:
        """Apply one action.

        Returns:
            The item to open in a web browser when the action confirms an
            item in the category view, otherwise None.
        """
        if self.show_help:
            if action in _HELP_ACTIONS:
                self.show_help = False
            return None

        if action in (Action.QUIT, Action.ESCAPE):
            self.should_quit = True
        elif action is Action.TOGGLE_HELP:
            self.show_help = True
        elif action is Action.SUMMARY:
            self.view = ViewMode.SUMMARY
        elif action is Action.NEXT_PLATFORM:
            self.cycle_platform(1)
        elif action is Action.PREV_PLATFORM:
            self.cycle_platform(-1)
        elif action is Action.CONFIRM:
            return self.confirm()
        elif action is Action.BACK:
            self.back()
        elif action is Action.DOWN:
            self.move(1)
        elif action is Action.UP:
            self.move(-1)
        return None

    def move(self, step: int) -> None:
        """Move the selection on the current list, wrapping at either end."""
        length = self._list_length()
        if not length:
            return
        if self.view is ViewMode.SUMMARY:
            self.platform_index = _wrap(self.platform_index, step, length)
        elif self.view is ViewMode.PLATFORM:
            self.category_index = _wrap(self.category_index, step, length)
        else:
            self.item_index = _wrap(self.item_index, step, length)

    def cycle_platform(self, step: int) -> None:
        """Select the next or previous platform.

        Outside the summary the platform view of the newly selected platform
        is shown.
        """
        if not self.platform_order:
            return
        self.platform_index = _wrap(self.platform_index, step, len(self.platform_order))
        if self.view is not ViewMode.SUMMARY:
            self.view = ViewMode.PLATFORM
            self.category_index = 0
            self.item_index = 0

    def confirm(self) -> ActivityItem | None:
        if self.view is ViewMode.SUMMARY:
            if self.platform_order:
                self.view = ViewMode.PLATFORM
                self.category_index = 0
            return None
        if self.view is ViewMode.PLATFORM:
            if self.categories(self.current_platform):
                self.view = ViewMode.CATEGORY
                self.item_index = 0
            return None
        return self.selected_item

    def back(self) -> None:
        """Return to the parent view, keeping its previous selection."""
        if self.view is ViewMode.CATEGORY:
            self.view = ViewMode.PLATFORM
        elif self.view is ViewMode.PLATFORM:
            self.view = ViewMode.SUMMARY
