"""Terminal browser for fetched activity."""

from reviewr.tui.browser import MultiPlatformBrowser, create_browser, open_url
from reviewr.tui.selector import select_employee
from reviewr.tui.state import Action, BrowserState, ViewMode

__all__ = [
    "Action",
    "BrowserState",
    "MultiPlatformBrowser",
    "ViewMode",
    "create_browser",
    "open_url",
    "select_employee",
]
