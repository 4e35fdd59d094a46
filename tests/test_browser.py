"""Tests for browser rendering and the key loop."""

import io
from contextlib import nullcontext

import pytest
from fixtures import make_item
from rich.console import Console

from reviewr.models.activity import ActivityCategory, ActivityItem, DetailedActivities
from reviewr.models.enums import UiTheme
from reviewr.tui.browser import MultiPlatformBrowser
from reviewr.tui.render import (
    BrowserContext,
    header_line,
    item_line,
    platform_summary_line,
    render_body,
    render_browser,
    summary_table,
    truncate,
)
from reviewr.tui.state import Action, BrowserState


@pytest.fixture
def state(sample_activities: DetailedActivities) -> BrowserState:
    return BrowserState(
        platform_order=["gerrit", "jira"],
        activities={"gerrit": sample_activities},
    )


@pytest.fixture
def context() -> BrowserContext:
    return BrowserContext(
        employee_name="Ada Lovelace",
        employee_email="ada@example.com",
        platform_names={"gerrit": "Gerrit", "jira": "JIRA"},
        platform_icons={"gerrit": "🔍", "jira": "🎫"},
    )


def _render_text(renderable: object, width: int = 120) -> str:
    console = Console(record=True, width=width, file=io.StringIO(), color_system=None)
    console.print(renderable)
    return console.export_text()


class TestText:
    """Tests for the text helpers."""

    def test_truncate(self) -> None:
        assert truncate("short", 10) == "short"
        assert truncate("x" * 61, 60) == "x" * 57 + "..."
        assert len(truncate("y" * 200, 20)) == 20

    def test_item_line_truncates_title_and_project(self) -> None:
        item = make_item("42", "t" * 80, project="p" * 30)
        assert item_line(item) == f"[42] {'t' * 57}... - {'p' * 17}..."

    def test_summary_lines(self, state: BrowserState, context: BrowserContext) -> None:
        assert platform_summary_line(state, context, "gerrit") == (
            "🔍 Gerrit - 3 items across 2 categories"
        )
        assert platform_summary_line(state, context, "jira") == "🎫 JIRA - No data available"

    def test_icons_can_be_hidden(self, state: BrowserState, context: BrowserContext) -> None:
        context.show_icons = False
        assert platform_summary_line(state, context, "jira") == "JIRA - No data available"

    def test_header_names_subject_and_view(
        self, state: BrowserState, context: BrowserContext
    ) -> None:
        assert header_line(state, context) == (
            "📋 Ada Lovelace (ada@example.com) - 📊 Multi-Platform Activity Summary"
        )
        state.handle(Action.CONFIRM)
        assert header_line(state, context).endswith("🏢 Gerrit Activity")
        state.handle(Action.CONFIRM)
        assert header_line(state, context).endswith("📋 Gerrit - Changes Created")


class TestRender:
    """Tests for the rich renderables."""

    def test_summary_view(self, state: BrowserState, context: BrowserContext) -> None:
        text = _render_text(render_body(state, context))

        assert "Available Platforms" in text
        assert "▶ 🔍 Gerrit - 3 items across 2 categories" in text
        assert "JIRA - No data available" in text

    def test_platform_view_lists_counts(
        self, state: BrowserState, context: BrowserContext
    ) -> None:
        state.handle(Action.CONFIRM)
        text = _render_text(render_body(state, context))

        assert "Categories in Gerrit" in text
        assert "Changes Created (2)" in text
        assert "Reviews Received (1)" in text

    def test_category_view_shows_details(
        self, state: BrowserState, context: BrowserContext
    ) -> None:
        for action in (Action.CONFIRM, Action.CONFIRM, Action.DOWN):
            state.handle(action)
        text = _render_text(render_body(state, context))

        assert "Changes Created Items" in text
        assert "▶ [102] Remove dead code - tools/lint" in text
        assert "Status: MERGED" in text

    def test_help_overlay(self, state: BrowserState, context: BrowserContext) -> None:
        state.handle(Action.TOGGLE_HELP)
        assert "Multi-Platform Review Browser" in _render_text(render_body(state, context))

    def test_bracketed_platform_names_render_literally(
        self, state: BrowserState, context: BrowserContext
    ) -> None:
        context.platform_names["gerrit"] = "GitLab [old] a[/]"

        assert "GitLab [old] a[/]" in _render_text(summary_table(state, context))
        state.handle(Action.CONFIRM)
        assert "Categories in GitLab [old] a[/]" in _render_text(render_body(state, context))

    @pytest.mark.parametrize("theme", list(UiTheme))
    def test_full_screen_renders_for_every_theme(
        self, state: BrowserState, context: BrowserContext, theme: UiTheme
    ) -> None:
        context.theme = theme
        console = Console(record=True, width=120, height=30, file=io.StringIO())
        console.print(render_browser(state, context))
        text = console.export_text()

        assert "Employee Review Dashboard" in text
        assert "Tab/Shift+Tab" in text

    def test_summary_table(self, state: BrowserState, context: BrowserContext) -> None:
        text = _render_text(summary_table(state, context))
        assert "Gerrit" in text
        assert "3" in text


class TestLoop:
    """Tests for MultiPlatformBrowser."""

    def _browser(
        self,
        state: BrowserState,
        context: BrowserContext,
        opened: list[str],
        opener_error: Exception | None = None,
    ) -> MultiPlatformBrowser:
        def opener(url: str) -> bool:
            if opener_error is not None:
                raise opener_error
            opened.append(url)
            return True

        def url_for(item: ActivityItem) -> str:
            return f"https://fallback/{item.id}"

        return MultiPlatformBrowser(
            state,
            context,
            console=Console(file=io.StringIO()),
            url_for=url_for,
            url_opener=opener,
        )

    def test_confirm_on_item_opens_url(
        self, state: BrowserState, context: BrowserContext
    ) -> None:
        opened: list[str] = []
        browser = self._browser(state, context, opened)

        for action in (Action.CONFIRM, Action.CONFIRM, Action.CONFIRM):
            browser.step(action)

        assert opened == ["https://review.example.com/c/core/server/+/101"]

    def test_item_without_url_uses_platform_url(self, context: BrowserContext) -> None:
        activities = DetailedActivities()
        activities.add(ActivityCategory.CHANGES_CREATED, [make_item("7", url="")])
        state = BrowserState(platform_order=["gerrit"], activities={"gerrit": activities})
        opened: list[str] = []
        browser = self._browser(state, context, opened)

        for action in (Action.CONFIRM, Action.CONFIRM, Action.CONFIRM):
            browser.step(action)

        assert opened == ["https://fallback/7"]

    def test_opener_failure_keeps_browser_running(
        self, state: BrowserState, context: BrowserContext
    ) -> None:
        browser = self._browser(state, context, [], opener_error=OSError("no display"))

        for action in (Action.CONFIRM, Action.CONFIRM, Action.CONFIRM):
            browser.step(action)

        assert not state.should_quit

    def test_run_until_quit(
        self,
        state: BrowserState,
        context: BrowserContext,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr("reviewr.tui.browser.cbreak_terminal", nullcontext)
        keys = iter([Action.DOWN, Action.TOGGLE_HELP, Action.QUIT, Action.ESCAPE, Action.QUIT])
        browser = MultiPlatformBrowser(
            state,
            context,
            console=Console(file=io.StringIO(), width=100, height=30),
            key_source=lambda: next(keys),
        )

        browser.run()

        assert state.should_quit
        assert state.selected_platform == "jira"
        assert next(keys, None) is None
