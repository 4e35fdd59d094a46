"""Rendering for the multi-platform browser.

Every function here is a pure projection of ``BrowserState`` plus the
display context onto rich renderables; nothing reads the terminal or the
network. The browser loop hands the result to ``rich.live.Live``.
"""

from dataclasses import dataclass, field

from rich.console import Group, RenderableType
from rich.layout import Layout
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from reviewr.config.messages import BROWSER_FOOTERS, BROWSER_HELP_TEXT, BROWSER_TITLE
from reviewr.constants import DEFAULT_PLATFORM_ICON, PROJECT_DISPLAY_CHARS, TITLE_DISPLAY_CHARS
from reviewr.models.activity import ActivityCategory, ActivityItem
from reviewr.models.enums import CategoryKind, UiTheme
from reviewr.tui.state import BrowserState, ViewMode

CATEGORY_ICONS: dict[CategoryKind, str] = {
    CategoryKind.CHANGES_CREATED: "📝",
    CategoryKind.CHANGES_MERGED: "✅",
    CategoryKind.CHANGES_REVIEWED: "👀",
    CategoryKind.REVIEWS_GIVEN: "👀",
    CategoryKind.REVIEWS_RECEIVED: "📥",
    CategoryKind.ISSUES_CREATED: "🎫",
    CategoryKind.ISSUES_RESOLVED: "✅",
    CategoryKind.ISSUES_ASSIGNED: "📌",
    CategoryKind.ISSUES_COMMENTED: "💬",
    CategoryKind.MERGE_REQUESTS_CREATED: "🔀",
    CategoryKind.MERGE_REQUESTS_REVIEWED: "👀",
    CategoryKind.MERGE_REQUESTS_MERGED: "✅",
}

HIGHLIGHT_SYMBOL = "▶ "


@dataclass(frozen=True)
class ThemeStyles:
    """Rich styles for one UI theme."""

    border: str
    title: str
    highlight: str
    tab_selected: str
    muted: str


THEMES: dict[UiTheme, ThemeStyles] = {
    UiTheme.DEFAULT: ThemeStyles("cyan", "bold cyan", "reverse", "bold yellow", "dim"),
    UiTheme.DARK: ThemeStyles(
        "grey50", "bold white", "black on bright_cyan", "bold cyan", "grey50"
    ),
    UiTheme.LIGHT: ThemeStyles("blue", "bold blue", "white on blue", "bold blue", "grey35"),
    UiTheme.HIGH_CONTRAST: ThemeStyles(
        "bright_white", "bold bright_white", "bold black on bright_yellow", "bold bright_yellow", ""
    ),
}


@dataclass
class BrowserContext:
    """Everything the renderer needs besides the navigation state."""

    employee_name: str
    employee_email: str
    platform_names: dict[str, str] = field(default_factory=dict)
    platform_icons: dict[str, str] = field(default_factory=dict)
    show_icons: bool = True
    theme: UiTheme = UiTheme.DEFAULT

    @property
    def styles(self) -> ThemeStyles:
        return THEMES[self.theme]

    def platform_name(self, platform_id: str) -> str:
        return self.platform_names.get(platform_id, platform_id)

    def platform_label(self, platform_id: str) -> str:
        name = self.platform_name(platform_id)
        if not self.show_icons:
            return name
        return f"{self.platform_icons.get(platform_id, DEFAULT_PLATFORM_ICON)} {name}"

    def category_label(self, category: ActivityCategory) -> str:
        if not self.show_icons:
            return category.display_name
        return f"{CATEGORY_ICONS.get(category.kind, DEFAULT_PLATFORM_ICON)} {category.display_name}"


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to ``limit`` characters, ending in ``...`` when shortened."""
    if len(text) <= limit:
        return text
    return f"{text[: limit - 3]}..."


def view_title(state: BrowserState, ctx: BrowserContext) -> str:
    if state.view is ViewMode.SUMMARY:
        return "📊 Multi-Platform Activity Summary"
    name = ctx.platform_name(state.current_platform or "")
    if state.view is ViewMode.PLATFORM:
        return f"🏢 {name} Activity"
    category = state.current_category
    return f"📋 {name} - {category.display_name if category else ''}"


def header_line(state: BrowserState, ctx: BrowserContext) -> str:
    return f"📋 {ctx.employee_name} ({ctx.employee_email}) - {view_title(state, ctx)}"


def platform_summary_line(state: BrowserState, ctx: BrowserContext, platform_id: str) -> str:
    label = ctx.platform_label(platform_id)
    activities = state.activities.get(platform_id)
    if activities is None:
        return f"{label} - No data available"
    return (
        f"{label} - {activities.total_items} items across "
        f"{len(activities.categories())} categories"
    )


def item_line(item: ActivityItem) -> str:
    title = truncate(item.title, TITLE_DISPLAY_CHARS)
    project = truncate(item.project, PROJECT_DISPLAY_CHARS)
    return f"[{item.id}] {title} - {project}"


def item_details(item: ActivityItem) -> str:
    return (
        f"ID: {item.id}\n"
        f"Title: {item.title}\n"
        f"Project: {item.project}\n"
        f"Status: {item.status}\n"
        f"Created: {item.created}\n"
        f"Updated: {item.updated}"
    )


def _selectable_list(lines: list[str], selected: int, styles: ThemeStyles) -> Text:
    text = Text()
    for index, line in enumerate(lines):
        if index:
            text.append("\n")
        if index == selected:
            text.append(f"{HIGHLIGHT_SYMBOL}{line}", style=styles.highlight)
        else:
            text.append(f"{' ' * len(HIGHLIGHT_SYMBOL)}{line}")
    return text


def _panel(body: RenderableType, title: str, styles: ThemeStyles) -> Panel:
    return Panel(body, title=Text(title), title_align="left", border_style=styles.border)


def render_summary(state: BrowserState, ctx: BrowserContext) -> RenderableType:
    styles = ctx.styles

    tabs = Text()
    for index, platform_id in enumerate(state.platform_order):
        if index:
            tabs.append(" │ ", style=styles.muted)
        style = styles.tab_selected if index == state.platform_index else ""
        tabs.append(ctx.platform_label(platform_id), style=style)

    lines = [platform_summary_line(state, ctx, pid) for pid in state.platform_order]
    return Group(
        _panel(tabs, "Available Platforms", styles),
        _panel(_selectable_list(lines, state.platform_index, styles), "Platform Summary", styles),
    )


def render_platform(state: BrowserState, ctx: BrowserContext) -> RenderableType:
    platform_id = state.current_platform or ""
    activities = state.activities.get(platform_id)
    lines = [
        f"{ctx.category_label(category)} ({len(activities.items(category)) if activities else 0})"
        for category in state.categories(platform_id)
    ]
    body: RenderableType = (
        _selectable_list(lines, state.category_index, ctx.styles)
        if lines
        else Text("No data available", style=ctx.styles.muted)
    )
    return _panel(body, f"Categories in {ctx.platform_name(platform_id)}", ctx.styles)


def render_category(state: BrowserState, ctx: BrowserContext) -> RenderableType:
    category = state.current_category
    items = state.items()
    title = f"{category.display_name if category else ''} Items"
    if not items:
        return _panel(Text("No items", style=ctx.styles.muted), title, ctx.styles)

    item_list = _panel(
        _selectable_list([item_line(item) for item in items], state.item_index, ctx.styles),
        title,
        ctx.styles,
    )
    selected = state.selected_item
    if selected is None:
        return item_list
    return Group(item_list, _panel(Text(item_details(selected)), "Details", ctx.styles))


def render_help(ctx: BrowserContext) -> RenderableType:
    return _panel(Text.from_markup(BROWSER_HELP_TEXT), "Help", ctx.styles)


def render_footer(state: BrowserState) -> str:
    return BROWSER_FOOTERS[state.view.value]


def render_body(state: BrowserState, ctx: BrowserContext) -> RenderableType:
    if state.show_help:
        return render_help(ctx)
    if state.view is ViewMode.SUMMARY:
        return render_summary(state, ctx)
    if state.view is ViewMode.PLATFORM:
        return render_platform(state, ctx)
    return render_category(state, ctx)


def render_browser(state: BrowserState, ctx: BrowserContext) -> Layout:
    """Full screen: header, current view (or help) and key hints."""
    styles = ctx.styles
    layout = Layout()
    layout.split_column(
        Layout(name="header", size=3),
        Layout(name="body"),
        Layout(name="footer", size=3),
    )
    layout["header"].update(
        Panel(
            Text(header_line(state, ctx), style=styles.title, overflow="ellipsis", no_wrap=True),
            title=BROWSER_TITLE,
            title_align="left",
            border_style=styles.border,
        )
    )
    layout["body"].update(render_body(state, ctx))
    layout["footer"].update(
        _panel(Text(render_footer(state), style=styles.muted, no_wrap=True), "Controls", styles)
    )
    return layout


def summary_table(state: BrowserState, ctx: BrowserContext) -> Table:
    """Plain table of per-platform totals, printed when the browser closes or in its place."""
    table = Table(title="Activity Summary", show_header=True, header_style="bold cyan")
    table.add_column("Platform", style="cyan")
    table.add_column("Items", justify="right")
    table.add_column("Categories", justify="right")
    for platform_id in state.platform_order:
        activities = state.activities.get(platform_id)
        if activities is None:
            table.add_row(Text(ctx.platform_label(platform_id)), "-", "-")
        else:
            table.add_row(
                Text(ctx.platform_label(platform_id)),
                str(activities.total_items),
                str(len(activities.categories())),
            )
    return table
