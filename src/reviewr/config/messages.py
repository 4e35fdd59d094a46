"""UI messages and strings for reviewr.

This module consolidates all user-facing messages including:
- Success/error/info/warning messages
- CLI help text
- Browser footer and help overlay text
"""

# =============================================================================
# Project Metadata
# =============================================================================

PROJECT_TAGLINE = "Everything a person shipped, reviewed and resolved, in one place"
PROJECT_URL = "https://github.com/reviewr-cli/reviewr"

HELP_TEXT = f"""
[bold cyan]reviewr[/bold cyan] - {PROJECT_TAGLINE}

[bold]Primary Commands:[/bold]
  [cyan]review[/cyan]      Fetch activity from every configured platform and browse it
  [cyan]list[/cyan]        List employees
  [cyan]add[/cyan]         Add an employee record
  [cyan]platforms[/cyan]   Check connectivity to configured platforms
  [cyan]errors[/cyan]      Inspect the platform error log
  [cyan]config[/cyan]      Show the effective configuration
  [cyan]version[/cyan]     Show version information

[bold]Examples:[/bold]
  [dim]# Browse the last 30 days for an employee[/dim]
  [dim]$ reviewr review "Ada Lovelace"[/dim]

  [dim]# Look back a full quarter[/dim]
  [dim]$ reviewr review "Ada Lovelace" --days 90[/dim]

  [dim]# Why did Jira return nothing?[/dim]
  [dim]$ reviewr errors list --platform jira[/dim]

For more information, visit: {PROJECT_URL}
"""

# =============================================================================
# Command Messages
# =============================================================================

ERROR_MESSAGES = {
    "generic_error": "An error occurred: {error}",
    "no_platforms_configured": (
        "No platforms are configured. Add a [platforms.gerrit], [platforms.jira] "
        "or [platforms.gitlab.<name>] section to {config_path}"
    ),
    "employee_not_found": "Employee '{name}' not found.",
    "no_employees": "No employees found. Add one with 'reviewr add <name> --title <title>'.",
    "invalid_config": "Invalid configuration in {path}: {details}",
    "no_selection": "No employee selected.",
    "unknown_platform": "Unknown platform '{platform}'.",
    "export_failed": "Could not write export file {path}: {error}",
}

SUCCESS_MESSAGES = {
    "employee_added": "Employee '{name}' added.",
    "errors_cleared": "Error log cleared.",
    "errors_exported": "Exported {count} errors to {path}",
}

INFO_MESSAGES = {
    "fetching": "Fetching activity for {name} ({email}) over the last {days} days...",
    "fetch_summary": "Fetched data from {succeeded} of {attempted} platform(s).",
    "fetch_failures_hint": "Run 'reviewr errors list' for details on failed platforms.",
    "no_email": (
        "Employee '{name}' does not have a committer email configured. "
        "Add 'committer_email' to their record to fetch activity."
    ),
    "no_errors": "No errors found.",
    "no_error_stats": "No error statistics available.",
    "no_error_log": "No error log file found.",
    "cancelled": "Cancelled by user",
}

# =============================================================================
# Browser
# =============================================================================

BROWSER_TITLE = "Employee Review Dashboard"

BROWSER_FOOTERS = {
    "summary": (
        "Tab/Shift+Tab: Switch Platform | ↑/↓: Navigate | Enter: View Platform | "
        "h: Help | q: Quit"
    ),
    "platform": "↑/↓: Navigate | Enter: View Category | Backspace: Back | h: Help | q: Quit",
    "category": "↑/↓: Navigate | Enter: Open in Browser | Backspace: Back | h: Help | q: Quit",
}

BROWSER_HELP_TEXT = """[bold]Multi-Platform Review Browser[/bold]

[bold]NAVIGATION[/bold]
  ↑/↓  k/j     Navigate through lists
  Enter        Select item / view details / open in browser
  Backspace    Go back to the previous view
  Tab          Next platform
  Shift+Tab    Previous platform

[bold]VIEWS[/bold]
  s            Go to the summary view
  h / ?        Show or hide this help
  q / Esc      Quit

[bold]FEATURES[/bold]
  • Summary: overview of every configured platform
  • Platform view: the activity categories of one platform
  • Category view: individual changes, tickets and merge requests
  • Open any item in your web browser

Press h, ? or Esc to close this help."""
