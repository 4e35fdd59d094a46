"""Configuration models for reviewr.

One TOML document holds connection settings per platform plus global and UI
preferences. A platform whose section is absent is not configured and is
left out of the registry.
"""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from reviewr.constants import (
    CONFIG_VERSION,
    DEFAULT_MAX_RESULTS_PER_CATEGORY,
    DEFAULT_TIME_PERIOD_DAYS,
    GITLAB_API_PATH,
    SECRET_MASK,
)
from reviewr.exceptions import ConfigurationError
from reviewr.models.enums import UiTheme


def _strip_url(url: str) -> str:
    return url[:-1] if url.endswith("/") else url


class GerritConfig(BaseModel):
    """Gerrit connection settings (HTTP Basic with the user's HTTP password)."""

    gerrit_url: str = Field(default="", description="Gerrit base URL")
    username: str = Field(default="", description="Gerrit username")
    http_password: str = Field(default="", description="Gerrit HTTP password")

    def is_configured(self) -> bool:
        return bool(self.gerrit_url and self.username and self.http_password)

    @property
    def base_url(self) -> str:
        return _strip_url(self.gerrit_url)


class JiraConfig(BaseModel):
    """Jira Cloud connection settings (HTTP Basic with email and API token)."""

    jira_url: str = Field(default="", description="Jira base URL")
    username: str = Field(default="", description="Account email used for Basic auth")
    api_token: str = Field(default="", description="Jira API token")
    project_filter: list[str] = Field(
        default_factory=list,
        description="Restrict searches to these project keys",
    )
    custom_fields: dict[str, str] = Field(
        default_factory=dict,
        description="Extra fields to copy into item metadata (metadata key -> field id)",
    )

    def is_configured(self) -> bool:
        return bool(self.jira_url and self.username and self.api_token)

    @property
    def base_url(self) -> str:
        return _strip_url(self.jira_url)


class GitLabConfig(BaseModel):
    """One GitLab instance (personal access token sent as a bearer token)."""

    name: str = Field(default="GitLab", description="Display name for this instance")
    gitlab_url: str = Field(default="", description="GitLab base URL")
    token: str = Field(default="", description="Personal access token with read_api scope")

    def is_configured(self) -> bool:
        return bool(self.gitlab_url and self.token)

    @property
    def base_url(self) -> str:
        return _strip_url(self.gitlab_url)

    def api_base_url(self) -> str:
        return f"{self.base_url}{GITLAB_API_PATH}"


class PlatformConfigs(BaseModel):
    """Per-platform sections."""

    gerrit: GerritConfig | None = None
    jira: JiraConfig | None = None
    gitlab: dict[str, GitLabConfig] = Field(
        default_factory=dict,
        description="GitLab instances keyed by instance name",
    )


class GlobalSettings(BaseModel):
    """Settings that apply across all platforms."""

    max_results_per_category: int = Field(default=DEFAULT_MAX_RESULTS_PER_CATEGORY, ge=1)


class UiPreferences(BaseModel):
    """Terminal browser preferences."""

    default_time_period_days: int = Field(default=DEFAULT_TIME_PERIOD_DAYS, ge=1)
    show_platform_icons: bool = True
    preferred_platform_order: list[str] = Field(
        default_factory=lambda: ["gerrit", "jira", "gitlab"]
    )
    theme: UiTheme = UiTheme.DEFAULT


class ReviewrConfig(BaseModel):
    """Main reviewr configuration."""

    version: int = Field(default=CONFIG_VERSION, description="Config version")
    platforms: PlatformConfigs = Field(default_factory=PlatformConfigs)
    global_settings: GlobalSettings = Field(default_factory=GlobalSettings)
    ui_preferences: UiPreferences = Field(default_factory=UiPreferences)

    @classmethod
    def load(cls, config_path: Path) -> "ReviewrConfig":
        """Load configuration from file.

        A missing file yields the defaults, which configure no platforms.

        Raises:
            ConfigurationError: If the file is not valid TOML or does not
                match the schema.
        """
        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML: {e}", config_file=config_path) from e

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            first = e.errors()[0]
            key = ".".join(str(part) for part in first["loc"])
            raise ConfigurationError(
                f"Invalid configuration: {first['msg']}", config_file=config_path, key=key
            ) from e

    def masked_dump(self) -> dict[str, Any]:
        """Configuration as a dict with credentials replaced by a mask."""
        data = self.model_dump(mode="json", exclude_none=True)
        platforms = data.get("platforms", {})
        for section, secret in (("gerrit", "http_password"), ("jira", "api_token")):
            if section in platforms and platforms[section].get(secret):
                platforms[section][secret] = SECRET_MASK
        for instance in platforms.get("gitlab", {}).values():
            if instance.get("token"):
                instance["token"] = SECRET_MASK
        return data
