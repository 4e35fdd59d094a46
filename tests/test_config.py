"""Tests for configuration loading and the config service."""

from pathlib import Path

import pytest
from fixtures import CONFIG_ALL_PLATFORMS, write_config

from reviewr.constants import SECRET_MASK
from reviewr.exceptions import ConfigurationError
from reviewr.models.config import ReviewrConfig
from reviewr.models.enums import UiTheme
from reviewr.services.config_service import ConfigService, resolve_data_path


class TestReviewrConfig:
    """Tests for ReviewrConfig."""

    def test_missing_file_yields_defaults(self, tmp_path: Path) -> None:
        config = ReviewrConfig.load(tmp_path / "config.toml")

        assert config.platforms.gerrit is None
        assert config.platforms.jira is None
        assert config.platforms.gitlab == {}
        assert config.ui_preferences.default_time_period_days == 30
        assert config.ui_preferences.theme is UiTheme.DEFAULT
        assert config.global_settings.max_results_per_category == 100

    def test_loads_every_platform(self, data_dir: Path) -> None:
        config = ReviewrConfig.load(write_config(data_dir, CONFIG_ALL_PLATFORMS))

        assert config.platforms.gerrit is not None
        assert config.platforms.gerrit.base_url == "https://review.example.com"
        assert config.platforms.jira is not None
        assert config.platforms.jira.is_configured()
        gitlab = config.platforms.gitlab["work"]
        assert gitlab.name == "Work GitLab"
        assert gitlab.api_base_url() == "https://gitlab.example.com/api/v4"

    def test_invalid_toml(self, data_dir: Path) -> None:
        path = write_config(data_dir, "[platforms\n")
        with pytest.raises(ConfigurationError) as exc_info:
            ReviewrConfig.load(path)
        assert exc_info.value.config_file == path

    def test_schema_violation_names_key(self, data_dir: Path) -> None:
        path = write_config(data_dir, '[ui_preferences]\ntheme = "neon"\n')
        with pytest.raises(ConfigurationError) as exc_info:
            ReviewrConfig.load(path)
        assert exc_info.value.key == "ui_preferences.theme"

    def test_max_results_must_be_positive(self, data_dir: Path) -> None:
        path = write_config(data_dir, "[global_settings]\nmax_results_per_category = 0\n")
        with pytest.raises(ConfigurationError):
            ReviewrConfig.load(path)

    def test_masked_dump_hides_secrets(self, data_dir: Path) -> None:
        config = ReviewrConfig.load(write_config(data_dir, CONFIG_ALL_PLATFORMS))
        dumped = config.masked_dump()

        platforms = dumped["platforms"]
        assert platforms["gerrit"]["http_password"] == SECRET_MASK
        assert platforms["jira"]["api_token"] == SECRET_MASK
        assert platforms["gitlab"]["work"]["token"] == SECRET_MASK
        assert platforms["gerrit"]["username"] == "ada"
        assert config.platforms.gerrit is not None
        assert config.platforms.gerrit.http_password == "gerrit-secret"


class TestConfigService:
    """Tests for data directory resolution."""

    def test_explicit_path_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            "reviewr.services.config_service.reviewr_settings.data_path", tmp_path / "env"
        )
        assert resolve_data_path(tmp_path / "cli") == tmp_path / "cli"
        assert resolve_data_path(None) == tmp_path / "env"

    def test_home_default(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setattr("reviewr.services.config_service.reviewr_settings.data_path", None)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert resolve_data_path() == tmp_path / ".reviewr"

    def test_paths_inside_data_dir(self, data_dir: Path) -> None:
        service = ConfigService(data_dir)

        assert service.config_path == data_dir / "config.toml"
        assert service.error_log().path == data_dir / "error.log"
        assert service.app_log_path == data_dir / "reviewr.log"
        assert service.employees_dir == data_dir / "employees"
