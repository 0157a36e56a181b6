"""
Unit Tests for Configuration Loader
"""

from pathlib import Path

import pytest

from burnwatch.config import MonitorSettings, get_config, load_config, reload_config
from burnwatch.errors import ConfigurationError


@pytest.fixture
def no_env_file(tmp_path: Path) -> str:
    return str(tmp_path / "missing.env")


class TestLoadConfig:
    """Test suite for load_config()."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch, no_env_file: str) -> None:
        for name in (
            "BURNWATCH_CONFIG_PATH",
            "BURNWATCH_REFRESH_INTERVAL",
            "BURNWATCH_PACKAGE",
            "BURNWATCH_OFFLINE",
            "BURNWATCH_NPX_PATH",
            "BURNWATCH_DAILY_DAYS",
            "BURNWATCH_WEEKLY_DAYS",
        ):
            monkeypatch.delenv(name, raising=False)

        config = load_config(env_file=no_env_file, reload=True)

        assert config.environment == "test"
        assert config.log_level == "DEBUG"
        assert config.monitor == MonitorSettings()
        assert config.monitor.refresh_interval == 300.0
        assert config.monitor.package_spec == "ccusage@latest"
        assert config.monitor.offline is True
        assert config.monitor.npx_path is None
        assert config.config_path.endswith("config.json")

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch, no_env_file: str) -> None:
        monkeypatch.setenv("BURNWATCH_REFRESH_INTERVAL", "60")
        monkeypatch.setenv("BURNWATCH_PACKAGE", "ccusage@15.2.0")
        monkeypatch.setenv("BURNWATCH_OFFLINE", "false")
        monkeypatch.setenv("BURNWATCH_NPX_PATH", "~/bin/npx")
        monkeypatch.setenv("BURNWATCH_DAILY_DAYS", "14")
        monkeypatch.setenv("BURNWATCH_CONFIG_PATH", "~/burnwatch.json")

        config = load_config(env_file=no_env_file, reload=True)

        assert config.monitor.refresh_interval == 60.0
        assert config.monitor.package_spec == "ccusage@15.2.0"
        assert config.monitor.offline is False
        assert config.monitor.npx_path == str(Path.home() / "bin" / "npx")
        assert config.monitor.daily_window_days == 14
        assert config.config_path == str(Path.home() / "burnwatch.json")

    def test_env_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("BURNWATCH_PACKAGE", "placeholder")
        env_file = tmp_path / ".env"
        env_file.write_text("BURNWATCH_PACKAGE=ccusage@16.0.0\n")

        config = load_config(env_file=str(env_file), reload=True)

        assert config.monitor.package_spec == "ccusage@16.0.0"

    def test_non_numeric_interval(self, monkeypatch: pytest.MonkeyPatch, no_env_file: str) -> None:
        monkeypatch.setenv("BURNWATCH_REFRESH_INTERVAL", "often")

        with pytest.raises(ConfigurationError, match="Invalid numeric environment value"):
            load_config(env_file=no_env_file, reload=True)

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("BURNWATCH_REFRESH_INTERVAL", "0"),
            ("BURNWATCH_DAILY_DAYS", "31"),
            ("LOG_LEVEL", "CHATTY"),
        ],
    )
    def test_invalid_values(self, monkeypatch: pytest.MonkeyPatch, no_env_file: str, name: str, value: str) -> None:
        monkeypatch.setenv(name, value)

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(env_file=no_env_file, reload=True)
        assert "validation_errors" in exc_info.value.details

    def test_cached_instance(self, no_env_file: str) -> None:
        first = load_config(env_file=no_env_file, reload=True)

        assert load_config() is first
        assert get_config() is first

    def test_reload(self, monkeypatch: pytest.MonkeyPatch, no_env_file: str) -> None:
        first = load_config(env_file=no_env_file, reload=True)
        monkeypatch.setenv("BURNWATCH_REFRESH_INTERVAL", "42")

        second = reload_config(env_file=no_env_file)

        assert second is not first
        assert second.monitor.refresh_interval == 42.0
