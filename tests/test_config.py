"""Tests for configuration loading."""

from pathlib import Path

import pytest

from gitoperations.config import (
    Settings,
    _drop_unset,
    _expand_env_vars,
    get_settings,
    load_settings,
    reset_settings,
)
from gitoperations.config.settings import GitSettings, TraceSettings
from gitoperations.errors import ConfigurationError, InvalidConfigError


class TestExpandEnvVars:
    """Tests for environment variable expansion."""

    def test_expand_simple_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test expanding a simple environment variable."""
        monkeypatch.setenv("TEST_PREFIX", "$ ")
        assert _expand_env_vars("${TEST_PREFIX}") == "$ "

    def test_expand_missing_var(self) -> None:
        """Test expanding a missing environment variable returns None."""
        assert _expand_env_vars("${NONEXISTENT_GITOPS_VAR}") is None

    def test_expand_in_nested_dict(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test expanding variables in nested dictionaries."""
        monkeypatch.setenv("NESTED_VAR", "nested_value")
        result = _expand_env_vars({"level1": {"level2": "${NESTED_VAR}"}})
        assert result["level1"]["level2"] == "nested_value"

    def test_non_strings_untouched(self) -> None:
        """Test booleans and numbers pass through."""
        assert _expand_env_vars({"enabled": True, "timeout": 3}) == {"enabled": True, "timeout": 3}


class TestDropUnset:
    """Tests for removing unset values."""

    def test_drops_none(self) -> None:
        assert _drop_unset({"trace": {"prefix": None, "enabled": True}}) == {"trace": {"enabled": True}}


class TestSettingsModels:
    """Tests for settings models."""

    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.trace.enabled is False
        assert settings.trace.prefix == "Running: "
        assert settings.git.timeout is None
        assert settings.log_level == "INFO"

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            GitSettings(timeout=0)

    def test_log_level_normalized(self) -> None:
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_env_nested(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITOPERATIONS_TRACE__PREFIX", "git> ")
        monkeypatch.setenv("GITOPERATIONS_GIT__TIMEOUT", "30")

        settings = Settings()

        assert settings.trace == TraceSettings(enabled=False, prefix="git> ")
        assert settings.git.timeout == 30


class TestLoadSettings:
    """Tests for load_settings."""

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        settings = load_settings(config_path=tmp_path / "absent.yaml", force_reload=True)

        assert settings.trace.enabled is False

    def test_load_from_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("trace:\n  enabled: true\ngit:\n  timeout: 4.5\nlog_level: warning\n")

        settings = load_settings(config_path=config_file, force_reload=True)

        assert settings.trace.enabled is True
        assert settings.git.timeout == 4.5
        assert settings.log_level == "WARNING"

    def test_env_var_expansion_in_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_TRACE_PREFIX", "[git] ")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("trace:\n  prefix: ${MY_TRACE_PREFIX}\n")

        settings = load_settings(config_path=config_file, force_reload=True)

        assert settings.trace.prefix == "[git] "

    def test_unset_env_var_falls_back_to_default(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("trace:\n  prefix: ${UNSET_GITOPS_PREFIX}\n")

        settings = load_settings(config_path=config_file, force_reload=True)

        assert settings.trace.prefix == "Running: "

    def test_cached(self, tmp_path: Path) -> None:
        first = load_settings(config_path=tmp_path / "absent.yaml", force_reload=True)

        assert load_settings() is first
        assert get_settings() is first

    def test_reset(self, tmp_path: Path) -> None:
        first = load_settings(config_path=tmp_path / "absent.yaml", force_reload=True)
        reset_settings()

        assert get_settings() is not first

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("trace: [unclosed\n")

        with pytest.raises(InvalidConfigError):
            load_settings(config_path=config_file, force_reload=True)

    def test_non_mapping(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- just\n- a list\n")

        with pytest.raises(ConfigurationError):
            load_settings(config_path=config_file, force_reload=True)

    def test_invalid_value(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("git:\n  timeout: -1\n")

        with pytest.raises(InvalidConfigError) as exc_info:
            load_settings(config_path=config_file, force_reload=True)

        assert exc_info.value.code == "INVALID_CONFIG"
