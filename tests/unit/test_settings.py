"""Tests for cowork/config/settings.py."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from cowork.config import CoworkSettings
from cowork.enums import AuthScope
from cowork.exceptions import ConfigurationError


class TestCoworkSettings:
    """Tests for settings defaults and environment overrides."""

    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.delenv("COWORK_GLOBAL_CONFIG_PATH", raising=False)
        monkeypatch.delenv("COWORK_PROJECT_CONFIG_PATH", raising=False)
        monkeypatch.chdir(tmp_path)

        settings = CoworkSettings()

        assert settings.global_config_path == Path.home() / ".config" / "cowork"
        assert settings.project_config_path == tmp_path / ".cowork"
        assert settings.log_level == "INFO"
        assert settings.provider_timeout == 30.0

    def test_env_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("COWORK_GLOBAL_CONFIG_PATH", str(tmp_path / "g"))
        monkeypatch.setenv("COWORK_LOG_LEVEL", "debug")
        monkeypatch.setenv("COWORK_PROVIDER_TIMEOUT", "5")

        settings = CoworkSettings()

        assert settings.global_config_path == tmp_path / "g"
        assert settings.log_level == "DEBUG"
        assert settings.provider_timeout == 5.0

    def test_paths_expand_user(self):
        settings = CoworkSettings(global_config_path="~/cfg")

        assert settings.global_config_path == Path.home() / "cfg"

    def test_config_path_per_scope(self, settings, global_config_dir, project_config_dir):
        assert settings.config_path(AuthScope.GLOBAL) == global_config_dir
        assert settings.config_path(AuthScope.PROJECT) == project_config_dir

    def test_invalid_timeout(self):
        with pytest.raises(ValidationError):
            CoworkSettings(provider_timeout=0)

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            CoworkSettings(log_level="LOUD")


class TestFromYaml:
    """Tests for loading settings from YAML."""

    def test_load(self, tmp_path):
        config_file = tmp_path / "cowork.yaml"
        config_file.write_text(f"global_config_path: {tmp_path / 'g'}\nprovider_timeout: 10\n")

        settings = CoworkSettings.from_yaml(config_file)

        assert settings.global_config_path == tmp_path / "g"
        assert settings.provider_timeout == 10.0

    def test_env_interpolation(self, tmp_path, monkeypatch):
        monkeypatch.setenv("COWORK_TEST_ROOT", str(tmp_path))
        config_file = tmp_path / "cowork.yaml"
        config_file.write_text(
            "# ${UNSET_IN_COMMENT}\n"
            "project_config_path: ${COWORK_TEST_ROOT}/proj\n"
            "log_level: ${COWORK_TEST_LEVEL:-warning}\n"
        )

        settings = CoworkSettings.from_yaml(config_file)

        assert settings.project_config_path == tmp_path / "proj"
        assert settings.log_level == "WARNING"

    def test_missing_env_var(self, tmp_path, monkeypatch):
        monkeypatch.delenv("COWORK_TEST_MISSING", raising=False)
        config_file = tmp_path / "cowork.yaml"
        config_file.write_text("project_config_path: ${COWORK_TEST_MISSING}\n")

        with pytest.raises(ConfigurationError, match="COWORK_TEST_MISSING is not set"):
            CoworkSettings.from_yaml(config_file)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            CoworkSettings.from_yaml(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "cowork.yaml"
        config_file.write_text("key: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            CoworkSettings.from_yaml(config_file)

    def test_not_a_mapping(self, tmp_path):
        config_file = tmp_path / "cowork.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="must be a YAML object"):
            CoworkSettings.from_yaml(config_file)

    def test_invalid_values(self, tmp_path):
        config_file = tmp_path / "cowork.yaml"
        config_file.write_text("provider_timeout: -1\n")

        with pytest.raises(ConfigurationError, match="Failed to validate"):
            CoworkSettings.from_yaml(config_file)

    def test_empty_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("COWORK_PROVIDER_TIMEOUT", raising=False)
        config_file = tmp_path / "cowork.yaml"
        config_file.write_text("")

        assert CoworkSettings.from_yaml(config_file).provider_timeout == 30.0
