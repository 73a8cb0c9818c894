"""
Configuration using pydantic-settings for type-safe settings management.

Settings are read from ``COWORK_*`` environment variables and may also be
loaded from a YAML file with environment variable interpolation.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Literal

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cowork.enums import AuthScope
from cowork.exceptions import ConfigurationError


def _default_global_config_path() -> Path:
    return Path.home() / ".config" / "cowork"


def _default_project_config_path() -> Path:
    return Path.cwd() / ".cowork"


class CoworkSettings(BaseSettings):
    """Locations of the two credential scopes and runtime options.

    Each scope's configuration directory holds one subdirectory per secure
    store (``auth``, ``.env``).
    """

    model_config = SettingsConfigDict(
        env_prefix="COWORK_",
        case_sensitive=False,
    )

    global_config_path: Path = Field(
        default_factory=_default_global_config_path,
        description="Per-user configuration directory (global scope)",
    )
    project_config_path: Path = Field(
        default_factory=_default_project_config_path,
        description="Per-repository configuration directory (project scope)",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Minimum log level"
    )
    provider_timeout: float = Field(
        default=30.0, ge=1.0, le=300.0, description="Seconds before a provider request times out"
    )

    @field_validator("global_config_path", "project_config_path", mode="after")
    @classmethod
    def expand_path(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    def config_path(self, scope: AuthScope) -> Path:
        """Configuration directory backing a scope."""
        if scope == AuthScope.GLOBAL:
            return self.global_config_path
        return self.project_config_path

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> CoworkSettings:
        """Load settings from YAML file with environment variable interpolation.

        Supports ${VAR_NAME} and ${VAR_NAME:-default} syntax.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            CoworkSettings instance

        Raises:
            ConfigurationError: If config file is invalid or missing
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            yaml_content = config_file.read_text()
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file: {config_path}") from e

        try:
            yaml_content = cls._interpolate_env_vars(yaml_content)
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment variable reference in config: {e}") from e

        try:
            config_dict = yaml.safe_load(yaml_content) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration must be a YAML object, not a list or scalar")

        try:
            return cls(**config_dict)
        except Exception as e:
            raise ConfigurationError(f"Failed to validate configuration: {e}") from e

    @staticmethod
    def _interpolate_env_vars(content: str) -> str:
        """Replace ${VAR_NAME} / ${VAR_NAME:-default} placeholders.

        YAML comment lines are left unchanged.

        Raises:
            ValueError: If a required environment variable is not set
        """
        pattern = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default_value = match.group(2)
            value = os.getenv(var_name)

            if value is not None:
                return value
            elif default_value is not None:
                return default_value
            else:
                raise ValueError(f"Environment variable {var_name} is not set")

        def process_line(line: str) -> str:
            if line.lstrip().startswith("#"):
                return line
            return pattern.sub(replace_var, line)

        return "\n".join(process_line(line) for line in content.split("\n"))
