"""Settings and the scoped environment-variable store."""

from cowork.config.env import EnvStore, parse_env_lines
from cowork.config.settings import CoworkSettings

__all__ = ["CoworkSettings", "EnvStore", "parse_env_lines"]
