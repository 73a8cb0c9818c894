"""Scoped environment variables kept in the ``.env`` secure store.

Variables are encrypted the same way as credentials and live next to the
``auth`` store of each scope. Project values shadow global ones in
``get_env_var_with_fallback``.
"""

from pathlib import Path

import structlog

from cowork.config.settings import CoworkSettings
from cowork.enums import AuthScope
from cowork.exceptions import ConfigurationError, RecordNotFoundError, StoreIOError
from cowork.secure_store import SecureStore

log = structlog.get_logger(__name__)

ENV_STORE_NAME = ".env"


def parse_env_lines(content: str, source: str = "<string>") -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines.

    Blank lines and lines starting with ``#`` are ignored. Keys and values are
    stripped; the value is everything after the first ``=``.

    Raises:
        ConfigurationError: On a line without ``=`` or with an empty key
    """
    variables: dict[str, str] = {}
    for line_number, raw_line in enumerate(content.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ConfigurationError(f"{source}:{line_number}: invalid line format, expected KEY=VALUE")

        variables[key] = value.strip()

    return variables


class EnvStore:
    """Encrypted environment variables in the global and project scopes.

    Example:
        >>> env = EnvStore.from_settings(CoworkSettings())
        >>> env.set_env_var("API_KEY", "secret")
        >>> env.get_env_var_with_fallback("API_KEY")
        ('secret', <AuthScope.PROJECT: 'project'>)
    """

    def __init__(self, global_store: SecureStore, project_store: SecureStore) -> None:
        self.global_store = global_store
        self.project_store = project_store

    @classmethod
    def from_settings(cls, settings: CoworkSettings) -> "EnvStore":
        """Open the ``.env`` store of both scopes named by settings."""
        return cls(
            global_store=SecureStore.for_scope(ENV_STORE_NAME, settings.config_path(AuthScope.GLOBAL)),
            project_store=SecureStore.for_scope(ENV_STORE_NAME, settings.config_path(AuthScope.PROJECT)),
        )

    def store_for(self, scope: AuthScope) -> SecureStore:
        if AuthScope(scope) == AuthScope.GLOBAL:
            return self.global_store
        return self.project_store

    def set_env_var(self, key: str, value: str, scope: AuthScope = AuthScope.PROJECT) -> None:
        """Store a variable in a scope, replacing any previous value."""
        self.store_for(scope).set(key, value)
        log.info("env_var_saved", key=key, scope=str(scope))

    def get_env_var(self, key: str, scope: AuthScope = AuthScope.PROJECT) -> str:
        """Read a variable from a scope.

        Raises:
            RecordNotFoundError: If the variable is not set in scope
        """
        return self.store_for(scope).get(key)

    def get_env_vars(self, scope: AuthScope = AuthScope.PROJECT) -> dict[str, str]:
        """All variables of a scope, keyed by their stored name."""
        store = self.store_for(scope)
        return {key: store.get(key) for key in store.list_keys()}

    def delete_env_var(self, key: str, scope: AuthScope = AuthScope.PROJECT) -> None:
        """Remove a variable from a scope.

        Raises:
            RecordNotFoundError: If the variable is not set in scope
        """
        self.store_for(scope).delete(key)
        log.info("env_var_deleted", key=key, scope=str(scope))

    def get_env_var_with_fallback(self, key: str) -> tuple[str, AuthScope]:
        """Read a variable from the project scope, else the global scope.

        Raises:
            RecordNotFoundError: If neither scope has the variable
        """
        for scope in (AuthScope.PROJECT, AuthScope.GLOBAL):
            try:
                return self.get_env_var(key, scope), scope
            except RecordNotFoundError:
                continue

        raise RecordNotFoundError(
            f"environment variable {key} not found in project or global scope",
            reference=key,
        )

    def set_env_from_file(self, path: str | Path, scope: AuthScope = AuthScope.PROJECT) -> int:
        """Import every ``KEY=VALUE`` line of a file into a scope.

        The whole file is parsed before anything is stored, so a malformed
        line leaves the store untouched.

        Returns:
            Number of variables stored

        Raises:
            StoreIOError: If the file cannot be read
            ConfigurationError: On a malformed line
        """
        env_file = Path(path)
        try:
            content = env_file.read_text()
        except OSError as e:
            raise StoreIOError(f"Failed to read env file: {type(e).__name__}", reference=str(env_file)) from e

        variables = parse_env_lines(content, source=str(env_file))
        for key, value in variables.items():
            self.store_for(scope).set(key, value)

        log.info("env_file_loaded", file=str(env_file), count=len(variables), scope=str(scope))
        return len(variables)
