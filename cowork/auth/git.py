"""Git transport credentials (SSH, HTTPS, token).

One record per scope, stored under ``git_<scope>``. Accessors check the stored
method before returning anything, so asking for an SSH key on an HTTPS record
fails instead of returning an empty value.
"""

from abc import ABC, abstractmethod
from pathlib import Path

import structlog

from cowork.auth.models import GitAuthConfig
from cowork.enums import AuthScope, GitAuthMethod
from cowork.exceptions import (
    MethodMismatchError,
    NoKeyFoundError,
    RecordNotFoundError,
    StoreIOError,
)
from cowork.secure_store import SecureStore

log = structlog.get_logger(__name__)


def git_auth_key(scope: AuthScope) -> str:
    """Store key of the git transport record for a scope."""
    return f"git_{AuthScope(scope).value}"


class GitAuthMixin(ABC):
    """Git transport operations for :class:`cowork.auth.AuthManager`."""

    @abstractmethod
    def store_for(self, scope: AuthScope) -> SecureStore:
        """Store holding the records of a scope."""
        pass

    def _save_git_auth_config(self, config: GitAuthConfig, scope: AuthScope) -> None:
        self.store_for(scope).set(git_auth_key(scope), config)
        log.info("git_auth_config_saved", method=config.auth_method.value, scope=str(scope))

    def set_git_ssh_key_file_auth(self, ssh_key_path: str | Path, scope: AuthScope) -> None:
        """Use the private key at ssh_key_path for git transport."""
        self._save_git_auth_config(
            GitAuthConfig(auth_method=GitAuthMethod.SSH, ssh_key_path=str(ssh_key_path)),
            scope,
        )

    def set_git_ssh_key_auth(self, ssh_key: str, scope: AuthScope) -> None:
        """Store inline private key material for git transport."""
        self._save_git_auth_config(GitAuthConfig(auth_method=GitAuthMethod.SSH, ssh_key=ssh_key), scope)

    def set_git_https_auth(self, username: str, password: str, scope: AuthScope) -> None:
        """Store HTTPS username and password for git transport."""
        self._save_git_auth_config(
            GitAuthConfig(auth_method=GitAuthMethod.HTTPS, username=username, password=password),
            scope,
        )

    set_git_basic_auth = set_git_https_auth

    def set_git_token_auth(self, token: str, scope: AuthScope) -> None:
        """Store an access token for git transport."""
        self._save_git_auth_config(GitAuthConfig(auth_method=GitAuthMethod.TOKEN, token=token), scope)

    def get_git_auth_config(self, scope: AuthScope) -> GitAuthConfig:
        """Load the git transport record for a scope.

        Raises:
            RecordNotFoundError: If none is stored
        """
        return self.store_for(scope).get(git_auth_key(scope), GitAuthConfig)

    def remove_git_auth(self, scope: AuthScope) -> None:
        """Delete the git transport record for a scope.

        Raises:
            RecordNotFoundError: If none is stored
        """
        self.store_for(scope).delete(git_auth_key(scope))
        log.info("git_auth_config_removed", scope=str(scope))

    def _get_git_auth_with_method(self, scope: AuthScope, method: GitAuthMethod) -> GitAuthConfig:
        config = self.get_git_auth_config(scope)
        if config.auth_method != method:
            raise MethodMismatchError(
                f"git auth method is not {method.value}",
                reference=git_auth_key(scope),
                suggestion=f"Stored method is '{config.auth_method.value}'",
            )
        return config

    def get_git_ssh_key(self, scope: AuthScope) -> str:
        """Return the SSH private key for git transport.

        A configured key path takes precedence over inline key material.

        Raises:
            RecordNotFoundError: If no git record is stored
            MethodMismatchError: If the stored method is not ssh
            NoKeyFoundError: If neither a key path nor a key is stored
            StoreIOError: If the key file cannot be read
        """
        config = self._get_git_auth_with_method(scope, GitAuthMethod.SSH)

        if config.ssh_key_path:
            try:
                return Path(config.ssh_key_path).expanduser().read_text()
            except OSError as e:
                raise StoreIOError(
                    f"Failed to read SSH key file: {type(e).__name__}",
                    reference=config.ssh_key_path,
                ) from e
        elif config.ssh_key:
            return config.ssh_key
        else:
            raise NoKeyFoundError("no SSH key found", reference=git_auth_key(scope))

    def get_git_https_auth(self, scope: AuthScope) -> tuple[str, str]:
        """Return (username, password) for HTTPS git transport.

        Raises:
            RecordNotFoundError: If no git record is stored
            MethodMismatchError: If the stored method is not https
        """
        config = self._get_git_auth_with_method(scope, GitAuthMethod.HTTPS)
        return config.username or "", config.password or ""

    def get_git_token_auth(self, scope: AuthScope) -> str:
        """Return the token for git transport.

        Raises:
            RecordNotFoundError: If no git record is stored
            MethodMismatchError: If the stored method is not token
        """
        config = self._get_git_auth_with_method(scope, GitAuthMethod.TOKEN)
        return config.token or ""

    def resolve_git_auth_config(self) -> tuple[GitAuthConfig, AuthScope]:
        """Return the project git record if present, else the global one.

        Raises:
            RecordNotFoundError: If neither scope has a git record
        """
        for scope in (AuthScope.PROJECT, AuthScope.GLOBAL):
            try:
                return self.get_git_auth_config(scope), scope
            except RecordNotFoundError:
                continue

        raise RecordNotFoundError(
            "git authentication not configured in project or global scope",
            suggestion="Configure it with: cowork auth git ssh|https|token",
        )
