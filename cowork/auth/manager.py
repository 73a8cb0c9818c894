"""Scoped provider credentials backed by two secure stores.

Records live in the ``auth`` store of the global scope (per user) or the
project scope (per repository). Every operation names its scope; only the
``resolve_*`` helpers look in both.
"""

import structlog

from cowork.auth.git import GitAuthMixin
from cowork.auth.models import AuthConfig
from cowork.config.settings import CoworkSettings
from cowork.enums import AuthMethod, AuthScope, ProviderType
from cowork.exceptions import (
    ManualInputRequiredError,
    ProviderAuthenticationError,
    ProviderConstructionError,
    RecordNotFoundError,
    UnsupportedMethodError,
)
from cowork.providers import ProviderFactory, create_provider
from cowork.secure_store import SecureStore

log = structlog.get_logger(__name__)

AUTH_STORE_NAME = "auth"


def auth_key(provider: ProviderType, scope: AuthScope) -> str:
    """Store key of a provider credential record, e.g. ``github_global``."""
    return f"{ProviderType(provider).value}_{AuthScope(scope).value}"


class AuthManager(GitAuthMixin):
    """Store, look up and verify hosting provider credentials.

    Example:
        >>> manager = AuthManager.from_settings(CoworkSettings())
        >>> manager.set_token(ProviderType.GITHUB, "ghp_...", AuthScope.GLOBAL)
        >>> await manager.test_auth(ProviderType.GITHUB, AuthScope.GLOBAL)
    """

    def __init__(
        self,
        global_store: SecureStore,
        project_store: SecureStore,
        provider_factory: ProviderFactory = create_provider,
        provider_timeout: float = 30.0,
    ) -> None:
        """Initialize the manager.

        Args:
            global_store: Store holding per-user records
            project_store: Store holding per-repository records
            provider_factory: Callable building a provider client from a record
            provider_timeout: Timeout passed to provider clients, in seconds
        """
        self.global_store = global_store
        self.project_store = project_store
        self._provider_factory = provider_factory
        self._provider_timeout = provider_timeout

    @classmethod
    def from_settings(
        cls,
        settings: CoworkSettings,
        provider_factory: ProviderFactory = create_provider,
    ) -> "AuthManager":
        """Open the ``auth`` store of both scopes named by settings."""
        return cls(
            global_store=SecureStore.for_scope(AUTH_STORE_NAME, settings.config_path(AuthScope.GLOBAL)),
            project_store=SecureStore.for_scope(AUTH_STORE_NAME, settings.config_path(AuthScope.PROJECT)),
            provider_factory=provider_factory,
            provider_timeout=settings.provider_timeout,
        )

    def store_for(self, scope: AuthScope) -> SecureStore:
        """Store backing a scope."""
        if AuthScope(scope) == AuthScope.GLOBAL:
            return self.global_store
        return self.project_store

    def _save_auth_config(self, config: AuthConfig, scope: AuthScope) -> None:
        self.store_for(scope).set(auth_key(config.provider_type, scope), config)
        log.info(
            "auth_config_saved",
            provider=config.provider_type.value,
            method=config.auth_method.value,
            scope=str(scope),
        )

    def set_token(
        self,
        provider: ProviderType,
        token: str,
        scope: AuthScope,
        base_url: str | None = None,
    ) -> None:
        """Store a token credential for a provider, replacing any previous one."""
        self._save_auth_config(
            AuthConfig(
                provider_type=provider,
                auth_method=AuthMethod.TOKEN,
                token=token,
                base_url=base_url,
            ),
            scope,
        )

    def set_basic_auth(
        self,
        provider: ProviderType,
        username: str,
        password: str,
        scope: AuthScope,
        base_url: str | None = None,
    ) -> None:
        """Store a username/password credential for a provider."""
        self._save_auth_config(
            AuthConfig(
                provider_type=provider,
                auth_method=AuthMethod.BASIC,
                username=username,
                password=password,
                base_url=base_url,
            ),
            scope,
        )

    def get_auth_config(self, provider: ProviderType, scope: AuthScope) -> AuthConfig:
        """Load the credential record of a provider in one scope.

        Raises:
            RecordNotFoundError: If no record is stored
            DecryptionError: If the record cannot be decrypted or parsed
        """
        return self.store_for(scope).get(auth_key(provider, scope), AuthConfig)

    def remove_auth(self, provider: ProviderType, scope: AuthScope) -> None:
        """Delete the credential record of a provider in one scope.

        Raises:
            RecordNotFoundError: If no record is stored
        """
        self.store_for(scope).delete(auth_key(provider, scope))
        log.info("auth_config_removed", provider=ProviderType(provider).value, scope=str(scope))

    def list_auth_configs(self) -> list[tuple[AuthConfig, AuthScope]]:
        """Every stored provider record, global scope first.

        Returns:
            (record, scope) pairs in scope then provider order
        """
        configs: list[tuple[AuthConfig, AuthScope]] = []
        for scope in (AuthScope.GLOBAL, AuthScope.PROJECT):
            for provider in ProviderType:
                try:
                    configs.append((self.get_auth_config(provider, scope), scope))
                except RecordNotFoundError:
                    continue
        return configs

    def authenticate_provider(self, provider: ProviderType, method: AuthMethod, scope: AuthScope) -> None:
        """Interactive authentication entry point.

        No method can obtain credentials on its own yet: token and basic
        credentials must be entered by the user with ``set_token`` or
        ``set_basic_auth``.

        Raises:
            ManualInputRequiredError: For token and basic methods
            UnsupportedMethodError: For any other method
        """
        provider = ProviderType(provider)
        if method == AuthMethod.TOKEN:
            raise ManualInputRequiredError(
                "token authentication requires manual token input",
                reference=auth_key(provider, scope),
                suggestion=f"Run: cowork auth login {provider.value} --scope {AuthScope(scope).value}",
            )
        if method == AuthMethod.BASIC:
            raise ManualInputRequiredError(
                "basic authentication requires manual username/password input",
                reference=auth_key(provider, scope),
                suggestion=f"Run: cowork auth login {provider.value} --basic --scope {AuthScope(scope).value}",
            )
        raise UnsupportedMethodError(f"unsupported authentication method: {method}", reference=provider.value)

    async def test_auth(self, provider: ProviderType, scope: AuthScope) -> None:
        """Verify the stored credential against the provider's API.

        Raises:
            RecordNotFoundError: If no record is stored for provider and scope
            ProviderConstructionError: If a client cannot be built from the record
            ProviderAuthenticationError: If the provider rejects the credential
                or cannot be reached
        """
        provider = ProviderType(provider)
        scope = AuthScope(scope)
        key = auth_key(provider, scope)

        try:
            config = self.get_auth_config(provider, scope)
        except RecordNotFoundError as e:
            raise RecordNotFoundError(
                "no authentication configured",
                reference=key,
                suggestion=f"Run: cowork auth login {provider.value} --scope {scope.value}",
            ) from e

        try:
            client = self._provider_factory(
                config.provider_type,
                config.token,
                base_url=config.base_url,
                timeout=self._provider_timeout,
            )
        except ProviderConstructionError as e:
            raise type(e)(
                f"failed to create {provider.display_name} client for {scope.value} scope: {e.message}",
                provider_type=provider.value,
            ) from e

        try:
            await client.test_auth()
        except ProviderAuthenticationError as e:
            log.warning("auth_test_failed", provider=provider.value, scope=scope.value, status=e.status_code)
            raise ProviderAuthenticationError(
                f"{scope.value} credentials rejected: {e.message}",
                provider_type=provider.value,
                status_code=e.status_code,
            ) from e

        log.info("auth_test_ok", provider=provider.value, scope=scope.value)

    def resolve_auth_config(self, provider: ProviderType) -> tuple[AuthConfig, AuthScope]:
        """Return the project record if present, else the global one.

        Raises:
            RecordNotFoundError: If neither scope holds a record for provider
        """
        provider = ProviderType(provider)
        for scope in (AuthScope.PROJECT, AuthScope.GLOBAL):
            try:
                return self.get_auth_config(provider, scope), scope
            except RecordNotFoundError:
                continue

        raise RecordNotFoundError(
            f"{provider.display_name} authentication not configured in project or global scope",
            reference=provider.value,
            suggestion=f"Run: cowork auth login {provider.value}",
        )

    def __repr__(self) -> str:
        return f"AuthManager(global={self.global_store!r}, project={self.project_store!r})"
