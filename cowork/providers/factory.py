"""Factory for creating hosting provider clients from stored credentials."""

from collections.abc import Callable

import structlog

from cowork.enums import ProviderType
from cowork.exceptions import ProviderConstructionError, UnsupportedProviderError
from cowork.providers.base import GitProvider
from cowork.providers.bitbucket import BitbucketProvider
from cowork.providers.github import GitHubProvider
from cowork.providers.gitlab import GitLabProvider

log = structlog.get_logger(__name__)

ProviderFactory = Callable[..., GitProvider]

_PROVIDER_CLASSES: dict[ProviderType, type[GitProvider]] = {
    ProviderType.GITHUB: GitHubProvider,
    ProviderType.GITLAB: GitLabProvider,
    ProviderType.BITBUCKET: BitbucketProvider,
}


def create_provider(
    provider_type: ProviderType | str,
    token: str | None,
    base_url: str | None = None,
    timeout: float = 30.0,
) -> GitProvider:
    """Create the client for a hosting provider.

    Args:
        provider_type: Provider to construct a client for
        token: API token
        base_url: Optional API base URL (self-hosted or enterprise)
        timeout: Request timeout in seconds

    Returns:
        GitProvider instance

    Raises:
        UnsupportedProviderError: If provider_type is not supported
        ProviderConstructionError: If no token is given

    Example:
        >>> provider = create_provider(ProviderType.GITHUB, "ghp_...")
        >>> await provider.test_auth()
    """
    try:
        provider = ProviderType(provider_type)
    except ValueError as e:
        raise UnsupportedProviderError(
            f"unsupported provider type: {provider_type}", provider_type=str(provider_type)
        ) from e

    if not token:
        raise ProviderConstructionError(f"{provider.display_name} token is required", provider_type=provider.value)

    log.info("creating_provider", provider=provider.value, base_url=base_url)
    return _PROVIDER_CLASSES[provider](token, base_url=base_url, timeout=timeout)
