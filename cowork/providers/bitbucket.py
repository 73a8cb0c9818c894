"""Bitbucket Cloud provider client using direct REST API 2.0 calls."""

from cowork.enums import ProviderType
from cowork.providers.rest import RestProvider

DEFAULT_BITBUCKET_API_URL = "https://api.bitbucket.org/2.0"


class BitbucketProvider(RestProvider):
    """Bitbucket implementation authenticating with a Bearer access token."""

    def __init__(self, token: str, base_url: str | None = None, timeout: float = 30.0) -> None:
        """Initialize Bitbucket provider.

        Args:
            token: Repository, project or workspace access token
            base_url: Bitbucket API base URL
            timeout: Request timeout in seconds
        """
        super().__init__(token, base_url or DEFAULT_BITBUCKET_API_URL, timeout)

    @property
    def provider_type(self) -> ProviderType:
        return ProviderType.BITBUCKET

    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}
