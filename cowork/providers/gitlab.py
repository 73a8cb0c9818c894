"""GitLab provider client using direct REST API v4 calls."""

from cowork.enums import ProviderType
from cowork.providers.rest import RestProvider

DEFAULT_GITLAB_URL = "https://gitlab.com"


class GitLabProvider(RestProvider):
    """GitLab implementation for gitlab.com and self-hosted instances.

    The base URL is the instance root; API calls go to ``/api/v4``.
    Tokens are sent in the ``PRIVATE-TOKEN`` header.
    """

    def __init__(self, token: str, base_url: str | None = None, timeout: float = 30.0) -> None:
        """Initialize GitLab provider.

        Args:
            token: Personal access token with at least the read_user scope
            base_url: GitLab base URL (e.g., https://gitlab.example.com)
            timeout: Request timeout in seconds
        """
        super().__init__(token, base_url or DEFAULT_GITLAB_URL, timeout)

    @property
    def provider_type(self) -> ProviderType:
        return ProviderType.GITLAB

    def auth_headers(self) -> dict[str, str]:
        return {"PRIVATE-TOKEN": self.token}

    @property
    def api_url(self) -> str:
        return f"{self.base_url}/api/v4"
