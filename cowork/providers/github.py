"""GitHub provider client using PyGithub."""

import asyncio

import requests
import structlog
from github import Auth, Github, GithubException  # type: ignore[import-not-found]

from cowork.enums import ProviderType
from cowork.exceptions import ProviderAuthenticationError
from cowork.providers.base import GitProvider

log = structlog.get_logger(__name__)

DEFAULT_GITHUB_API_URL = "https://api.github.com"


class GitHubProvider(GitProvider):
    """GitHub implementation using the PyGithub library."""

    def __init__(self, token: str, base_url: str | None = None, timeout: float = 30.0) -> None:
        """Initialize GitHub provider.

        Args:
            token: GitHub personal access token or App token
            base_url: GitHub API base URL (for GitHub Enterprise)
            timeout: Request timeout in seconds
        """
        super().__init__(token, base_url or DEFAULT_GITHUB_API_URL, timeout)
        self._client: Github | None = None

    @property
    def provider_type(self) -> ProviderType:
        return ProviderType.GITHUB

    def _get_client(self) -> Github:
        if self._client is None:
            self._client = Github(
                auth=Auth.Token(self.token),
                base_url=self.base_url,
                timeout=int(self.timeout),
            )
        return self._client

    async def test_auth(self) -> None:
        """Fetch the authenticated user in a worker thread."""

        def _whoami() -> str:
            return self._get_client().get_user().login

        try:
            login = await asyncio.to_thread(_whoami)
        except GithubException as e:
            log.error("github_auth_failed", base_url=self.base_url, status=e.status)
            raise ProviderAuthenticationError(
                "GitHub authentication failed",
                provider_type=ProviderType.GITHUB.value,
                status_code=e.status,
            ) from e
        except requests.RequestException as e:
            log.error("github_auth_request_failed", base_url=self.base_url, error=type(e).__name__)
            raise ProviderAuthenticationError(
                f"GitHub is unreachable: {type(e).__name__}",
                provider_type=ProviderType.GITHUB.value,
            ) from e

        log.info("github_auth_ok", base_url=self.base_url, login=login)

    async def close(self) -> None:
        """Close the underlying GitHub client."""
        if self._client:
            await asyncio.to_thread(self._client.close)
            self._client = None
