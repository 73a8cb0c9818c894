"""Shared httpx plumbing for providers that are called over plain REST."""

from abc import abstractmethod
from typing import Any

import httpx
import structlog

from cowork.exceptions import ProviderAuthenticationError
from cowork.providers.base import GitProvider

log = structlog.get_logger(__name__)


class RestProvider(GitProvider):
    """GitProvider that checks credentials with a GET on the current-user endpoint."""

    user_path: str = "/user"

    @property
    def api_url(self) -> str:
        """Root that request paths are resolved against."""
        return self.base_url

    @abstractmethod
    def auth_headers(self) -> dict[str, str]:
        """Headers carrying the credential for every request."""
        pass

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.api_url,
            timeout=self.timeout,
            headers={"Accept": "application/json", **self.auth_headers()},
        )

    async def get_current_user(self) -> dict[str, Any]:
        """Fetch the authenticated user.

        Raises:
            ProviderAuthenticationError: If the request fails or is rejected
        """
        provider = self.provider_type.value
        try:
            async with self._client() as client:
                response = await client.get(self.user_path)
        except httpx.HTTPError as e:
            log.error(f"{provider}_auth_request_failed", base_url=self.base_url, error=type(e).__name__)
            raise ProviderAuthenticationError(
                f"{self.provider_type.display_name} is unreachable: {type(e).__name__}",
                provider_type=provider,
            ) from e

        if response.status_code != 200:
            log.error(f"{provider}_auth_failed", base_url=self.base_url, status=response.status_code)
            raise ProviderAuthenticationError(
                f"{self.provider_type.display_name} authentication failed",
                provider_type=provider,
                status_code=response.status_code,
            )

        try:
            user = response.json()
        except ValueError:
            user = None
        if not isinstance(user, dict):
            log.error(f"{provider}_auth_unexpected_response", base_url=self.base_url)
            raise ProviderAuthenticationError(
                f"{self.provider_type.display_name} returned an unexpected response",
                provider_type=provider,
                status_code=response.status_code,
            )

        return user

    async def test_auth(self) -> None:
        user = await self.get_current_user()
        log.info(
            f"{self.provider_type.value}_auth_ok",
            base_url=self.base_url,
            user=user.get("username") or user.get("nickname"),
        )
