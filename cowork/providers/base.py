"""
Abstract base class for git hosting provider clients.

The auth manager only needs a client to identify its provider and to prove
that stored credentials are accepted. Repository, issue and pull request
operations are left to the concrete clients.
"""

from abc import ABC, abstractmethod

from cowork.enums import ProviderType


class GitProvider(ABC):
    """Contract every hosting provider client fulfils.

    Implementations normalize provider-specific authentication header formats
    (``Authorization: token``, ``PRIVATE-TOKEN``, ``Authorization: Bearer``)
    behind ``test_auth``.
    """

    def __init__(self, token: str, base_url: str, timeout: float = 30.0) -> None:
        """Initialize provider client.

        Args:
            token: API token
            base_url: API base URL, trailing slash removed
            timeout: Request timeout in seconds
        """
        self.token = token.strip() if token else token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    @abstractmethod
    def provider_type(self) -> ProviderType:
        """Provider this client talks to."""
        pass

    @abstractmethod
    async def test_auth(self) -> None:
        """Verify the credentials with a minimal read-only API call.

        Raises:
            ProviderAuthenticationError: If the provider rejects the
                credentials or cannot be reached.
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r})"
