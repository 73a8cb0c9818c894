"""Provider clients for git hosting platforms.

Key Components:
    - GitProvider: Abstract base for hosting provider clients
    - GitHubProvider: GitHub (PyGithub)
    - GitLabProvider: GitLab REST API v4 (httpx)
    - BitbucketProvider: Bitbucket Cloud REST API 2.0 (httpx)
    - create_provider: Construct a client from a provider type and token

Example:
    >>> from cowork.providers import create_provider
    >>> provider = create_provider("gitlab", token, base_url="https://gitlab.example.com")
    >>> await provider.test_auth()
"""

from cowork.providers.base import GitProvider
from cowork.providers.bitbucket import BitbucketProvider
from cowork.providers.factory import ProviderFactory, create_provider
from cowork.providers.github import GitHubProvider
from cowork.providers.gitlab import GitLabProvider

__all__ = [
    "GitProvider",
    "GitHubProvider",
    "GitLabProvider",
    "BitbucketProvider",
    "ProviderFactory",
    "create_provider",
]
