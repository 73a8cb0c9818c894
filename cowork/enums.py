"""Enumerations for providers, auth methods and credential scopes."""

from enum import Enum

from cowork.exceptions import ConfigurationError


class ProviderType(str, Enum):
    """Git hosting providers with API credentials."""

    GITHUB = "github"
    GITLAB = "gitlab"
    BITBUCKET = "bitbucket"

    def __str__(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        """Human-readable provider name."""
        return {
            ProviderType.GITHUB: "GitHub",
            ProviderType.GITLAB: "GitLab",
            ProviderType.BITBUCKET: "Bitbucket",
        }[self]

    @classmethod
    def parse(cls, name: str) -> "ProviderType":
        """Parse a provider name case-insensitively.

        Raises:
            ConfigurationError: If the name is not a supported provider
        """
        try:
            return cls(name.strip().lower())
        except ValueError as e:
            supported = ", ".join(p.value for p in cls)
            raise ConfigurationError(f"unsupported provider: {name} (supported: {supported})") from e


class AuthMethod(str, Enum):
    """How a hosting-provider credential authenticates."""

    TOKEN = "token"
    BASIC = "basic"
    SSH = "ssh"

    def __str__(self) -> str:
        return self.value


class GitAuthMethod(str, Enum):
    """How git transport authenticates against a remote."""

    SSH = "ssh"
    HTTPS = "https"
    TOKEN = "token"
    NONE = "none"

    def __str__(self) -> str:
        return self.value


class AuthScope(str, Enum):
    """Credential scope.

    Each scope is backed by its own store root. When both are consulted,
    project wins over global and records are never merged.
    """

    GLOBAL = "global"
    PROJECT = "project"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> "AuthScope":
        """Parse a scope name case-insensitively.

        Raises:
            ConfigurationError: If the name is not a known scope
        """
        try:
            return cls(name.strip().lower())
        except ValueError as e:
            supported = ", ".join(s.value for s in cls)
            raise ConfigurationError(f"unsupported scope: {name} (supported: {supported})") from e
