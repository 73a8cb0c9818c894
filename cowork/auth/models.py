"""Credential records persisted by the auth manager.

Secret fields are excluded from ``repr()`` so a record can be logged or
printed without revealing its token, password or key material. Unset
optional fields are omitted from the stored JSON.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from cowork.enums import AuthMethod, GitAuthMethod, ProviderType


class AuthConfig(BaseModel):
    """Hosting-provider API credential."""

    model_config = ConfigDict(frozen=True)

    provider_type: ProviderType = Field(..., description="Hosting provider")
    auth_method: AuthMethod = Field(..., description="token, basic or ssh")
    token: str | None = Field(default=None, repr=False, description="API token")
    username: str | None = Field(default=None, description="Username for basic auth")
    password: str | None = Field(default=None, repr=False, description="Password for basic auth")
    base_url: str | None = Field(default=None, description="API base URL (self-hosted/enterprise)")
    expires_at: datetime | None = Field(default=None, description="Credential expiry")


class GitAuthConfig(BaseModel):
    """Git transport credential. One record per scope."""

    model_config = ConfigDict(frozen=True)

    auth_method: GitAuthMethod = Field(..., description="ssh, https, token or none")
    username: str | None = Field(default=None, description="HTTPS username")
    password: str | None = Field(default=None, repr=False, description="HTTPS password")
    token: str | None = Field(default=None, repr=False, description="Access token")
    ssh_key_path: str | None = Field(default=None, description="Path to a private key file")
    ssh_key: str | None = Field(default=None, repr=False, description="Inline private key material")
    expires_at: datetime | None = Field(default=None, description="Credential expiry")
