"""Provider and git transport credentials.

Key Components:
    - AuthManager: Scoped credential operations over two secure stores
    - AuthConfig: Hosting provider API credential record
    - GitAuthConfig: Git transport credential record
"""

from cowork.auth.git import GitAuthMixin, git_auth_key
from cowork.auth.manager import AuthManager, auth_key
from cowork.auth.models import AuthConfig, GitAuthConfig

__all__ = [
    "AuthManager",
    "AuthConfig",
    "GitAuthConfig",
    "GitAuthMixin",
    "auth_key",
    "git_auth_key",
]
