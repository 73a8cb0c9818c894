"""Encrypted key-value persistence.

This package provides the storage primitive shared by every secret class in
cowork (provider credentials, git transport credentials, environment
variables):

- AES-256-GCM record encryption with a per-root random key
- Owner-only directory and file permissions
- Atomic record writes
- Prefix-filtered listing that skips unreadable entries

Example usage:

    from cowork.secure_store import SecureStore

    store = SecureStore.for_scope("auth", Path("~/.config/cowork").expanduser())
    store.set("github_global", {"token": "..."})
    record = store.get("github_global")
"""

from .cipher import KEY_SIZE, NONCE_SIZE, TAG_SIZE, RecordCipher, generate_key
from .store import SecureStore, sanitize_key

__all__ = [
    "SecureStore",
    "sanitize_key",
    "RecordCipher",
    "generate_key",
    "KEY_SIZE",
    "NONCE_SIZE",
    "TAG_SIZE",
]
