"""AES-256-GCM record encryption.

Blob layout: ``[12-byte nonce][ciphertext][16-byte authentication tag]``.
A fresh random nonce is drawn for every call to :meth:`RecordCipher.encrypt`,
so encrypting the same plaintext twice never yields the same blob.
"""

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from cowork.exceptions import DecryptionError, ShortCiphertextError

KEY_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16


def generate_key() -> bytes:
    """Generate a random 256-bit key."""
    return AESGCM.generate_key(bit_length=KEY_SIZE * 8)


class RecordCipher:
    """Authenticated encryption for store records.

    Example:
        >>> cipher = RecordCipher(generate_key())
        >>> blob = cipher.encrypt(b'{"token": "..."}')
        >>> cipher.decrypt(blob)
        b'{"token": "..."}'
    """

    def __init__(self, key: bytes) -> None:
        """Initialize cipher.

        Args:
            key: 32-byte symmetric key

        Raises:
            ValueError: If the key is not exactly 32 bytes
        """
        if len(key) != KEY_SIZE:
            raise ValueError(f"Encryption key must be {KEY_SIZE} bytes, got {len(key)}")
        self._aesgcm = AESGCM(key)

    def encrypt(self, plaintext: bytes) -> bytes:
        """Encrypt plaintext and prepend the nonce."""
        nonce = os.urandom(NONCE_SIZE)
        return nonce + self._aesgcm.encrypt(nonce, plaintext, None)

    def decrypt(self, blob: bytes) -> bytes:
        """Split off the nonce and open the remainder.

        Raises:
            ShortCiphertextError: If the blob is shorter than the nonce
            DecryptionError: If the authentication tag does not verify
        """
        if len(blob) < NONCE_SIZE:
            raise ShortCiphertextError("ciphertext too short")

        nonce, ciphertext = blob[:NONCE_SIZE], blob[NONCE_SIZE:]
        try:
            return self._aesgcm.decrypt(nonce, ciphertext, None)
        except InvalidTag as e:
            raise DecryptionError(
                "Authentication tag mismatch",
                suggestion="The record was tampered with or written under a different key",
            ) from e
