"""Encrypted key-value store rooted at one directory.

Security Model:
- One random 256-bit key per store root, kept in ``<root>/.key`` (mode 600)
- Each record encrypted with AES-256-GCM into ``<root>/<sanitized-key>.enc``
- Store directory is mode 700, record and key files are mode 600
- Records are written to a temporary file and renamed into place

Key Lifecycle:
    A ``.key`` file that is not exactly 32 bytes is treated as absent and a new
    key is generated over it. Every record encrypted under the previous key is
    then permanently undecryptable. This is logged as a warning, not repaired.
    A new key is written to a temporary file and hard-linked to ``.key``, so
    the key file is never visible half-written. When two processes initialize
    an empty root, the loser of the link reads the winner's key.
"""

from __future__ import annotations

import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from cowork.exceptions import (
    DecryptionError,
    EncryptionError,
    RecordNotFoundError,
    ShortCiphertextError,
    StoreIOError,
)
from cowork.secure_store.cipher import KEY_SIZE, RecordCipher, generate_key

log = structlog.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

KEY_FILE_NAME = ".key"
RECORD_SUFFIX = ".enc"

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def sanitize_key(key: str) -> str:
    """Map a logical key to a filesystem-safe file stem.

    Every character outside ``[A-Za-z0-9_-]`` becomes ``_``. The mapping is
    not injective: ``"proj:a"`` and ``"proj a"`` name the same record.

    Example:
        >>> sanitize_key("env/API_KEY")
        'env_API_KEY'
    """
    return _UNSAFE_KEY_CHARS.sub("_", key)


class SecureStore:
    """Durable, encrypted storage for small JSON records.

    Values are pydantic models or any JSON-serializable value. Records are
    replaced wholesale on every ``set``.

    Example:
        >>> store = SecureStore(Path("~/.config/cowork/auth").expanduser())
        >>> store.set("github_global", config)
        >>> store.get("github_global", AuthConfig)
        >>> store.list("github", AuthConfig)
    """

    def __init__(self, root_dir: Path | str) -> None:
        """Open or initialize a store root.

        Args:
            root_dir: Directory holding the key file and the records

        Raises:
            StoreIOError: If the directory cannot be created or the key
                cannot be written
        """
        self.root = Path(root_dir)
        self._ensure_root()
        self._key = self._load_or_generate_key()
        self._cipher = RecordCipher(self._key)

    @classmethod
    def for_scope(cls, store_name: str, config_path: Path | str) -> SecureStore:
        """Open the named store under a scope's configuration directory.

        Args:
            store_name: Store name (e.g., 'auth', '.env')
            config_path: Global or project configuration directory

        Returns:
            SecureStore rooted at ``config_path / store_name``
        """
        return cls(Path(config_path) / store_name)

    @property
    def key_path(self) -> Path:
        return self.root / KEY_FILE_NAME

    def _ensure_root(self) -> None:
        existed = self.root.is_dir()
        try:
            self.root.mkdir(mode=0o700, parents=True, exist_ok=True)
            if not existed:
                # mkdir mode is filtered by the umask
                self.root.chmod(0o700)
        except OSError as e:
            raise StoreIOError(f"Failed to create store directory: {e}", reference=str(self.root)) from e

    def _read_key(self) -> bytes | None:
        """Read the key file, or None when it does not exist."""
        try:
            return self.key_path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreIOError(f"Failed to read key: {e}", reference=str(self.key_path)) from e

    def _publish_key(self, key: bytes) -> None:
        """Create the key file holding a complete key, or fail if one exists.

        The key is written and synced under a temporary name, then hard-linked
        to ``.key``. ``os.link`` never replaces an existing file, so a visible
        ``.key`` always holds the full key of whichever initializer linked first.

        Raises:
            FileExistsError: If ``.key`` already exists
            StoreIOError: If the key cannot be written
        """
        try:
            fd, temp_name = tempfile.mkstemp(dir=self.root, prefix=f"{KEY_FILE_NAME}.", suffix=".tmp")
        except OSError as e:
            raise StoreIOError(f"Failed to save key: {e}", reference=str(self.key_path)) from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(key)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(temp_name, 0o600)
            os.link(temp_name, self.key_path)
        except FileExistsError:
            raise
        except OSError as e:
            raise StoreIOError(f"Failed to save key: {e}", reference=str(self.key_path)) from e
        finally:
            try:
                os.unlink(temp_name)
            except FileNotFoundError:
                pass

    def _load_or_generate_key(self) -> bytes:
        """Load the store key or generate and persist a new one.

        Returns:
            32-byte key

        Raises:
            StoreIOError: If the key file cannot be read or written
        """
        existing = self._read_key()
        if existing is not None and len(existing) == KEY_SIZE:
            return existing

        key = generate_key()

        if existing is None:
            try:
                self._publish_key(key)
            except FileExistsError:
                existing = self._read_key()
                if existing is not None and len(existing) == KEY_SIZE:
                    log.debug("secure_store_key_race_lost", root=str(self.root))
                    return existing
            else:
                log.info("secure_store_key_generated", root=str(self.root))
                return key

        log.warning(
            "secure_store_key_regenerated",
            root=str(self.root),
            previous_size=len(existing) if existing is not None else None,
            note="records encrypted under the previous key are no longer readable",
        )
        self._write_atomic(self.key_path, key)
        return key

    def _record_path(self, key: str) -> Path:
        return self.root / f"{sanitize_key(key)}{RECORD_SUFFIX}"

    def _write_atomic(self, path: Path, data: bytes) -> None:
        """Write data to a temporary file in the root and rename it over path."""
        try:
            fd, temp_name = tempfile.mkstemp(dir=self.root, prefix=f".{path.name}.", suffix=".tmp")
        except OSError as e:
            raise StoreIOError(f"Failed to write {path.name}: {e}", reference=str(path)) from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.chmod(temp_name, 0o600)
            os.replace(temp_name, path)
        except OSError as e:
            try:
                os.unlink(temp_name)
            except FileNotFoundError:
                pass
            raise StoreIOError(f"Failed to write {path.name}: {e}", reference=str(path)) from e

    @staticmethod
    def _serialize(key: str, value: Any) -> bytes:
        if isinstance(value, BaseModel):
            return value.model_dump_json(exclude_none=True).encode("utf-8")
        try:
            return json.dumps(value).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise TypeError(f"Value for key {key!r} is not JSON serializable") from e

    def _decode(self, key: str, blob: bytes, model: type[M] | None) -> Any:
        """Decrypt a stored blob and decode its JSON payload.

        Raises:
            ShortCiphertextError: If the blob is shorter than the nonce
            DecryptionError: If the tag fails or the payload is malformed
        """
        try:
            plaintext = self._cipher.decrypt(blob)
        except ShortCiphertextError as e:
            raise ShortCiphertextError(e.message, reference=key) from e
        except DecryptionError as e:
            raise DecryptionError(e.message, reference=key, suggestion=e.suggestion) from e

        if model is not None:
            try:
                return model.model_validate_json(plaintext)
            except ValidationError as e:
                raise DecryptionError(
                    f"Stored payload is not a valid {model.__name__}", reference=key
                ) from e

        if not plaintext:
            return None

        try:
            return json.loads(plaintext)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecryptionError("Stored payload is not valid JSON", reference=key) from e

    def set(self, key: str, value: Any) -> None:
        """Encrypt and store a value, replacing any previous record.

        Args:
            key: Logical key (sanitized into the file name)
            value: Pydantic model or JSON-serializable value

        Raises:
            StoreIOError: If the record cannot be written
            TypeError: If the value cannot be serialized
        """
        data = self._serialize(key, value)
        self._write_atomic(self._record_path(key), self._cipher.encrypt(data))
        log.debug("secure_store_record_written", root=str(self.root), key=sanitize_key(key))

    def get(self, key: str, model: type[M] | None = None) -> Any:
        """Read and decrypt the record stored under key.

        Args:
            key: Logical key
            model: Optional pydantic model to validate the payload into

        Returns:
            The model instance, or the decoded JSON value when no model is given

        Raises:
            RecordNotFoundError: If no record exists for key
            ShortCiphertextError: If the stored bytes are shorter than the nonce
            DecryptionError: If the record fails authentication or decoding
            StoreIOError: If the file exists but cannot be read
        """
        path = self._record_path(key)
        try:
            blob = path.read_bytes()
        except FileNotFoundError as e:
            raise RecordNotFoundError(f"value not found for key: {key}", reference=key) from e
        except OSError as e:
            raise StoreIOError(f"Failed to read record: {e}", reference=key) from e

        return self._decode(key, blob, model)

    def delete(self, key: str, missing_ok: bool = False) -> None:
        """Remove the record stored under key.

        Args:
            key: Logical key
            missing_ok: Do not raise when the record does not exist

        Raises:
            RecordNotFoundError: If no record exists and missing_ok is False
            StoreIOError: If the file cannot be removed
        """
        path = self._record_path(key)
        try:
            path.unlink()
        except FileNotFoundError as e:
            if missing_ok:
                return
            raise RecordNotFoundError(f"value not found for key: {key}", reference=key) from e
        except OSError as e:
            raise StoreIOError(f"Failed to delete record: {e}", reference=key) from e

        log.debug("secure_store_record_deleted", root=str(self.root), key=sanitize_key(key))

    def _record_files(self, prefix: str) -> list[Path]:
        sanitized_prefix = sanitize_key(prefix)
        try:
            entries = sorted(self.root.iterdir())
        except OSError as e:
            raise StoreIOError(f"Failed to read store directory: {e}", reference=str(self.root)) from e

        return [
            entry
            for entry in entries
            if entry.suffix == RECORD_SUFFIX and entry.is_file() and entry.stem.startswith(sanitized_prefix)
        ]

    def list(self, prefix: str = "", model: type[M] | None = None) -> list[Any]:
        """Decode every record whose sanitized key starts with prefix.

        Entries that cannot be read, decrypted, parsed or validated against
        ``model`` are skipped and logged; they never fail the whole call.

        Args:
            prefix: Key prefix (sanitized before matching)
            model: Optional pydantic model every record must validate into

        Returns:
            Decoded records ordered by file name

        Raises:
            StoreIOError: If the store directory cannot be listed
        """
        records: list[Any] = []
        for path in self._record_files(prefix):
            try:
                record = self._decode(path.stem, path.read_bytes(), model)
            except (OSError, EncryptionError) as e:
                log.warning(
                    "secure_store_entry_skipped",
                    root=str(self.root),
                    file=path.name,
                    reason=type(e).__name__,
                )
                continue

            if record is None:
                log.warning("secure_store_entry_skipped", root=str(self.root), file=path.name, reason="empty")
                continue

            records.append(record)

        return records

    def list_keys(self, prefix: str = "") -> list[str]:
        """Sanitized keys of the records whose key starts with prefix."""
        return [path.stem for path in self._record_files(prefix)]

    def exists(self, key: str) -> bool:
        """Check whether a record is stored under key."""
        return self._record_path(key).is_file()

    def clear(self) -> None:
        """Delete every record in the store. The key file is kept.

        Raises:
            StoreIOError: If a record cannot be removed
        """
        for path in self._record_files(""):
            try:
                path.unlink()
            except OSError as e:
                raise StoreIOError(f"Failed to remove file {path.name}: {e}", reference=str(path)) from e

        log.info("secure_store_cleared", root=str(self.root))

    def size(self) -> int:
        """Number of records in the store."""
        return len(self._record_files(""))

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        return f"SecureStore(root={str(self.root)!r})"
