"""Custom exception hierarchy for the cowork credential store.

Exception Hierarchy:
    CoworkError (base)
    ├── ConfigurationError
    ├── CredentialError
    │   ├── RecordNotFoundError
    │   ├── EncryptionError
    │   │   ├── DecryptionError
    │   │   └── ShortCiphertextError
    │   ├── MethodMismatchError
    │   ├── NoKeyFoundError
    │   ├── UnsupportedMethodError
    │   │   └── ManualInputRequiredError
    │   └── StoreIOError
    └── ProviderError
        ├── ProviderConstructionError
        │   └── UnsupportedProviderError
        └── ProviderAuthenticationError

Messages may name a store key, a scope or a provider. They must never contain
the secret value itself.

Example Usage:
    >>> from cowork.exceptions import RecordNotFoundError
    >>> try:
    ...     manager.get_auth_config(ProviderType.GITHUB, AuthScope.GLOBAL)
    ... except RecordNotFoundError as e:
    ...     print(e.message)
"""


class CoworkError(Exception):
    """Base exception for all cowork errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(CoworkError):
    """Configuration-related errors.

    Examples:
        - Settings file not found or not valid YAML
        - Malformed line in a KEY=VALUE env file
        - Unknown scope or provider name in user input
    """

    pass


class CredentialError(CoworkError):
    """Credential storage and lookup errors.

    Attributes:
        message: Human-readable error description
        reference: Store key, scope or provider the error refers to
        suggestion: Optional suggestion for resolution
    """

    def __init__(
        self,
        message: str,
        reference: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            reference: The store key or scope that failed
            suggestion: Optional suggestion for resolution
        """
        self.reference = reference
        self.suggestion = suggestion

        full_message = message
        if reference:
            full_message = f"{message} (reference: {reference})"
        if suggestion:
            full_message = f"{full_message}\nSuggestion: {suggestion}"

        super().__init__(full_message)
        # Preserve original message (super sets self.message to full_message)
        self.message = message


class RecordNotFoundError(CredentialError):
    """No record is stored under the requested key."""

    pass


class EncryptionError(CredentialError):
    """Encryption or decryption operation failed."""

    pass


class DecryptionError(EncryptionError):
    """Authentication tag did not verify or the payload is malformed.

    Raised for tampered files, files written under a different key, and
    plaintexts that are not valid JSON for the expected record type.
    """

    pass


class ShortCiphertextError(EncryptionError):
    """Stored bytes are shorter than the nonce."""

    pass


class MethodMismatchError(CredentialError):
    """Stored auth method differs from the one the accessor expects."""

    pass


class NoKeyFoundError(CredentialError):
    """SSH record holds neither a key path nor inline key material."""

    pass


class UnsupportedMethodError(CredentialError):
    """Authentication method is not supported by the requested operation."""

    pass


class ManualInputRequiredError(UnsupportedMethodError):
    """Credentials cannot be synthesized and must be entered by the user."""

    pass


class StoreIOError(CredentialError):
    """Filesystem operation on a store root failed."""

    pass


# =============================================================================
# Provider Errors
# =============================================================================


class ProviderError(CoworkError):
    """Base exception for git hosting provider errors.

    Attributes:
        message: Human-readable error description
        provider_type: Provider the error refers to (e.g., "github")
    """

    def __init__(self, message: str, provider_type: str | None = None) -> None:
        """Initialize exception.

        Args:
            message: Error message
            provider_type: Provider that failed
        """
        self.provider_type = provider_type

        full_message = message
        if provider_type:
            full_message = f"{message} (provider: {provider_type})"

        super().__init__(full_message)
        self.message = message


class ProviderConstructionError(ProviderError):
    """A provider client could not be constructed from stored credentials."""

    pass


class UnsupportedProviderError(ProviderConstructionError):
    """Provider type is not one of the supported hosting providers."""

    pass


class ProviderAuthenticationError(ProviderError):
    """Connectivity check against the provider failed.

    Attributes:
        status_code: HTTP status code (if applicable)
    """

    def __init__(
        self,
        message: str,
        provider_type: str | None = None,
        status_code: int | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            provider_type: Provider that rejected the credentials
            status_code: HTTP status code (if applicable)
        """
        self.status_code = status_code
        if status_code and f"HTTP {status_code}" not in message:
            message = f"{message} (HTTP {status_code})"
        super().__init__(message, provider_type=provider_type)
