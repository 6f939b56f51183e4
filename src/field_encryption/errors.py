"""
Exception classes for field encryption operations.

Every failure raised by the engine derives from EncryptionError. Errors from
user-supplied custom encryption functions are never wrapped.
"""

from __future__ import annotations


class EncryptionError(Exception):
    """Base exception for all field encryption operations."""

    pass


class InvalidKeyLengthError(EncryptionError):
    """Key material is not exactly 32 bytes."""

    pass


class EmptyKeyListError(EncryptionError):
    """Decrypter was constructed without any candidate keys."""

    pass


class MalformedEnvelopeError(EncryptionError):
    """Encrypted value does not have the envelope shape."""

    def __init__(self, message: str = "Malformed encrypted data") -> None:
        super().__init__(message)


class DecryptionFailedError(EncryptionError):
    """No candidate key matched, or authentication failed for every match."""

    pass


class ConfigError(EncryptionError):
    """Configuration error."""

    pass
