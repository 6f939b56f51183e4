"""
Cryptographic primitives for AES-256-GCM field encryption.

This module provides:
- SecureKey: Validated 32-byte key wrapper with best-effort zeroization
- derive_key: Turn raw key bytes or a string secret into a SecureKey
- key_digest: Deterministic identifier of a key's bytes
- EncryptedData: IV plus ciphertext (auth tag appended)
- AesGcmCipher: AES-256-GCM encryption/decryption operations

Warning
-------
String secrets are turned into keys with a single SHA-256 pass. This is NOT
a password hashing function: there is no salt and no work factor. Only pass
high-entropy strings (e.g. ``secrets.token_urlsafe(32)``), never passwords.
"""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass
from typing import Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import ConfigError, DecryptionFailedError, InvalidKeyLengthError

# Cryptographic constants
AES_256_KEY_SIZE: int = 32  # 256 bits
NONCE_SIZE: int = 12  # 96 bits (standard for AES-GCM)
TAG_SIZE: int = 16  # 128 bits (authentication tag)
KEY_DIGEST_SIZE: int = 8  # leading SHA-256 bytes kept for the key id


class SecureKey:
    """
    Secure 32-byte key wrapper with automatic memory cleanup on deletion.

    Uses bytearray internally for mutable zeroing in __del__.
    Note: Python's garbage collector doesn't guarantee immediate cleanup,
    so this is best-effort zeroization.
    """

    __slots__ = ("_bytes",)

    def __init__(self, key_bytes: bytes | bytearray, message: str | None = None) -> None:
        """
        Create a SecureKey from raw bytes.

        Args:
            key_bytes: Raw key material, exactly 32 bytes
            message: Error message used when the length is wrong

        Raises:
            InvalidKeyLengthError: If key_bytes is not 32 bytes long
        """
        if not isinstance(key_bytes, (bytes, bytearray)):
            raise ConfigError("Key must be bytes or bytearray")
        if len(key_bytes) != AES_256_KEY_SIZE:
            raise InvalidKeyLengthError(
                message or f"Key must be {AES_256_KEY_SIZE} bytes, got {len(key_bytes)}"
            )
        self._bytes = bytearray(key_bytes)

    @classmethod
    def generate(cls) -> SecureKey:
        """Generate a cryptographically secure random 32-byte key."""
        return cls(secrets.token_bytes(AES_256_KEY_SIZE))

    def as_bytes(self) -> bytes:
        """Return key as immutable bytes."""
        return bytes(self._bytes)

    def __len__(self) -> int:
        return len(self._bytes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecureKey):
            return NotImplemented
        return secrets.compare_digest(bytes(self._bytes), bytes(other._bytes))

    def __hash__(self) -> int:
        return hash(key_digest(self))

    def __repr__(self) -> str:
        """Redacted representation to prevent accidental key disclosure."""
        return "SecureKey([REDACTED])"

    def __del__(self) -> None:
        """Zero memory on deletion (best-effort)."""
        if hasattr(self, "_bytes"):
            for i in range(len(self._bytes)):
                self._bytes[i] = 0


KeyInput = Union[str, bytes, bytearray, SecureKey]


def derive_key(secret: KeyInput) -> SecureKey:
    """
    Turn a caller-supplied secret into a 32-byte key.

    Raw key bytes are validated and passed through unchanged. Strings are
    hashed with SHA-256 over their UTF-8 encoding; the same string always
    yields the same key. See the module warning: this is not a KDF.

    Args:
        secret: 32 raw key bytes, an existing SecureKey, or a string secret

    Returns:
        SecureKey

    Raises:
        InvalidKeyLengthError: If raw key bytes are not 32 bytes long
        ConfigError: If secret has an unsupported type
    """
    if isinstance(secret, SecureKey):
        return secret
    if isinstance(secret, str):
        return SecureKey(hashlib.sha256(secret.encode("utf-8")).digest())
    if isinstance(secret, (bytes, bytearray)):
        return SecureKey(secret)
    raise ConfigError(f"Unsupported key type: {type(secret).__name__}")


def key_digest(key: SecureKey) -> str:
    """Hex digest identifying key in envelope metadata."""
    return hashlib.sha256(key.as_bytes()).digest()[:KEY_DIGEST_SIZE].hex()


@dataclass(frozen=True)
class EncryptedData:
    """
    Encrypted data container with nonce and ciphertext.

    The ciphertext includes the 16-byte authentication tag appended by AESGCM.
    """

    nonce: bytes  # 12 bytes
    ciphertext: bytes  # Ciphertext + 16-byte auth tag

    def to_aead_blob(self) -> bytes:
        """Convert to AEAD blob format: nonce || ciphertext || tag."""
        return self.nonce + self.ciphertext

    @classmethod
    def from_aead_blob(cls, blob: bytes) -> EncryptedData:
        """
        Parse from AEAD blob format: nonce || ciphertext || tag.

        Raises:
            ValueError: If blob is shorter than nonce plus tag
        """
        min_size = NONCE_SIZE + TAG_SIZE
        if len(blob) < min_size:
            raise ValueError(
                f"AEAD blob too small: expected at least {min_size} bytes, got {len(blob)}"
            )
        return cls(nonce=blob[:NONCE_SIZE], ciphertext=blob[NONCE_SIZE:])


class AesGcmCipher:
    """
    AES-256-GCM authenticated encryption bound to one key.

    The AESGCM handle is built once from the key so repeated calls don't
    re-import key material.
    """

    __slots__ = ("_aesgcm",)

    def __init__(self, key: SecureKey) -> None:
        self._aesgcm = AESGCM(key.as_bytes())

    def encrypt(self, plaintext: bytes) -> EncryptedData:
        """Encrypt plaintext under a freshly drawn nonce, without AAD."""
        nonce = generate_random_bytes(NONCE_SIZE)
        return EncryptedData(nonce=nonce, ciphertext=self._aesgcm.encrypt(nonce, plaintext, None))

    def decrypt(self, encrypted: EncryptedData) -> bytes:
        """
        Decrypt and authenticate ciphertext.

        Raises:
            DecryptionFailedError: If the nonce is malformed or authentication fails
        """
        if len(encrypted.nonce) != NONCE_SIZE:
            raise DecryptionFailedError(
                f"Invalid nonce size: expected {NONCE_SIZE}, got {len(encrypted.nonce)}"
            )

        try:
            return self._aesgcm.decrypt(encrypted.nonce, encrypted.ciphertext, None)
        except InvalidTag as e:
            # Generic error to prevent oracle attacks
            raise DecryptionFailedError("Decryption failed") from e


def generate_random_bytes(length: int) -> bytes:
    """
    Generate cryptographically secure random bytes.

    Args:
        length: Number of bytes to generate

    Returns:
        Random bytes of specified length
    """
    return secrets.token_bytes(length)
