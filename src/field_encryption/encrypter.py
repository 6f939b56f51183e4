"""Encrypter bound to a single active key."""

from __future__ import annotations

from .crypto import AesGcmCipher, SecureKey, derive_key, key_digest
from .envelope import ALGORITHM, ENVELOPE_VERSION, Envelope, EnvelopeMetadata


class Encrypter:
    """
    Produces envelopes with one active key.

    The key is validated and the cipher handle and digest are derived in the
    constructor, so a bad key fails here and never on first encrypt.
    """

    def __init__(self, key: bytes | bytearray | SecureKey) -> None:
        """
        Args:
            key: 32-byte encryption key

        Raises:
            InvalidKeyLengthError: If key is not 32 bytes
        """
        if not isinstance(key, SecureKey):
            key = SecureKey(key, "Encryption key must be 32 bytes")
        self._cipher = AesGcmCipher(key)
        self._metadata = EnvelopeMetadata(
            version=ENVELOPE_VERSION,
            algorithm=ALGORITHM,
            key_digest=key_digest(key),
        )

    @classmethod
    def from_secret(cls, secret: str | bytes | bytearray | SecureKey) -> Encrypter:
        """Create an Encrypter from raw key bytes or a string secret."""
        return cls(derive_key(secret))

    @property
    def key_digest(self) -> str:
        return self._metadata.key_digest

    @property
    def version(self) -> int:
        return self._metadata.version

    @property
    def algorithm(self) -> str:
        return self._metadata.algorithm

    async def encrypt(self, plaintext: str) -> str:
        """
        Encrypt a string into an envelope.

        Args:
            plaintext: Value to encrypt (may be empty)

        Returns:
            Envelope string ``<base64 metadata>.<base64 iv||ciphertext||tag>``
        """
        if not isinstance(plaintext, str):
            raise TypeError(f"plaintext must be str, got {type(plaintext).__name__}")

        encrypted = self._cipher.encrypt(plaintext.encode("utf-8"))
        return Envelope(metadata=self._metadata, encrypted_data=encrypted).to_string()
