"""Decrypter with support for key rotation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .crypto import AesGcmCipher, SecureKey, key_digest
from .envelope import ALGORITHM, ENVELOPE_VERSION, Envelope
from .errors import DecryptionFailedError, EmptyKeyListError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _CandidateKey:
    digest: str
    cipher: AesGcmCipher


class Decrypter:
    """
    Consumes envelopes using an ordered set of candidate keys.

    Conventionally the current key comes first, followed by keys being phased
    out. The envelope's key digest selects which candidates are tried.
    """

    def __init__(self, keys: Sequence[bytes | bytearray | SecureKey]) -> None:
        """
        Args:
            keys: Non-empty ordered list of 32-byte keys

        Raises:
            EmptyKeyListError: If keys is empty
            InvalidKeyLengthError: If any key is not 32 bytes
        """
        if len(keys) == 0:
            raise EmptyKeyListError("At least one decryption key must be provided")

        validated = [
            key if isinstance(key, SecureKey) else SecureKey(key, "Decryption key must be 32 bytes")
            for key in keys
        ]
        self._table: Tuple[_CandidateKey, ...] = tuple(
            _CandidateKey(digest=key_digest(key), cipher=AesGcmCipher(key)) for key in validated
        )

    @property
    def key_digests(self) -> List[str]:
        """Digests of the candidate keys, in candidate order."""
        return [entry.digest for entry in self._table]

    def _candidates(self, digest: str) -> List[AesGcmCipher]:
        return [entry.cipher for entry in self._table if entry.digest == digest]

    async def decrypt(self, data: str) -> str:
        """
        Decrypt an envelope string.

        Args:
            data: Envelope produced by Encrypter.encrypt

        Returns:
            Decrypted plaintext

        Raises:
            MalformedEnvelopeError: If data is not a well-formed envelope
            DecryptionFailedError: If no candidate key matches the envelope's
                key digest or authentication fails with every match
        """
        envelope = Envelope.from_string(data)
        metadata = envelope.metadata

        if metadata.version != ENVELOPE_VERSION:
            raise DecryptionFailedError(f"Unsupported encryption version: {metadata.version}")
        if metadata.algorithm != ALGORITHM:
            raise DecryptionFailedError(f"Unsupported encryption algorithm: {metadata.algorithm}")

        candidates = self._candidates(metadata.key_digest)
        if not candidates:
            logger.debug("No decryption key matches digest %s", metadata.key_digest)
            raise DecryptionFailedError("No matching decryption key found")

        for cipher in candidates:
            try:
                plaintext = cipher.decrypt(envelope.encrypted_data)
            except DecryptionFailedError:
                logger.debug("Authentication failed for key %s", metadata.key_digest)
                continue

            try:
                return plaintext.decode("utf-8")
            except UnicodeDecodeError as e:
                raise DecryptionFailedError("Decrypted data is not valid UTF-8") from e

        raise DecryptionFailedError("Decryption failed")
