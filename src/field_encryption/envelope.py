"""
Envelope wire format.

An envelope couples AES-GCM output with the metadata needed to decrypt it:

    base64(metadata-json) + "." + base64(iv || ciphertext || tag)

where metadata is ``{"v": <version>, "alg": <algorithm>, "kid": <key digest>}``.
Both segments use the standard base64 alphabet with padding, and the metadata
JSON is compact so two implementations sharing keys produce the same framing.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass

from .crypto import EncryptedData
from .errors import MalformedEnvelopeError

ENVELOPE_VERSION: int = 1
ALGORITHM: str = "AES-256-GCM"
SEPARATOR: str = "."


@dataclass(frozen=True)
class EnvelopeMetadata:
    """Self-describing header of an envelope."""

    version: int
    algorithm: str
    key_digest: str

    def to_json(self) -> str:
        return json.dumps(
            {"v": self.version, "alg": self.algorithm, "kid": self.key_digest},
            separators=(",", ":"),
        )

    @classmethod
    def from_json(cls, raw: bytes) -> EnvelopeMetadata:
        """
        Parse metadata JSON.

        Raises:
            MalformedEnvelopeError: If raw is not a JSON object of the expected shape
        """
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError, RecursionError) as e:
            raise MalformedEnvelopeError() from e

        if not isinstance(data, dict):
            raise MalformedEnvelopeError()

        version = data.get("v")
        algorithm = data.get("alg")
        digest = data.get("kid")
        # bool is a subclass of int
        if not isinstance(version, int) or isinstance(version, bool):
            raise MalformedEnvelopeError()
        if not isinstance(algorithm, str) or not isinstance(digest, str):
            raise MalformedEnvelopeError()

        return cls(version=version, algorithm=algorithm, key_digest=digest)


@dataclass(frozen=True)
class Envelope:
    """One encrypted value: metadata plus IV and authenticated ciphertext."""

    metadata: EnvelopeMetadata
    encrypted_data: EncryptedData

    def to_string(self) -> str:
        """Serialize to the dotted base64 wire format."""
        header = _b64encode(self.metadata.to_json().encode("utf-8"))
        payload = _b64encode(self.encrypted_data.to_aead_blob())
        return f"{header}{SEPARATOR}{payload}"

    @classmethod
    def from_string(cls, encoded: str) -> Envelope:
        """
        Parse the dotted base64 wire format.

        Args:
            encoded: Envelope string produced by to_string

        Returns:
            Envelope instance

        Raises:
            MalformedEnvelopeError: If the string does not have two non-empty
                base64 segments, the metadata is invalid, or the payload is
                shorter than IV plus tag
        """
        if not isinstance(encoded, str):
            raise MalformedEnvelopeError()

        parts = encoded.split(SEPARATOR)
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise MalformedEnvelopeError()

        header, payload = parts
        metadata = EnvelopeMetadata.from_json(_b64decode(header))

        try:
            encrypted_data = EncryptedData.from_aead_blob(_b64decode(payload))
        except ValueError as e:
            raise MalformedEnvelopeError() from e

        return cls(metadata=metadata, encrypted_data=encrypted_data)


def _b64encode(data: bytes) -> str:
    return base64.standard_b64encode(data).decode("ascii")


def _b64decode(segment: str) -> bytes:
    try:
        return base64.b64decode(segment, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedEnvelopeError() from e
