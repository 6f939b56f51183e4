"""Tests for the envelope wire format."""

from __future__ import annotations

import base64
import json

import pytest

from field_encryption import (
    ALGORITHM,
    ENVELOPE_VERSION,
    Encrypter,
    EncryptedData,
    Envelope,
    EnvelopeMetadata,
    MalformedEnvelopeError,
)


def _b64(data: bytes) -> str:
    return base64.standard_b64encode(data).decode("ascii")


def _metadata_segment(payload: object) -> str:
    return _b64(json.dumps(payload).encode("utf-8"))


VALID_PAYLOAD = _b64(b"\x01" * 12 + b"\x02" * 16)


class TestEnvelope:
    def test_to_string_layout(self) -> None:
        envelope = Envelope(
            metadata=EnvelopeMetadata(version=1, algorithm="AES-256-GCM", key_digest="abcd"),
            encrypted_data=EncryptedData(nonce=b"\x00" * 12, ciphertext=b"\xff" * 20),
        )
        header, payload = envelope.to_string().split(".")
        assert base64.b64decode(header) == b'{"v":1,"alg":"AES-256-GCM","kid":"abcd"}'
        assert base64.b64decode(payload) == b"\x00" * 12 + b"\xff" * 20

    def test_from_string_parses_to_string(self) -> None:
        envelope = Envelope(
            metadata=EnvelopeMetadata(version=1, algorithm="AES-256-GCM", key_digest="k1"),
            encrypted_data=EncryptedData(nonce=b"n" * 12, ciphertext=b"c" * 16),
        )
        assert Envelope.from_string(envelope.to_string()) == envelope

    async def test_encrypter_output_metadata(self, encrypter: Encrypter) -> None:
        parsed = Envelope.from_string(await encrypter.encrypt("hello"))
        assert parsed.metadata.version == ENVELOPE_VERSION
        assert parsed.metadata.algorithm == ALGORITHM
        assert parsed.metadata.key_digest == encrypter.key_digest

    def test_metadata_is_immutable(self) -> None:
        metadata = EnvelopeMetadata(version=1, algorithm="AES-256-GCM", key_digest="k")
        with pytest.raises(AttributeError):
            metadata.version = 2  # type: ignore[misc]


class TestMalformedEnvelope:
    @pytest.mark.parametrize(
        "data",
        [
            "not-encrypted",
            "",
            ".",
            "abc.",
            ".abc",
            "a.b.c",
            "!!!!." + VALID_PAYLOAD,
            _metadata_segment({"v": 1, "alg": "AES-256-GCM", "kid": "x"}) + ".!!!!",
        ],
    )
    def test_shape_errors(self, data: str) -> None:
        with pytest.raises(MalformedEnvelopeError, match="Malformed encrypted data"):
            Envelope.from_string(data)

    @pytest.mark.parametrize(
        "metadata",
        [
            [1, 2, 3],
            {"alg": "AES-256-GCM", "kid": "x"},
            {"v": "1", "alg": "AES-256-GCM", "kid": "x"},
            {"v": True, "alg": "AES-256-GCM", "kid": "x"},
            {"v": 1, "alg": 7, "kid": "x"},
            {"v": 1, "alg": "AES-256-GCM"},
        ],
    )
    def test_metadata_shape_errors(self, metadata: object) -> None:
        with pytest.raises(MalformedEnvelopeError):
            Envelope.from_string(_metadata_segment(metadata) + "." + VALID_PAYLOAD)

    @pytest.mark.parametrize(
        "header",
        [
            b"{not json",
            b"[" * 200_000,
            b"\xff\xfe",
            '{"v":1,"alg":"AES-256-GCM","kid":"x"}'.encode("utf-16"),
        ],
        ids=["invalid", "deeply-nested", "not-utf8", "utf16"],
    )
    def test_metadata_not_utf8_json(self, header: bytes) -> None:
        with pytest.raises(MalformedEnvelopeError, match="Malformed encrypted data"):
            Envelope.from_string(_b64(header) + "." + VALID_PAYLOAD)

    def test_payload_too_short(self) -> None:
        header = _metadata_segment({"v": 1, "alg": "AES-256-GCM", "kid": "x"})
        with pytest.raises(MalformedEnvelopeError):
            Envelope.from_string(header + "." + _b64(b"\x00" * 27))
