"""
Pytest configuration and fixtures for field encryption tests.
"""

from __future__ import annotations

import secrets
from pathlib import Path

import pytest

from field_encryption import AES_256_KEY_SIZE, Decrypter, Encrypter


def random_key() -> bytes:
    """Generate a random 32-byte key."""
    return secrets.token_bytes(AES_256_KEY_SIZE)


@pytest.fixture
def key() -> bytes:
    return random_key()


@pytest.fixture
def old_key() -> bytes:
    return random_key()


@pytest.fixture
def new_key() -> bytes:
    return random_key()


@pytest.fixture
def encrypter(key: bytes) -> Encrypter:
    return Encrypter(key)


@pytest.fixture
def decrypter(key: bytes) -> Decrypter:
    return Decrypter([key])


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Remove encryption variables and return an empty .env path."""
    for name in ("ENCRYPTION_KEY", "ENCRYPTION_PREVIOUS_KEYS", "APP_KEY", "APP_PREVIOUS_KEYS"):
        # setenv first so values loaded from .env are undone at teardown
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return tmp_path / ".env"
