"""
Encryption configuration.

Two variants are supported:
- SimpleEncryption: built-in AES-256-GCM engine with a current key and
  optional previous keys for rotation
- CustomEncryption: caller-supplied encrypt/decrypt functions; the engine is
  not used at all
"""

from __future__ import annotations

import base64
import binascii
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple, Union

from dotenv import load_dotenv

from .crypto import KeyInput, SecureKey, derive_key
from .errors import ConfigError

# Prefix marking an environment value as base64-encoded raw key bytes
BASE64_KEY_PREFIX = "base64:"

CustomFunction = Callable[[str, Any, str], Union[str, Awaitable[str]]]


@dataclass(frozen=True)
class SimpleEncryption:
    """
    Built-in encryption configuration.

    Attributes:
        key: Current key. 32 raw bytes, or a string derived via SHA-256.
        previous_keys: Keys being phased out. Tried for decryption only.
    """

    key: KeyInput
    previous_keys: Tuple[KeyInput, ...] = ()

    def __post_init__(self) -> None:
        # Accept any sequence but store an immutable tuple
        object.__setattr__(self, "previous_keys", tuple(self.previous_keys))

    def encryption_key(self) -> SecureKey:
        return derive_key(self.key)

    def all_keys(self) -> List[SecureKey]:
        """Decryption candidates: current key first, then previous keys."""
        return [derive_key(k) for k in (self.key, *self.previous_keys)]

    def __repr__(self) -> str:
        return f"SimpleEncryption(key=[REDACTED], previous_keys=[{len(self.previous_keys)} REDACTED])"


@dataclass(frozen=True)
class CustomEncryption:
    """
    Custom encryption configuration.

    Both functions are called as ``fn(model, field, value)`` and may return a
    string or an awaitable resolving to one. Return values and exceptions are
    passed through untouched.
    """

    encrypt: CustomFunction
    decrypt: CustomFunction


EncryptionConfig = Union[SimpleEncryption, CustomEncryption]


def is_custom_encryption(config: EncryptionConfig) -> bool:
    """Return True if config selects caller-supplied functions."""
    if isinstance(config, CustomEncryption):
        return True
    if isinstance(config, SimpleEncryption):
        return False
    raise ConfigError(f"Unknown encryption config: {type(config).__name__}")


def _parse_key(value: str) -> KeyInput:
    value = value.strip()
    if not value.startswith(BASE64_KEY_PREFIX):
        return value
    try:
        return base64.b64decode(value[len(BASE64_KEY_PREFIX):], validate=True)
    except (binascii.Error, ValueError) as e:
        raise ConfigError(f"Invalid base64 key: {e}") from e


def load_config_from_env(
    env_file: Optional[Union[str, Path]] = None,
    prefix: str = "ENCRYPTION_",
) -> SimpleEncryption:
    """
    Build a SimpleEncryption config from environment variables.

    Variables (``.env`` is loaded first, existing variables win):
        {prefix}KEY: current key (required)
        {prefix}PREVIOUS_KEYS: comma-separated previous keys (optional)

    A value starting with ``base64:`` is decoded to raw key bytes, anything
    else is treated as a string secret.

    Args:
        env_file: Path to a .env file (defaults to dotenv's lookup)
        prefix: Variable name prefix

    Returns:
        SimpleEncryption

    Raises:
        ConfigError: If the key variable is missing or a key is invalid base64
    """
    load_dotenv(env_file)

    key_var = f"{prefix}KEY"
    raw_key = os.environ.get(key_var)
    if not raw_key:
        raise ConfigError(f"{key_var} must be set in environment or .env file")

    raw_previous = os.environ.get(f"{prefix}PREVIOUS_KEYS", "")
    previous: Sequence[KeyInput] = [
        _parse_key(item) for item in raw_previous.split(",") if item.strip()
    ]

    return SimpleEncryption(key=_parse_key(raw_key), previous_keys=tuple(previous))
