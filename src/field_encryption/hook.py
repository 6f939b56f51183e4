"""
Field-level encryption dispatcher.

FieldEncryption is the boundary an ORM or repository layer talks to. It takes
an EncryptionConfig and either drives the built-in Encrypter/Decrypter or
hands values straight to the caller's custom functions.

Discovering which fields are encrypted and walking relations is the caller's
job; FieldEncryption only works on values and flat records.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from .config import CustomEncryption, EncryptionConfig, SimpleEncryption
from .decrypter import Decrypter
from .encrypter import Encrypter
from .errors import ConfigError

logger = logging.getLogger(__name__)


class FieldEncryption:
    """
    Encrypts and decrypts individual field values according to a config.

    Example:
        ```python
        fields = FieldEncryption(SimpleEncryption(key=os.environ["ENCRYPTION_KEY"]))
        stored = await fields.encrypt_value("User", ssn_field, "123-45-6789")
        plain = await fields.decrypt_value("User", ssn_field, stored)
        ```
    """

    def __init__(self, config: EncryptionConfig) -> None:
        """
        Args:
            config: SimpleEncryption or CustomEncryption

        Raises:
            ConfigError: If config is neither variant
            InvalidKeyLengthError: If a simple config holds a bad raw key
        """
        self._config = config
        self._encrypter: Optional[Encrypter] = None
        self._decrypter: Optional[Decrypter] = None

        if isinstance(config, SimpleEncryption):
            self._encrypter = Encrypter(config.encryption_key())
            self._decrypter = Decrypter(config.all_keys())
            logger.info(
                "Field encryption enabled (AES-256-GCM, %d decryption key(s))",
                len(self._decrypter.key_digests),
            )
        elif isinstance(config, CustomEncryption):
            logger.info("Field encryption enabled (custom functions)")
        else:
            raise ConfigError(f"Unknown encryption config: {type(config).__name__}")

    @property
    def config(self) -> EncryptionConfig:
        return self._config

    @property
    def encrypter(self) -> Optional[Encrypter]:
        """Built-in encrypter, or None for a custom config."""
        return self._encrypter

    @property
    def decrypter(self) -> Optional[Decrypter]:
        """Built-in decrypter, or None for a custom config."""
        return self._decrypter

    async def encrypt_value(self, model: str, field: Any, value: str) -> str:
        """Encrypt one field value for storage."""
        config = self._config
        if isinstance(config, CustomEncryption):
            return await _call_custom(config.encrypt, model, field, value)
        return await self._encrypter.encrypt(value)

    async def decrypt_value(self, model: str, field: Any, value: str) -> str:
        """Decrypt one stored field value."""
        config = self._config
        if isinstance(config, CustomEncryption):
            return await _call_custom(config.decrypt, model, field, value)
        return await self._decrypter.decrypt(value)

    async def encrypt_record(
        self, model: str, fields: Mapping[str, Any], record: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """
        Encrypt the listed fields of a record.

        Args:
            model: Model name passed through to custom functions
            fields: Field name to opaque field descriptor
            record: Row data

        Returns:
            Shallow copy of record with encrypted values; None and absent
            fields are left as they are
        """
        return await self._transform_record(self.encrypt_value, model, fields, record)

    async def decrypt_record(
        self, model: str, fields: Mapping[str, Any], record: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """Decrypt the listed fields of a record. Any failure fails the whole record."""
        return await self._transform_record(self.decrypt_value, model, fields, record)

    @staticmethod
    async def _transform_record(
        transform: Callable[[str, Any, str], Awaitable[str]],
        model: str,
        fields: Mapping[str, Any],
        record: Mapping[str, Any],
    ) -> Dict[str, Any]:
        result = dict(record)
        for name, field in fields.items():
            value = result.get(name)
            if value is None:
                continue
            result[name] = await transform(model, field, value)
        return result


async def _call_custom(fn: Callable[..., Any], model: str, field: Any, value: str) -> str:
    # Result is returned as-is, without checking its type
    result = fn(model, field, value)
    if inspect.isawaitable(result):
        result = await result
    return result
