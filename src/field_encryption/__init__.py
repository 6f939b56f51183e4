"""
Field Encryption Library

Self-describing AES-256-GCM encryption for string field values, with key
rotation support.

Quick Start
-----------
```python
import asyncio
from field_encryption import Decrypter, Encrypter, derive_key

async def main():
    new_key = derive_key("a long, random, high-entropy secret")
    old_key = derive_key("the secret we used last year")

    encrypter = Encrypter(new_key)
    decrypter = Decrypter([new_key, old_key])

    stored = await encrypter.encrypt("Sensitive data")
    plaintext = await decrypter.decrypt(stored)

asyncio.run(main())
```

Key Features
------------
- **AES-256-GCM**: Authenticated encryption with a random 96-bit IV per value
- **Self-describing envelopes**: ``base64(metadata).base64(iv||ciphertext||tag)``
- **Key Rotation**: Old envelopes stay readable while new writes use the new key
- **Custom Encryption**: Plug in your own encrypt/decrypt functions instead
- **Memory Security**: Best-effort key zeroization on deletion

Modules
-------
- `crypto`: AES-256-GCM primitives and key derivation
- `envelope`: Envelope wire format
- `encrypter`: Encrypter (single active key)
- `decrypter`: Decrypter (rotation-aware key selection)
- `config`: Simple/custom configuration and environment loading
- `hook`: Field-level dispatcher for ORM/repository integration
- `errors`: Error types and exception classes
"""

__version__ = "0.1.0"

# ============================================================================
# Crypto Exports
# ============================================================================

from .crypto import (
    AES_256_KEY_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
    AesGcmCipher,
    EncryptedData,
    SecureKey,
    derive_key,
    generate_random_bytes,
    key_digest,
)

# ============================================================================
# Error Exports
# ============================================================================

from .errors import (
    ConfigError,
    DecryptionFailedError,
    EmptyKeyListError,
    EncryptionError,
    InvalidKeyLengthError,
    MalformedEnvelopeError,
)

# ============================================================================
# Envelope Exports
# ============================================================================

from .envelope import (
    ALGORITHM,
    ENVELOPE_VERSION,
    Envelope,
    EnvelopeMetadata,
)

# ============================================================================
# Engine Exports
# ============================================================================

from .encrypter import Encrypter
from .decrypter import Decrypter

# ============================================================================
# Configuration Exports
# ============================================================================

from .config import (
    CustomEncryption,
    EncryptionConfig,
    SimpleEncryption,
    is_custom_encryption,
    load_config_from_env,
)

from .hook import FieldEncryption

# ============================================================================
# Public API
# ============================================================================

__all__ = [
    # Version
    "__version__",
    # Crypto
    "AES_256_KEY_SIZE",
    "NONCE_SIZE",
    "TAG_SIZE",
    "AesGcmCipher",
    "EncryptedData",
    "SecureKey",
    "derive_key",
    "generate_random_bytes",
    "key_digest",
    # Errors
    "EncryptionError",
    "InvalidKeyLengthError",
    "EmptyKeyListError",
    "MalformedEnvelopeError",
    "DecryptionFailedError",
    "ConfigError",
    # Envelope
    "ALGORITHM",
    "ENVELOPE_VERSION",
    "Envelope",
    "EnvelopeMetadata",
    # Engine
    "Encrypter",
    "Decrypter",
    # Configuration
    "SimpleEncryption",
    "CustomEncryption",
    "EncryptionConfig",
    "is_custom_encryption",
    "load_config_from_env",
    "FieldEncryption",
]
