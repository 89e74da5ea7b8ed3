# hybrid_crypto_package/__init__.py

"""
Hybrid Crypto Package (PyCryptodome)
Building blocks for multi-recipient envelope encryption:
- RSA key pair generation (2048-bit and up)
- Portable key export/import as JWK or PEM
- Symmetric encryption/decryption using AES-256-GCM
- Session key wrapping with RSA-OAEP (SHA-256)
"""
import logging

from .codec import b64decode, b64encode, b64url_decode, b64url_encode
from .exceptions import (
    CannotDecrypt,
    ContentAuthenticationFailed,
    EnvelopeCryptoError,
    KeyGenerationFailed,
    KeyImportError,
    KeyUnwrapFailed,
    MalformedEnvelope,
    NoKeyForRecipient,
    PayloadNotText,
    PrivateKeyUnavailable,
    RecipientWrapFailed,
)
from .key_generation import KeyHalf, KeyPair, generate_key_pair
from .key_serialization import export_key, import_key
from .key_wrapping import rsa_unwrap_key, rsa_wrap_key
from .symmetric_ciphers import aes_gcm_decrypt, aes_gcm_encrypt, generate_session_key

logger = logging.getLogger(__name__)
logger.debug("Hybrid Crypto Package initialized (PyCryptodome AES-GCM, RSA-OAEP-256)")

__all__ = [
    "b64encode",
    "b64decode",
    "b64url_encode",
    "b64url_decode",
    "KeyHalf",
    "KeyPair",
    "generate_key_pair",
    "export_key",
    "import_key",
    "generate_session_key",
    "aes_gcm_encrypt",
    "aes_gcm_decrypt",
    "rsa_wrap_key",
    "rsa_unwrap_key",
    "EnvelopeCryptoError",
    "KeyGenerationFailed",
    "KeyImportError",
    "MalformedEnvelope",
    "PayloadNotText",
    "PrivateKeyUnavailable",
    "RecipientWrapFailed",
    "CannotDecrypt",
    "NoKeyForRecipient",
    "KeyUnwrapFailed",
    "ContentAuthenticationFailed",
]
