# security/__init__.py
from .hybrid_cipher import HybridCipher, WrapPolicy, decrypt_text, encrypt_text
from .key_manager import KeyManager
from .key_store import InMemoryPrivateKeyStore, JsonFilePrivateKeyStore, PrivateKeyStore
from .secure_envelope import Envelope, deserialize_envelope, serialize_envelope

__all__ = [
    "HybridCipher",
    "WrapPolicy",
    "encrypt_text",
    "decrypt_text",
    "KeyManager",
    "PrivateKeyStore",
    "InMemoryPrivateKeyStore",
    "JsonFilePrivateKeyStore",
    "Envelope",
    "serialize_envelope",
    "deserialize_envelope",
]
