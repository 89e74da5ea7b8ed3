# --- File: security/key_manager.py ---
import logging
from threading import Lock
from typing import Dict, Optional, Tuple

from Crypto.PublicKey.RSA import RsaKey

from hybrid_crypto_package import (
    KeyHalf,
    KeyPair,
    PrivateKeyUnavailable,
    export_key,
    generate_key_pair,
    import_key,
)
from .key_store import InMemoryPrivateKeyStore, PrivateKeyStore

logger = logging.getLogger(__name__)


class KeyManager:
    """
    Manages the RSA identity keys of the local party.
    Private keys live in the injected PrivateKeyStore and are only ever looked up for
    identities this party owns; public keys are exported as portable text for sharing.
    """
    def __init__(self, key_store: Optional[PrivateKeyStore] = None, key_size: Optional[int] = None):
        self.key_store = key_store if key_store is not None else InMemoryPrivateKeyStore()
        self.key_size = key_size
        self._identity_locks: Dict[str, Lock] = {}
        self._locks_guard = Lock()

    # =========================================================================
    # Key pair lifecycle
    # =========================================================================

    def generate_key_pair(self) -> KeyPair:
        """Generates a fresh key pair without storing it."""
        return generate_key_pair(self.key_size)

    def ensure_identity(self, identity: str) -> KeyPair:
        """
        Returns the identity's key pair, generating and storing it on first use.
        Concurrent first calls for the same identity generate exactly one key.
        """
        existing = self.key_store.get(identity)
        if existing is not None:
            return KeyPair(public_key=existing.public_key(), private_key=existing)

        with self._lock_for(identity):
            existing = self.key_store.get(identity)
            if existing is None:
                logger.info(f"No key found for identity '{identity}'. Generating new key pair.")
                pair = self.generate_key_pair()
                existing = self.key_store.put_if_absent(identity, pair.private_key)
            # the key is stored, later callers take the lock-free path above
            with self._locks_guard:
                self._identity_locks.pop(identity, None)
            return KeyPair(public_key=existing.public_key(), private_key=existing)

    def _lock_for(self, identity: str) -> Lock:
        with self._locks_guard:
            return self._identity_locks.setdefault(identity, Lock())

    def has_identity(self, identity: str) -> bool:
        return self.key_store.get(identity) is not None

    # =========================================================================
    # Portable keys
    # =========================================================================

    @staticmethod
    def export_key(key: RsaKey, half: KeyHalf, fmt: Optional[str] = None) -> str:
        return export_key(key, half, fmt)

    @staticmethod
    def import_key(portable: str, half: KeyHalf) -> RsaKey:
        return import_key(portable, half)

    def export_public_key(self, identity: str, fmt: Optional[str] = None) -> str:
        """Shareable public key text for one of this party's identities."""
        return export_key(self.private_key_for(identity), KeyHalf.PUBLIC, fmt)

    def private_key_for(self, identity: str) -> RsaKey:
        """Retrieves this party's private key for an identity it owns."""
        key = self.key_store.get(identity)
        if key is None:
            logger.warning(f"Private key not found for identity: {identity}")
            raise PrivateKeyUnavailable(f"No private key stored for identity '{identity}'.")
        return key

    def recipient_entry(self, identity: str, fmt: Optional[str] = None) -> Tuple[str, str]:
        """(identity, public key text) pair, e.g. for a sender adding itself to the recipients."""
        return identity, self.export_public_key(identity, fmt)
