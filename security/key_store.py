# --- File: security/key_store.py ---
import json
import logging
import os
from threading import Lock
from typing import Dict, List, Optional, Protocol, runtime_checkable

from Crypto.PublicKey.RSA import RsaKey

from hybrid_crypto_package import KeyHalf, KeyImportError, export_key, import_key

logger = logging.getLogger(__name__)


@runtime_checkable
class PrivateKeyStore(Protocol):
    """
    Identity -> private key storage local to the owning party.
    Keys are immutable once stored; put_if_absent is the only write.
    """
    def get(self, identity: str) -> Optional[RsaKey]: ...

    def put_if_absent(self, identity: str, key: RsaKey) -> RsaKey: ...

    def identities(self) -> List[str]: ...


class InMemoryPrivateKeyStore:
    """Private keys held in process memory only."""

    def __init__(self):
        self.lock = Lock()
        self._keys: Dict[str, RsaKey] = {}

    def get(self, identity: str) -> Optional[RsaKey]:
        with self.lock:
            return self._keys.get(identity)

    def put_if_absent(self, identity: str, key: RsaKey) -> RsaKey:
        if not key.has_private():
            raise ValueError(f"Refusing to store a public-only key for identity '{identity}'.")
        with self.lock:
            existing = self._keys.get(identity)
            if existing is not None:
                return existing
            self._keys[identity] = key
            try:
                self._persist()
            except Exception:
                del self._keys[identity]
                raise
            return key

    def _persist(self):
        """Hook called under the lock after a key is added. Nothing to do in memory."""

    def identities(self) -> List[str]:
        with self.lock:
            return list(self._keys.keys())


class JsonFilePrivateKeyStore(InMemoryPrivateKeyStore):
    """
    Private keys persisted as JWKs in a local JSON file readable only by its owner.
    The file is loaded once at construction and rewritten whenever a key is added.
    """

    def __init__(self, key_file_path: str):
        super().__init__()
        self.key_file_path = key_file_path
        self._load_keys()

    def _load_keys(self):
        """Loads private keys from the key file, if it exists."""
        if not os.path.exists(self.key_file_path):
            logger.info(f"No private key file at {self.key_file_path}; starting with an empty store.")
            return

        try:
            with open(self.key_file_path, 'r') as f:
                stored = json.load(f)
        except (IOError, ValueError, RecursionError) as e:
            logger.error(f"Error loading private keys from {self.key_file_path}: {e}")
            raise KeyImportError(f"Private key file {self.key_file_path} is unreadable: {e}") from e

        if not isinstance(stored, dict):
            raise KeyImportError(f"Private key file {self.key_file_path} must hold a JSON object.")

        for identity, portable in stored.items():
            # A bad entry is fatal: regenerating would orphan every envelope wrapped for the old key
            self._keys[identity] = import_key(portable, KeyHalf.PRIVATE)
        logger.info(f"Loaded {len(self._keys)} private key(s) from {self.key_file_path}")

    def _persist(self):
        """Writes all private keys to the key file. Caller holds the lock."""
        key_dir = os.path.dirname(self.key_file_path)
        if key_dir and not os.path.exists(key_dir):
            os.makedirs(key_dir, exist_ok=True)
            logger.info(f"Created directory for key file: {key_dir}")

        stored = {identity: export_key(key, KeyHalf.PRIVATE, fmt="jwk") for identity, key in self._keys.items()}
        tmp_path = f"{self.key_file_path}.tmp"
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            with os.fdopen(fd, 'w') as f:
                json.dump(stored, f, indent=4)
            os.replace(tmp_path, self.key_file_path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        os.chmod(self.key_file_path, 0o600)
        logger.info(f"Private keys saved to {self.key_file_path}")
