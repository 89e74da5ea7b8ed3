# --- File: security/hybrid_cipher.py ---
import logging
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Union

from Crypto.PublicKey.RSA import RsaKey

import config
from hybrid_crypto_package import (
    ContentAuthenticationFailed,
    KeyHalf,
    KeyImportError,
    KeyUnwrapFailed,
    NoKeyForRecipient,
    PayloadNotText,
    RecipientWrapFailed,
    aes_gcm_decrypt,
    aes_gcm_encrypt,
    b64encode,
    generate_session_key,
    import_key,
    rsa_unwrap_key,
    rsa_wrap_key,
)
from .secure_envelope import Envelope, deserialize_envelope, serialize_envelope

logger = logging.getLogger(__name__)

PublicKeyLike = Union[str, RsaKey]
PrivateKeyLike = Union[str, RsaKey]
Recipient = Tuple[str, PublicKeyLike]


class WrapPolicy(str, Enum):
    STRICT = "strict"           # any recipient failure fails the whole encrypt
    BEST_EFFORT = "best-effort" # failed recipients are left out of the envelope


class HybridCipher:
    """
    Encrypts a payload once for many recipients and decrypts an envelope for one.

    Each encrypt draws a fresh AES-256 session key and 96-bit IV, seals the payload
    with AES-GCM and wraps the session key separately for every recipient with
    RSA-OAEP-256. Decrypt reverses this for a single identity.
    """
    def __init__(self, wrap_policy: Optional[Union[WrapPolicy, str]] = None, max_workers: Optional[int] = None):
        self.wrap_policy = WrapPolicy(wrap_policy or config.ENVELOPE_WRAP_POLICY)
        self.max_workers = max_workers if max_workers is not None else config.WRAP_MAX_WORKERS
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1. Got {self.max_workers}.")

    # =========================================================================
    # Encrypt
    # =========================================================================

    def encrypt(self, plaintext: Union[str, bytes], recipients: Iterable[Recipient]) -> Envelope:
        """
        Args:
            plaintext: Text (UTF-8 encoded before sealing) or raw bytes.
            recipients: (identity, public key) pairs. Keys may be exported text or RsaKey handles.
        Returns:
            Envelope whose keys hold one wrapped session key per successfully wrapped recipient.
        Raises:
            RecipientWrapFailed: only under the strict policy.
        """
        if isinstance(plaintext, str):
            payload_bytes = plaintext.encode('utf-8')
        elif isinstance(plaintext, (bytes, bytearray)):
            payload_bytes = bytes(plaintext)
        else:
            raise TypeError(f"Unsupported payload type: {type(plaintext).__name__}")

        recipient_list = list(recipients)

        # 1-3. Fresh session key and IV, seal the payload
        session_key = generate_session_key()
        iv, sealed = aes_gcm_encrypt(payload_bytes, session_key)
        logger.debug(f"ENCRYPT: Sealed {len(payload_bytes)} payload bytes with AES-256-GCM.")

        # 4-5. Wrap the raw session key for every recipient
        keys: Dict[str, str] = {}
        for identity, wrapped, error in self._wrap_all(session_key, recipient_list):
            if error is not None:
                if self.wrap_policy is WrapPolicy.STRICT:
                    logger.error(f"ENCRYPT: Aborting, could not wrap session key for '{identity}': {error.reason}")
                    raise error
                logger.warning(f"ENCRYPT: Excluding recipient '{identity}': {error.reason}")
                continue
            if identity in keys:
                logger.debug(f"ENCRYPT: Recipient '{identity}' listed more than once; keeping the last entry.")
            keys[identity] = wrapped

        envelope = Envelope(iv=b64encode(iv), content=b64encode(sealed), keys=keys)
        logger.info(f"ENCRYPT: Created envelope for {len(keys)} of {len(recipient_list)} recipient(s).")
        return envelope

    def _wrap_all(self, session_key: bytes, recipients: List[Recipient]) -> List[Tuple[str, Optional[str], Optional[RecipientWrapFailed]]]:
        def wrap_one(recipient: Recipient):
            identity, public_key = recipient
            try:
                return identity, self._wrap_for(session_key, identity, public_key), None
            except RecipientWrapFailed as e:
                return identity, None, e

        if self.max_workers > 1 and len(recipients) > 1:
            workers = min(self.max_workers, len(recipients))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                # map keeps input order so "last entry wins" holds for duplicates
                return list(executor.map(wrap_one, recipients))
        return [wrap_one(r) for r in recipients]

    @staticmethod
    def _wrap_for(session_key: bytes, identity: str, public_key: PublicKeyLike) -> str:
        if not isinstance(identity, str) or not identity:
            raise RecipientWrapFailed(str(identity), "recipient identity must be a non-empty string")
        try:
            key = import_key(public_key, KeyHalf.PUBLIC) if isinstance(public_key, str) else public_key
            if not isinstance(key, RsaKey):
                raise TypeError(f"expected an RSA public key, got {type(key).__name__}")
            if key.size_in_bits() < config.MIN_RSA_KEY_SIZE:
                raise ValueError(f"{key.size_in_bits()}-bit RSA key is below the minimum of {config.MIN_RSA_KEY_SIZE}")
            return b64encode(rsa_wrap_key(session_key, key.public_key()))
        except (KeyImportError, ValueError, TypeError, RecursionError) as e:
            raise RecipientWrapFailed(identity, str(e)) from e

    # =========================================================================
    # Decrypt
    # =========================================================================

    def decrypt_bytes(self, envelope: Envelope, identity: str, private_key: PrivateKeyLike) -> bytes:
        """
        Recovers the payload bytes for one recipient.
        Raises:
            NoKeyForRecipient: the identity has no entry in envelope.keys.
            KeyUnwrapFailed: the private key does not unwrap the entry.
            ContentAuthenticationFailed: the GCM tag does not verify.
            KeyImportError: private_key is text that cannot be imported.
        """
        # 1. Locate this identity's wrapped key
        wrapped = envelope.wrapped_key_for(identity)
        if wrapped is None:
            logger.warning(f"DECRYPT (for {identity}): No wrapped key for this identity.")
            raise NoKeyForRecipient()

        if isinstance(private_key, str):
            private_key = import_key(private_key, KeyHalf.PRIVATE)

        # 2-3. Unwrap and rebuild the session key
        try:
            session_key = rsa_unwrap_key(wrapped, private_key)
        except (ValueError, TypeError) as e:
            logger.warning(f"DECRYPT (for {identity}): Session key unwrap failed.")
            raise KeyUnwrapFailed() from e
        if len(session_key) != config.AES_KEY_BYTES:
            logger.warning(f"DECRYPT (for {identity}): Unwrapped session key has unexpected length {len(session_key)}.")
            raise KeyUnwrapFailed()

        # 4. Open and verify the content
        try:
            payload_bytes = aes_gcm_decrypt(envelope.iv_bytes(), envelope.content_bytes(), session_key)
        except ValueError as e:
            logger.warning(f"DECRYPT (for {identity}): Content authentication failed.")
            raise ContentAuthenticationFailed() from e

        logger.debug(f"DECRYPT (for {identity}): Recovered {len(payload_bytes)} payload bytes.")
        return payload_bytes

    def decrypt(self, envelope: Envelope, identity: str, private_key: PrivateKeyLike) -> str:
        """
        Recovers a text payload for one recipient. See decrypt_bytes for the failure kinds.
        Raises:
            PayloadNotText: the payload authenticated but is not UTF-8; use decrypt_bytes for binary payloads.
        """
        payload_bytes = self.decrypt_bytes(envelope, identity, private_key)
        try:
            return payload_bytes.decode('utf-8')
        except UnicodeDecodeError as e:
            logger.warning(f"DECRYPT (for {identity}): Payload is not UTF-8 text.")
            raise PayloadNotText("Decrypted payload is not UTF-8 text; use decrypt_bytes.") from e


def encrypt_text(text: str, recipients: Iterable[Recipient], wrap_policy: Optional[Union[WrapPolicy, str]] = None) -> str:
    """Encrypts text for (identity, public key text) recipients and returns the serialized envelope."""
    return serialize_envelope(HybridCipher(wrap_policy=wrap_policy).encrypt(text, recipients))


def decrypt_text(envelope_text: str, private_key_text: PrivateKeyLike, identity: str) -> str:
    """Parses a serialized envelope and decrypts it for one identity."""
    envelope = deserialize_envelope(envelope_text)
    return HybridCipher().decrypt(envelope, identity, private_key_text)
