# hybrid_crypto_package/symmetric_ciphers.py
from typing import Tuple

from Crypto.Cipher import AES
from Crypto.Random import get_random_bytes

import config


def generate_session_key() -> bytes:
    """Fresh AES-256 key for a single envelope."""
    return get_random_bytes(config.AES_KEY_BYTES)


def aes_gcm_encrypt(plaintext_bytes: bytes, aes_key_bytes: bytes) -> Tuple[bytes, bytes]:
    """
    Encrypts with AES-GCM under a freshly drawn 96-bit nonce.
    Returns:
        (nonce, ciphertext || tag). The 16-byte tag is appended to the ciphertext,
        the same layout WebCrypto produces.
    Raises:
        ValueError / TypeError: invalid key length or type.
    """
    nonce_bytes = get_random_bytes(config.GCM_NONCE_BYTES)
    cipher = AES.new(aes_key_bytes, AES.MODE_GCM, nonce=nonce_bytes, mac_len=config.GCM_TAG_BYTES)
    ciphertext_bytes, tag_bytes = cipher.encrypt_and_digest(plaintext_bytes)
    return nonce_bytes, ciphertext_bytes + tag_bytes


def aes_gcm_decrypt(nonce_bytes: bytes, sealed_bytes: bytes, aes_key_bytes: bytes) -> bytes:
    """
    Decrypts ciphertext || tag and verifies the tag.
    Raises:
        ValueError: tag mismatch ("MAC check failed") or content shorter than the tag.
    """
    if len(sealed_bytes) < config.GCM_TAG_BYTES:
        raise ValueError("Sealed content is shorter than the GCM tag.")
    ciphertext_bytes = sealed_bytes[:-config.GCM_TAG_BYTES]
    tag_bytes = sealed_bytes[-config.GCM_TAG_BYTES:]

    cipher = AES.new(aes_key_bytes, AES.MODE_GCM, nonce=nonce_bytes, mac_len=config.GCM_TAG_BYTES)
    return cipher.decrypt_and_verify(ciphertext_bytes, tag_bytes)
