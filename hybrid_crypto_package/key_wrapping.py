# hybrid_crypto_package/key_wrapping.py
from Crypto.Cipher import PKCS1_OAEP
from Crypto.Hash import SHA256
from Crypto.PublicKey.RSA import RsaKey
from Crypto.Signature.pss import MGF1


def _oaep(key: RsaKey):
    # RSA-OAEP with SHA-256 and MGF1-SHA-256, i.e. WebCrypto's {name: "RSA-OAEP", hash: "SHA-256"}
    return PKCS1_OAEP.new(key, hashAlgo=SHA256, mgfunc=lambda x, y: MGF1(x, y, SHA256))


def rsa_wrap_key(symmetric_key_bytes: bytes, recipient_public_key: RsaKey) -> bytes:
    """
    Wraps raw session key bytes under a recipient's RSA public key.
    Raises:
        ValueError / TypeError: key too small for the payload or not an RSA key.
    """
    return _oaep(recipient_public_key).encrypt(symmetric_key_bytes)


def rsa_unwrap_key(wrapped_key_bytes: bytes, recipient_private_key: RsaKey) -> bytes:
    """
    Recovers raw session key bytes with the recipient's RSA private key.
    Raises:
        ValueError: the ciphertext was not produced for this key ("Incorrect decryption.").
        TypeError: the key has no private component.
    """
    return _oaep(recipient_private_key).decrypt(wrapped_key_bytes)
