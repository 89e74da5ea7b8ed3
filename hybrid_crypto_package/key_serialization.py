# hybrid_crypto_package/key_serialization.py
"""
Portable key text for RSA-OAEP keys.

JWK is the default format and matches what a browser's WebCrypto exportKey("jwk")
produces for an RSA-OAEP / SHA-256 key. PEM (SubjectPublicKeyInfo / PKCS#8) is
accepted as well.
"""
import binascii
import json
from typing import Any, Dict, Optional

from Crypto.PublicKey import RSA
from Crypto.PublicKey.RSA import RsaKey
from Crypto.Util.number import inverse

import config
from .codec import b64url_to_int, int_to_b64url
from .exceptions import KeyImportError
from .key_generation import KeyHalf


JWK_ALG = "RSA-OAEP-256"
PEM_PREFIX = "-----BEGIN"

_PUBLIC_MEMBERS = ("n", "e")
_PRIVATE_MEMBERS = ("d", "p", "q")


def export_key(key: RsaKey, half: KeyHalf, fmt: Optional[str] = None) -> str:
    """
    Serializes one half of an RSA key to portable text.
    Args:
        key: An RsaKey. A private key can export either half.
        half: KeyHalf.PUBLIC or KeyHalf.PRIVATE.
        fmt: "jwk" or "pem"; defaults to config.KEY_EXPORT_FORMAT.
    """
    half = KeyHalf(half)
    fmt = (fmt or config.KEY_EXPORT_FORMAT).lower()

    if half is KeyHalf.PRIVATE and not key.has_private():
        raise ValueError("Cannot export the private half of a public-only key.")
    target = key if half is KeyHalf.PRIVATE else key.public_key()

    if fmt == "jwk":
        return json.dumps(_to_jwk(target, half), separators=(',', ':'))
    if fmt == "pem":
        if half is KeyHalf.PRIVATE:
            return target.export_key(format='PEM', pkcs=8).decode('ascii')
        return target.export_key(format='PEM').decode('ascii')
    raise ValueError(f"Unsupported key export format: {fmt}")


def _to_jwk(key: RsaKey, half: KeyHalf) -> Dict[str, Any]:
    jwk: Dict[str, Any] = {
        "kty": "RSA",
        "alg": JWK_ALG,
        "ext": True,
        "key_ops": ["encrypt"] if half is KeyHalf.PUBLIC else ["decrypt"],
        "n": int_to_b64url(key.n),
        "e": int_to_b64url(key.e),
    }
    if half is KeyHalf.PRIVATE:
        jwk.update({
            "d": int_to_b64url(key.d),
            "p": int_to_b64url(key.p),
            "q": int_to_b64url(key.q),
            "dp": int_to_b64url(key.d % (key.p - 1)),
            "dq": int_to_b64url(key.d % (key.q - 1)),
            "qi": int_to_b64url(inverse(key.q, key.p)),
        })
    return jwk


def import_key(portable: str, half: KeyHalf) -> RsaKey:
    """
    Parses portable key text (JWK or PEM) back into a usable RsaKey.
    Requesting the public half of private key text returns its public key.
    Raises:
        KeyImportError: malformed text, mismatched algorithm parameters, a key that
            is too small, or public-only text when the private half is requested.
    """
    half = KeyHalf(half)
    if not isinstance(portable, str) or not portable.strip():
        raise KeyImportError("Portable key text is empty or not a string.")

    text = portable.strip()
    if text.startswith(PEM_PREFIX):
        key = _from_pem(text)
    else:
        key = _from_jwk(text, half)

    if key.size_in_bits() < config.MIN_RSA_KEY_SIZE:
        raise KeyImportError(
            f"RSA modulus of {key.size_in_bits()} bits is below the minimum of {config.MIN_RSA_KEY_SIZE}."
        )

    if half is KeyHalf.PRIVATE:
        if not key.has_private():
            raise KeyImportError("Expected a private key but the text only holds a public key.")
        return key
    return key.public_key()


def _from_pem(text: str) -> RsaKey:
    try:
        return RSA.import_key(text)
    except (ValueError, IndexError, TypeError) as e:
        raise KeyImportError(f"Invalid PEM key: {e}") from e


def _from_jwk(text: str, half: KeyHalf) -> RsaKey:
    try:
        jwk = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise KeyImportError(f"Key text is neither PEM nor valid JWK JSON: {e}") from e
    if not isinstance(jwk, dict):
        raise KeyImportError("JWK must be a JSON object.")

    if jwk.get("kty") != "RSA":
        raise KeyImportError(f"Unsupported JWK key type: {jwk.get('kty')!r}")
    if "alg" in jwk and jwk["alg"] != JWK_ALG:
        raise KeyImportError(f"JWK algorithm {jwk['alg']!r} does not match {JWK_ALG}.")

    key_ops = jwk.get("key_ops")
    if key_ops is not None:
        wanted = "encrypt" if half is KeyHalf.PUBLIC else "decrypt"
        if not isinstance(key_ops, list):
            raise KeyImportError("JWK key_ops must be a list.")
        # a private JWK only lists "decrypt" but may still yield its public half
        derives_public = half is KeyHalf.PUBLIC and "decrypt" in key_ops and "d" in jwk
        if wanted not in key_ops and not derives_public:
            raise KeyImportError(f"JWK key_ops {key_ops!r} do not permit '{wanted}'.")

    has_private = any(m in jwk for m in _PRIVATE_MEMBERS)
    required = _PUBLIC_MEMBERS + _PRIVATE_MEMBERS if has_private else _PUBLIC_MEMBERS
    missing = [m for m in required if m not in jwk]
    if missing:
        raise KeyImportError(f"JWK is missing required members: {', '.join(missing)}")

    try:
        components = tuple(b64url_to_int(jwk[m]) for m in required)
        # with (n, e, d, p, q), RSA.construct checks the components are mutually consistent
        return RSA.construct(components)
    except (ValueError, TypeError, binascii.Error) as err:
        raise KeyImportError(f"Invalid RSA parameters in JWK: {err}") from err
