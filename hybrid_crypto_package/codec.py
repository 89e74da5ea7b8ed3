# hybrid_crypto_package/codec.py
"""Text encodings for binary values carried in envelopes and portable keys."""
import base64
import binascii

from Crypto.Util.number import bytes_to_long, long_to_bytes

_URLSAFE_TO_STD = str.maketrans('-_', '+/')


def b64encode(data: bytes) -> str:
    """Standard base64 with padding, as used for iv, content and wrapped keys."""
    return base64.b64encode(data).decode('ascii')


def b64decode(text: str) -> bytes:
    """Strict inverse of b64encode. Raises binascii.Error (a ValueError) on bad input."""
    if not isinstance(text, str):
        raise TypeError(f"Expected base64 text, got {type(text).__name__}")
    try:
        return base64.b64decode(text.encode('ascii'), validate=True)
    except UnicodeEncodeError as e:
        raise binascii.Error(f"Non-ASCII character in base64 text: {e}") from e


def b64url_encode(data: bytes) -> str:
    # JWK members are base64url without padding (RFC 7515 section 2)
    return base64.urlsafe_b64encode(data).rstrip(b'=').decode('ascii')


def b64url_decode(text: str) -> bytes:
    if not isinstance(text, str):
        raise TypeError(f"Expected base64url text, got {type(text).__name__}")
    if '=' in text:
        text = text.rstrip('=')
    padded = text + '=' * (-len(text) % 4)
    try:
        return base64.b64decode(padded.translate(_URLSAFE_TO_STD).encode('ascii'), validate=True)
    except UnicodeEncodeError as e:
        raise binascii.Error(f"Non-ASCII character in base64url text: {e}") from e


def int_to_b64url(value: int) -> str:
    return b64url_encode(long_to_bytes(value))


def b64url_to_int(text: str) -> int:
    raw = b64url_decode(text)
    if not raw:
        raise ValueError("Empty integer value")
    return bytes_to_long(raw)
