# hybrid_crypto_package/exceptions.py
from typing import Optional


class EnvelopeCryptoError(Exception):
    """Base class for every error raised by the envelope encryption core."""


class KeyGenerationFailed(EnvelopeCryptoError):
    """Randomness or algorithm initialization failed while creating a key pair."""


class KeyImportError(EnvelopeCryptoError, ValueError):
    """Portable key text is malformed or does not match the expected algorithm."""


class MalformedEnvelope(EnvelopeCryptoError, ValueError):
    """Envelope text or fields are structurally invalid."""


class PayloadNotText(EnvelopeCryptoError, ValueError):
    """An authenticated payload is not valid UTF-8; read it with decrypt_bytes instead."""


class PrivateKeyUnavailable(EnvelopeCryptoError):
    """The local key store holds no private key for the requested identity."""


class RecipientWrapFailed(EnvelopeCryptoError):
    """The session key could not be wrapped for one recipient."""

    def __init__(self, identity: str, reason: Optional[str] = None):
        self.identity = identity
        self.reason = reason
        message = f"Could not wrap session key for recipient '{identity}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


# Decrypt-time failures. They share a base class and one message so callers can
# present a single "cannot decrypt" state without leaking which check failed.
CANNOT_DECRYPT_MESSAGE = "Envelope cannot be decrypted with the supplied identity and key."


class CannotDecrypt(EnvelopeCryptoError):
    def __init__(self, message: str = CANNOT_DECRYPT_MESSAGE):
        super().__init__(message)


class NoKeyForRecipient(CannotDecrypt):
    pass


class KeyUnwrapFailed(CannotDecrypt):
    pass


class ContentAuthenticationFailed(CannotDecrypt):
    pass
