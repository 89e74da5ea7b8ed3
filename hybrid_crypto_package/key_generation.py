# hybrid_crypto_package/key_generation.py
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from Crypto.PublicKey import RSA
from Crypto.PublicKey.RSA import RsaKey

import config
from .exceptions import KeyGenerationFailed

logger = logging.getLogger(__name__)


class KeyHalf(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


@dataclass(frozen=True)
class KeyPair:
    """An RSA key pair. The public half is shareable; the private half stays with its owner."""
    public_key: RsaKey
    private_key: RsaKey

    @property
    def key_size(self) -> int:
        return self.public_key.size_in_bits()


def generate_key_pair(key_size: Optional[int] = None) -> KeyPair:
    """
    Generates an RSA key pair for RSA-OAEP key wrapping.
    Uses PyCryptodome's RSA.generate, which draws from the OS CSPRNG.
    Raises:
        KeyGenerationFailed: key size below the configured minimum, or the library failed.
    """
    bits = key_size if key_size is not None else config.RSA_KEY_SIZE
    if bits < config.MIN_RSA_KEY_SIZE:
        raise KeyGenerationFailed(
            f"RSA key size {bits} is below the minimum of {config.MIN_RSA_KEY_SIZE} bits."
        )

    logger.debug(f"Generating {bits}-bit RSA key pair...")
    try:
        private_key = RSA.generate(bits, e=config.RSA_PUBLIC_EXPONENT)
    except (ValueError, TypeError, OSError) as e:
        logger.error(f"RSA key generation failed: {e}")
        raise KeyGenerationFailed(f"RSA key generation failed: {e}") from e

    logger.info(f"Generated {bits}-bit RSA key pair.")
    return KeyPair(public_key=private_key.public_key(), private_key=private_key)
