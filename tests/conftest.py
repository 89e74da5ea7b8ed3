"""Shared fixtures: RSA key generation is slow, so identities are created once per session."""
import pytest

from hybrid_crypto_package import KeyHalf, export_key, generate_key_pair
from security import HybridCipher, WrapPolicy


@pytest.fixture(scope="session")
def alice():
    return generate_key_pair()


@pytest.fixture(scope="session")
def bob():
    return generate_key_pair()


@pytest.fixture(scope="session")
def carol():
    return generate_key_pair()


@pytest.fixture(scope="session")
def public_jwk():
    def _export(pair):
        return export_key(pair.public_key, KeyHalf.PUBLIC, fmt="jwk")
    return _export


@pytest.fixture
def cipher():
    return HybridCipher(wrap_policy=WrapPolicy.BEST_EFFORT, max_workers=1)
