"""Shared pytest fixtures for lanyard tests."""

import pytest
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from lanyard import KeyPair, MockSigningProvider, TokenSigner

PRIMARY_SECRET = b"primary-secret-0123456789abcdef-xyz"
PREVIOUS_SECRET = b"previous-secret-0123456789abcdef-xyz"
UNKNOWN_SECRET = b"unknown-secret-0123456789abcdef-xyz"


@pytest.fixture
def mock_provider():
    """Fresh mock signing provider with an empty attempt log."""
    return MockSigningProvider()


@pytest.fixture
def hmac_signer():
    """Real HS256 signer with a current and a previous secret."""
    return TokenSigner(PRIMARY_SECRET, PREVIOUS_SECRET)


@pytest.fixture
def rsa_keypair():
    """RSA-2048 key pair."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return KeyPair(private_key=private_key, public_key=private_key.public_key())


@pytest.fixture
def ec_keypair():
    """P-256 key pair."""
    private_key = ec.generate_private_key(ec.SECP256R1())
    return KeyPair(private_key=private_key, public_key=private_key.public_key())
