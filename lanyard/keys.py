"""Key extraction helpers.

Keys are opaque to lanyard. The only thing it knows about them is that a
KeyPair signs with its private half and verifies with its public half.
"""

from __future__ import annotations

from typing import Any

from lanyard.models import KeyPair


def signing_key(key: Any) -> Any:
    """Return the key to sign with: the private half of a KeyPair."""
    if isinstance(key, KeyPair):
        return key.private_key
    return key


def verifying_key(key: Any) -> Any:
    """Return the key to verify with: the public half of a KeyPair."""
    if isinstance(key, KeyPair):
        return key.public_key
    return key


def str_to_keys(*secrets: str) -> list[bytes]:
    """Convert string secrets to HMAC keys.

    Example:
        >>> signer = TokenSigner(*str_to_keys("current-secret", "previous-secret"))
    """
    return [secret.encode("utf-8") for secret in secrets]
