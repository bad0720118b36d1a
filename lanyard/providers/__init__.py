"""Signing provider implementations."""

from lanyard.providers.pyjwt import PyJWTProvider

__all__ = [
    "PyJWTProvider",
]
