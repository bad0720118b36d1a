"""PyJWT implementation of the signing provider."""

from lanyard.providers.pyjwt.provider import PyJWTParsedToken, PyJWTProvider

__all__ = [
    "PyJWTParsedToken",
    "PyJWTProvider",
]
