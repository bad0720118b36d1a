"""Abstract signing provider interface.

This module defines the capability lanyard delegates cryptography to.
The interface is library-agnostic - implementations can sign with PyJWT,
joserfc, a KMS client, or anything else that can produce and check a
serialized token.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from lanyard.models import Claims, Validator


class ParsedToken(ABC):
    """A token that has been parsed structurally but not yet trusted.

    Implementations hold the raw token plus its decoded header and claims.
    """

    @property
    @abstractmethod
    def header(self) -> dict[str, Any]:
        """The decoded token header."""

    @abstractmethod
    def claims(self) -> Claims:
        """Return the token's claims WITHOUT any validation.

        WARNING: Never trust these claims for authorization decisions
        unless validate() has succeeded for some key.
        """

    @abstractmethod
    def validate(self, key: Any, method: str, *validators: Validator) -> None:
        """Validate the token against one key and one signing method.

        Args:
            key: The verification key (already extracted from any KeyPair)
            method: The signing method the token must have been signed with
            validators: Claim validators applied after the signature check

        Raises:
            TokenValidationError: If the signature, expiry or any validator
                rejects the token for this (key, method) candidate
        """


class SigningProvider(ABC):
    """Abstract interface for token serialization and signature checks.

    Implementations:
        - PyJWTProvider: JWS compact tokens via PyJWT
        - MockSigningProvider: In-memory tokens for tests
    """

    @abstractmethod
    def serialize(self, claims: Claims, method: str, key: Any) -> str:
        """Sign claims and serialize them into a token string.

        Args:
            claims: The claims to sign
            method: The signing method name
            key: The signing key (already extracted from any KeyPair)

        Returns:
            The serialized token

        Raises:
            SigningError: If the provider cannot produce a token
        """

    @abstractmethod
    def parse(self, token: str) -> ParsedToken:
        """Parse a token's structural envelope without verifying it.

        Raises:
            MalformedTokenError: If the token is not well-formed
        """

    @abstractmethod
    def supports(self, method: str) -> bool:
        """Return True if this provider implements the signing method."""
