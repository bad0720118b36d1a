"""PyJWT signing provider.

This module provides JWS compact serialization and verification with:
- Every algorithm PyJWT registers (HMAC, RSA, RSA-PSS, ECDSA, EdDSA)
- Explicit unsecured ("none") tokens, accepted only under the "none" method
- Expiry and not-before checks with the validator's leeway
"""

from __future__ import annotations

from typing import Any

import jwt
import structlog
from jwt.algorithms import get_default_algorithms

from lanyard.core.signing_provider import ParsedToken, SigningProvider
from lanyard.exceptions import (
    InvalidSignatureError,
    MalformedTokenError,
    SigningError,
    TokenExpiredError,
    TokenValidationError,
)
from lanyard.models import UNSECURED, Claims, Validator

log = structlog.get_logger()

# PyJWT checks the signature, exp and nbf only; claim contents belong to validators
CLAIM_OPTIONS = {
    "verify_exp": True,
    "verify_nbf": True,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
}


class PyJWTParsedToken(ParsedToken):
    """A JWS compact token decoded by PyJWT but not yet verified."""

    def __init__(
        self,
        token: str,
        header: dict[str, Any],
        payload: dict[str, Any],
        signature: bytes,
    ):
        self._token = token
        self._header = header
        self._payload = payload
        self._signature = signature

    @property
    def header(self) -> dict[str, Any]:
        return dict(self._header)

    def claims(self) -> Claims:
        return Claims(self._payload)

    def _check_unsecured(self) -> None:
        alg = self._header.get("alg")
        if alg != UNSECURED:
            raise InvalidSignatureError(f"Signing method mismatch: token uses {alg}, expected none")
        if self._signature:
            raise InvalidSignatureError("Unsecured token must not carry a signature")

    def validate(self, key: Any, method: str, *validators: Validator) -> None:
        leeway = max((v.leeway for v in validators), default=0)
        try:
            if method == UNSECURED:
                self._check_unsecured()
                payload = jwt.decode(
                    self._token,
                    options={"verify_signature": False, **CLAIM_OPTIONS},
                    leeway=leeway,
                )
            else:
                payload = jwt.decode(
                    self._token,
                    key,
                    algorithms=[method],
                    options=CLAIM_OPTIONS,
                    leeway=leeway,
                )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError()
        except jwt.InvalidSignatureError:
            raise InvalidSignatureError()
        except jwt.InvalidAlgorithmError:
            raise InvalidSignatureError(
                f"Signing method mismatch: token uses {self._header.get('alg')}, expected {method}"
            )
        except jwt.PyJWTError as e:
            raise TokenValidationError(f"Invalid token: {e}")
        except (TypeError, ValueError) as e:
            # PyJWT raises these when the key cannot be used with the method
            raise InvalidSignatureError(f"Key cannot verify {method} signature: {e}")

        claims = Claims(payload)
        for validator in validators:
            validator.validate(claims)


class PyJWTProvider(SigningProvider):
    """Signing provider backed by PyJWT.

    Keys are whatever PyJWT accepts for the method: bytes or str secrets
    for HMAC, PEM strings or ``cryptography`` key objects for asymmetric
    methods, and None for the unsecured method.

    Example:
        >>> provider = PyJWTProvider()
        >>> token = provider.serialize(Claims(sub="user-1"), "HS256", b"secret")
        >>> provider.parse(token).validate(b"secret", "HS256")
    """

    def serialize(self, claims: Claims, method: str, key: Any) -> str:
        try:
            return jwt.encode(dict(claims), key, algorithm=method)
        except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as e:
            log.warning("signing_failed", method=method, error=str(e))
            raise SigningError(f"Failed to sign token: {e}", method=method) from e

    def parse(self, token: str) -> PyJWTParsedToken:
        try:
            decoded = jwt.api_jwt.decode_complete(
                token,
                options={"verify_signature": False, "verify_sub": False, "verify_jti": False},
            )
        except jwt.PyJWTError as e:
            raise MalformedTokenError(f"Malformed token: {e}")

        return PyJWTParsedToken(
            token=token,
            header=decoded["header"],
            payload=decoded["payload"],
            signature=decoded["signature"],
        )

    def supports(self, method: str) -> bool:
        return method in get_default_algorithms()
