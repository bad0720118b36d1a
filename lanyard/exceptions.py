"""Lanyard exceptions.

All exceptions inherit from LanyardError for easy catching.
"""

from __future__ import annotations

from typing import Optional

HTTP_UNAUTHORIZED = 401


class LanyardError(Exception):
    """Base exception for Lanyard errors."""

    def __init__(self, message: str, code: str):
        self.message = message
        self.code = code
        super().__init__(message)


# ==================== Configuration Errors ====================


class ConfigurationError(LanyardError):
    """Raised when a signer is given invalid keys, methods or validators.

    Configuration errors are programmer errors: they surface at setup time
    and are never converted into an insecure fallback.
    """

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(message=message, code="INVALID_CONFIGURATION")
        self.setting = setting


# ==================== Issuance Errors ====================


class SigningError(LanyardError):
    """Raised when the signing provider fails to serialize a token."""

    def __init__(self, message: str, method: Optional[str] = None):
        super().__init__(message=message, code="SIGNING_FAILED")
        self.method = method


# ==================== Token Errors ====================


class MalformedTokenError(LanyardError):
    """Raised when a token is not structurally well-formed."""

    def __init__(self, message: str = "Malformed token"):
        super().__init__(message=message, code="MALFORMED_TOKEN")


class TokenValidationError(LanyardError):
    """Raised when a token fails validation against one (key, method) candidate."""

    def __init__(self, message: str = "Invalid token", code: str = "INVALID_TOKEN"):
        super().__init__(message=message, code=code)


class InvalidSignatureError(TokenValidationError):
    """Raised when token signature verification fails."""

    def __init__(self, message: str = "Token signature verification failed"):
        super().__init__(message=message, code="INVALID_SIGNATURE")


class TokenExpiredError(TokenValidationError):
    """Raised when token has expired."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message=message, code="TOKEN_EXPIRED")


class ClaimRejectedError(TokenValidationError):
    """Raised when a validator rejects the token's claims."""

    def __init__(self, message: str = "Token claims rejected", claim: Optional[str] = None):
        super().__init__(message=message, code="CLAIM_REJECTED")
        self.claim = claim


class RotationExhaustedError(TokenValidationError):
    """Raised when no (key, method) candidate validates a token.

    Carries the last validation error observed, not the first.
    """

    def __init__(self, last_error: Optional[TokenValidationError], attempts: int):
        message = last_error.message if last_error is not None else "No signing candidates"
        super().__init__(message=message, code="ROTATION_EXHAUSTED")
        self.last_error = last_error
        self.attempts = attempts


# ==================== Authentication Errors ====================


class AuthenticationError(LanyardError):
    """Raised at the verification boundary for every failure.

    The message is deliberately generic. The root cause is kept in ``cause``
    and its text in ``detail`` for logging.
    """

    status_code = HTTP_UNAUTHORIZED

    def __init__(
        self,
        detail: str = "",
        cause: Optional[BaseException] = None,
        message: str = "Authentication failed",
    ):
        super().__init__(message=message, code="UNAUTHORIZED")
        self.detail = detail
        self.cause = cause
