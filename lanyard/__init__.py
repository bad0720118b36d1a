"""Lanyard - Signed bearer tokens with key rotation.

Lanyard issues and verifies signed bearer tokens for authenticating callers
of a network service, delegating the cryptography to a signing provider.

Features:
- Claims assembly (issuer, audience, expiration, issued-at)
- Verification that rotates across keys and signing methods
- Backup signing configuration for verify-only key rollover
- Uniform 401-shaped authentication failures with the cause kept for logs
- FastAPI dependency for bearer token authentication
"""

from lanyard.core.factory import create_provider
from lanyard.core.signing_provider import ParsedToken, SigningProvider
from lanyard.exceptions import (
    AuthenticationError,
    ClaimRejectedError,
    ConfigurationError,
    InvalidSignatureError,
    LanyardError,
    MalformedTokenError,
    RotationExhaustedError,
    SigningError,
    TokenExpiredError,
    TokenValidationError,
)
from lanyard.keys import signing_key, str_to_keys, verifying_key
from lanyard.mock import MockSigningProvider
from lanyard.models import DEFAULT_METHOD, UNSECURED, Claims, KeyPair, Validator
from lanyard.providers import PyJWTProvider
from lanyard.rotation import Candidate, SigningConfig, iter_candidates, verify_candidates
from lanyard.settings import SignerSettings
from lanyard.signer import TokenSigner, decode

__version__ = "0.1.0"

__all__ = [
    # Entry point
    "TokenSigner",
    "decode",
    "SignerSettings",
    # Core interfaces
    "ParsedToken",
    "SigningProvider",
    "create_provider",
    # Providers
    "PyJWTProvider",
    "MockSigningProvider",
    # Models
    "Claims",
    "KeyPair",
    "Validator",
    # Constants
    "DEFAULT_METHOD",
    "UNSECURED",
    # Keys
    "signing_key",
    "str_to_keys",
    "verifying_key",
    # Rotation
    "Candidate",
    "SigningConfig",
    "iter_candidates",
    "verify_candidates",
    # Exceptions - Base
    "LanyardError",
    # Exceptions - Configuration / issuance
    "ConfigurationError",
    "SigningError",
    # Exceptions - Token
    "MalformedTokenError",
    "TokenValidationError",
    "InvalidSignatureError",
    "TokenExpiredError",
    "ClaimRejectedError",
    "RotationExhaustedError",
    # Exceptions - Authentication
    "AuthenticationError",
]
