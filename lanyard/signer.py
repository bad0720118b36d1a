"""Token signing and verification with key rotation.

TokenSigner holds the signing configuration a service sets up once at start:
keys, signing methods, issuer, audience, default expiration, an optional
claim validator and an optional backup signing configuration used only when
verifying.

TokenSigner is not internally synchronized. Configure it before serving
requests; sign(), decode() and verify() are then safe to call from many
threads. Swap in a new signer instead of mutating one that is serving.
"""

from __future__ import annotations

import time
from datetime import timedelta
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

import structlog

from lanyard.core.signing_provider import SigningProvider
from lanyard.exceptions import (
    AuthenticationError,
    ConfigurationError,
    MalformedTokenError,
    RotationExhaustedError,
)
from lanyard.keys import signing_key, str_to_keys
from lanyard.models import DEFAULT_METHOD, ISSUED_AT, UNSECURED, Claims, Validator
from lanyard.providers.pyjwt import PyJWTProvider
from lanyard.rotation import SigningConfig, iter_candidates, validate_methods, verify_candidates

if TYPE_CHECKING:
    from lanyard.settings import SignerSettings

log = structlog.get_logger()

Duration = Union[timedelta, int, float]


def _to_timedelta(value: Optional[Duration]) -> timedelta:
    if value is None:
        return timedelta(0)
    if isinstance(value, timedelta):
        return value
    return timedelta(seconds=value)


def decode(token: str, provider: Optional[SigningProvider] = None) -> Claims:
    """Parse a token and return its claims WITHOUT verifying anything.

    Raises:
        MalformedTokenError: If the token is not structurally well-formed
    """
    provider = provider or PyJWTProvider()
    return provider.parse(token).claims()


class TokenSigner:
    """Creates, decodes and verifies signed bearer tokens.

    With no keys the signer uses the unsecured method: tokens carry no
    signature. That is an explicit opt-out for local testing, never a
    fallback. With keys the signer uses HS256 until set_signing() says
    otherwise.

    Args:
        *keys: Signing keys, newest first. The first signs; all verify.
            A KeyPair signs with its private half and verifies with its
            public half.
        provider: The signing provider. Defaults to PyJWTProvider.

    Example:
        >>> signer = TokenSigner(b"current-secret", b"previous-secret")
        >>> signer.set_issuer("https://auth.example.com")
        >>> signer.set_expires_in(timedelta(hours=1))
        >>> token = signer.sign({"sub": "user-123"})
        >>> claims = signer.verify(token)
    """

    def __init__(self, *keys: Any, provider: Optional[SigningProvider] = None):
        self._provider = provider or PyJWTProvider()
        if keys:
            self._primary = SigningConfig.create([DEFAULT_METHOD], keys)
        else:
            self._primary = SigningConfig(methods=(UNSECURED,), keys=(None,))
        self._backup: Optional[SigningConfig] = None
        self._issuer = ""
        self._audience: tuple[str, ...] = ()
        self._expires_in = timedelta(0)
        self._validator: Optional[Validator] = None

    @classmethod
    def from_settings(
        cls,
        settings: SignerSettings,
        provider: Optional[SigningProvider] = None,
    ) -> TokenSigner:
        """Build a signer from environment-backed settings."""
        keys = str_to_keys(*settings.get_key_list())
        signer = cls(*keys, provider=provider)
        if keys:
            signer.set_signing(settings.method, *keys)
        backup_keys = str_to_keys(*settings.get_backup_key_list())
        if backup_keys:
            signer.set_backup_signing(settings.backup_method, *backup_keys)
        signer.set_issuer(settings.issuer)
        signer.set_audience(*settings.get_audience_list())
        signer.set_expires_in(settings.expires_in)
        return signer

    # ==================== Accessors ====================

    @property
    def provider(self) -> SigningProvider:
        return self._provider

    @property
    def issuer(self) -> str:
        return self._issuer

    @property
    def audience(self) -> tuple[str, ...]:
        return self._audience

    @property
    def expires_in(self) -> timedelta:
        return self._expires_in

    @property
    def primary(self) -> SigningConfig:
        return self._primary

    @property
    def backup(self) -> Optional[SigningConfig]:
        return self._backup

    @property
    def validator(self) -> Optional[Validator]:
        return self._validator

    @property
    def unsecured(self) -> bool:
        return self._primary.method == UNSECURED

    # ==================== Mutators ====================

    def set_issuer(self, issuer: str) -> None:
        """Set the ``iss`` claim added to new tokens. Empty disables it."""
        self._issuer = issuer

    def set_audience(self, *audience: str) -> None:
        """Set the ``aud`` claim added to new tokens. No arguments disables it."""
        self._audience = tuple(audience)

    def set_expires_in(self, expires_in: Optional[Duration]) -> None:
        """Set the default lifetime of new tokens. Zero or None disables ``exp``."""
        self._expires_in = _to_timedelta(expires_in)

    def set_signing(self, method: str, *keys: Any) -> None:
        """Replace the primary signing method and keys.

        Raises:
            ConfigurationError: On no keys, a None first key, an empty or
                unsupported method, or the unsecured method
        """
        self._primary = self._build_config([method], keys)

    def set_methods(self, *methods: str) -> None:
        """Replace the primary signing methods, keeping the keys.

        The first method signs; every method is tried for every key when
        verifying.

        Raises:
            ConfigurationError: On no methods, an unsupported method, or a
                signer that has no keys
        """
        if self.unsecured:
            raise ConfigurationError(
                "Unsecured signer has no keys; use set_signing() to add keys and methods",
                setting="method",
            )
        self._primary = self._build_config(methods, self._primary.keys)

    def set_backup_signing(self, method: str, *keys: Any) -> None:
        """Add a backup method and keys tried by verify() after the primary ones.

        The backup is never used to sign.

        Raises:
            ConfigurationError: On no keys, a None first key, an empty or
                unsupported method, or the unsecured method
        """
        self._backup = self._build_config([method], keys)

    def set_validator(self, validator: Validator) -> None:
        """Set the claim validator applied by verify(), replacing any previous one.

        Raises:
            ConfigurationError: If validator is None
        """
        if validator is None:
            raise ConfigurationError("Invalid validator", setting="validator")
        self._validator = validator

    def _build_config(self, methods: Any, keys: Any) -> SigningConfig:
        validate_methods(methods)
        for method in methods:
            if method == UNSECURED:
                raise ConfigurationError(
                    "Unsecured method cannot be combined with keys; construct TokenSigner() without keys",
                    setting="method",
                )
            if not self._provider.supports(method):
                raise ConfigurationError(f"Unsupported signing method: {method}", setting="method")
        return SigningConfig.create(methods, keys)

    # ==================== Tokens ====================

    def sign(self, content: Mapping[str, Any], expires_in: Optional[Duration] = None) -> str:
        """Create a token from the given content.

        The content is copied, never modified. ``iss`` and ``aud`` are added
        when configured. ``iat`` is added unless the content already has one.

        Args:
            content: Claims to sign
            expires_in: Lifetime for this token. Omitted means the configured
                default; zero means no ``exp`` even if a default is set.

        Returns:
            The serialized token

        Raises:
            SigningError: If the provider fails; never retried
        """
        claims = Claims(content)
        if self._issuer:
            claims.set_issuer(self._issuer)
        if self._audience:
            claims.set_audience(*self._audience)

        now = int(time.time())
        ttl = self._expires_in if expires_in is None else _to_timedelta(expires_in)
        if ttl > timedelta(0):
            claims.set_expiration(now + int(ttl.total_seconds()))
        if not claims.has(ISSUED_AT):
            claims.set_issued_at(now)

        return self._provider.serialize(claims, self._primary.method, signing_key(self._primary.key))

    def decode(self, token: str) -> Claims:
        """Parse a token WITHOUT verifying its signature, expiry or claims.

        Never use the result for authentication.

        Raises:
            MalformedTokenError: If the token is not structurally well-formed
        """
        return self._provider.parse(token).claims()

    def verify(self, token: str) -> Claims:
        """Verify a token against every configured key and method in turn.

        Candidates are the primary keys x primary methods (key-major), then
        the backup keys x backup method. The first that validates wins.

        Returns:
            The verified claims

        Raises:
            AuthenticationError: For every failure. ``cause`` holds the
                structural parse error, or the last candidate's
                validation error.
        """
        try:
            parsed = self._provider.parse(token)
        except MalformedTokenError as e:
            log.info("token_parse_failed", error=e.message)
            raise AuthenticationError(detail=e.message, cause=e) from e

        validators = (self._validator,) if self._validator is not None else ()
        try:
            claims = verify_candidates(parsed, iter_candidates(self._primary, self._backup), validators)
        except RotationExhaustedError as e:
            cause = e.last_error if e.last_error is not None else e
            log.info("token_rejected", code=cause.code, attempts=e.attempts)
            raise AuthenticationError(detail=cause.message, cause=cause) from cause

        log.debug("token_verified", sub=claims.subject)
        return claims
