"""Mock signing provider for tests and local development.

Implements lanyard's SigningProvider interface without real cryptography.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time
from typing import Any

from lanyard.core.signing_provider import ParsedToken, SigningProvider
from lanyard.exceptions import (
    InvalidSignatureError,
    MalformedTokenError,
    SigningError,
    TokenExpiredError,
    TokenValidationError,
)
from lanyard.models import UNSECURED, Claims, Validator


MOCK_METHODS = frozenset({UNSECURED, "HS256", "HS384", "HS512", "RS256", "ES256", "EdDSA"})


def _b64encode(data: dict[str, Any]) -> str:
    raw = json.dumps(data, separators=(",", ":"), sort_keys=True).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _b64decode(segment: str) -> dict[str, Any]:
    padded = segment + "=" * (-len(segment) % 4)
    data = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8"))
    if not isinstance(data, dict):
        raise ValueError("segment is not a JSON object")
    return data


def _digest(method: str, key: Any, signing_input: str) -> str:
    if method == UNSECURED:
        return ""
    material = f"{method}:{key!r}:{signing_input}".encode("utf-8")
    return hashlib.sha256(material).hexdigest()


class MockParsedToken(ParsedToken):
    """A mock token split into header, payload and digest."""

    def __init__(
        self,
        provider: MockSigningProvider,
        header: dict[str, Any],
        payload: dict[str, Any],
        signing_input: str,
        signature: str,
    ):
        self._provider = provider
        self._header = header
        self._payload = payload
        self._signing_input = signing_input
        self._signature = signature

    @property
    def header(self) -> dict[str, Any]:
        return dict(self._header)

    def claims(self) -> Claims:
        return Claims(self._payload)

    def validate(self, key: Any, method: str, *validators: Validator) -> None:
        self._provider.attempts.append((key, method))

        alg = self._header.get("alg")
        if alg != method:
            raise InvalidSignatureError(f"Signing method mismatch: token uses {alg}, expected {method}")
        expected = _digest(method, key, self._signing_input)
        if not hmac.compare_digest(expected, self._signature):
            raise InvalidSignatureError(f"Signature mismatch for key {key!r}")

        leeway = max((v.leeway for v in validators), default=0)
        now = time.time()
        exp = self._payload.get("exp")
        if exp is not None and exp < now - leeway:
            raise TokenExpiredError()
        nbf = self._payload.get("nbf")
        if nbf is not None and nbf > now + leeway:
            raise TokenValidationError("Token is not yet valid")

        claims = self.claims()
        for validator in validators:
            validator.validate(claims)


class MockSigningProvider(SigningProvider):
    """Mock signing provider that produces deterministic fake tokens.

    Mock tokens look like JWS compact tokens (three dot-separated segments),
    but the third segment is a SHA-256 digest over method, key and payload
    rather than a real signature. Any hashable-by-repr value works as a key.

    Every validate() call is recorded in ``attempts`` as a (key, method)
    tuple so tests can assert the order candidates were tried in.

    Note:
        - No actual cryptographic protection is provided
        - Perfect for unit tests of rotation and claims assembly
    """

    def __init__(self) -> None:
        self.attempts: list[tuple[Any, str]] = []

    def serialize(self, claims: Claims, method: str, key: Any) -> str:
        if not self.supports(method):
            raise SigningError(f"Unsupported signing method: {method}", method=method)
        if method != UNSECURED and key is None:
            raise SigningError(f"Signing method {method} requires a key", method=method)
        try:
            signing_input = f"{_b64encode({'alg': method, 'typ': 'JWT'})}.{_b64encode(dict(claims))}"
        except (TypeError, ValueError) as e:
            raise SigningError(f"Claims are not serializable: {e}", method=method) from e
        return f"{signing_input}.{_digest(method, key, signing_input)}"

    def parse(self, token: str) -> MockParsedToken:
        parts = token.split(".")
        if len(parts) != 3:
            raise MalformedTokenError("Malformed token: not enough segments")
        try:
            header = _b64decode(parts[0])
            payload = _b64decode(parts[1])
        except ValueError as e:
            # base64, UTF-8 and JSON decoding errors are all ValueErrors
            raise MalformedTokenError(f"Malformed token: {e}")
        return MockParsedToken(
            provider=self,
            header=header,
            payload=payload,
            signing_input=f"{parts[0]}.{parts[1]}",
            signature=parts[2],
        )

    def supports(self, method: str) -> bool:
        return method in MOCK_METHODS
