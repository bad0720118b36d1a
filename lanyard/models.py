"""Token models - claims, key pairs and validators."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional, Union

from lanyard.exceptions import ClaimRejectedError

# Reserved claim names (RFC 7519 section 4.1)
ISSUER = "iss"
AUDIENCE = "aud"
EXPIRATION = "exp"
ISSUED_AT = "iat"
SUBJECT = "sub"
NOT_BEFORE = "nbf"
JWT_ID = "jti"

# Signing method names
UNSECURED = "none"
DEFAULT_METHOD = "HS256"


def _to_timestamp(value: Union[datetime, int, float]) -> int:
    if isinstance(value, datetime):
        return int(value.timestamp())
    return int(value)


class Claims(dict):
    """The payload of a token: claim name to JSON-serializable value.

    Reserved claims have accessors; everything else is plain dict access.
    Timestamps are stored as integer Unix epoch seconds.
    """

    def has(self, name: str) -> bool:
        return name in self

    @property
    def issuer(self) -> Optional[str]:
        return self.get(ISSUER)

    def set_issuer(self, issuer: str) -> None:
        self[ISSUER] = issuer

    @property
    def audience(self) -> list[str]:
        """Audience as a list, whether stored as one string or many."""
        aud = self.get(AUDIENCE)
        if aud is None:
            return []
        if isinstance(aud, str):
            return [aud]
        return list(aud)

    def set_audience(self, *audience: str) -> None:
        # A single audience is a plain string, several are an array
        if len(audience) == 1:
            self[AUDIENCE] = audience[0]
        else:
            self[AUDIENCE] = list(audience)

    @property
    def expiration(self) -> Optional[int]:
        return self.get(EXPIRATION)

    def set_expiration(self, when: Union[datetime, int, float]) -> None:
        self[EXPIRATION] = _to_timestamp(when)

    @property
    def issued_at(self) -> Optional[int]:
        return self.get(ISSUED_AT)

    def set_issued_at(self, when: Union[datetime, int, float]) -> None:
        self[ISSUED_AT] = _to_timestamp(when)

    @property
    def subject(self) -> Optional[str]:
        return self.get(SUBJECT)

    @property
    def not_before(self) -> Optional[int]:
        return self.get(NOT_BEFORE)

    @property
    def jwt_id(self) -> Optional[str]:
        return self.get(JWT_ID)


@dataclass(frozen=True)
class KeyPair:
    """Private and public halves of one asymmetric identity.

    The private half signs, the public half verifies.
    """

    private_key: Any
    public_key: Any


@dataclass
class Validator:
    """Checks applied to claims after the signature has been verified.

    Args:
        issuer: Expected ``iss``. Not checked when None.
        audience: Audience that must appear in ``aud``. Not checked when None.
        subject: Expected ``sub``. Not checked when None.
        leeway: Seconds of clock skew tolerated on ``exp`` and ``nbf``.
        check: Custom callable receiving the claims. It rejects by raising
            or by returning False; any exception it raises becomes a
            ClaimRejectedError.
    """

    issuer: Optional[str] = None
    audience: Optional[str] = None
    subject: Optional[str] = None
    leeway: int = 0
    check: Optional[Callable[[Claims], Any]] = None

    def validate(self, claims: Claims) -> None:
        """Raise ClaimRejectedError if the claims do not satisfy this validator."""
        if self.issuer is not None and claims.issuer != self.issuer:
            raise ClaimRejectedError(
                f"Invalid issuer: expected {self.issuer}, got {claims.issuer}",
                claim=ISSUER,
            )
        if self.audience is not None and self.audience not in claims.audience:
            raise ClaimRejectedError(
                f"Invalid audience: {self.audience} not in {claims.audience}",
                claim=AUDIENCE,
            )
        if self.subject is not None and claims.subject != self.subject:
            raise ClaimRejectedError(
                f"Invalid subject: expected {self.subject}, got {claims.subject}",
                claim=SUBJECT,
            )
        if self.check is None:
            return
        try:
            accepted = self.check(claims)
        except ClaimRejectedError:
            raise
        except Exception as e:
            raise ClaimRejectedError(f"Token claims rejected by validator: {e!r}") from e
        if accepted is False:
            raise ClaimRejectedError("Token claims rejected by validator")
