"""Key and signing method rotation.

Verification is a single short-circuiting pass over an ordered sequence of
(key, method) candidates: the primary configuration's keys x methods in
key-major order, followed by the backup configuration's candidates. The
first candidate that validates wins; if none does, the last validation
error is reported.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional, Sequence

import structlog

from lanyard.core.signing_provider import ParsedToken
from lanyard.exceptions import ConfigurationError, RotationExhaustedError, TokenValidationError
from lanyard.keys import verifying_key
from lanyard.models import Claims, Validator

log = structlog.get_logger()


@dataclass(frozen=True)
class SigningConfig:
    """An ordered set of keys and the signing methods they may be used with.

    The first key and the first method are the ones used for signing.
    """

    methods: tuple[str, ...]
    keys: tuple[Any, ...]

    @classmethod
    def create(cls, methods: Sequence[Optional[str]], keys: Sequence[Any]) -> SigningConfig:
        """Build a config, rejecting anything that could silently weaken it.

        Raises:
            ConfigurationError: On an empty key list, a None sole/first key,
                or an empty/None method
        """
        if len(keys) == 0 or keys[0] is None:
            raise ConfigurationError("Invalid keys: at least one non-empty key is required", setting="keys")
        validate_methods(methods)
        return cls(methods=tuple(methods), keys=tuple(keys))

    @property
    def method(self) -> str:
        return self.methods[0]

    @property
    def key(self) -> Any:
        return self.keys[0]


def validate_methods(methods: Sequence[Optional[str]]) -> None:
    """Raise ConfigurationError unless every method is a non-empty name."""
    if len(methods) == 0:
        raise ConfigurationError("Invalid signing method: at least one is required", setting="method")
    for method in methods:
        if not method:
            raise ConfigurationError(f"Invalid signing method: {method!r}", setting="method")


@dataclass(frozen=True)
class Candidate:
    """One (key, method) pair to try during verification."""

    key: Any
    method: str
    backup: bool = False


def iter_candidates(primary: SigningConfig, backup: Optional[SigningConfig] = None) -> Iterator[Candidate]:
    """Yield verification candidates in rotation order.

    Keys are the outer loop and methods the inner one. Backup candidates
    are only produced once every primary candidate has been consumed.
    """
    for key in primary.keys:
        for method in primary.methods:
            yield Candidate(key=key, method=method)
    if backup is not None:
        for key in backup.keys:
            for method in backup.methods:
                yield Candidate(key=key, method=method, backup=True)


def verify_candidates(
    token: ParsedToken,
    candidates: Iterable[Candidate],
    validators: Sequence[Validator] = (),
) -> Claims:
    """Return the claims for the first candidate that validates the token.

    Raises:
        RotationExhaustedError: If no candidate validates; carries the last
            validation error observed
    """
    last_error: Optional[TokenValidationError] = None
    attempts = 0
    for candidate in candidates:
        attempts += 1
        try:
            token.validate(verifying_key(candidate.key), candidate.method, *validators)
        except TokenValidationError as e:
            log.debug(
                "candidate_rejected",
                method=candidate.method,
                backup=candidate.backup,
                attempt=attempts,
                code=e.code,
            )
            last_error = e
            continue

        if candidate.backup:
            log.info("backup_signing_used", method=candidate.method, attempt=attempts)
        return token.claims()

    log.debug("rotation_exhausted", attempts=attempts)
    raise RotationExhaustedError(last_error, attempts)
