"""Tests for MockSigningProvider."""

import time

import pytest

from lanyard.exceptions import (
    InvalidSignatureError,
    MalformedTokenError,
    SigningError,
    TokenExpiredError,
    TokenValidationError,
)
from lanyard.models import Claims, Validator


def test_round_trip(mock_provider):
    """Test that a mock token validates with the key and method it was made with."""
    token = mock_provider.serialize(Claims(sub="user-123"), "HS256", "k1")
    parsed = mock_provider.parse(token)

    parsed.validate("k1", "HS256")

    assert parsed.claims() == {"sub": "user-123"}
    assert parsed.header == {"alg": "HS256", "typ": "JWT"}


def test_tokens_are_deterministic(mock_provider):
    claims = Claims(sub="user-123", iat=1_700_000_000)
    assert mock_provider.serialize(claims, "HS256", "k1") == mock_provider.serialize(claims, "HS256", "k1")


def test_records_attempts(mock_provider):
    """Test that every validate() call is logged in order."""
    parsed = mock_provider.parse(mock_provider.serialize(Claims(), "HS256", "k2"))

    with pytest.raises(InvalidSignatureError):
        parsed.validate("k1", "HS256")
    parsed.validate("k2", "HS256")

    assert mock_provider.attempts == [("k1", "HS256"), ("k2", "HS256")]


def test_wrong_key(mock_provider):
    parsed = mock_provider.parse(mock_provider.serialize(Claims(), "HS256", "k1"))
    with pytest.raises(InvalidSignatureError) as exc:
        parsed.validate("k2", "HS256")
    assert "'k2'" in exc.value.message


def test_method_mismatch(mock_provider):
    parsed = mock_provider.parse(mock_provider.serialize(Claims(), "HS256", "k1"))
    with pytest.raises(InvalidSignatureError) as exc:
        parsed.validate("k1", "HS512")
    assert "mismatch" in exc.value.message


def test_expired(mock_provider):
    parsed = mock_provider.parse(mock_provider.serialize(Claims(exp=int(time.time()) - 60), "HS256", "k1"))
    with pytest.raises(TokenExpiredError):
        parsed.validate("k1", "HS256")
    parsed.validate("k1", "HS256", Validator(leeway=120))


def test_not_yet_valid(mock_provider):
    parsed = mock_provider.parse(mock_provider.serialize(Claims(nbf=int(time.time()) + 3600), "HS256", "k1"))
    with pytest.raises(TokenValidationError):
        parsed.validate("k1", "HS256")


def test_unsecured(mock_provider):
    """Test that unsecured mock tokens carry an empty digest."""
    token = mock_provider.serialize(Claims(sub="user-123"), "none", None)
    assert token.endswith(".")
    mock_provider.parse(token).validate(None, "none")


def test_serialize_unsupported_method(mock_provider):
    with pytest.raises(SigningError):
        mock_provider.serialize(Claims(), "XX999", "k1")


def test_serialize_requires_key(mock_provider):
    with pytest.raises(SigningError):
        mock_provider.serialize(Claims(), "HS256", None)


def test_serialize_unserializable_claims(mock_provider):
    with pytest.raises(SigningError):
        mock_provider.serialize(Claims(when=object()), "HS256", "k1")


@pytest.mark.parametrize("token", ["", "a.b", "a.b.c.d", "%%%.%%%.x", "W10.W10.x"])
def test_parse_malformed(mock_provider, token):
    """Test bad segment counts, bad base64 and non-object JSON."""
    with pytest.raises(MalformedTokenError):
        mock_provider.parse(token)
