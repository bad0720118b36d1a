"""Tests for the key and signing method rotation engine."""

import pytest

from lanyard.exceptions import (
    ClaimRejectedError,
    ConfigurationError,
    InvalidSignatureError,
    RotationExhaustedError,
)
from lanyard.models import Claims, KeyPair, Validator
from lanyard.rotation import Candidate, SigningConfig, iter_candidates, verify_candidates


def _token(provider, key, method="HS256", **claims):
    return provider.parse(provider.serialize(Claims(claims), method, key))


# ==================== SigningConfig Tests ====================


def test_signing_config_create():
    """Test building a config from methods and keys."""
    config = SigningConfig.create(["HS256", "HS384"], ["k1", "k2"])
    assert config.methods == ("HS256", "HS384")
    assert config.keys == ("k1", "k2")
    assert config.method == "HS256"
    assert config.key == "k1"


@pytest.mark.parametrize("keys", [[], [None], (None, "k2")])
def test_signing_config_rejects_missing_keys(keys):
    """Test that no keys or a None first key is a configuration error."""
    with pytest.raises(ConfigurationError) as exc:
        SigningConfig.create(["HS256"], keys)
    assert exc.value.setting == "keys"


@pytest.mark.parametrize("methods", [[], [None], [""], ["HS256", None]])
def test_signing_config_rejects_missing_methods(methods):
    """Test that no methods or an empty method is a configuration error."""
    with pytest.raises(ConfigurationError) as exc:
        SigningConfig.create(methods, ["k1"])
    assert exc.value.setting == "method"


# ==================== Candidate Order Tests ====================


def test_candidates_are_key_major():
    """Test that every method is tried for a key before the next key."""
    primary = SigningConfig.create(["HS256", "HS384"], ["k1", "k2"])
    assert list(iter_candidates(primary)) == [
        Candidate("k1", "HS256"),
        Candidate("k1", "HS384"),
        Candidate("k2", "HS256"),
        Candidate("k2", "HS384"),
    ]


def test_backup_candidates_come_last():
    """Test that backup candidates follow all primary candidates."""
    primary = SigningConfig.create(["HS256"], ["k1", "k2"])
    backup = SigningConfig.create(["RS256"], ["b1"])
    assert list(iter_candidates(primary, backup)) == [
        Candidate("k1", "HS256"),
        Candidate("k2", "HS256"),
        Candidate("b1", "RS256", backup=True),
    ]


def test_candidates_are_lazy():
    """Test that backup candidates are not produced until primaries are consumed."""
    primary = SigningConfig.create(["HS256"], ["k1"])
    backup = SigningConfig.create(["HS256"], ["b1"])
    candidates = iter_candidates(primary, backup)
    assert next(candidates) == Candidate("k1", "HS256")
    assert next(candidates).backup is True


# ==================== Verification Tests ====================


def test_first_valid_candidate_wins(mock_provider):
    """Test that rotation stops at the first key that validates."""
    token = _token(mock_provider, "k2", sub="user-123")
    primary = SigningConfig.create(["HS256"], ["k1", "k2", "k3"])

    claims = verify_candidates(token, iter_candidates(primary))

    assert claims["sub"] == "user-123"
    assert mock_provider.attempts == [("k1", "HS256"), ("k2", "HS256")]


def test_exhaustion_reports_last_error(mock_provider):
    """Test that the last candidate's error is reported, not the first."""
    token = _token(mock_provider, "other")
    primary = SigningConfig.create(["HS256"], ["k1", "k2"])

    with pytest.raises(RotationExhaustedError) as exc:
        verify_candidates(token, iter_candidates(primary))

    assert exc.value.attempts == 2
    assert isinstance(exc.value.last_error, InvalidSignatureError)
    assert "'k2'" in exc.value.last_error.message
    assert "'k1'" not in exc.value.last_error.message


def test_validator_rejection_moves_to_next_candidate(mock_provider):
    """Test that a validator failure is a per-candidate failure."""
    token = _token(mock_provider, "k1", sub="user-123")
    primary = SigningConfig.create(["HS256"], ["k1"])
    validator = Validator(subject="someone-else")

    with pytest.raises(RotationExhaustedError) as exc:
        verify_candidates(token, iter_candidates(primary), [validator])

    assert isinstance(exc.value.last_error, ClaimRejectedError)


def test_key_pair_verifies_with_public_half(mock_provider):
    """Test that KeyPair candidates are verified with their public half."""
    pair = KeyPair(private_key="private", public_key="public")
    token = _token(mock_provider, "public")
    primary = SigningConfig.create(["HS256"], [pair])

    verify_candidates(token, iter_candidates(primary))

    assert mock_provider.attempts == [("public", "HS256")]


def test_no_candidates(mock_provider):
    """Test exhaustion with nothing to try."""
    token = _token(mock_provider, "k1")

    with pytest.raises(RotationExhaustedError) as exc:
        verify_candidates(token, [])

    assert exc.value.attempts == 0
    assert exc.value.last_error is None
