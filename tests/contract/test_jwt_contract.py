"""Contract tests for the wire format of issued tokens.

Tokens issued here must be standard compact JWS that any HS256 consumer
holding the shared secret can verify, and tokens issued by another service
with the same secret and claim set must be accepted. This pins:

- Registered claims: iss, sub, iat, nbf, exp, jti (NumericDate integers)
- Header: alg=HS256, typ=JWT
- Lifetime: exp = iat + ttl minutes
"""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from tokenguard.exceptions import TokenInvalidException
from tests.helpers.token_factory import NOW, TEST_SECRET, make_claims, sign

# ---------------------------------------------------------------------------
# Contract: issued claims
# ---------------------------------------------------------------------------


def _issue(manager, **claims) -> str:
    return manager.encode(manager.payload_factory.make({"sub": "user-001", **claims})).get()


def _read(token: str) -> dict:
    """Decode as an external consumer would, with python-jose only."""
    return jwt.decode(
        token,
        TEST_SECRET,
        algorithms=["HS256"],
        options={"verify_exp": False, "verify_nbf": False, "verify_iat": False},
    )


class TestIssuedClaims:
    """Every issued token carries the registered claim set."""

    REQUIRED_CLAIMS = {"iss", "sub", "iat", "nbf", "exp", "jti"}

    def test_contains_required_claims(self, manager, frozen_now):
        payload = _read(_issue(manager))

        for claim in self.REQUIRED_CLAIMS:
            assert claim in payload, f"Missing required claim: {claim}"

    def test_time_claims_are_integers(self, manager, frozen_now):
        payload = _read(_issue(manager))
        for claim in ("iat", "nbf", "exp"):
            assert isinstance(payload[claim], int)

    def test_issuer_is_configured_value(self, manager, frozen_now):
        assert _read(_issue(manager))["iss"] == "https://auth.test"

    def test_custom_claims_round_trip(self, manager, frozen_now):
        payload = _read(_issue(manager, role="analyst", scopes=["read", "write"]))
        assert payload["role"] == "analyst"
        assert payload["scopes"] == ["read", "write"]

    def test_datetime_claims_are_serialised_as_numeric_dates(self, manager, frozen_now):
        expires = datetime.fromtimestamp(NOW, tz=UTC) + timedelta(minutes=5)
        assert _read(_issue(manager, exp=expires))["exp"] == NOW + 300


# ---------------------------------------------------------------------------
# Contract: header
# ---------------------------------------------------------------------------


class TestHeader:
    def test_algorithm_is_hs256(self, manager, frozen_now):
        header = jwt.get_unverified_header(_issue(manager))
        assert header["alg"] == "HS256"
        assert header["typ"] == "JWT"


# ---------------------------------------------------------------------------
# Contract: expiry
# ---------------------------------------------------------------------------


class TestExpiry:
    def test_exp_is_ttl_minutes_after_iat(self, manager, settings, frozen_now):
        payload = _read(_issue(manager))
        assert payload["exp"] - payload["iat"] == settings.ttl * 60

    def test_nbf_equals_iat(self, manager, frozen_now):
        payload = _read(_issue(manager))
        assert payload["nbf"] == payload["iat"] == NOW


# ---------------------------------------------------------------------------
# Contract: cross-service compatibility
# ---------------------------------------------------------------------------


class TestCrossServiceCompatibility:
    """Tokens produced by one service must be decodable by the other."""

    def test_external_token_accepted(self, manager, frozen_now):
        payload = manager.decode(sign(make_claims(role="analyst")))
        assert payload["role"] == "analyst"

    def test_external_token_with_integer_subject(self, manager, frozen_now):
        assert manager.decode(sign(make_claims(sub=1001)))["sub"] == 1001

    def test_tampered_token_rejected(self, manager, frozen_now):
        tampered = _issue(manager)[:-5] + "XXXXX"
        with pytest.raises(TokenInvalidException):
            manager.decode(tampered)

    def test_wrong_secret_rejected(self, manager, frozen_now):
        token = sign(make_claims(), secret="wrong-secret-key")
        with pytest.raises(TokenInvalidException):
            manager.decode(token)

    def test_external_token_missing_jti_rejected(self, manager, frozen_now):
        with pytest.raises(TokenInvalidException, match=r"\[jti\]"):
            manager.decode(sign(make_claims(jti=None)))
