"""Claim values and their validation rules.

A claim is an immutable ``(name, value)`` pair whose behaviour is selected by
its ``ClaimKind``. The registered names (``sub``, ``iss``, ``iat``, ``nbf``,
``exp``, ``jti``) map to dedicated kinds; any other name is ``CUSTOM`` and
carries no time semantics.

Validation happens in three places:

* construction: the value is normalised and type-checked, so a ``Claim``
  instance is never malformed;
* ``validate_create``: creation-time range checks (no future ``iat``/``nbf``,
  no past ``exp``);
* ``validate_payload`` / ``validate_refresh``: checks applied to claims that
  arrive in a decoded token.

The rules per kind live in dispatch tables at the bottom of this module;
adding a kind means extending ``ClaimKind`` and those tables.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from tokenguard.exceptions import (
    InvalidClaimException,
    TokenExpiredException,
    TokenInvalidException,
)
from tokenguard.utils import clock


class ClaimKind(str, Enum):
    """Closed set of claim kinds."""

    SUBJECT = "sub"
    ISSUER = "iss"
    ISSUED_AT = "iat"
    NOT_BEFORE = "nbf"
    EXPIRATION = "exp"
    JWT_ID = "jti"
    CUSTOM = "custom"

    @classmethod
    def for_name(cls, name: str) -> ClaimKind:
        """Return the kind registered for *name*, or ``CUSTOM``."""
        try:
            return cls(name)
        except ValueError:
            return cls.CUSTOM


TIME_KINDS = frozenset({ClaimKind.ISSUED_AT, ClaimKind.NOT_BEFORE, ClaimKind.EXPIRATION})


@dataclass(frozen=True)
class Claim:
    """A single named, self-validating token claim.

    Args:
        name: Claim key as it appears in the token.
        value: Claim value. Time claims accept an ``int``/``float`` unix
            timestamp, a ``datetime`` or a ``timedelta`` from now, and store
            an ``int``.
        leeway: Clock-skew tolerance in seconds for time comparisons.
        serializable: Whether the claim is written into the signed token.

    Raises:
        InvalidClaimException: If *value* is malformed for the claim's kind.
    """

    name: str
    value: Any
    leeway: int = field(default=0, compare=False)
    serializable: bool = field(default=True, compare=False)
    kind: ClaimKind = field(init=False, compare=False)

    def __post_init__(self) -> None:
        kind = ClaimKind.for_name(self.name)
        object.__setattr__(self, "kind", kind)
        normalise = _STRUCTURE.get(kind)
        if normalise is not None:
            object.__setattr__(self, "value", normalise(self))

    @classmethod
    def from_decoded(cls, name: str, value: Any, leeway: int = 0) -> Claim:
        """Build a claim from a decoded token, without creation-time checks.

        A structurally malformed value in a token we did not create is a
        property of the token, so it is reported as ``TokenInvalidException``.
        """
        try:
            return cls(name, value, leeway)
        except InvalidClaimException as exc:
            raise TokenInvalidException(exc.message) from exc

    @property
    def is_time_claim(self) -> bool:
        return self.kind in TIME_KINDS

    def validate_create(self, now: int | None = None) -> None:
        """Range checks applied when the claim is first issued."""
        check = _CREATE_CHECKS.get(self.kind)
        if check is not None:
            check(self, clock.now() if now is None else now)

    def validate_payload(self, now: int | None = None) -> None:
        """Checks applied once per decode."""
        check = _PAYLOAD_CHECKS.get(self.kind)
        if check is not None:
            check(self, clock.now() if now is None else now)

    def validate_refresh(self, refresh_ttl: int, now: int | None = None) -> None:
        """Checks applied when the token is presented for refresh.

        Args:
            refresh_ttl: Minutes after issuance during which refresh is allowed.
        """
        check = _REFRESH_CHECKS.get(self.kind)
        if check is not None:
            check(self, refresh_ttl, clock.now() if now is None else now)

    def is_future(self, timestamp: int, now: int) -> bool:
        return timestamp - self.leeway > now

    def is_past(self, timestamp: int, now: int) -> bool:
        return timestamp + self.leeway < now

    def to_dict(self) -> dict[str, Any]:
        return {self.name: self.value}


# ---------------------------------------------------------------------------
# Structural normalisation (run on construction)
# ---------------------------------------------------------------------------


def _timestamp(claim: Claim) -> int:
    value = claim.value
    if isinstance(value, bool):
        raise InvalidClaimException(claim.name)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    if isinstance(value, (datetime, timedelta)):
        return clock.to_timestamp(value)
    raise InvalidClaimException(claim.name)


def _subject(claim: Claim) -> str | int:
    value = claim.value
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise InvalidClaimException(claim.name)
    if isinstance(value, str) and not value:
        raise InvalidClaimException(claim.name)
    return value


def _non_empty_string(claim: Claim) -> str:
    if not isinstance(claim.value, str) or not claim.value:
        raise InvalidClaimException(claim.name)
    return claim.value


_STRUCTURE: dict[ClaimKind, Callable[[Claim], Any]] = {
    ClaimKind.SUBJECT: _subject,
    ClaimKind.ISSUER: _non_empty_string,
    ClaimKind.JWT_ID: _non_empty_string,
    ClaimKind.ISSUED_AT: _timestamp,
    ClaimKind.NOT_BEFORE: _timestamp,
    ClaimKind.EXPIRATION: _timestamp,
}


# ---------------------------------------------------------------------------
# Creation-time range checks
# ---------------------------------------------------------------------------


def _reject_future(claim: Claim, now: int) -> None:
    if claim.is_future(claim.value, now):
        raise InvalidClaimException(claim)


def _reject_past(claim: Claim, now: int) -> None:
    if claim.is_past(claim.value, now):
        raise InvalidClaimException(claim)


_CREATE_CHECKS: dict[ClaimKind, Callable[[Claim, int], None]] = {
    ClaimKind.ISSUED_AT: _reject_future,
    ClaimKind.NOT_BEFORE: _reject_future,
    ClaimKind.EXPIRATION: _reject_past,
}


# ---------------------------------------------------------------------------
# Decode-time checks
# ---------------------------------------------------------------------------


def _issued_at_payload(claim: Claim, now: int) -> None:
    if claim.is_future(claim.value, now):
        raise TokenInvalidException("Issued At (iat) timestamp cannot be in the future")


def _not_before_payload(claim: Claim, now: int) -> None:
    if claim.is_future(claim.value, now):
        raise TokenInvalidException("Not Before (nbf) timestamp cannot be in the future")


def _expiration_payload(claim: Claim, now: int) -> None:
    if claim.is_past(claim.value, now):
        raise TokenExpiredException("Token has expired")


_PAYLOAD_CHECKS: dict[ClaimKind, Callable[[Claim, int], None]] = {
    ClaimKind.ISSUED_AT: _issued_at_payload,
    ClaimKind.NOT_BEFORE: _not_before_payload,
    ClaimKind.EXPIRATION: _expiration_payload,
}


def _issued_at_refresh(claim: Claim, refresh_ttl: int, now: int) -> None:
    if claim.is_past(claim.value + refresh_ttl * 60, now):
        raise TokenExpiredException("Token has expired and can no longer be refreshed")


_REFRESH_CHECKS: dict[ClaimKind, Callable[[Claim, int, int], None]] = {
    ClaimKind.ISSUED_AT: _issued_at_refresh,
}
