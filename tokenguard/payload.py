"""Validated token payloads and the factory that builds them.

A ``Payload`` can only be obtained by running a claim collection through a
``PayloadValidator``, so holding one means its claims were acceptable for
the mode it was built in. Payloads are immutable; equality and hashing use
the claim map.

Usage::

    factory = PayloadFactory(ClaimFactory(ttl=60), PayloadValidator(["sub"]))
    payload = factory.make({"sub": "user-1", "role": "admin"})
    payload = factory.from_decoded(driver.decode(raw_token))
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterator, Mapping
from typing import Any

from tokenguard.claims import ClaimCollection, ClaimFactory
from tokenguard.validators import PayloadValidator, ValidationMode


class Payload(Mapping[str, Any]):
    """Immutable, validated set of claims.

    Args:
        claims: The claims to wrap.
        validator: Validator run against *claims* before the payload exists.
        mode: Validation mode (create or decode).
        refresh: Whether the payload is being read for a refresh.
    """

    __slots__ = ("_claims", "_values")

    def __init__(
        self,
        claims: ClaimCollection,
        validator: PayloadValidator,
        mode: ValidationMode = ValidationMode.DECODE,
        refresh: bool = False,
    ):
        self._claims = validator.check(claims, mode, refresh)
        self._values = claims.to_payload_dict()

    @property
    def claims(self) -> ClaimCollection:
        return self._claims

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Payload):
            return self._values == other._values
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.fingerprint())

    def __repr__(self) -> str:
        return f"Payload({self._values!r})"

    def __str__(self) -> str:
        return self.to_json()

    def has(self, name: str) -> bool:
        return name in self._values

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def to_json(self) -> str:
        return json.dumps(self._values, sort_keys=True, separators=(",", ":"), default=str)

    def fingerprint(self) -> str:
        """SHA-1 of the canonical claim map; identifies payloads without a ``jti``."""
        return hashlib.sha1(self.to_json().encode()).hexdigest()

    def matches(self, values: Mapping[str, Any], strict: bool = False) -> bool:
        """Check that every item in *values* is present with an equal value.

        With ``strict=True`` the types must also be identical, so ``1`` does
        not match ``"1"``.
        """
        if not values:
            return False
        for name, expected in values.items():
            if name not in self._values:
                return False
            actual = self._values[name]
            if strict and type(actual) is not type(expected):
                return False
            if actual != expected and str(actual) != str(expected):
                return False
        return True


class PayloadFactory:
    """Builds ``Payload`` instances in create mode or decode mode."""

    def __init__(self, claim_factory: ClaimFactory, validator: PayloadValidator):
        self.claim_factory = claim_factory
        self.validator = validator

    def make(self, claims: Mapping[str, Any] | None = None, reset_claims: bool = False) -> Payload:
        """Issue a new payload from caller-supplied *claims*.

        Default claims (``iss``, ``iat``, ``exp``, ``nbf``, ``jti``) are
        generated when not supplied. ``reset_claims=True`` regenerates
        ``iat`` even when one is supplied.

        Raises:
            InvalidClaimException: A claim value is malformed or out of range.
            TokenInvalidException: A required claim is missing.
        """
        claims = dict(claims or {})
        if reset_claims:
            claims.pop("iat", None)

        built = [
            self.claim_factory.make(name)
            for name in self.claim_factory.default_names()
            if name not in claims
        ]
        built.extend(self.claim_factory.get(name, value) for name, value in claims.items())
        for claim in built:
            claim.validate_create()

        return Payload(ClaimCollection.make(built), self.validator, ValidationMode.CREATE)

    def from_decoded(self, claims: Mapping[str, Any], refresh: bool = False) -> Payload:
        """Wrap a claim map returned by the driver.

        Raises:
            TokenInvalidException: A claim is malformed or invalid, or a
                required claim is missing.
            TokenExpiredException: The token, or its refresh window, has expired.
        """
        collection = ClaimCollection.make(
            self.claim_factory.get_decoded(name, value) for name, value in claims.items()
        )
        return Payload(collection, self.validator, ValidationMode.DECODE, refresh)
