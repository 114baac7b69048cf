"""Builds claims and generates the default registered claims."""

import uuid
from typing import Any

from tokenguard.claims.claim import Claim
from tokenguard.utils import clock

DEFAULT_CLAIMS = ("iss", "iat", "exp", "nbf", "jti")


class ClaimFactory:
    """
    Creates ``Claim`` instances with a shared leeway and produces default
    values for ``iss``, ``iat``, ``exp``, ``nbf`` and ``jti``.

    ``ttl`` is in minutes; ``None`` means issued tokens carry no ``exp``.
    """

    def __init__(self, ttl: int | None = 60, leeway: int = 0, issuer: str | None = None):
        self.ttl = ttl
        self.leeway = leeway
        self.issuer = issuer

    def get(self, name: str, value: Any) -> Claim:
        """Build a claim from an application-supplied value."""
        return Claim(name, value, self.leeway)

    def get_decoded(self, name: str, value: Any) -> Claim:
        """Build a claim from a value read out of a decoded token."""
        return Claim.from_decoded(name, value, self.leeway)

    def default_names(self) -> list[str]:
        """Names of the claims this factory generates, in issue order."""
        names = list(DEFAULT_CLAIMS)
        if self.issuer is None:
            names.remove("iss")
        if self.ttl is None:
            names.remove("exp")
        return names

    def make(self, name: str) -> Claim:
        """Generate the default claim for *name*."""
        generators = {
            "iss": self._make_iss,
            "iat": self._make_iat,
            "exp": self._make_exp,
            "nbf": self._make_nbf,
            "jti": self._make_jti,
        }
        if name not in generators:
            raise ValueError(f"No default value for claim [{name}]")
        return self.get(name, generators[name]())

    def _make_iss(self) -> str | None:
        return self.issuer

    def _make_iat(self) -> int:
        return clock.now()

    def _make_exp(self) -> int:
        return clock.now() + (self.ttl or 0) * 60

    def _make_nbf(self) -> int:
        return clock.now()

    def _make_jti(self) -> str:
        return uuid.uuid4().hex
