"""Payload validation.

``PayloadValidator.check`` is run whenever a ``Payload`` is built:

* ``CREATE``: required-claim presence only; per-claim creation checks have
  already been applied by the payload factory.
* ``DECODE``: required-claim presence plus each claim's decode-time checks
  (``exp`` in the past, ``nbf``/``iat`` in the future).

``refresh=True`` is orthogonal to the mode. It tolerates an expired ``exp``
and instead requires ``iat`` to lie within ``refresh_ttl`` minutes of now.
"""

from collections.abc import Iterable
from enum import Enum

from tokenguard.claims import ClaimCollection, ClaimKind
from tokenguard.exceptions import JWTException, TokenInvalidException
from tokenguard.utils import clock

# Registered claims are always checked in this order, whatever order the
# configuration lists them in, so the reported missing claim is deterministic.
REQUIRED_CLAIM_ORDER = ("sub", "iat", "exp", "nbf", "iss", "jti")


class ValidationMode(str, Enum):
    CREATE = "create"
    DECODE = "decode"


class PayloadValidator:
    """
    Validates claim collections against the configured requirements.

    Args:
        required_claims: Claim names that every payload must carry.
        refresh_ttl: Minutes after ``iat`` during which a token may be
            refreshed. ``None`` allows refresh indefinitely.
    """

    def __init__(self, required_claims: Iterable[str] = (), refresh_ttl: int | None = 20160):
        self.required_claims = self._ordered(required_claims)
        self.refresh_ttl = refresh_ttl

    @staticmethod
    def _ordered(required_claims: Iterable[str]) -> tuple[str, ...]:
        configured = list(dict.fromkeys(required_claims))
        registered = [name for name in REQUIRED_CLAIM_ORDER if name in configured]
        extras = [name for name in configured if name not in REQUIRED_CLAIM_ORDER]
        return (*registered, *extras)

    def check(
        self,
        claims: ClaimCollection,
        mode: ValidationMode = ValidationMode.DECODE,
        refresh: bool = False,
    ) -> ClaimCollection:
        """Validate *claims* and return them unchanged.

        Raises:
            TokenInvalidException: A required claim is missing, or a decoded
                claim is semantically invalid.
            TokenExpiredException: ``exp`` has passed (decode mode), or the
                refresh window has closed (refresh).
        """
        self.validate_structure(claims)

        if mode is ValidationMode.DECODE:
            self.validate_payload(claims, refresh=refresh)
        if refresh:
            self.validate_refresh(claims)

        return claims

    def is_valid(
        self,
        claims: ClaimCollection,
        mode: ValidationMode = ValidationMode.DECODE,
        refresh: bool = False,
    ) -> bool:
        try:
            self.check(claims, mode, refresh)
        except JWTException:
            return False
        return True

    def validate_structure(self, claims: ClaimCollection) -> None:
        missing = claims.first_missing(self.required_claims)
        if missing is not None:
            raise TokenInvalidException(
                f"JWT payload does not contain the required claim [{missing}]"
            )

    def validate_payload(self, claims: ClaimCollection, refresh: bool = False) -> None:
        now = clock.now()
        for claim in claims.values():
            if refresh and claim.kind is ClaimKind.EXPIRATION:
                continue
            claim.validate_payload(now)

    def validate_refresh(self, claims: ClaimCollection) -> None:
        if self.refresh_ttl is None:
            return
        issued_at = claims.get_by_name(ClaimKind.ISSUED_AT.value)
        if issued_at is None:
            raise TokenInvalidException(
                "JWT payload does not contain the required claim [iat]"
            )
        issued_at.validate_refresh(self.refresh_ttl, clock.now())
