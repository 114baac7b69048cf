"""Exception hierarchy for token handling.

Every failure raised by the package derives from ``JWTException`` so callers
can catch one type, while the subclasses let a consuming layer tell
"retry with refresh" (expired) apart from "reject outright" (invalid or
blacklisted).

Wrapped causes are attached with ``raise ... from exc`` and are available on
``__cause__``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tokenguard.claims.claim import Claim


class JWTException(Exception):
    """Base class for all token errors."""

    default_message = "An error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidClaimException(JWTException):
    """A claim value is malformed or out of range at creation time."""

    def __init__(self, claim: Claim | str):
        self.claim_name = claim if isinstance(claim, str) else claim.name
        super().__init__(f"Invalid value provided for claim [{self.claim_name}]")


class TokenInvalidException(JWTException):
    """Signature, structure or a claim's meaning is unacceptable."""

    default_message = "The token is invalid"


class TokenExpiredException(JWTException):
    """The token is past its expiry or past its refresh window."""

    default_message = "Token has expired"


class TokenBlacklistedException(TokenInvalidException):
    """The token is well-formed and signed but has been revoked."""

    default_message = "The token has been blacklisted"


class StorageException(JWTException):
    """The blacklist backing store failed."""

    default_message = "The blacklist storage is unavailable"
