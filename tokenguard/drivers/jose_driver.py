"""JWT signing driver built on python-jose.

The driver only signs and verifies. Registered time claims (``exp``,
``nbf``, ``iat``) are not checked here: the payload validator
owns those rules, including the refresh window and leeway, so python-jose's
own claim checks are switched off.
"""

from typing import Any

from jose import jwt
from jose.constants import ALGORITHMS
from jose.exceptions import JOSEError

from tokenguard.exceptions import JWTException, TokenInvalidException

_DECODE_OPTIONS = {
    "verify_signature": True,
    "verify_aud": False,
    "verify_iat": False,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
    "verify_at_hash": False,
}


class JoseDriver:
    """
    Signs claim maps with HMAC, RSA or EC keys.

    Symmetric algorithms (``HS*``) use *secret* for both signing and
    verification. Asymmetric algorithms sign with *private_key* and verify
    with *public_key* (PEM strings).
    """

    def __init__(
        self,
        secret: str | None,
        algo: str = ALGORITHMS.HS256,
        public_key: str | None = None,
        private_key: str | None = None,
    ):
        if algo not in ALGORITHMS.SUPPORTED:
            raise JWTException(f"The given algorithm [{algo}] could not be found")
        self.secret = secret
        self.algo = algo
        self.public_key = public_key
        self.private_key = private_key

    @property
    def is_asymmetric(self) -> bool:
        return self.algo in ALGORITHMS.RSA or self.algo in ALGORITHMS.EC

    def signing_key(self) -> str:
        key = self.private_key if self.is_asymmetric else self.secret
        if not key:
            raise JWTException(f"No signing key configured for {self.algo}")
        return key

    def verification_key(self) -> str:
        key = self.public_key if self.is_asymmetric else self.secret
        if not key:
            raise JWTException(f"No verification key configured for {self.algo}")
        return key

    def encode(self, claims: dict[str, Any]) -> str:
        try:
            return jwt.encode(claims, self.signing_key(), algorithm=self.algo)
        except (JOSEError, TypeError, ValueError) as exc:
            raise JWTException(f"Could not create token: {exc}") from exc

    def decode(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self.verification_key(),
                algorithms=[self.algo],
                options=_DECODE_OPTIONS,
            )
        except JOSEError as exc:
            raise TokenInvalidException(f"Could not decode token: {exc}") from exc
