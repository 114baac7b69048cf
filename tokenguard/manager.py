"""Token lifecycle orchestration.

A token moves through ``issued -> active -> (expired | revoked)``, and an
active or expired-but-refreshable token can be exchanged for a new one:

* ``encode`` signs a payload through the driver.
* ``decode`` verifies the signature, rebuilds the payload in decode mode,
  then consults the blacklist. The store is only read for tokens whose
  signature and claims are valid.
* ``refresh`` decodes in refresh mode, revokes the old token, and only then
  mints the replacement.
* ``invalidate`` revokes a token without issuing another.

Concurrency model: the manager holds no mutable state and may be shared
across requests. Two concurrent refreshes of one token can both succeed;
the blacklist grace period covers that window.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from tokenguard.blacklist import Blacklist
from tokenguard.exceptions import JWTException, TokenBlacklistedException
from tokenguard.payload import Payload, PayloadFactory
from tokenguard.protocols import Driver
from tokenguard.token import Token

logger = logging.getLogger(__name__)

# Claims always carried from the old token into its replacement.
REFRESH_CLAIMS = ("sub", "iat")


class Manager:
    """
    Encodes, decodes, refreshes and invalidates tokens.

    Args:
        driver: Signs and verifies tokens.
        blacklist: Revocation ledger.
        payload_factory: Builds validated payloads.
        blacklist_enabled: When ``False`` decoding skips the blacklist and
            ``invalidate`` is refused.
        persistent_claims: Extra claim names copied into refreshed tokens.
    """

    def __init__(
        self,
        driver: Driver,
        blacklist: Blacklist,
        payload_factory: PayloadFactory,
        blacklist_enabled: bool = True,
        persistent_claims: Iterable[str] = (),
    ):
        self.driver = driver
        self.blacklist = blacklist
        self.payload_factory = payload_factory
        self.blacklist_enabled = blacklist_enabled
        self.persistent_claims = tuple(persistent_claims)

    def encode(self, payload: Payload) -> Token:
        return Token(self.driver.encode(payload.to_dict()))

    def decode(
        self, token: Token | str, check_blacklist: bool = True, refresh: bool = False
    ) -> Payload:
        """Verify *token* and return its payload.

        Args:
            token: Token to decode.
            check_blacklist: Reject revoked tokens.
            refresh: Validate for refresh; an expired token within the
                refresh window is accepted.

        Raises:
            TokenInvalidException: Bad signature, malformed token or claims.
            TokenExpiredException: Expired, or past the refresh window.
            TokenBlacklistedException: The token has been revoked.
        """
        token = Token.coerce(token)
        claims = self.driver.decode(token.get())
        payload = self.payload_factory.from_decoded(claims, refresh=refresh)

        if check_blacklist and self.blacklist_enabled and self.blacklist.has(payload):
            logger.debug("Rejected blacklisted token %s", self.blacklist.get_key(payload))
            raise TokenBlacklistedException("The token has been blacklisted")

        return payload

    def refresh(
        self,
        token: Token | str,
        force_forever: bool = False,
        reset_claims: bool = False,
        claims: Mapping[str, Any] | None = None,
    ) -> Token:
        """Exchange *token* for a new one and revoke the old one.

        Args:
            token: Token to refresh; may be expired if still refreshable.
            force_forever: Revoke the old token permanently.
            reset_claims: Issue a fresh ``iat`` instead of carrying the
                original one forward (which restarts the refresh window).
            claims: Extra claims for the new token; carried claims win
                over these.
        """
        payload = self.decode(token, refresh=True)

        if self.blacklist_enabled:
            self._revoke(payload, force_forever)

        new_payload = self.payload_factory.make(
            self.build_refresh_claims(payload, claims), reset_claims=reset_claims
        )
        logger.info("Refreshed token %s", self.blacklist.get_key(payload))
        return self.encode(new_payload)

    def invalidate(self, token: Token | str, force_forever: bool = False) -> bool:
        """Revoke *token*.

        Raises:
            JWTException: The blacklist is disabled.
        """
        if not self.blacklist_enabled:
            raise JWTException("You must have the blacklist enabled to invalidate a token.")

        return self._revoke(self.decode(token, check_blacklist=False), force_forever)

    def build_refresh_claims(
        self, payload: Payload, claims: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Select the claims the refreshed token inherits from *payload*."""
        carried = {
            name: payload[name]
            for name in (*self.persistent_claims, *REFRESH_CLAIMS)
            if name in payload
        }
        return {**(claims or {}), **carried}

    def _revoke(self, payload: Payload, force_forever: bool) -> bool:
        if force_forever:
            return self.blacklist.add_forever(payload)
        return self.blacklist.add(payload)
