"""Revocation ledger for issued tokens.

Each revoked payload is stored under its ``jti`` (or the payload fingerprint
when there is no ``jti``) with the value ``{"valid_until": <timestamp>}``.
The token keeps working until ``valid_until``, which is ``now +
grace_period`` at revocation time; this lets requests that raced a refresh
finish with the old token. After that the token is rejected.

The record's TTL in the store is the remaining refresh window plus the grace
period, so records disappear on their own once the token could no longer be
refreshed anyway::

    ttl = max(0, refresh_ttl * 60 - (now - iat)) + grace_period

A token can outlive its refresh window (an old ``iat`` with a later ``exp``,
or an ``exp`` still inside the leeway), so the TTL never drops below the
time left until ``exp + leeway``, and is at least one second.

Permanent revocations store the string ``"forever"`` with no TTL.
"""

import logging

from tokenguard.payload import Payload
from tokenguard.protocols import Storage
from tokenguard.utils import clock

logger = logging.getLogger(__name__)

FOREVER = "forever"


class Blacklist:
    """
    Decides whether a payload is revoked and records revocations.

    Args:
        storage: Backing key/value store with per-key TTL.
        refresh_ttl: Refresh window in minutes; ``None`` means tokens are
            refreshable forever, so every revocation is permanent.
        grace_period: Seconds a revoked token stays usable.
        key: Claim used to identify a payload in the store.
        leeway: Clock-skew tolerance in seconds applied when decoding;
            records outlive ``exp`` by this much.
    """

    def __init__(
        self,
        storage: Storage,
        refresh_ttl: int | None = 20160,
        grace_period: int = 0,
        key: str = "jti",
        leeway: int = 0,
    ):
        self.storage = storage
        self.refresh_ttl = refresh_ttl
        self.grace_period = grace_period
        self.key = key
        self.leeway = leeway

    def get_key(self, payload: Payload) -> str:
        value = payload.get(self.key)
        if value is None:
            return payload.fingerprint()
        return str(value)

    def ttl_for(self, payload: Payload) -> int:
        """Seconds the revocation record must live in the store."""
        now = clock.now()
        remaining = (self.refresh_ttl or 0) * 60
        issued_at = payload.get("iat")
        if issued_at is not None:
            remaining -= now - issued_at
        expires = payload.get("exp")
        if expires is not None:
            remaining = max(remaining, expires + self.leeway - now)
        return max(1, max(0, remaining) + self.grace_period)

    def add(self, payload: Payload) -> bool:
        """Revoke *payload* for the rest of its refresh window.

        An existing record is left untouched, so revoking twice does not
        extend or reset the grace period.
        """
        if self.refresh_ttl is None or not payload.has("exp"):
            return self.add_forever(payload)

        key = self.get_key(payload)
        if self.storage.get(key) is not None:
            return True

        ttl = self.ttl_for(payload)
        self.storage.put(key, {"valid_until": clock.now() + self.grace_period}, ttl)
        logger.info("Blacklisted token %s for %ds", key, ttl)
        return True

    def add_forever(self, payload: Payload) -> bool:
        """Revoke *payload* permanently."""
        key = self.get_key(payload)
        self.storage.put_forever(key, FOREVER)
        logger.info("Blacklisted token %s permanently", key)
        return True

    def has(self, payload: Payload) -> bool:
        """Return ``True`` if *payload* is revoked and past its grace period."""
        record = self.storage.get(self.get_key(payload))
        if record is None:
            return False
        if record == FOREVER:
            return True
        valid_until = record.get("valid_until") if isinstance(record, dict) else None
        if not isinstance(valid_until, int):
            logger.warning(
                "Unrecognised blacklist record for %s; treating as revoked",
                self.get_key(payload),
            )
            return True
        return valid_until <= clock.now()

    def remove(self, payload: Payload) -> bool:
        """Lift the revocation of *payload*."""
        return self.storage.destroy(self.get_key(payload))

    def clear(self) -> bool:
        """Remove every revocation record."""
        self.storage.flush()
        logger.info("Blacklist cleared")
        return True
