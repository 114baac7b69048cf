"""Request-scoped facade over the token manager.

``JWTAuth`` holds the token of the current request and exposes the common
operations on it. Each method delegates explicitly to the ``Manager``.

Usage::

    auth = JWTAuth(manager)
    token = auth.from_subject(user)

    auth.set_token(raw_token)
    payload = auth.check_or_fail()
    new_token = auth.refresh()
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Mapping
from typing import Any

from tokenguard.blacklist import Blacklist
from tokenguard.exceptions import JWTException
from tokenguard.manager import Manager
from tokenguard.payload import Payload, PayloadFactory
from tokenguard.protocols import Subject
from tokenguard.token import Token

logger = logging.getLogger(__name__)

SUBJECT_LOCK_CLAIM = "prv"


class JWTAuth:
    """
    Issues tokens for subjects and validates the current request's token.

    Args:
        manager: Token manager.
        lock_subject: Embed a hash of the subject's type in the ``prv``
            claim so a token issued for one subject type cannot be used
            for another.
    """

    def __init__(self, manager: Manager, lock_subject: bool = True):
        self.manager = manager
        self.lock_subject = lock_subject
        self.token: Token | None = None

    # ------------------------------------------------------------------
    # Issuing
    # ------------------------------------------------------------------

    def from_subject(self, subject: Subject, claims: Mapping[str, Any] | None = None) -> str:
        """Issue a token for *subject*, with optional extra *claims*."""
        return self.manager.encode(self.make_payload(subject, claims)).get()

    def from_user(self, user: Subject, claims: Mapping[str, Any] | None = None) -> str:
        return self.from_subject(user, claims)

    def make_payload(self, subject: Subject, claims: Mapping[str, Any] | None = None) -> Payload:
        return self.factory.make(self.claims_for(subject, claims))

    def claims_for(
        self, subject: Subject, claims: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Claims for *subject*: ``sub`` and ``prv``, then the subject's own
        custom claims, then *claims* (later entries win)."""
        base: dict[str, Any] = {"sub": subject.get_jwt_identifier()}
        if self.lock_subject:
            base[SUBJECT_LOCK_CLAIM] = self.hash_subject_model(subject)
        return {**base, **subject.get_jwt_custom_claims(), **(claims or {})}

    @staticmethod
    def hash_subject_model(model: object | type | str) -> str:
        if isinstance(model, str):
            name = model
        else:
            cls = model if isinstance(model, type) else type(model)
            name = f"{cls.__module__}.{cls.__qualname__}"
        return hashlib.sha1(name.encode()).hexdigest()

    # ------------------------------------------------------------------
    # Current token
    # ------------------------------------------------------------------

    def set_token(self, token: Token | str) -> JWTAuth:
        self.token = Token.coerce(token)
        return self

    def unset_token(self) -> JWTAuth:
        self.token = None
        return self

    def get_token(self) -> Token | None:
        return self.token

    def require_token(self) -> Token:
        if self.token is None:
            raise JWTException("A token is required")
        return self.token

    def refresh(
        self,
        force_forever: bool = False,
        reset_claims: bool = False,
        claims: Mapping[str, Any] | None = None,
    ) -> str:
        """Refresh the current token and return the new one."""
        return self.manager.refresh(
            self.require_token(), force_forever, reset_claims, claims
        ).get()

    def invalidate(self, force_forever: bool = False) -> JWTAuth:
        self.manager.invalidate(self.require_token(), force_forever)
        return self

    def get_payload(self) -> Payload:
        """Decode the current token, checking expiry and the blacklist."""
        return self.manager.decode(self.require_token())

    def payload(self) -> Payload:
        return self.get_payload()

    def check_or_fail(self) -> Payload:
        return self.get_payload()

    def check(self, get_payload: bool = False) -> Payload | bool:
        """Like ``check_or_fail`` but returns ``False`` instead of raising."""
        try:
            payload = self.check_or_fail()
        except JWTException as exc:
            logger.debug("Token check failed: %s", exc.message)
            return False
        return payload if get_payload else True

    def get_claim(self, name: str) -> Any:
        return self.payload().get(name)

    def check_subject_model(self, model: object | type | str) -> bool:
        """Return ``True`` if the token was issued for *model*'s type.

        Tokens without a ``prv`` claim are not locked and always match.
        """
        locked = self.payload().get(SUBJECT_LOCK_CLAIM)
        if locked is None:
            return True
        return self.hash_subject_model(model) == locked

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    @property
    def factory(self) -> PayloadFactory:
        return self.manager.payload_factory

    @property
    def blacklist(self) -> Blacklist:
        return self.manager.blacklist
