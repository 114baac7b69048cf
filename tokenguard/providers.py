"""Wiring helpers that assemble the token stack from ``Settings``.

Each component receives its configuration explicitly; nothing downstream
reads the settings object.
"""

from redis import Redis

from tokenguard.auth import SUBJECT_LOCK_CLAIM, JWTAuth
from tokenguard.blacklist import Blacklist
from tokenguard.claims import ClaimFactory
from tokenguard.config import Settings
from tokenguard.drivers import JoseDriver
from tokenguard.manager import Manager
from tokenguard.payload import PayloadFactory
from tokenguard.protocols import Driver, Storage
from tokenguard.storage import RedisStorage
from tokenguard.validators import PayloadValidator


def create_redis(settings: Settings) -> Redis:
    """Create a Redis client for the blacklist."""
    return Redis.from_url(settings.redis_url, decode_responses=True)


def build_driver(settings: Settings) -> JoseDriver:
    return JoseDriver(
        settings.secret,
        settings.algo,
        public_key=settings.public_key,
        private_key=settings.private_key,
    )


def build_payload_factory(settings: Settings) -> PayloadFactory:
    return PayloadFactory(
        ClaimFactory(ttl=settings.ttl, leeway=settings.leeway, issuer=settings.issuer),
        PayloadValidator(settings.required_claims, refresh_ttl=settings.refresh_ttl),
    )


def build_manager(
    settings: Settings,
    redis: Redis | None = None,
    storage: Storage | None = None,
    driver: Driver | None = None,
) -> Manager:
    """Assemble a ``Manager``.

    Storage defaults to ``RedisStorage`` over *redis* (or a client created
    from ``settings.redis_url``); the driver defaults to ``JoseDriver``.
    """
    if storage is None:
        storage = RedisStorage(redis or create_redis(settings), settings.blacklist_key_prefix)

    persistent_claims = list(settings.persistent_claims)
    if settings.lock_subject and SUBJECT_LOCK_CLAIM not in persistent_claims:
        persistent_claims.append(SUBJECT_LOCK_CLAIM)

    return Manager(
        driver or build_driver(settings),
        Blacklist(
            storage,
            refresh_ttl=settings.refresh_ttl,
            grace_period=settings.blacklist_grace_period,
            leeway=settings.leeway,
        ),
        build_payload_factory(settings),
        blacklist_enabled=settings.blacklist_enabled,
        persistent_claims=persistent_claims,
    )


def build_auth(settings: Settings, manager: Manager | None = None, **kwargs) -> JWTAuth:
    """Assemble a request-scoped ``JWTAuth``; *kwargs* go to ``build_manager``."""
    return JWTAuth(manager or build_manager(settings, **kwargs), lock_subject=settings.lock_subject)
