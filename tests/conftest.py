"""Shared test fixtures for tokenguard."""

import os

# Set a test secret before any Settings() is built from the environment.
os.environ.setdefault("JWT_SECRET", "test-secret-for-unit-tests-0123456789abcdef")

import fakeredis  # noqa: E402
import pytest  # noqa: E402

from tokenguard.config import Settings  # noqa: E402
from tokenguard.providers import build_auth, build_manager  # noqa: E402
from tokenguard.storage import RedisStorage  # noqa: E402
from tokenguard.utils import clock  # noqa: E402
from tests.helpers.token_factory import NOW, TEST_SECRET  # noqa: E402

# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


@pytest.fixture()
def frozen_now():
    """Pin the package clock to ``NOW`` for the duration of the test."""
    with clock.frozen(NOW) as ts:
        yield ts


# ---------------------------------------------------------------------------
# Fake Redis (drop-in sync replacement, isolated per test)
# ---------------------------------------------------------------------------


@pytest.fixture()
def redis_client():
    client = fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
    yield client
    client.close()


@pytest.fixture()
def storage(redis_client):
    return RedisStorage(redis_client)


# ---------------------------------------------------------------------------
# Settings and assembled components
# ---------------------------------------------------------------------------


@pytest.fixture()
def settings():
    return Settings(
        secret=TEST_SECRET,
        issuer="https://auth.test",
        ttl=60,
        refresh_ttl=20160,
        required_claims=["iss", "iat", "exp", "nbf", "sub", "jti"],
    )


@pytest.fixture()
def manager(settings, redis_client):
    return build_manager(settings, redis=redis_client)


@pytest.fixture()
def jwt_auth(settings, manager):
    return build_auth(settings, manager=manager)
