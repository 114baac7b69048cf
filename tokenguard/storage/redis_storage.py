"""Redis-backed blacklist storage.

Values are stored as JSON under ``{prefix}{key}``. ``put`` uses ``SETEX`` so
each record expires on its own; ``put_forever`` uses a plain ``SET``.

Usage::

    from redis import Redis
    storage = RedisStorage(Redis.from_url("redis://localhost:6379/0"))
"""

import json
import logging
from typing import Any

from redis import Redis
from redis.exceptions import RedisError

from tokenguard.exceptions import StorageException

logger = logging.getLogger(__name__)


class RedisStorage:
    """
    Key/value store with per-key TTL on top of a synchronous Redis client.

    Key format: ``{prefix}{key}`` (default prefix ``tokenguard:blacklist:``).
    """

    DEFAULT_PREFIX = "tokenguard:blacklist:"

    def __init__(self, redis: Redis, prefix: str | None = None):
        self.redis = redis
        self.prefix = self.DEFAULT_PREFIX if prefix is None else prefix

    def _make_key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Any | None:
        try:
            raw = self.redis.get(self._make_key(key))
        except RedisError as exc:
            raise StorageException(f"Could not read blacklist entry: {exc}") from exc
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable blacklist entry %s", key)
            return None

    def put(self, key: str, value: Any, ttl_seconds: int) -> None:
        try:
            self.redis.setex(self._make_key(key), ttl_seconds, json.dumps(value))
        except RedisError as exc:
            raise StorageException(f"Could not write blacklist entry: {exc}") from exc

    def put_forever(self, key: str, value: Any) -> None:
        try:
            self.redis.set(self._make_key(key), json.dumps(value))
        except RedisError as exc:
            raise StorageException(f"Could not write blacklist entry: {exc}") from exc

    def destroy(self, key: str) -> bool:
        try:
            return self.redis.delete(self._make_key(key)) > 0
        except RedisError as exc:
            raise StorageException(f"Could not delete blacklist entry: {exc}") from exc

    def flush(self) -> None:
        """Delete every key under this storage's prefix."""
        try:
            for key in self.redis.scan_iter(match=f"{self.prefix}*"):
                self.redis.delete(key)
        except RedisError as exc:
            raise StorageException(f"Could not flush blacklist: {exc}") from exc
