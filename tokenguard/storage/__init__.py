"""Blacklist storage backends."""
from tokenguard.storage.redis_storage import RedisStorage

__all__ = ["RedisStorage"]
