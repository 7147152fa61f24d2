"""
Redis client wrapper that degrades to a no-op when Redis is unreachable
"""
import json
import logging
from enum import Enum
from typing import Any, Optional

import redis

from cinema.core.config import settings

logger = logging.getLogger(__name__)


class EnumEncoder(json.JSONEncoder):
    """JSON encoder that handles Enums properly"""
    def default(self, obj):
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


class RedisClient:
    """Sync Redis client wrapper"""

    def __init__(self):
        self.redis: Optional[redis.Redis] = None

    def connect(self):
        """Connect to Redis; leave the client disabled if it is not reachable"""
        try:
            client = redis.Redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                max_connections=50,
            )
            client.ping()
            self.redis = client
            logger.info("Redis connected successfully")
        except redis.RedisError as e:
            logger.error(f"Redis connection failed, caching disabled: {e}")
            self.redis = None

    def close(self):
        """Close Redis connection"""
        if self.redis:
            self.redis.close()
            self.redis = None
            logger.info("Redis connection closed")

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache"""
        if not self.redis:
            return None

        try:
            value = self.redis.get(key)
            if value:
                return json.loads(value)
            return None
        except redis.RedisError as e:
            logger.error(f"Redis GET error for key {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: int = None) -> bool:
        """Set value in cache with optional TTL"""
        if not self.redis:
            return False

        try:
            ttl = ttl or settings.REDIS_CACHE_TTL
            serialized = json.dumps(value, cls=EnumEncoder, default=str)
            self.redis.setex(key, ttl, serialized)
            return True
        except redis.RedisError as e:
            logger.error(f"Redis SET error for key {key}: {e}")
            return False

    def delete(self, *keys: str) -> bool:
        """Delete one or more keys"""
        if not self.redis:
            return False

        try:
            self.redis.delete(*keys)
            return True
        except redis.RedisError as e:
            logger.error(f"Redis DELETE error: {e}")
            return False

    def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern"""
        if not self.redis:
            return 0

        try:
            keys = list(self.redis.scan_iter(match=pattern))
            if keys:
                return self.redis.delete(*keys)
            return 0
        except redis.RedisError as e:
            logger.error(f"Redis DELETE_PATTERN error: {e}")
            return 0


# Global Redis client instance
redis_client = RedisClient()
