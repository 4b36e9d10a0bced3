"""
Redis cache for per-hotel room listings.

Redis is optional: with no ``REDIS_URL`` or an unreachable server every read
is a miss and every write is skipped, so the API keeps serving from the
database. Booking writes drop the hotel's key because room periods changed.
"""

import json

import redis
from redis.exceptions import RedisError

from app.core.config import REDIS_URL
from app.core.logging_config import get_logger

logger = get_logger()

_redis_client = None


def hotel_rooms_key(hotel_id: int) -> str:
    return f"hotel:{hotel_id}:rooms"


def get_redis_client():
    global _redis_client

    if _redis_client is not None or not REDIS_URL:
        return _redis_client

    try:
        client = redis.Redis.from_url(
            REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        client.ping()
    except RedisError as e:
        logger.warning(f"Room cache disabled, Redis unavailable: {e}")
        return None

    logger.info("Room cache connected to Redis")
    _redis_client = client
    return _redis_client


def get_cache(key: str):
    client = get_redis_client()
    if client is None:
        return None
    try:
        data = client.get(key)
    except RedisError as e:
        logger.warning(f"Cache read failed for {key}: {e}")
        return None
    return json.loads(data) if data else None


def set_cache(key: str, value, ttl: int = 60):
    client = get_redis_client()
    if client is None:
        return
    try:
        # datetimes in room periods serialize as ISO strings
        client.setex(key, ttl, json.dumps(value, default=str))
    except RedisError as e:
        logger.warning(f"Cache write failed for {key}: {e}")


def delete_cache(key: str):
    client = get_redis_client()
    if client is None:
        return
    try:
        client.delete(key)
    except RedisError as e:
        logger.warning(f"Cache invalidation failed for {key}: {e}")
