"""
Cache-aside store on Redis

Every cached value is recomputable from MongoDB, so the cache is only an
optimization: read failures count as misses, write failures are logged,
and invalidation is fire-and-forget.

Values are stored wrapped as {"value": ...}. Presence is decided by the
wrapper, never by the truthiness of the value, so a cached 0 is a hit.
"""

import json
import logging
from typing import Any, Awaitable, Callable, Optional, Tuple, TypeVar

import redis.asyncio as redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

T = TypeVar("T")

ENVELOPE_FIELD = "value"


def create_redis_client(host: str, port: int, password: Optional[str], db: int) -> redis.Redis:
    return redis.Redis(
        host=host,
        port=port,
        password=password,
        db=db,
        decode_responses=True,
        socket_timeout=5,
        socket_connect_timeout=5,
    )


# ==================== KEYS ====================

def exercise_tests_key(exercise_id: str) -> str:
    return f"exercise:{exercise_id}:tests"


def total_points_key(user_id: str) -> str:
    return f"user:{user_id}:total_points"


def track_exercise_count_key(track_id: str) -> str:
    return f"track:{track_id}:exercise_count"


def track_progress_key(user_id: str, track_id: str) -> str:
    return f"user:{user_id}:track:{track_id}:progress"


def streak_key(user_id: str) -> str:
    return f"user:{user_id}:streak"


def solved_count_key(user_id: str) -> str:
    return f"user:{user_id}:solved_count"


def profile_created_key(user_id: str) -> str:
    return f"user:{user_id}:created_at"


# ==================== SERIALIZATION ====================

def encode_entry(value: Any) -> str:
    return json.dumps({ENVELOPE_FIELD: value}, default=str)


def decode_entry(raw: Optional[str]) -> Tuple[bool, Any]:
    """
    Returns (found, value). Anything that is not a well formed envelope
    is reported as not found.
    """
    if raw is None:
        return False, None
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError):
        return False, None
    if not isinstance(payload, dict) or ENVELOPE_FIELD not in payload:
        return False, None
    return True, payload[ENVELOPE_FIELD]


class CacheStore:
    """Read-through cache with explicit invalidation"""

    def __init__(self, client: redis.Redis):
        self._client = client

    async def fetch_or_compute(
        self,
        key: str,
        ttl_seconds: int,
        compute: Callable[[], Awaitable[Any]],
        decode: Optional[Callable[[Any], T]] = None,
    ) -> T:
        """
        Return the cached value for key, or compute, store and return it.
        Errors raised by compute propagate and nothing is cached.

        compute returns the JSON-ready form; decode turns it into the typed
        result. A cached entry that decode rejects with TypeError, KeyError
        or ValueError is a miss and gets overwritten.
        """
        found, value = await self._read(key)
        if found:
            if decode is None:
                logger.debug("[CACHE] hit key=%s", key)
                return value
            try:
                result = decode(value)
                logger.debug("[CACHE] hit key=%s", key)
                return result
            except (TypeError, KeyError, ValueError) as e:
                logger.debug("[CACHE] wrong-shape entry treated as miss key=%s: %s", key, e)

        logger.debug("[CACHE] miss key=%s", key)
        value = await compute()
        await self._write(key, value, ttl_seconds)
        return value if decode is None else decode(value)

    async def invalidate(self, key: str) -> None:
        try:
            await self._client.delete(key)
            logger.debug("[CACHE] invalidated key=%s", key)
        except RedisError as e:
            logger.warning("[CACHE] invalidate failed key=%s: %s", key, e)

    async def get_raw(self, key: str) -> Optional[str]:
        """Unwrapped read for blobs written by other processes"""
        try:
            return await self._client.get(key)
        except RedisError as e:
            logger.warning("[CACHE] raw read failed key=%s: %s", key, e)
            return None

    async def _read(self, key: str) -> Tuple[bool, Any]:
        try:
            raw = await self._client.get(key)
        except RedisError as e:
            logger.warning("[CACHE] read failed key=%s: %s", key, e)
            return False, None
        found, value = decode_entry(raw)
        if raw is not None and not found:
            logger.debug("[CACHE] undecodable entry treated as miss key=%s", key)
        return found, value

    async def _write(self, key: str, value: Any, ttl_seconds: int) -> None:
        try:
            await self._client.set(key, encode_entry(value), ex=ttl_seconds)
        except RedisError as e:
            logger.warning("[CACHE] write failed key=%s: %s", key, e)
