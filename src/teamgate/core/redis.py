"""Optional Redis connection backing the permission cache.

When REDIS_URL is unset or the server cannot be reached, ``get_redis``
returns None and callers use their in-process fallback instead.
"""

from redis.asyncio import ConnectionPool, Redis

from src.teamgate.core.config import get_settings
from src.teamgate.core.logging import get_logger

logger = get_logger(__name__)

_pool: ConnectionPool | None = None
_redis: Redis | None = None
_connection_attempted: bool = False


async def get_redis() -> Redis | None:
    """Return the shared client, connecting lazily on first use."""
    global _pool, _redis, _connection_attempted

    if _redis is not None:
        return _redis
    # One attempt per process until close_redis() resets the state
    if _connection_attempted:
        return None

    _connection_attempted = True
    settings = get_settings()
    if not settings.redis_url:
        logger.info("Redis not configured, permission cache is process-local")
        return None

    try:
        _pool = ConnectionPool.from_url(
            settings.redis_url,
            max_connections=settings.redis_pool_size,
            decode_responses=True,
        )
        _redis = Redis(connection_pool=_pool)
        await _redis.ping()  # type: ignore[misc]
        logger.info("Redis connected", url=settings.redis_url.split("@")[-1])
        return _redis
    except Exception as e:
        logger.warning("Redis connection failed, using process-local cache", error=str(e))
        if _redis:
            await _redis.aclose()
            _redis = None
        if _pool:
            await _pool.disconnect()
            _pool = None
        return None


async def close_redis() -> None:
    """Close the pool. Called from the application lifespan on shutdown."""
    global _pool, _redis, _connection_attempted

    if _redis:
        await _redis.aclose()
        logger.info("Redis connection closed")
    if _pool:
        await _pool.disconnect()

    _redis = None
    _pool = None
    _connection_attempted = False


def reset_redis_state() -> None:
    """Forget any client so the next call reconnects."""
    global _pool, _redis, _connection_attempted
    _redis = None
    _pool = None
    _connection_attempted = False
