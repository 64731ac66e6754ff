"""Per-role permission-set cache.

Entries are keyed by role id and expire after
``permission_cache_ttl_seconds``. Redis is used when available so that all
workers observe an invalidation; otherwise each process keeps its own map.
Readers tolerate stale entries for at most one TTL.
"""

import json
import time
from uuid import UUID

from src.teamgate.core.config import get_settings
from src.teamgate.core.logging import get_logger
from src.teamgate.core.redis import get_redis

logger = get_logger(__name__)

PREFIX_ROLE_PERMISSIONS = "role_permissions"

# role_id -> (expires_at monotonic, keys)
_local_cache: dict[UUID, tuple[float, frozenset[str]]] = {}


def _key(role_id: UUID) -> str:
    return f"{PREFIX_ROLE_PERMISSIONS}:{role_id}"


async def get_role_permissions(role_id: UUID) -> frozenset[str] | None:
    """Return the cached permission keys for a role, or None on a miss."""
    redis = await get_redis()
    if redis is not None:
        raw = await redis.get(_key(role_id))
        if raw is None:
            return None
        return frozenset(json.loads(raw))

    entry = _local_cache.get(role_id)
    if entry is None:
        return None
    expires_at, keys = entry
    if expires_at <= time.monotonic():
        _local_cache.pop(role_id, None)
        return None
    return keys


async def set_role_permissions(role_id: UUID, keys: frozenset[str]) -> None:
    ttl = get_settings().permission_cache_ttl_seconds
    if ttl <= 0:
        return

    redis = await get_redis()
    if redis is not None:
        await redis.setex(_key(role_id), ttl, json.dumps(sorted(keys)))
        return
    _local_cache[role_id] = (time.monotonic() + ttl, keys)


async def invalidate_role_permissions(*role_ids: UUID) -> None:
    """Drop cached sets so the next check reads the link table."""
    if not role_ids:
        return
    for role_id in role_ids:
        _local_cache.pop(role_id, None)

    redis = await get_redis()
    if redis is not None:
        await redis.delete(*(_key(r) for r in role_ids))
    logger.debug("Permission cache invalidated", role_ids=[str(r) for r in role_ids])


def clear_local_cache() -> None:
    _local_cache.clear()
