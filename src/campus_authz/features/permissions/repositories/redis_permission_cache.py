"""
Redis cache implementation for resolved permission sets.

Stores each principal's flat permission set under ``permissions:{id}`` as a
JSON list of ``{resource, action}`` objects with a TTL.
"""
import json
from typing import Iterable, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError
from loguru import logger

from ....config.constants import CacheKeys
from ....core.exceptions import CacheConnectionError, CacheSerializationError
from ..entities import FlatPermissionSet, PermissionGrant, grants_from_payload, grants_to_payload


class RedisPermissionCache:
    """
    Redis implementation of the PermissionCache protocol.

    Errors are raised as PermissionCacheError subclasses; the enforcement
    gate decides to fall through to the store. Each write is a single SETEX,
    so an abandoned check never leaves a partial entry.
    """

    def __init__(self, redis_client: redis.Redis, key_prefix: str = ""):
        self._redis = redis_client
        self._key_prefix = key_prefix

    def build_key(self, principal_id: str) -> str:
        """Get the full Redis key for a principal."""
        return f"{self._key_prefix}{CacheKeys.USER_PERMISSIONS.format(principal_id=principal_id)}"

    async def get(self, principal_id: str) -> Optional[FlatPermissionSet]:
        """Get the cached permission set, or None on a miss."""
        full_key = self.build_key(principal_id)
        try:
            raw = await self._redis.get(full_key)
        except RedisError as e:
            raise CacheConnectionError(
                f"Failed to read permission cache: {e}",
                details={"key": full_key}
            ) from e

        if raw is None:
            return None

        try:
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            payload = json.loads(raw)
        except ValueError as e:
            raise CacheSerializationError(
                "Cached permission set is not valid JSON",
                details={"key": full_key}
            ) from e
        return grants_from_payload(payload)

    async def put(
        self,
        principal_id: str,
        grants: Iterable[PermissionGrant],
        ttl_seconds: int
    ) -> None:
        """Cache a principal's permission set."""
        full_key = self.build_key(principal_id)
        data = json.dumps(grants_to_payload(grants))
        try:
            await self._redis.setex(full_key, ttl_seconds, data)
        except RedisError as e:
            raise CacheConnectionError(
                f"Failed to write permission cache: {e}",
                details={"key": full_key}
            ) from e

    async def invalidate(self, principal_id: str) -> None:
        """Invalidate the cached permission set of a principal."""
        full_key = self.build_key(principal_id)
        try:
            await self._redis.delete(full_key)
        except RedisError as e:
            raise CacheConnectionError(
                f"Failed to invalidate permission cache: {e}",
                details={"key": full_key}
            ) from e
        logger.debug(f"Cleared permission cache for principal {principal_id}")

    async def ping(self) -> bool:
        """Check if the Redis backend is reachable."""
        try:
            return bool(await self._redis.ping())
        except RedisError as e:
            logger.warning(f"Permission cache ping failed: {e}")
            return False
