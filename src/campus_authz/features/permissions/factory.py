"""
Factory functions wiring the authorization engine from settings.
"""
from typing import Optional

import asyncpg
import redis.asyncio as redis
from loguru import logger

from ...config.settings import AuthzSettings, get_settings
from ...core.exceptions import ConfigurationError
from .entities import HierarchyTable, OwnershipChecker, PermissionCache, PermissionStore, DEFAULT_HIERARCHY
from .repositories import AsyncPGPermissionStore, InMemoryPermissionCache, RedisPermissionCache
from .services import DecisionEngine, EnforcementGate


async def create_database_pool(settings: Optional[AuthzSettings] = None) -> asyncpg.Pool:
    """Create the asyncpg pool backing the permission store."""
    settings = settings or get_settings()
    if not settings.database_url:
        raise ConfigurationError("AUTHZ_DATABASE_URL is required to create the permission store pool")

    dsn = settings.database_url.replace("+asyncpg", "")
    logger.info(f"Creating permission store pool with size {settings.db_pool_max_size}")
    pool = await asyncpg.create_pool(
        dsn,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        server_settings={"application_name": settings.app_name},
    )
    logger.info("Permission store pool created successfully")
    return pool


def create_redis_client(settings: Optional[AuthzSettings] = None) -> Optional[redis.Redis]:
    """Create a Redis client, or None when no Redis URL is configured."""
    settings = settings or get_settings()
    if not settings.is_cache_enabled:
        return None
    return redis.from_url(settings.redis_url, decode_responses=False)


def create_permission_cache(
    settings: Optional[AuthzSettings] = None,
    redis_client: Optional[redis.Redis] = None
) -> PermissionCache:
    """Create the permission cache backend.

    Redis when a client is given or configured, the in-memory cache otherwise.
    """
    settings = settings or get_settings()
    client = redis_client or create_redis_client(settings)
    if client is None:
        logger.warning("Redis is not configured, using in-memory permission cache")
        return InMemoryPermissionCache(max_size=settings.memory_cache_max_size)

    logger.debug(f"Using Redis permission cache with prefix '{settings.cache_key_prefix}'")
    return RedisPermissionCache(client, key_prefix=settings.cache_key_prefix)


def create_enforcement_gate(
    settings: Optional[AuthzSettings] = None,
    pool: Optional[asyncpg.Pool] = None,
    store: Optional[PermissionStore] = None,
    redis_client: Optional[redis.Redis] = None,
    cache: Optional[PermissionCache] = None,
    ownership: Optional[OwnershipChecker] = None,
    hierarchy: Optional[HierarchyTable] = None
) -> EnforcementGate:
    """Build an EnforcementGate from settings.

    Args:
        settings: Settings to use (defaults to ``get_settings()``)
        pool: asyncpg pool for the default permission store
        store: Permission store to use instead of the asyncpg one
        redis_client: Redis client for the permission cache
        cache: Permission cache to use instead of the configured one
        ownership: Ownership checker for the ownership fallback
        hierarchy: Action hierarchy (defaults to the MANAGE hierarchy)

    Raises:
        ConfigurationError: If neither a store nor a pool is given
    """
    settings = settings or get_settings()

    if store is None:
        if pool is None:
            raise ConfigurationError("A permission store or a database pool is required")
        store = AsyncPGPermissionStore(
            pool,
            schema=settings.db_schema,
            query_timeout=settings.store_timeout_seconds,
        )

    if cache is None:
        cache = create_permission_cache(settings, redis_client)

    engine = DecisionEngine(
        hierarchy=hierarchy or DEFAULT_HIERARCHY,
        elevated_labels=settings.bypass_role_labels,
    )
    return EnforcementGate(
        store=store,
        cache=cache,
        engine=engine,
        ownership=ownership,
        **settings.get_engine_config()
    )
