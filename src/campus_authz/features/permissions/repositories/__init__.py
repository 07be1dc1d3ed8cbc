"""Permission repositories - store adapters and cache backends."""

from .permission_store import AsyncPGPermissionStore
from .role_repository import AsyncPGRoleRepository
from .redis_permission_cache import RedisPermissionCache
from .memory_permission_cache import InMemoryPermissionCache

__all__ = [
    "AsyncPGPermissionStore",
    "AsyncPGRoleRepository",
    "RedisPermissionCache",
    "InMemoryPermissionCache",
]
