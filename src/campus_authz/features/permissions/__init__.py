"""
Permissions feature - role based authorization decisions.

Resolves a principal's flat permission set from the store (through the
cache) and decides allow/deny for a (resource, action) request.
"""

from .entities import (
    PermissionGrant,
    FlatPermissionSet,
    Principal,
    Role,
    Permission,
    HierarchyTable,
    DEFAULT_HIERARCHY,
    MatchRule,
    DecisionOptions,
    DenyReason,
    Decision,
    Proceed,
    Deny,
    Outcome,
    PermissionStore,
    PermissionCache,
    OwnershipChecker,
)
from .repositories import (
    AsyncPGPermissionStore,
    AsyncPGRoleRepository,
    RedisPermissionCache,
    InMemoryPermissionCache,
)
from .services import (
    DecisionEngine,
    OwnershipRegistry,
    EnforcementGate,
    RoleAdministrationService,
)
from .factory import (
    create_database_pool,
    create_redis_client,
    create_permission_cache,
    create_enforcement_gate,
)

__all__ = [
    "PermissionGrant",
    "FlatPermissionSet",
    "Principal",
    "Role",
    "Permission",
    "HierarchyTable",
    "DEFAULT_HIERARCHY",
    "MatchRule",
    "DecisionOptions",
    "DenyReason",
    "Decision",
    "Proceed",
    "Deny",
    "Outcome",
    "PermissionStore",
    "PermissionCache",
    "OwnershipChecker",
    "AsyncPGPermissionStore",
    "AsyncPGRoleRepository",
    "RedisPermissionCache",
    "InMemoryPermissionCache",
    "DecisionEngine",
    "OwnershipRegistry",
    "EnforcementGate",
    "RoleAdministrationService",
    "create_database_pool",
    "create_redis_client",
    "create_permission_cache",
    "create_enforcement_gate",
]
