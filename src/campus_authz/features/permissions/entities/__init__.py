"""Permission feature entities."""

from .grant import (
    PermissionGrant,
    FlatPermissionSet,
    ActionLike,
    normalize_action,
    grants_to_payload,
    grants_from_payload,
)
from .principal import Principal
from .role import Role, Permission
from .hierarchy import HierarchyTable, DEFAULT_HIERARCHY
from .outcome import (
    MatchRule,
    DecisionOptions,
    DenyReason,
    Decision,
    Proceed,
    Deny,
    Outcome,
)
from .protocols import (
    PermissionStore,
    PermissionCache,
    OwnershipChecker,
    RoleAdministrationRepository,
)

__all__ = [
    "PermissionGrant",
    "FlatPermissionSet",
    "ActionLike",
    "normalize_action",
    "grants_to_payload",
    "grants_from_payload",
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
    "RoleAdministrationRepository",
]
