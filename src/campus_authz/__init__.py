"""
campus-authz - role based authorization engine for the campus platform.
"""

from .__version__ import __version__
from .config import PermissionAction, AuthzSettings, get_settings
from .core.exceptions import CampusAuthzError
from .features.permissions import (
    PermissionGrant,
    Principal,
    HierarchyTable,
    DEFAULT_HIERARCHY,
    DecisionOptions,
    Proceed,
    Deny,
    DecisionEngine,
    OwnershipRegistry,
    EnforcementGate,
    RoleAdministrationService,
    create_enforcement_gate,
)

__all__ = [
    "__version__",
    "PermissionAction",
    "AuthzSettings",
    "get_settings",
    "CampusAuthzError",
    "PermissionGrant",
    "Principal",
    "HierarchyTable",
    "DEFAULT_HIERARCHY",
    "DecisionOptions",
    "Proceed",
    "Deny",
    "DecisionEngine",
    "OwnershipRegistry",
    "EnforcementGate",
    "RoleAdministrationService",
    "create_enforcement_gate",
]
