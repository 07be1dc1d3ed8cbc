"""Role and permission records of the permission store.

Map to the ``roles`` and ``permissions`` tables; ``user_roles`` and
``role_permissions`` are the join tables between them and principals.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .grant import PermissionGrant, normalize_action


@dataclass(frozen=True)
class Role:
    """A named bundle of permissions assignable to principals."""

    id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Role name cannot be empty")

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Permission:
    """A declared ``(resource, action)`` grant. A declaration, not a decision."""

    id: str
    name: str
    resource: str
    action: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        object.__setattr__(self, "action", normalize_action(self.action))

    def to_grant(self) -> PermissionGrant:
        """Get the grant this permission declares."""
        return PermissionGrant(resource=self.resource, action=self.action)

    def __str__(self) -> str:
        return f"Permission({self.resource}:{self.action})"
