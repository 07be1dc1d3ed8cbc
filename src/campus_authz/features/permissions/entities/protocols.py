"""Protocol interfaces for permission feature dependency injection.

Defines contracts for the permission store, the permission cache and the
ownership fallback so the enforcement gate can be wired with real backends
or test fakes.
"""

from abc import abstractmethod
from typing import Iterable, List, Optional, Protocol, runtime_checkable

from .grant import FlatPermissionSet, PermissionGrant
from .role import Role


@runtime_checkable
class PermissionStore(Protocol):
    """Protocol for reading a principal's roles and grants from the system of record."""

    @abstractmethod
    async def resolve(self, principal_id: str) -> FlatPermissionSet:
        """Get the deduplicated grants reachable from the principal's roles.

        Returns an empty set when the principal holds no roles. Raises
        PermissionStoreError on infrastructure failure only.
        """
        ...

    @abstractmethod
    async def get_user_roles(self, principal_id: str) -> List[Role]:
        """Get the roles assigned to a principal."""
        ...


@runtime_checkable
class PermissionCache(Protocol):
    """Protocol for the per-principal flat permission set cache."""

    @abstractmethod
    async def get(self, principal_id: str) -> Optional[FlatPermissionSet]:
        """Get the cached set, or None on a miss."""
        ...

    @abstractmethod
    async def put(
        self,
        principal_id: str,
        grants: Iterable[PermissionGrant],
        ttl_seconds: int
    ) -> None:
        """Store the set under a single key with the given TTL."""
        ...

    @abstractmethod
    async def invalidate(self, principal_id: str) -> None:
        """Drop the cached set for a principal."""
        ...


@runtime_checkable
class OwnershipChecker(Protocol):
    """Protocol for the resource-instance ownership fallback."""

    @abstractmethod
    async def check(
        self,
        principal_id: str,
        resource: str,
        resource_instance_id: str
    ) -> bool:
        """Check if the principal owns the resource instance.

        Must answer False, never raise, for resources it does not know.
        """
        ...


@runtime_checkable
class RoleAdministrationRepository(Protocol):
    """Protocol for the writes that change a principal's flat permission set."""

    @abstractmethod
    async def get_role(self, role_id: str) -> Optional[Role]:
        ...

    @abstractmethod
    async def assign_role(self, principal_id: str, role_id: str) -> bool:
        ...

    @abstractmethod
    async def revoke_role(self, principal_id: str, role_id: str) -> bool:
        ...

    @abstractmethod
    async def add_permissions_to_role(self, role_id: str, permission_ids: List[str]) -> int:
        ...

    @abstractmethod
    async def remove_permissions_from_role(self, role_id: str, permission_ids: List[str]) -> int:
        ...

    @abstractmethod
    async def list_role_members(self, role_id: str) -> List[str]:
        ...
