"""
Role administration service.

Applies role membership and role permission changes through the role
repository and invalidates the cached permission set of every principal
the change affects.
"""
from typing import List

from loguru import logger

from ....core.exceptions import PermissionCacheError, RoleNotFoundError
from ..entities import Role, RoleAdministrationRepository
from .enforcement_gate import EnforcementGate


class RoleAdministrationService:
    """Role mutations that keep the permission cache consistent."""

    def __init__(self, repository: RoleAdministrationRepository, gate: EnforcementGate):
        self.repository = repository
        self.gate = gate

    async def assign_role(self, principal_id: str, role_id: str) -> bool:
        """Assign a role to a principal.

        Returns:
            True if a new assignment was created, False if it already existed

        Raises:
            RoleNotFoundError: If the role does not exist
        """
        await self._require_role(role_id)
        created = await self.repository.assign_role(principal_id, role_id)
        await self.gate.invalidate(principal_id)
        logger.info(f"Assigned role {role_id} to principal {principal_id} (created={created})")
        return created

    async def revoke_role(self, principal_id: str, role_id: str) -> bool:
        """Revoke a role from a principal."""
        await self._require_role(role_id)
        removed = await self.repository.revoke_role(principal_id, role_id)
        await self.gate.invalidate(principal_id)
        logger.info(f"Revoked role {role_id} from principal {principal_id} (removed={removed})")
        return removed

    async def add_permissions_to_role(self, role_id: str, permission_ids: List[str]) -> int:
        """Attach permissions to a role and invalidate every member's cached set."""
        await self._require_role(role_id)
        added = await self.repository.add_permissions_to_role(role_id, permission_ids)
        await self._invalidate_members(role_id)
        logger.info(f"Added {added} permissions to role {role_id}")
        return added

    async def remove_permissions_from_role(self, role_id: str, permission_ids: List[str]) -> int:
        """Detach permissions from a role and invalidate every member's cached set."""
        await self._require_role(role_id)
        removed = await self.repository.remove_permissions_from_role(role_id, permission_ids)
        await self._invalidate_members(role_id)
        logger.info(f"Removed {removed} permissions from role {role_id}")
        return removed

    async def _require_role(self, role_id: str) -> Role:
        role = await self.repository.get_role(role_id)
        if role is None:
            raise RoleNotFoundError(f"Role {role_id} not found", details={"role_id": role_id})
        return role

    async def _invalidate_members(self, role_id: str) -> None:
        """Invalidate every member of a role, then report all failures at once."""
        members = await self.repository.list_role_members(role_id)
        failed: List[str] = []
        for principal_id in members:
            try:
                await self.gate.invalidate(principal_id)
            except PermissionCacheError:
                failed.append(principal_id)

        if failed:
            logger.error(
                f"Failed to invalidate cached permissions of {len(failed)} of "
                f"{len(members)} members of role {role_id}"
            )
            raise PermissionCacheError(
                f"Permission cache invalidation failed for members of role {role_id}",
                details={"role_id": role_id, "failed_principal_ids": failed}
            )
        logger.debug(f"Invalidated cached permissions of {len(members)} members of role {role_id}")
