"""AsyncPG-based role administration repository.

Writes to user_roles and role_permissions. Every write here changes some
principal's flat permission set, so callers go through
RoleAdministrationService, which invalidates the permission cache.
"""

import logging
from typing import List, Optional

import asyncpg

from ....core.exceptions import PermissionStoreError
from ..entities import Permission, Role
from ..utils.queries import (
    ADD_ROLE_PERMISSIONS,
    ASSIGN_USER_ROLE,
    REMOVE_ROLE_PERMISSIONS,
    REVOKE_USER_ROLE,
    ROLE_BY_ID,
    ROLE_MEMBERS,
    ROLE_PERMISSIONS,
    validate_schema_name,
)


logger = logging.getLogger(__name__)


def _affected_rows(status: str) -> int:
    """Parse the row count from an asyncpg command status such as 'INSERT 0 3'."""
    try:
        return int(status.split()[-1])
    except (AttributeError, IndexError, ValueError):
        return 0


class AsyncPGRoleRepository:
    """AsyncPG implementation of RoleAdministrationRepository protocol."""

    def __init__(self, pool: asyncpg.Pool, schema: str = "public"):
        self._pool = pool
        self._schema = validate_schema_name(schema)

    def _q(self, template: str) -> str:
        return template.format(schema=self._schema)

    async def get_role(self, role_id: str) -> Optional[Role]:
        """Get role by ID."""
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(self._q(ROLE_BY_ID), role_id)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error(f"Failed to get role {role_id}: {e}")
            raise PermissionStoreError(f"Failed to retrieve role: {e}") from e

        if row is None:
            return None
        return Role(
            id=str(row["id"]),
            name=row["name"],
            description=row["description"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    async def get_role_permissions(self, role_id: str) -> List[Permission]:
        """Get the permissions attached to a role."""
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(self._q(ROLE_PERMISSIONS), role_id)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error(f"Failed to get permissions for role {role_id}: {e}")
            raise PermissionStoreError(f"Failed to retrieve role permissions: {e}") from e

        return [
            Permission(
                id=str(row["id"]),
                name=row["name"],
                resource=row["resource"],
                action=row["action"],
                description=row["description"],
                created_at=row["created_at"],
                updated_at=row["updated_at"],
            )
            for row in rows
        ]

    async def list_role_members(self, role_id: str) -> List[str]:
        """Get the ids of every principal holding a role."""
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(self._q(ROLE_MEMBERS), role_id)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error(f"Failed to list members of role {role_id}: {e}")
            raise PermissionStoreError(f"Failed to list role members: {e}") from e
        return [str(row["user_id"]) for row in rows]

    async def assign_role(self, principal_id: str, role_id: str) -> bool:
        """Assign a role to a principal. Returns False if already assigned."""
        status = await self._execute(ASSIGN_USER_ROLE, principal_id, role_id, operation="assign role")
        return _affected_rows(status) > 0

    async def revoke_role(self, principal_id: str, role_id: str) -> bool:
        """Revoke a role from a principal. Returns False if it was not assigned."""
        status = await self._execute(REVOKE_USER_ROLE, principal_id, role_id, operation="revoke role")
        return _affected_rows(status) > 0

    async def add_permissions_to_role(self, role_id: str, permission_ids: List[str]) -> int:
        """Attach permissions to a role. Returns the number of new links."""
        if not permission_ids:
            return 0
        status = await self._execute(ADD_ROLE_PERMISSIONS, role_id, permission_ids, operation="add permissions")
        return _affected_rows(status)

    async def remove_permissions_from_role(self, role_id: str, permission_ids: List[str]) -> int:
        """Detach permissions from a role. Returns the number of removed links."""
        if not permission_ids:
            return 0
        status = await self._execute(REMOVE_ROLE_PERMISSIONS, role_id, permission_ids, operation="remove permissions")
        return _affected_rows(status)

    async def _execute(self, template: str, *args, operation: str) -> str:
        try:
            async with self._pool.acquire() as conn:
                return await conn.execute(self._q(template), *args)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error(f"Failed to {operation} ({args[0]}): {e}")
            raise PermissionStoreError(
                f"Database error while trying to {operation}",
                details={"target": str(args[0])}
            ) from e
