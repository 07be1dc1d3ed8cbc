"""AsyncPG-based permission store adapter.

Concrete implementation of the PermissionStore protocol. Resolves a
principal's flat permission set by joining user_roles, roles,
role_permissions and permissions. Read-only.
"""

import asyncio
import logging
from typing import List, Optional

import asyncpg

from ....core.exceptions import PermissionStoreError, MalformedPermissionDataError
from ..entities import FlatPermissionSet, PermissionGrant, Role
from ..utils.queries import USER_FLAT_PERMISSIONS, USER_ROLES, validate_schema_name


logger = logging.getLogger(__name__)


class AsyncPGPermissionStore:
    """AsyncPG implementation of PermissionStore protocol."""

    def __init__(
        self,
        pool: asyncpg.Pool,
        schema: str = "public",
        query_timeout: Optional[float] = 5.0
    ):
        """Initialize with a connection pool and the schema holding the RBAC tables."""
        self._pool = pool
        self._schema = validate_schema_name(schema)
        self._query_timeout = query_timeout

    async def resolve(self, principal_id: str) -> FlatPermissionSet:
        """Get all grants reachable from the principal's roles, deduplicated."""
        query = USER_FLAT_PERMISSIONS.format(schema=self._schema)
        rows = await self._fetch(query, principal_id, operation="resolve permissions")

        grants = set()
        for row in rows:
            resource, action = row["resource"], row["action"]
            if not resource or not action:
                logger.error(
                    f"Malformed permission row for principal {principal_id}: "
                    f"resource={resource!r}, action={action!r}"
                )
                raise MalformedPermissionDataError(
                    "Permission row is missing resource or action",
                    details={"principal_id": principal_id}
                )
            grants.add(PermissionGrant(resource=resource, action=action))

        logger.debug(f"Resolved {len(grants)} grants for principal {principal_id}")
        return frozenset(grants)

    async def get_user_roles(self, principal_id: str) -> List[Role]:
        """Get all roles assigned to a principal."""
        query = USER_ROLES.format(schema=self._schema)
        rows = await self._fetch(query, principal_id, operation="get user roles")

        roles = [
            Role(
                id=str(row["id"]),
                name=row["name"],
                description=row["description"],
                created_at=row["created_at"],
                updated_at=row["updated_at"],
            )
            for row in rows
        ]
        logger.debug(f"Found {len(roles)} roles for principal {principal_id}")
        return roles

    async def _fetch(self, query: str, principal_id: str, operation: str) -> List[asyncpg.Record]:
        try:
            async with self._pool.acquire() as conn:
                return await conn.fetch(query, principal_id, timeout=self._query_timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Timed out after {self._query_timeout}s trying to {operation} for principal {principal_id}")
            raise PermissionStoreError(
                f"Permission store timed out during {operation}",
                details={"principal_id": principal_id, "timeout": self._query_timeout}
            ) from e
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error(f"Failed to {operation} for principal {principal_id}: {e}")
            raise PermissionStoreError(
                f"Permission store failure during {operation}",
                details={"principal_id": principal_id}
            ) from e
