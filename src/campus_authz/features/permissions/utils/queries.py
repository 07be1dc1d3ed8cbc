"""SQL query templates for the role/permission store.

Templates take a ``{schema}`` placeholder that is filled with a validated
identifier; values are always bound as asyncpg parameters.
"""

import re

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")


def validate_schema_name(schema_name: str) -> str:
    """Validate schema name to prevent SQL injection."""
    if not schema_name or not _IDENTIFIER.match(schema_name):
        raise ValueError(f"Invalid schema name: {schema_name}")
    return schema_name


# Flat permission set of a principal: user_roles -> roles -> role_permissions -> permissions
USER_FLAT_PERMISSIONS = """
    SELECT DISTINCT p.resource, p.action
    FROM {schema}.user_roles ur
    JOIN {schema}.roles r ON r.id = ur.role_id
    JOIN {schema}.role_permissions rp ON rp.role_id = r.id
    JOIN {schema}.permissions p ON p.id = rp.permission_id
    WHERE ur.user_id = $1
"""

USER_ROLES = """
    SELECT r.id, r.name, r.description, r.created_at, r.updated_at
    FROM {schema}.user_roles ur
    JOIN {schema}.roles r ON r.id = ur.role_id
    WHERE ur.user_id = $1
    ORDER BY r.name ASC
"""

ROLE_BY_ID = """
    SELECT id, name, description, created_at, updated_at
    FROM {schema}.roles
    WHERE id = $1
"""

ROLE_PERMISSIONS = """
    SELECT p.id, p.name, p.resource, p.action, p.description, p.created_at, p.updated_at
    FROM {schema}.role_permissions rp
    JOIN {schema}.permissions p ON p.id = rp.permission_id
    WHERE rp.role_id = $1
    ORDER BY p.resource ASC, p.action ASC
"""

ROLE_MEMBERS = """
    SELECT DISTINCT ur.user_id
    FROM {schema}.user_roles ur
    WHERE ur.role_id = $1
"""

# The unique (user_id, role_id) and (role_id, permission_id) constraints keep joins deduplicated
ASSIGN_USER_ROLE = """
    INSERT INTO {schema}.user_roles (user_id, role_id, created_at, updated_at)
    VALUES ($1, $2, NOW(), NOW())
    ON CONFLICT (user_id, role_id) DO NOTHING
"""

REVOKE_USER_ROLE = """
    DELETE FROM {schema}.user_roles
    WHERE user_id = $1 AND role_id = $2
"""

ADD_ROLE_PERMISSIONS = """
    INSERT INTO {schema}.role_permissions (role_id, permission_id, created_at, updated_at)
    SELECT $1, p.id, NOW(), NOW()
    FROM {schema}.permissions p
    WHERE p.id = ANY($2::uuid[])
    ON CONFLICT (role_id, permission_id) DO NOTHING
"""

REMOVE_ROLE_PERMISSIONS = """
    DELETE FROM {schema}.role_permissions
    WHERE role_id = $1 AND permission_id = ANY($2::uuid[])
"""
