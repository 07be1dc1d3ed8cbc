"""Constants and enums for campus-authz.

This module defines the constants, enums, and configuration values used
throughout the authorization engine. The action values correspond to the
``permissions.action`` column of the role/permission store.
"""

from enum import Enum
from typing import Final, FrozenSet


# Reserved sentinel meaning "any resource" or "any action" in a grant
WILDCARD: Final[str] = "*"


class PermissionAction(str, Enum):
    """Actions a permission can grant on a resource family."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE = "manage"
    APPROVE = "approve"
    REJECT = "reject"
    VIEW_REPORTS = "view_reports"
    DOWNLOAD_DATA = "download_data"
    EXPORT = "export"
    IMPORT = "import"
    ARCHIVE = "archive"
    RESTORE = "restore"
    PUBLISH = "publish"
    UNPUBLISH = "unpublish"
    ASSIGN = "assign"
    TRANSFER = "transfer"

    def __str__(self) -> str:
        return self.value


class ErrorCode(str, Enum):
    """Error codes surfaced in deny payloads and error responses."""

    AUTH_INSUFFICIENT_PERMISSIONS = "AUTH_INSUFFICIENT_PERMISSIONS"
    AUTH_PERMISSION_STORE_FAILURE = "AUTH_PERMISSION_STORE_FAILURE"
    AUTH_PERMISSION_CACHE_FAILURE = "AUTH_PERMISSION_CACHE_FAILURE"
    AUTH_CONFIGURATION_ERROR = "AUTH_CONFIGURATION_ERROR"
    RES_NOT_FOUND = "RES_NOT_FOUND"


class DenyCause(str, Enum):
    """Internal cause of a denial. Logged, never surfaced to callers."""

    UNAUTHENTICATED = "unauthenticated"
    INSUFFICIENT_PERMISSIONS = "insufficient_permissions"
    PERMISSION_CHECK_FAILED = "permission_check_failed"


class CacheKeys:
    """Cache key patterns for the permission cache."""

    USER_PERMISSIONS: Final[str] = "permissions:{principal_id}"


class CacheTTL:
    """Cache TTL values in seconds."""

    PERMISSIONS: Final[int] = 600  # 10 minutes


class Timeouts:
    """I/O timeouts for a single authorization check, in seconds."""

    CACHE_OPERATION: Final[float] = 0.5
    STORE_QUERY: Final[float] = 5.0


# Role labels that bypass fine-grained checks when bypass is enabled
DEFAULT_ELEVATED_ROLE_LABELS: Final[FrozenSet[str]] = frozenset({"admin", "super_admin"})
