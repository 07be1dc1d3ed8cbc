"""Infrastructure-specific exceptions for campus-authz.

Faults of the permission store and the permission cache. The enforcement
gate catches all of these at its boundary.
"""

from ...config.constants import ErrorCode
from .base import CampusAuthzError


# Store Errors
class PermissionStoreError(CampusAuthzError):
    """Raised when roles or permissions cannot be read from the store."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("error_code", ErrorCode.AUTH_PERMISSION_STORE_FAILURE.value)
        super().__init__(message, **kwargs)


class MalformedPermissionDataError(PermissionStoreError):
    """Raised when the role/permission join returns unusable rows."""
    pass


# Cache Errors
class PermissionCacheError(CampusAuthzError):
    """Base class for permission cache errors."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("error_code", ErrorCode.AUTH_PERMISSION_CACHE_FAILURE.value)
        super().__init__(message, **kwargs)


class CacheConnectionError(PermissionCacheError):
    """Raised when the cache backend is unreachable."""
    pass


class CacheTimeoutError(PermissionCacheError):
    """Raised when a cache operation times out."""
    pass


class CacheSerializationError(PermissionCacheError):
    """Raised when a cached permission set cannot be decoded or encoded."""
    pass


# Configuration Errors
class ConfigurationError(CampusAuthzError):
    """Raised when engine configuration is invalid."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("error_code", ErrorCode.AUTH_CONFIGURATION_ERROR.value)
        super().__init__(message, **kwargs)
