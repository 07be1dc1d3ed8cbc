"""Exception hierarchy for campus-authz."""

from .base import CampusAuthzError, create_error_response
from .infrastructure import (
    PermissionStoreError,
    MalformedPermissionDataError,
    PermissionCacheError,
    CacheConnectionError,
    CacheTimeoutError,
    CacheSerializationError,
    ConfigurationError,
)
from .domain import (
    ResourceNotFoundError,
    RoleNotFoundError,
    PermissionNotFoundError,
    OwnershipCheckError,
)

__all__ = [
    "CampusAuthzError",
    "create_error_response",
    "PermissionStoreError",
    "MalformedPermissionDataError",
    "PermissionCacheError",
    "CacheConnectionError",
    "CacheTimeoutError",
    "CacheSerializationError",
    "ConfigurationError",
    "ResourceNotFoundError",
    "RoleNotFoundError",
    "PermissionNotFoundError",
    "OwnershipCheckError",
]
