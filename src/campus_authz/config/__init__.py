"""Configuration for campus-authz."""

from .constants import (
    WILDCARD,
    PermissionAction,
    ErrorCode,
    DenyCause,
    CacheKeys,
    CacheTTL,
    Timeouts,
    DEFAULT_ELEVATED_ROLE_LABELS,
)
from .settings import AuthzSettings, get_settings
from .logging_config import LoggingConfig, setup_logging

__all__ = [
    "WILDCARD",
    "PermissionAction",
    "ErrorCode",
    "DenyCause",
    "CacheKeys",
    "CacheTTL",
    "Timeouts",
    "DEFAULT_ELEVATED_ROLE_LABELS",
    "AuthzSettings",
    "get_settings",
    "LoggingConfig",
    "setup_logging",
]
