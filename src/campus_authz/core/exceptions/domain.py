"""Domain exceptions for role administration and ownership checks."""

from ...config.constants import ErrorCode
from .base import CampusAuthzError


class ResourceNotFoundError(CampusAuthzError):
    """Raised when a referenced record does not exist."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("error_code", ErrorCode.RES_NOT_FOUND.value)
        super().__init__(message, **kwargs)


class RoleNotFoundError(ResourceNotFoundError):
    """Raised when a role does not exist."""
    pass


class PermissionNotFoundError(ResourceNotFoundError):
    """Raised when a permission does not exist."""
    pass


class OwnershipCheckError(CampusAuthzError):
    """Raised by an ownership checker that cannot reach a decision.

    The ownership registry converts it to a negative answer.
    """
    pass
