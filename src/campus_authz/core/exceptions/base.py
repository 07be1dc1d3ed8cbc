"""Base exceptions for campus-authz.

This module defines the base exception hierarchy for the authorization
engine. All exceptions inherit from CampusAuthzError and carry an error code
and structured details. Access denial is not an exception: the enforcement
gate returns a Deny outcome for it.
"""

from typing import Any, Dict, Optional


class CampusAuthzError(Exception):
    """Base exception for all campus-authz errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def create_error_response(exception: CampusAuthzError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The campus-authz exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
