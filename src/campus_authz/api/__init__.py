"""FastAPI adapter for the enforcement gate."""

from .dependencies import (
    get_enforcement_gate,
    get_principal,
    require_permission,
    require_role,
)
from .models import PermissionDeniedResponse

__all__ = [
    "get_enforcement_gate",
    "get_principal",
    "require_permission",
    "require_role",
    "PermissionDeniedResponse",
]
