"""Permission services."""

from .decision_engine import DecisionEngine
from .ownership import OwnershipRegistry, OwnershipRule
from .enforcement_gate import EnforcementGate
from .role_admin_service import RoleAdministrationService

__all__ = [
    "DecisionEngine",
    "OwnershipRegistry",
    "OwnershipRule",
    "EnforcementGate",
    "RoleAdministrationService",
]
