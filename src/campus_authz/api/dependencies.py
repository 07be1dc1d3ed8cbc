"""
FastAPI dependencies enforcing permission and role checks.

The authenticated principal is expected on ``request.state.principal`` (set
by the application's authentication middleware) and the gate on
``request.app.state.enforcement_gate``.
"""
from typing import Callable, Optional

from fastapi import HTTPException, Request, status
from loguru import logger

from ..core.exceptions import ConfigurationError
from ..features.permissions.entities import ActionLike, Deny, DecisionOptions, Principal, Proceed, normalize_action
from ..features.permissions.services import EnforcementGate
from .models import PermissionDeniedResponse


GateProvider = Callable[[Request], EnforcementGate]


def get_enforcement_gate(request: Request) -> EnforcementGate:
    """Get the enforcement gate registered on the application state."""
    gate = getattr(request.app.state, "enforcement_gate", None)
    if gate is None:
        raise ConfigurationError("No enforcement gate registered on app.state.enforcement_gate")
    return gate


def get_principal(request: Request) -> Optional[Principal]:
    """Get the authenticated principal attached to the request, if any."""
    return getattr(request.state, "principal", None)


def raise_for_deny(outcome: Deny) -> None:
    """Raise the 403 for a Deny outcome."""
    body = PermissionDeniedResponse(**outcome.to_payload())
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=body.model_dump(by_alias=True),
    )


def require_permission(
    resource: str,
    action: ActionLike,
    bypass_enabled: bool = True,
    ownership_check_enabled: bool = False,
    instance_param: str = "id",
    gate_provider: GateProvider = get_enforcement_gate
):
    """Require a permission on a resource.

    Args:
        resource: Resource family being accessed
        action: Action being performed
        bypass_enabled: Let elevated role labels through
        ownership_check_enabled: Fall back to the ownership check when the
            permission set does not allow the call
        instance_param: Path parameter holding the resource instance id
        gate_provider: Callable returning the gate for a request
    """
    options = DecisionOptions(
        bypass_enabled=bypass_enabled,
        ownership_check_enabled=ownership_check_enabled,
    )

    async def dependency(request: Request) -> Principal:
        gate = gate_provider(request)
        principal = get_principal(request)
        instance_id = request.path_params.get(instance_param) if ownership_check_enabled else None

        outcome = await gate.authorize(
            principal,
            resource,
            action,
            options=options,
            resource_instance_id=str(instance_id) if instance_id is not None else None,
        )
        if isinstance(outcome, Proceed):
            return principal

        logger.warning(f"Rejected {request.method} {request.url.path}: missing {resource}:{normalize_action(action)}")
        raise_for_deny(outcome)

    return dependency


def require_role(
    *role_names: str,
    bypass_enabled: bool = True,
    gate_provider: GateProvider = get_enforcement_gate
):
    """Require any of the specified roles."""

    async def dependency(request: Request) -> Principal:
        gate = gate_provider(request)
        principal = get_principal(request)

        outcome = await gate.has_role(principal, role_names, bypass_enabled=bypass_enabled)
        if isinstance(outcome, Proceed):
            return principal

        logger.warning(f"Rejected {request.method} {request.url.path}: missing role in {sorted(role_names)}")
        raise_for_deny(outcome)

    return dependency
